# SindGocg/Sindicancia/firebase.py
import logging
import threading
from urllib.parse import quote
from uuid import uuid4

import firebase_admin
from django.conf import settings
from firebase_admin import credentials, firestore, storage

from SindGocg.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_lock = threading.Lock()


def get_app():
    """
    Devolve a aplicação Firebase, inicializando-a na primeira chamada.
    As credenciais vêm de FIREBASE_CREDENTIALS (caminho para o JSON da conta de serviço);
    sem ele, usa as credenciais padrão do ambiente.
    """
    with _lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass

        try:
            if settings.FIREBASE_CREDENTIALS:
                cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
            else:
                cred = credentials.ApplicationDefault()
            app = firebase_admin.initialize_app(cred, {'storageBucket': settings.FIREBASE_STORAGE_BUCKET})
        except (ValueError, OSError) as e:
            raise ConfigurationError(f"Não foi possível inicializar o Firebase: {e}") from e

        logger.info(f"🔥 Firebase inicializado (bucket: {settings.FIREBASE_STORAGE_BUCKET})")
        return app


def get_firestore_client():
    return firestore.client(app=get_app())


def get_storage_bucket():
    return storage.bucket(app=get_app())


def url_download(bucket_name, storage_path, token):
    return (
        f"https://firebasestorage.googleapis.com/v0/b/{bucket_name}/o/"
        f"{quote(storage_path, safe='')}?alt=media&token={token}"
    )


def enviar_blob(blob, file_obj, content_type=None):
    """
    Envia o conteúdo para o blob com um token de download do Firebase
    e devolve o URL público equivalente ao getDownloadURL() do SDK web.
    """
    token = uuid4().hex
    blob.metadata = {'firebaseStorageDownloadTokens': token}
    blob.upload_from_file(file_obj, content_type=content_type, rewind=True)
    return url_download(blob.bucket.name, blob.name, token)
