# SindGocg/Sindicancia/database.py
"""
Acesso às coleções do Firestore.

Cada operação corresponde a uma única chamada remota e devolve sempre um
envelope {'success': bool, ...}; os erros são registados no log e devolvidos
em 'error', nunca propagados.
"""
import logging

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from SindGocg.exceptions import ValidationError
from .firebase import enviar_blob, get_firestore_client, get_storage_bucket
from .schemas import COLECAO_OITIVAS, COLECAO_SINDICANCIAS, STATUS_AGENDADA

logger = logging.getLogger(__name__)


def _documento(snapshot):
    return {'id': snapshot.id, **(snapshot.to_dict() or {})}


class DatabaseService:
    def __init__(self, db=None, bucket=None):
        self._db = db
        self._bucket = bucket

    @property
    def db(self):
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    @property
    def bucket(self):
        if self._bucket is None:
            self._bucket = get_storage_bucket()
        return self._bucket

    def _sindicancias(self):
        return self.db.collection(COLECAO_SINDICANCIAS)

    def _oitivas(self, inquiry_id):
        # Toda escrita em 'oitivas' fica presa a uma sindicância concreta
        if not inquiry_id:
            raise ValidationError("É necessário indicar a sindicância da oitiva.")
        return self._sindicancias().document(inquiry_id).collection(COLECAO_OITIVAS)

    def _query_sindicancias(self, user_id):
        return (
            self._sindicancias()
            .where(filter=FieldFilter('sindicanteId', '==', user_id))
            .order_by('dataInstauracao', direction=firestore.Query.DESCENDING)
        )

    def _query_oitivas(self, inquiry_id):
        return self._oitivas(inquiry_id).order_by('dataOitiva', direction=firestore.Query.ASCENDING)

    # --- Sindicâncias ---

    def create_inquiry(self, data, user_id):
        try:
            _, doc_ref = self._sindicancias().add({
                **data,
                'sindicanteId': user_id,
                'dataInstauracao': firestore.SERVER_TIMESTAMP,
            })
            logger.info(f"📁 Sindicância criada: {doc_ref.id} (sindicante {user_id})")
            return {'success': True, 'id': doc_ref.id}
        except Exception as e:
            logger.error(f"Erro ao criar sindicância: {e}")
            return {'success': False, 'error': str(e)}

    def get_inquiries(self, user_id):
        try:
            data = [_documento(doc) for doc in self._query_sindicancias(user_id).stream()]
            return {'success': True, 'data': data}
        except Exception as e:
            logger.error(f"Erro ao listar sindicâncias de {user_id}: {e}")
            return {'success': False, 'error': str(e)}

    def get_inquiry(self, inquiry_id):
        try:
            doc = self._sindicancias().document(inquiry_id).get()
            if not doc.exists:
                return {'success': False, 'error': 'Sindicância não encontrada'}
            return {'success': True, 'data': _documento(doc)}
        except Exception as e:
            logger.error(f"Erro ao buscar sindicância {inquiry_id}: {e}")
            return {'success': False, 'error': str(e)}

    # --- Oitivas ---

    def create_hearing(self, inquiry_id, data):
        try:
            _, doc_ref = self._oitivas(inquiry_id).add({**data, 'status': STATUS_AGENDADA})
            logger.info(f"🗓️ Oitiva agendada: {doc_ref.id} (sindicância {inquiry_id})")
            return {'success': True, 'id': doc_ref.id}
        except Exception as e:
            logger.error(f"Erro ao criar oitiva na sindicância {inquiry_id}: {e}")
            return {'success': False, 'error': str(e)}

    def get_hearings(self, inquiry_id):
        try:
            data = [_documento(doc) for doc in self._query_oitivas(inquiry_id).stream()]
            return {'success': True, 'data': data}
        except Exception as e:
            logger.error(f"Erro ao listar oitivas da sindicância {inquiry_id}: {e}")
            return {'success': False, 'error': str(e)}

    def get_hearing(self, inquiry_id, hearing_id):
        try:
            doc = self._oitivas(inquiry_id).document(hearing_id).get()
            if not doc.exists:
                return {'success': False, 'error': 'Oitiva não encontrada'}
            return {'success': True, 'data': _documento(doc)}
        except Exception as e:
            logger.error(f"Erro ao buscar oitiva {hearing_id}: {e}")
            return {'success': False, 'error': str(e)}

    def update_hearing(self, inquiry_id, hearing_id, data):
        try:
            self._oitivas(inquiry_id).document(hearing_id).update(data)
            return {'success': True}
        except Exception as e:
            logger.error(f"Erro ao atualizar oitiva {hearing_id}: {e}")
            return {'success': False, 'error': str(e)}

    # --- Storage ---

    def upload_document(self, file, path):
        try:
            blob = self.bucket.blob(path)
            url = enviar_blob(blob, file, content_type=getattr(file, 'content_type', None))
            return {'success': True, 'url': url}
        except Exception as e:
            logger.error(f"Erro ao enviar documento para {path}: {e}")
            return {'success': False, 'error': str(e)}

    # --- Tempo real ---

    def listen_to_hearings(self, inquiry_id, callback):
        """
        Subscreve as oitivas da sindicância. O callback recebe a lista completa,
        ordenada por data, a cada alteração. Devolve o envelope com 'unsubscribe'.
        """
        def on_snapshot(docs, changes, read_time):
            callback([_documento(doc) for doc in docs])

        try:
            watch = self._query_oitivas(inquiry_id).on_snapshot(on_snapshot)
            return {'success': True, 'unsubscribe': watch.unsubscribe}
        except Exception as e:
            logger.error(f"Erro ao subscrever oitivas da sindicância {inquiry_id}: {e}")
            return {'success': False, 'error': str(e)}

    def listen_to_inquiries(self, user_id, callback):
        def on_snapshot(docs, changes, read_time):
            callback([_documento(doc) for doc in docs])

        try:
            watch = self._query_sindicancias(user_id).on_snapshot(on_snapshot)
            return {'success': True, 'unsubscribe': watch.unsubscribe}
        except Exception as e:
            logger.error(f"Erro ao subscrever sindicâncias de {user_id}: {e}")
            return {'success': False, 'error': str(e)}
