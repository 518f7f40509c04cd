# SindGocg/Sindicancia/file_manager.py
import logging
import os
import threading
import time

from django.conf import settings
from google.api_core.exceptions import NotFound

from SindGocg.exceptions import ValidationError
from .firebase import enviar_blob, get_storage_bucket
from .schemas import ProgressoUpload

logger = logging.getLogger(__name__)

# Força o envio resumível em blocos para haver progresso intermédio
TAMANHO_BLOCO_UPLOAD = 256 * 1024


class _LeitorComProgresso:
    """Envolve o ficheiro enviado e informa quantos bytes já foram lidos pelo cliente do Storage."""

    def __init__(self, stream, total, on_progress):
        self._stream = stream
        self._total = total
        self._on_progress = on_progress

    def read(self, size=-1):
        data = self._stream.read(size)
        if self._total:
            self._on_progress(min(self._stream.tell(), self._total) / self._total * 100)
        return data

    def seek(self, *args):
        return self._stream.seek(*args)

    def tell(self):
        return self._stream.tell()


def _extensao(file_name):
    return file_name.rsplit('.', 1)[-1].lower() if '.' in file_name else ''


class FileManager:
    def __init__(self, bucket=None):
        self._bucket = bucket
        self._progresso = {}
        self._lock = threading.Lock()

    @property
    def bucket(self):
        if self._bucket is None:
            self._bucket = get_storage_bucket()
        return self._bucket

    def _set_progresso(self, hearing_id, **kwargs):
        with self._lock:
            self._progresso[hearing_id] = ProgressoUpload(**kwargs)

    def upload_document(self, file, hearing_id, progress_callback=None):
        """
        Valida e envia um ofício para oficios/{hearingId}/{timestamp}_{nome}.
        O progresso (0-100) fica disponível em get_upload_progress e é passado ao callback.
        """
        try:
            file_name = os.path.basename(file.name)
            self.validate_file(file)

            timestamp = int(time.time() * 1000)
            storage_path = f"oficios/{hearing_id}/{timestamp}_{file_name}"

            def on_progress(progress):
                self._set_progresso(hearing_id, progress=progress, status='uploading')
                if progress_callback:
                    progress_callback(progress)

            on_progress(0)

            blob = self.bucket.blob(storage_path, chunk_size=TAMANHO_BLOCO_UPLOAD)
            leitor = _LeitorComProgresso(file, file.size, on_progress)
            url = enviar_blob(blob, leitor, content_type=getattr(file, 'content_type', None))

            self._set_progresso(hearing_id, progress=100, status='completed')
            if progress_callback:
                progress_callback(100)

            logger.info(f"📎 Ofício '{file_name}' enviado para {storage_path}")
            return {
                'success': True,
                'url': url,
                'fileName': file_name,
                'storagePath': storage_path,
            }
        except Exception as e:
            self._set_progresso(hearing_id, progress=0, status='error', error=str(e))
            logger.error(f"Erro ao fazer upload do ofício da oitiva {hearing_id}: {e}")
            return {'success': False, 'error': str(e)}

    def delete_document(self, storage_path):
        try:
            self.bucket.blob(storage_path).delete()
            logger.info(f"🗑️ Ofício removido: {storage_path}")
            return {'success': True}
        except NotFound:
            # Já não existe no Storage: a referência na oitiva pode ser removida
            logger.warning(f"⚠️ Ofício {storage_path} já não existia no Storage")
            return {'success': True}
        except Exception as e:
            logger.error(f"Erro ao deletar documento {storage_path}: {e}")
            return {'success': False, 'error': str(e)}

    def get_upload_progress(self, hearing_id):
        with self._lock:
            progresso = self._progresso.get(hearing_id) or ProgressoUpload()
        return progresso.model_dump(exclude_none=True)

    def clear_upload_progress(self, hearing_id):
        with self._lock:
            self._progresso.pop(hearing_id, None)

    def validate_file(self, file):
        """Extensão (pdf, doc, docx) e tamanho máximo do ofício."""
        if _extensao(os.path.basename(file.name)) not in settings.OFICIO_EXTENSOES_PERMITIDAS:
            raise ValidationError('Tipo de arquivo não suportado. Use apenas PDF, DOC ou DOCX.')
        self.validate_file_size(file, settings.OFICIO_TAMANHO_MAXIMO_MB)

    def validate_file_size(self, file, max_size_mb=10):
        file_size_mb = file.size / (1024 * 1024)
        if file_size_mb > max_size_mb:
            raise ValidationError(f"Arquivo muito grande. Tamanho máximo permitido: {max_size_mb}MB")
        return True

    def get_file_info(self, file):
        if not file:
            return None
        return {
            'name': file.name,
            'size': file.size,
            'sizeMB': f"{file.size / (1024 * 1024):.2f}",
            'extension': _extensao(file.name),
        }
