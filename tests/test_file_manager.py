"""
Test ofício uploads through the FileManager with a fake Storage bucket.
"""

from unittest.mock import MagicMock
from urllib.parse import quote

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from google.api_core.exceptions import NotFound

from SindGocg.exceptions import ValidationError
from Sindicancia.file_manager import FileManager


def _bucket_falso():
    """Bucket cujo upload lê o ficheiro em blocos, como o envio resumível do Storage."""
    bucket = MagicMock()
    blobs = {}

    def blob(path, chunk_size=None):
        b = MagicMock()
        b.name = path
        b.bucket.name = "sind-gocg.firebasestorage.app"

        def upload_from_file(stream, content_type=None, rewind=False):
            if rewind:
                stream.seek(0)
            while stream.read(chunk_size or 1024):
                pass

        b.upload_from_file.side_effect = upload_from_file
        blobs[path] = b
        return b

    bucket.blob.side_effect = blob
    bucket.blobs = blobs
    return bucket


def _pdf(nome="oficio.pdf", tamanho=600 * 1024):
    return SimpleUploadedFile(nome, b"%" * tamanho, content_type="application/pdf")


def test_upload_document_sucesso():
    bucket = _bucket_falso()
    manager = FileManager(bucket=bucket)
    progressos = []

    resultado = manager.upload_document(_pdf(), "oit-1", progress_callback=progressos.append)

    assert resultado["success"] is True
    assert resultado["fileName"] == "oficio.pdf"
    assert resultado["storagePath"].startswith("oficios/oit-1/")
    assert resultado["storagePath"].endswith("_oficio.pdf")
    assert resultado["url"].startswith(
        "https://firebasestorage.googleapis.com/v0/b/sind-gocg.firebasestorage.app/o/"
        + quote(resultado["storagePath"], safe="")
    )
    assert "alt=media&token=" in resultado["url"]

    blob = bucket.blobs[resultado["storagePath"]]
    assert "firebaseStorageDownloadTokens" in blob.metadata

    assert progressos[0] == 0
    assert progressos[-1] == 100
    assert any(0 < p < 100 for p in progressos)
    assert progressos == sorted(progressos)
    assert manager.get_upload_progress("oit-1") == {"progress": 100, "status": "completed"}


def test_extensao_maiuscula_aceite():
    manager = FileManager(bucket=_bucket_falso())
    resultado = manager.upload_document(_pdf("OFICIO.DOCX", 10), "oit-1")
    assert resultado["success"] is True


def test_extensao_invalida():
    bucket = _bucket_falso()
    manager = FileManager(bucket=bucket)

    resultado = manager.upload_document(_pdf("foto.png", 10), "oit-1")

    assert resultado == {
        "success": False,
        "error": "Tipo de arquivo não suportado. Use apenas PDF, DOC ou DOCX.",
    }
    assert manager.get_upload_progress("oit-1")["status"] == "error"
    bucket.blob.assert_not_called()


def test_ficheiro_grande_demais():
    manager = FileManager(bucket=_bucket_falso())

    resultado = manager.upload_document(_pdf(tamanho=10 * 1024 * 1024 + 1), "oit-2")

    assert resultado["success"] is False
    assert resultado["error"] == "Arquivo muito grande. Tamanho máximo permitido: 10MB"
    progresso = manager.get_upload_progress("oit-2")
    assert progresso["status"] == "error"
    assert progresso["progress"] == 0


def test_falha_no_storage():
    bucket = MagicMock()
    bucket.blob.return_value.upload_from_file.side_effect = RuntimeError("403 Forbidden")
    manager = FileManager(bucket=bucket)

    resultado = manager.upload_document(_pdf(tamanho=10), "oit-3")

    assert resultado == {"success": False, "error": "403 Forbidden"}
    assert manager.get_upload_progress("oit-3")["error"] == "403 Forbidden"


def test_progresso_por_omissao_e_limpeza():
    manager = FileManager(bucket=_bucket_falso())
    assert manager.get_upload_progress("nada") == {"progress": 0, "status": "idle"}

    manager.upload_document(_pdf(tamanho=10), "oit-1")
    manager.clear_upload_progress("oit-1")
    assert manager.get_upload_progress("oit-1") == {"progress": 0, "status": "idle"}


def test_delete_document():
    bucket = MagicMock()
    manager = FileManager(bucket=bucket)

    assert manager.delete_document("oficios/oit-1/1_a.pdf") == {"success": True}
    bucket.blob.assert_called_once_with("oficios/oit-1/1_a.pdf")

    bucket.blob.return_value.delete.side_effect = RuntimeError("403 Forbidden")
    assert manager.delete_document("oficios/x.pdf") == {"success": False, "error": "403 Forbidden"}


def test_delete_document_ja_removido():
    bucket = MagicMock()
    bucket.blob.return_value.delete.side_effect = NotFound("No such object")
    manager = FileManager(bucket=bucket)

    assert manager.delete_document("oficios/oit-1/1_a.pdf") == {"success": True}


def test_validate_file_size():
    manager = FileManager(bucket=MagicMock())
    assert manager.validate_file_size(_pdf(tamanho=1024), 1) is True
    with pytest.raises(ValidationError):
        manager.validate_file_size(_pdf(tamanho=2 * 1024 * 1024), 1)


def test_get_file_info():
    manager = FileManager(bucket=MagicMock())
    assert manager.get_file_info(None) is None
    assert manager.get_file_info(_pdf("Relatorio.Final.PDF", 1572864)) == {
        "name": "Relatorio.Final.PDF",
        "size": 1572864,
        "sizeMB": "1.50",
        "extension": "pdf",
    }
