"""
Test the OpenAI proxy endpoints (/api/transcribe, /api/enhance-text, /api/get-openai-key).
"""

from unittest.mock import MagicMock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from SindGocg.exceptions import UpstreamError
from Transcricao import openai_services


def _audio():
    return SimpleUploadedFile("gravacao.webm", b"\x1aE\xdf\xa3" * 400, content_type="audio/webm")


@pytest.fixture
def processar(monkeypatch):
    mock = MagicMock(return_value={"rawText": "bom dia", "formattedText": "**SINDICANTE:** Bom dia."})
    monkeypatch.setattr(openai_services, "processar_audio", mock)
    return mock


@pytest.fixture
def aprimorar(monkeypatch):
    mock = MagicMock(return_value="Texto aprimorado.")
    monkeypatch.setattr(openai_services, "aprimorar_texto", mock)
    return mock


def test_transcribe(client, processar):
    response = client.post("/api/transcribe", {"audio": _audio()})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "rawText": "bom dia",
        "formattedText": "**SINDICANTE:** Bom dia.",
    }
    audio_bytes, mime_type = processar.call_args.args
    assert len(audio_bytes) == 1600
    assert mime_type == "audio/webm"


def test_transcribe_sem_fala(client, processar):
    processar.return_value = {"rawText": "", "formattedText": ""}

    response = client.post("/api/transcribe", {"audio": _audio()})

    assert response.status_code == 200
    assert response.json() == {"success": True, "formattedText": "[Nenhum áudio detectado]", "rawText": ""}


def test_transcribe_metodo_invalido(client, processar):
    response = client.get("/api/transcribe")

    assert response.status_code == 405
    assert response.json() == {"success": False, "error": "Method not allowed. Use POST."}
    processar.assert_not_called()


def test_transcribe_sem_audio(client, processar):
    response = client.post("/api/transcribe", {"outro": "campo"})

    assert response.status_code == 400
    assert response.json()["error"] == "No audio file found in request"


def test_transcribe_sem_chave(client, processar, settings):
    settings.OPENAI_API_KEY = None

    response = client.post("/api/transcribe", {"audio": _audio()})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "OpenAI API key not configured on server"}
    processar.assert_not_called()


def test_transcribe_erro_upstream(client, processar):
    processar.side_effect = UpstreamError("Whisper transcription failed: Whisper API error: 429 - Rate limit", 429)

    response = client.post("/api/transcribe", {"audio": _audio()})

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("Server error: Whisper transcription failed")


def test_enhance_text(client, aprimorar):
    response = client.post("/api/enhance-text", {"text": "eu vi o cabo sair"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "enhancedText": "Texto aprimorado.",
        "originalText": "eu vi o cabo sair",
    }
    aprimorar.assert_called_once_with("eu vi o cabo sair")


def test_enhance_text_metodo_invalido_com_corpo(client, aprimorar):
    response = client.put("/api/enhance-text", data="text=ola", content_type="application/x-www-form-urlencoded")

    assert response.status_code == 405
    assert response.json()["success"] is False
    aprimorar.assert_not_called()


def test_enhance_text_sem_texto(client, aprimorar):
    response = client.post("/api/enhance-text", {"text": ""})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No text found in request"}


def test_enhance_text_falha_upstream(client, aprimorar):
    aprimorar.side_effect = UpstreamError("Failed to enhance text: GPT-4 API error: 500 - boom")

    response = client.post("/api/enhance-text", {"text": "texto"})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "Failed to enhance text" in body["error"]


def test_get_openai_key_desligado(client):
    assert client.post("/api/get-openai-key").status_code == 404


def test_get_openai_key_legado(client, settings):
    settings.TRANSCRICAO_PERMITIR_CHAVE_LEGADA = True

    response = client.post("/api/get-openai-key")

    assert response.status_code == 200
    body = response.json()
    assert body["apiKey"] == "sk-test-key"
    assert isinstance(body["timestamp"], int)
    assert response["Cache-Control"] == "no-cache, no-store, must-revalidate"
    assert response["Access-Control-Allow-Origin"] == "*"


def test_get_openai_key_formato_invalido(client, settings):
    settings.TRANSCRICAO_PERMITIR_CHAVE_LEGADA = True
    settings.OPENAI_API_KEY = "chave-errada"

    response = client.post("/api/get-openai-key")

    assert response.status_code == 500
    assert response.json() == {"error": "Invalid API key format"}


def test_get_openai_key_metodo_invalido(client, settings):
    settings.TRANSCRICAO_PERMITIR_CHAVE_LEGADA = True
    assert client.get("/api/get-openai-key").status_code == 405
