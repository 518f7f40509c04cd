"""
Test the OpenAI helpers (Whisper transcription, formatting, enhancement).
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest
from langchain_core.runnables import RunnableLambda

from SindGocg.exceptions import ConfigurationError, UpstreamError
from Transcricao import openai_services


def _modelo(resposta):
    """Substituto do ChatOpenAI: devolve sempre a mesma resposta (ou levanta a exceção)."""
    def responder(_mensagens):
        if isinstance(resposta, Exception):
            raise resposta
        return resposta
    return RunnableLambda(responder)


@pytest.fixture
def whisper(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(openai_services, "_whisper_client", lambda api_key: client)
    return client


def test_get_api_key_ausente(settings):
    settings.OPENAI_API_KEY = None
    with pytest.raises(ConfigurationError, match="OpenAI API key not configured on server"):
        openai_services.get_api_key()


def test_get_model_sem_chave_nao_cria_modelo(settings):
    settings.OPENAI_API_KEY = ""
    with pytest.raises(ConfigurationError):
        openai_services.get_model()


@pytest.mark.parametrize("mime_type, nome", [
    ("audio/webm;codecs=opus", "audio.webm"),
    ("audio/mp4", "audio.mp4"),
    ("audio/ogg", "audio.ogg"),
    ("audio/wav", "audio.wav"),
    ("audio/mpeg", "audio.mp3"),
    ("application/octet-stream", "audio.webm"),
    (None, "audio.webm"),
])
def test_nome_arquivo_audio(mime_type, nome):
    assert openai_services.nome_arquivo_audio(mime_type) == nome


def test_transcrever_audio(whisper):
    whisper.audio.transcriptions.create.return_value = SimpleNamespace(text="  Bom dia, sargento.  ")

    texto = openai_services.transcrever_audio(b"RIFF....", "audio/wav")

    assert texto == "Bom dia, sargento."
    kwargs = whisper.audio.transcriptions.create.call_args.kwargs
    assert kwargs["model"] == "whisper-1"
    assert kwargs["language"] == "pt"
    assert kwargs["temperature"] == 0.2
    assert kwargs["file"].name == "audio.wav"


def test_transcrever_audio_erro_da_api(whisper):
    request = httpx.Request("POST", "https://api.openai.com/v1/audio/transcriptions")
    response = httpx.Response(401, request=request, json={"error": {"message": "Invalid key"}})
    whisper.audio.transcriptions.create.side_effect = openai.AuthenticationError(
        "Invalid key", response=response, body=None
    )

    with pytest.raises(UpstreamError) as excinfo:
        openai_services.transcrever_audio(b"audio")

    assert excinfo.value.status_code == 401
    assert "Whisper transcription failed" in str(excinfo.value)


def test_formatar_transcricao(monkeypatch):
    monkeypatch.setattr(openai_services, "get_model", lambda max_tokens: _modelo("**SINDICANTE:** Bom dia."))
    assert openai_services.formatar_transcricao("bom dia") == "**SINDICANTE:** Bom dia."


def test_formatar_transcricao_envia_texto_bruto(monkeypatch):
    recebido = {}

    def responder(mensagens):
        recebido["mensagens"] = mensagens.to_messages()
        return "ok"

    monkeypatch.setattr(openai_services, "get_model", lambda max_tokens: RunnableLambda(responder))
    openai_services.formatar_transcricao("eu vi a capa")

    sistema, utilizador = recebido["mensagens"]
    assert sistema.content.startswith("Você é um assistente de transcrição jurídica")
    assert utilizador.content == 'Formate e corrija o seguinte texto transcrito de uma oitiva militar:\n\n"eu vi a capa"'


def test_formatar_transcricao_falha_devolve_texto_bruto(monkeypatch):
    monkeypatch.setattr(openai_services, "get_model", lambda max_tokens: _modelo(RuntimeError("timeout")))
    assert openai_services.formatar_transcricao("texto original") == "texto original"


def test_formatar_transcricao_vazia_devolve_texto_bruto(monkeypatch):
    monkeypatch.setattr(openai_services, "get_model", lambda max_tokens: _modelo("   "))
    assert openai_services.formatar_transcricao("texto original") == "texto original"


def test_aprimorar_texto(monkeypatch):
    monkeypatch.setattr(openai_services, "get_model", lambda max_tokens: _modelo("Texto aprimorado."))
    assert openai_services.aprimorar_texto("texto") == "Texto aprimorado."


def test_aprimorar_texto_vazio_devolve_original(monkeypatch):
    monkeypatch.setattr(openai_services, "get_model", lambda max_tokens: _modelo(""))
    assert openai_services.aprimorar_texto("texto") == "texto"


def test_aprimorar_texto_falha(monkeypatch):
    monkeypatch.setattr(openai_services, "get_model", lambda max_tokens: _modelo(RuntimeError("503")))
    with pytest.raises(UpstreamError, match="Failed to enhance text: 503"):
        openai_services.aprimorar_texto("texto")


def test_processar_audio_sem_fala(monkeypatch):
    monkeypatch.setattr(openai_services, "transcrever_audio", lambda audio, mime: "")
    formatar = MagicMock()
    monkeypatch.setattr(openai_services, "formatar_transcricao", formatar)

    assert openai_services.processar_audio(b"audio", "audio/webm") == {"rawText": "", "formattedText": ""}
    formatar.assert_not_called()
