"""
Pytest configuration and fixtures.
"""

import threading
import time
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from django.contrib.auth.models import Group, User

from SindGocg.exceptions import DeviceError
from Transcricao.audio import FonteAudio


@pytest.fixture(autouse=True)
def openai_settings(settings):
    """Chave falsa e modo local em todos os testes; nenhum teste fala com a OpenAI."""
    settings.OPENAI_API_KEY = "sk-test-key"
    settings.TRANSCRICAO_MODO = "local"
    settings.TRANSCRICAO_PERMITIR_CHAVE_LEGADA = False
    return settings


class FonteFalsa(FonteAudio):
    """Fonte de áudio que entrega um PCM pré-definido e depois fica em silêncio."""

    def __init__(self, pcm=b"", dispositivos=None, erro_abrir=None):
        self._pcm = pcm
        self._pos = 0
        self._dispositivos = [{"id": "0", "label": "Microfone de teste"}] if dispositivos is None else dispositivos
        self._erro_abrir = erro_abrir
        self.esgotada = threading.Event()
        self.aberta = False

    def listar_dispositivos(self):
        return self._dispositivos

    def abrir(self):
        if self._erro_abrir:
            raise DeviceError(self._erro_abrir)
        self.aberta = True

    def ler(self, frames):
        if self._pos >= len(self._pcm):
            self.esgotada.set()
            time.sleep(0.005)
            return b""
        tamanho = frames * self.sample_width * self.channels
        dados = self._pcm[self._pos:self._pos + tamanho]
        self._pos += len(dados)
        return dados

    def fechar(self):
        self.aberta = False


def pcm_segundos(segundos, sample_rate=16000):
    """PCM mono 16-bit não silencioso com a duração pedida."""
    return b"\x10\x00" * int(sample_rate * segundos)


@pytest.fixture
def sindicante(db):
    user = User.objects.create_user(username="sindicante", password="senha-forte-123")
    grupo, _ = Group.objects.get_or_create(name="Sindicante")
    user.groups.add(grupo)
    return user


@pytest.fixture
def outro_utilizador(db):
    return User.objects.create_user(username="visitante", password="senha-forte-456")


@pytest.fixture
def client_sindicante(client, sindicante):
    client.force_login(sindicante)
    return client


@pytest.fixture
def db_service(monkeypatch):
    """Substitui o DatabaseService usado pelas views de sindicância."""
    mock = MagicMock()
    monkeypatch.setattr("Sindicancia.views.db_service", mock)
    return mock


@pytest.fixture
def file_manager(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr("Sindicancia.views.file_manager", mock)
    return mock


@pytest.fixture
def sindicancia_de(sindicante):
    """Documento de sindicância pertencente ao utilizador indicado (por omissão, o sindicante)."""
    def _build(user=None, **extra):
        return {
            "id": "sind-1",
            "numeroProcesso": "67112.004914/2025-10",
            "sindicanteId": str((user or sindicante).pk),
            "dataInstauracao": datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc),
            **extra,
        }
    return _build


@pytest.fixture
def oitiva():
    return {
        "id": "oit-1",
        "dataOitiva": datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc),
        "status": "Agendada",
        "tipo": "testemunha",
        "nomeTestemunha": "João da Silva",
        "postoGraduacao": "3S",
    }
