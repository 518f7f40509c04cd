# SindGocg/Transcricao/pipeline.py
"""
Gravação segmentada com transcrição contínua.

Uma thread capta o áudio e corta-o em segmentos de duração fixa; outra
processa os segmentos por ordem (Whisper + formatação) e entrega cada
resultado ao callback. A captura do segmento seguinte não espera pelo
processamento do anterior.
"""
import logging
import queue
import threading
from typing import Optional

import httpx
from django.conf import settings
from pydantic import BaseModel, ConfigDict, Field

from SindGocg.exceptions import ConfigurationError, DeviceError, StateError, UpstreamError
from . import openai_services
from .audio import METODO_TRANSCRICAO, Microfone, codificar_wav, testar_microfone

logger = logging.getLogger(__name__)

MENSAGEM_ERRO_SEGMENTO = '[Erro no processamento - verifique conexão com OpenAI]'

# Amostras lidas de cada vez (100 ms a 16 kHz)
FRAMES_POR_LEITURA = 1600

_FIM = object()


class ResultadoSegmento(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    formatted_text: str = Field(alias='formattedText')
    raw_text: str = Field(default='', alias='rawText')
    confidence: float = 0.95
    is_final: bool = Field(default=True, alias='isFinal')
    error: bool = False
    error_message: Optional[str] = Field(default=None, alias='errorMessage')

    def para_callback(self):
        return self.model_dump(by_alias=True, exclude_none=True)


class BackendLocal:
    """Chama a OpenAI diretamente com a chave do servidor."""

    def processar(self, audio, mime_type='audio/wav'):
        return openai_services.processar_audio(audio, mime_type)


class BackendProxy:
    """Envia cada segmento para o endpoint /api/transcribe."""

    def __init__(self, url=None, timeout=None):
        self.url = url or settings.TRANSCRICAO_PROXY_URL
        self.timeout = timeout or settings.OPENAI_TIMEOUT

    def processar(self, audio, mime_type='audio/wav'):
        try:
            response = httpx.post(
                self.url,
                files={'audio': ('audio.wav', audio, mime_type)},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Falha ao contactar o proxy de transcrição: {e}") from e

        try:
            dados = response.json()
        except ValueError:
            dados = {}

        if response.status_code >= 400 or not dados.get('success'):
            raise UpstreamError(dados.get('error') or f"Proxy respondeu {response.status_code}", response.status_code)
        return {'rawText': dados.get('rawText', ''), 'formattedText': dados.get('formattedText', '')}


def criar_backend(modo=None):
    modo = modo or settings.TRANSCRICAO_MODO
    if modo == 'local':
        return BackendLocal()
    if modo == 'proxy':
        return BackendProxy()
    raise ConfigurationError(f"TRANSCRICAO_MODO inválido: {modo!r} (use 'local' ou 'proxy')")


class ServicoTranscricao:
    def __init__(self, fonte=None, backend=None, segmento_ms=None, min_bytes=None):
        self.fonte = fonte or Microfone(sample_rate=settings.TRANSCRICAO_TAXA_AMOSTRAGEM)
        self.backend = backend or criar_backend()
        self.segmento_ms = segmento_ms or settings.TRANSCRICAO_SEGMENTO_MS
        self.min_bytes = settings.TRANSCRICAO_MIN_BYTES if min_bytes is None else min_bytes

        self._lock = threading.Lock()
        self._transcrevendo = False
        self._buffer = bytearray()
        self._fila = None
        self._thread_captura = None
        self._thread_worker = None
        self._indice = 0

    @property
    def _bytes_por_segmento(self):
        amostras = self.fonte.sample_rate * self.segmento_ms // 1000
        return amostras * self.fonte.sample_width * self.fonte.channels

    def is_active(self):
        return self._transcrevendo

    def _reservar_sessao(self):
        # Uma segunda chamada é recusada antes de qualquer acesso ao dispositivo
        with self._lock:
            if self._transcrevendo:
                raise StateError('Transcription already running')
            self._transcrevendo = True

    def _encerrar_sessao(self):
        with self._lock:
            if not self._transcrevendo:
                raise StateError('No transcription running')
            self._transcrevendo = False

    def start_transcription(self, callback):
        try:
            self._reservar_sessao()
        except StateError as e:
            return {'success': False, 'error': str(e)}

        try:
            teste = testar_microfone(self.fonte)
            if not teste['success']:
                raise DeviceError(f"Microphone test failed: {teste['error']}")

            self.fonte.abrir()
        except Exception as e:
            with self._lock:
                self._transcrevendo = False
            logger.error(f"❌ Não foi possível iniciar a transcrição: {e}")
            return {'success': False, 'error': str(e)}

        self._buffer = bytearray()
        self._indice = 0
        self._fila = queue.Queue()

        self._thread_worker = threading.Thread(
            target=self._processar_fila, args=(self._fila, callback), name='transcricao-worker', daemon=True,
        )
        self._thread_captura = threading.Thread(target=self._capturar, name='transcricao-captura', daemon=True)
        self._thread_worker.start()
        self._thread_captura.start()

        logger.info(f"🎙️ Transcrição iniciada (segmentos de {self.segmento_ms} ms)")
        return {'success': True, 'method': METODO_TRANSCRICAO}

    def stop_transcription(self):
        try:
            self._encerrar_sessao()
        except StateError as e:
            return {'success': False, 'error': str(e)}

        try:
            # A thread de captura termina após a leitura em curso
            self._thread_captura.join(timeout=5)

            if self._buffer:
                self._enfileirar(bytes(self._buffer))
            self._buffer = bytearray()

            self.fonte.fechar()
        except Exception as e:
            logger.error(f"❌ Erro ao parar a transcrição: {e}")
            return {'success': False, 'error': str(e)}
        finally:
            self._fila.put(_FIM)

        logger.info(f"⏹️ Transcrição parada ({self._indice} segmentos)")
        return {'success': True}

    def aguardar(self, timeout=None):
        """Espera que todos os segmentos já captados sejam processados. True se terminou."""
        if self._thread_worker is None:
            return True
        self._thread_worker.join(timeout)
        return not self._thread_worker.is_alive()

    def _capturar(self):
        while self._transcrevendo:
            try:
                dados = self.fonte.ler(FRAMES_POR_LEITURA)
            except Exception as e:
                logger.error(f"❌ Erro na captura de áudio: {e}")
                self._falha_captura(e)
                break

            if not dados:
                continue

            self._buffer.extend(dados)
            tamanho = self._bytes_por_segmento
            while len(self._buffer) >= tamanho:
                segmento = bytes(self._buffer[:tamanho])
                del self._buffer[:tamanho]
                self._enfileirar(segmento)

    def _falha_captura(self, erro):
        """Termina a sessão quando o dispositivo falha a meio da gravação."""
        with self._lock:
            encerrada_aqui = self._transcrevendo
            self._transcrevendo = False

        # Com um stop em curso, o flush e o fecho da fila ficam a cargo dele
        if encerrada_aqui and self._buffer:
            self._enfileirar(bytes(self._buffer))
            self._buffer = bytearray()

        self._fila.put(ResultadoSegmento(
            formattedText=MENSAGEM_ERRO_SEGMENTO,
            rawText='',
            confidence=0.0,
            error=True,
            errorMessage=f"Falha na captura de áudio: {erro}",
        ))

        if not encerrada_aqui:
            return
        try:
            self.fonte.fechar()
        except Exception as e:
            logger.error(f"❌ Erro ao libertar o microfone: {e}")
        finally:
            self._fila.put(_FIM)
        logger.info(f"⏹️ Transcrição interrompida por falha na captura ({self._indice} segmentos)")

    def _enfileirar(self, pcm):
        self._indice += 1
        self._fila.put((self._indice, pcm))

    def _processar_fila(self, fila, callback):
        while True:
            item = fila.get()
            if item is _FIM:
                break
            if isinstance(item, ResultadoSegmento):
                resultado = item
                indice = self._indice
            else:
                indice, pcm = item
                resultado = self._processar_segmento(indice, pcm)
            if resultado is None:
                continue
            try:
                callback(resultado.para_callback())
            except Exception as e:
                logger.error(f"❌ Erro no callback do segmento {indice}: {e}")

    def _processar_segmento(self, indice, pcm):
        audio = codificar_wav(pcm, self.fonte.sample_rate, self.fonte.channels, self.fonte.sample_width)
        if len(audio) <= self.min_bytes:
            logger.debug(f"Segmento {indice} muito pequeno ({len(audio)} bytes), ignorado")
            return None

        logger.info(f"📤 Enviando segmento {indice} ({len(audio)} bytes)")
        try:
            resposta = self.backend.processar(audio, 'audio/wav')
        except Exception as e:
            logger.error(f"❌ Erro ao transcrever o segmento {indice}: {e}")
            return ResultadoSegmento(
                formattedText=MENSAGEM_ERRO_SEGMENTO,
                rawText='',
                confidence=0.0,
                error=True,
                errorMessage=str(e),
            )

        texto_bruto = (resposta.get('rawText') or '').strip()
        if not texto_bruto:
            return None

        return ResultadoSegmento(
            formattedText=resposta.get('formattedText') or texto_bruto,
            rawText=texto_bruto,
        )
