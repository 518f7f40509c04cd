# SindGocg/Transcricao/audio.py
"""Captura de áudio do microfone em PCM 16-bit e codificação dos segmentos em WAV."""
import io
import logging
import wave
from abc import ABC, abstractmethod

from SindGocg.exceptions import DeviceError

logger = logging.getLogger(__name__)

METODO_TRANSCRICAO = 'openai-whisper-gpt4'


class FonteAudio(ABC):
    """Origem de áudio PCM contínuo (mono, 16-bit)."""

    sample_rate = 16000
    channels = 1
    sample_width = 2

    @abstractmethod
    def listar_dispositivos(self) -> list[dict]:
        """Dispositivos de entrada disponíveis, como [{'id', 'label'}]."""

    @abstractmethod
    def abrir(self):
        """Reserva o dispositivo e começa a captar. Levanta DeviceError se não for possível."""

    @abstractmethod
    def ler(self, frames: int) -> bytes:
        """Bloqueia até haver `frames` amostras (ou a fonte terminar) e devolve os bytes PCM."""

    @abstractmethod
    def fechar(self):
        """Liberta o dispositivo."""


def _sounddevice():
    # PortAudio pode faltar no servidor; só o gravador local precisa dele
    try:
        import sounddevice
    except OSError as e:
        raise DeviceError(f"PortAudio não disponível: {e}") from e
    return sounddevice


class Microfone(FonteAudio):
    def __init__(self, sample_rate=16000, device=None):
        self.sample_rate = sample_rate
        self.device = device
        self._stream = None

    def listar_dispositivos(self):
        sd = _sounddevice()
        try:
            dispositivos = sd.query_devices()
        except sd.PortAudioError as e:
            raise DeviceError(str(e)) from e
        return [
            {'id': str(idx), 'label': d['name']}
            for idx, d in enumerate(dispositivos)
            if d['max_input_channels'] > 0
        ]

    def abrir(self):
        sd = _sounddevice()
        try:
            self._stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype='int16',
                device=self.device,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            self._stream = None
            raise DeviceError(str(e)) from e
        logger.info(f"🎤 Microfone aberto ({self.sample_rate} Hz)")

    def ler(self, frames):
        if self._stream is None:
            return b''
        dados, overflow = self._stream.read(frames)
        if overflow:
            logger.warning("⚠️ Buffer do microfone transbordou; parte do áudio foi perdida")
        return bytes(dados)

    def fechar(self):
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
            logger.info("🎤 Microfone libertado")


def testar_microfone(fonte):
    """Verifica se há microfone e se é possível abri-lo, sem iniciar a gravação."""
    try:
        dispositivos = fonte.listar_dispositivos()
        if not dispositivos:
            return {'success': False, 'error': 'No microphone devices found'}

        fonte.abrir()
        fonte.fechar()

        return {
            'success': True,
            'deviceCount': len(dispositivos),
            'devices': dispositivos,
            'method': METODO_TRANSCRICAO,
        }
    except DeviceError as e:
        logger.error(f"❌ Teste do microfone falhou: {e}")
        return {'success': False, 'error': f'Permission denied: {e}'}


def codificar_wav(pcm, sample_rate=16000, channels=1, sample_width=2):
    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buffer.getvalue()
