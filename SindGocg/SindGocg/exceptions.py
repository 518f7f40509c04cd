# SindGocg/exceptions.py


class SindGocgError(Exception):
    """Erro base da aplicação."""


class ConfigurationError(SindGocgError):
    """Credencial ou configuração do servidor ausente."""


class ValidationError(SindGocgError):
    """Método, campo, tipo ou tamanho de ficheiro inválido."""


class UpstreamError(SindGocgError):
    """Resposta de erro de uma API externa (Whisper ou GPT)."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class DeviceError(SindGocgError):
    """Microfone inexistente ou permissão negada."""


class StateError(SindGocgError):
    """Operação inválida para o estado atual da sessão de gravação."""
