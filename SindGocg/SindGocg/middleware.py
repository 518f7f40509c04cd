import logging
import time

logger = logging.getLogger('django')

# Polling e ficheiros estáticos não entram no log
CAMINHOS_IGNORADOS = (
    '/static/',
    '/favicon.ico',
    '/oficios/progresso/',
    'jsi18n',
)


def _contexto_processo(request):
    """Identificadores da sindicância/oitiva do pedido, vindos da URL ou da query string."""
    match = getattr(request, 'resolver_match', None)
    kwargs = match.kwargs if match else {}

    sindicancia = kwargs.get('inquiry_id') or request.GET.get('inquiryId')
    oitiva = kwargs.get('hearing_id')
    if match and match.url_name == 'inquiry':
        sindicancia = sindicancia or request.GET.get('id')
    elif match and match.url_name in ('hearing', 'realizar_oitiva'):
        oitiva = oitiva or request.GET.get('id')

    partes = []
    if sindicancia:
        partes.append(f"Sindicância: {sindicancia}")
    if oitiva:
        partes.append(f"Oitiva: {oitiva}")
    return ' | '.join(partes)


class RequestLogMiddleware:
    """Uma linha de log por pedido: método, rota, sindicante, processo e duração."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        inicio = time.monotonic()
        response = self.get_response(request)
        duracao = time.monotonic() - inicio

        if any(termo in request.path for termo in CAMINHOS_IGNORADOS):
            return response

        user = getattr(request, 'user', None)
        sindicante = user.username if user and user.is_authenticated else 'Anon'

        log_msg = f"[{request.method}] {request.path} | Sindicante: {sindicante} | Status: {response.status_code} | {duracao:.2f}s"
        contexto = _contexto_processo(request)
        if contexto:
            log_msg = f"{log_msg} | {contexto}"

        if response.status_code >= 500:
            logger.error(f"❌ {log_msg}")
        elif response.status_code >= 400:
            logger.warning(f"⚠️ {log_msg}")
        else:
            logger.info(f"ℹ️ {log_msg}")

        return response
