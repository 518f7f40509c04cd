# SindGocg/Sindicancia/navigation.py
"""
Navegação entre as páginas do sistema.

As páginas têm nomes lógicos ('dashboard', 'inquiry', ...) associados aos
nomes das URLs do Django. O estado da página (ids da sindicância e da
oitiva) viaja na query string, e a página atual fica registada na sessão.
"""
import logging

from django.http import QueryDict
from django.shortcuts import redirect
from django.urls import Resolver404, resolve, reverse

logger = logging.getLogger(__name__)

PAGE_MAP = {
    'login': 'login:login',
    'dashboard': 'Sindicancia:dashboard',
    'inquiry': 'Sindicancia:inquiry',
    'hearing': 'Sindicancia:hearing',
    'realizar-oitiva': 'Sindicancia:realizar_oitiva',
}

PUBLIC_PAGES = ('login', 'index')

SESSION_HISTORICO = 'historico_navegacao'
HISTORICO_MAXIMO = 20


def _url_da_pagina(page):
    url_name = PAGE_MAP.get(page)
    if url_name is None:
        return f'/{page}/'
    return reverse(url_name)


def get_current_page(request):
    try:
        match = resolve(request.path_info)
    except Resolver404:
        match = None

    if match is not None:
        url_name = f'{match.namespace}:{match.url_name}' if match.namespace else match.url_name
        for page, mapped in PAGE_MAP.items():
            if mapped == url_name:
                return page

    partes = [p for p in request.path_info.split('/') if p]
    return partes[-1] if partes else 'index'


def navigate_to(request, page, **params):
    url = _url_da_pagina(page)

    query = {k: v for k, v in params.items() if v is not None}
    if query:
        qd = QueryDict(mutable=True)
        qd.update(query)
        url = f'{url}?{qd.urlencode()}'

    historico = request.session.get(SESSION_HISTORICO, [])
    historico.append({'page': page, 'params': {k: str(v) for k, v in query.items()}})
    request.session[SESSION_HISTORICO] = historico[-HISTORICO_MAXIMO:]

    logger.debug(f"Navegando para '{page}' -> {url}")
    return redirect(url)


def get_param(request, name, default=None):
    return request.GET.get(name, default)


def set_param(request, name, value):
    """URL da página atual com o parâmetro definido (ou substituído)."""
    qd = request.GET.copy()
    qd[name] = value
    return f'{request.path}?{qd.urlencode()}'


def remove_param(request, name):
    qd = request.GET.copy()
    qd.pop(name, None)
    query = qd.urlencode()
    return f'{request.path}?{query}' if query else request.path


def redirect_based_on_auth(request):
    """
    Utilizador autenticado numa página pública vai para o dashboard;
    anónimo numa página privada vai para o login. Caso contrário, None.
    """
    page = get_current_page(request)
    is_public = page in PUBLIC_PAGES

    if request.user.is_authenticated and is_public:
        return navigate_to(request, 'dashboard')
    if not request.user.is_authenticated and not is_public:
        return navigate_to(request, 'login')
    return None
