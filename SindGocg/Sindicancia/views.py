# SindGocg/Sindicancia/views.py
import json
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required, user_passes_test
from django.core.exceptions import PermissionDenied
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET, require_http_methods, require_POST
from firebase_admin import firestore
from pydantic import ValidationError as PydanticValidationError

from SindGocg.exceptions import ValidationError
from .database import DatabaseService
from .file_manager import FileManager
from .forms import OficioForm, OitivaForm, SindicanciaForm
from .navigation import get_param, navigate_to
from .permissions import has_sindicante_access, is_owner
from .schemas import AtualizacaoOitiva, DocumentoOficio, NovaOitiva, NovaSindicancia, Oitiva, Sindicancia
from .termos import exportar_termo_docx, get_template

logger = logging.getLogger(__name__)

db_service = DatabaseService()
file_manager = FileManager()


# --- Funções auxiliares ---

def _user_id(request):
    return str(request.user.pk)


def _json_body(request):
    try:
        return json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        raise ValidationError("Corpo do pedido não é JSON válido.")


def _mensagem_validacao(e):
    return '; '.join(
        f"{'.'.join(str(loc) for loc in erro['loc'])}: {erro['msg']}" for erro in e.errors()
    )


def _erro(mensagem, status):
    return JsonResponse({'success': False, 'error': mensagem}, status=status)


def _obter_sindicancia(request, inquiry_id):
    """
    Carrega a sindicância e confirma que pertence ao utilizador.
    Devolve (dados, None) ou (None, (status, mensagem)).
    """
    resultado = db_service.get_inquiry(inquiry_id)
    if not resultado['success']:
        status = 404 if resultado['error'] == 'Sindicância não encontrada' else 500
        return None, (status, resultado['error'])

    if not is_owner(request.user, resultado['data']):
        logger.warning(f"⛔ Utilizador '{request.user.username}' tentou aceder à sindicância {inquiry_id} de outro sindicante.")
        return None, (403, 'Acesso negado a esta sindicância.')

    return resultado['data'], None


def _obter_oitiva(inquiry_id, hearing_id):
    resultado = db_service.get_hearing(inquiry_id, hearing_id)
    if not resultado['success']:
        status = 404 if resultado['error'] == 'Oitiva não encontrada' else 500
        return None, (status, resultado['error'])
    return resultado['data'], None


def _pagina_sindicancia(request, inquiry_id):
    sindicancia, falha = _obter_sindicancia(request, inquiry_id)
    if falha:
        status, mensagem = falha
        if status == 403:
            raise PermissionDenied(mensagem)
        raise Http404(mensagem)
    return sindicancia


def _pagina_oitiva(inquiry_id, hearing_id):
    oitiva, falha = _obter_oitiva(inquiry_id, hearing_id)
    if falha:
        raise Http404(falha[1])
    return oitiva


def _dados_termo(sindicancia, oitiva):
    return {
        **oitiva,
        'numeroProcesso': sindicancia.get('numeroProcesso'),
        'inquiryId': sindicancia['id'],
    }


def _enviar_oficio(inquiry_id, hearing_id, ficheiro):
    resultado = file_manager.upload_document(ficheiro, hearing_id)
    if not resultado['success']:
        return resultado

    oficio = DocumentoOficio(
        storagePath=resultado['storagePath'],
        url=resultado['url'],
        fileName=resultado['fileName'],
        hearingId=hearing_id,
    )
    atualizacao = db_service.update_hearing(inquiry_id, hearing_id, {'oficio': oficio.model_dump(by_alias=True)})
    if not atualizacao['success']:
        # Sem referência na oitiva o ficheiro ficaria órfão no Storage
        file_manager.delete_document(resultado['storagePath'])
        return atualizacao
    return resultado


# --- Páginas ---

@login_required
def dashboard(request):
    if request.method == 'POST':
        form = SindicanciaForm(request.POST)
        if not has_sindicante_access(request.user):
            messages.error(request, "Apenas sindicantes podem instaurar sindicâncias.")
        elif form.is_valid():
            dados = NovaSindicancia.model_validate(form.cleaned_data).para_firestore()
            resultado = db_service.create_inquiry(dados, _user_id(request))
            if resultado['success']:
                messages.success(request, "Sindicância instaurada com sucesso.")
                return navigate_to(request, 'inquiry', id=resultado['id'])
            messages.error(request, f"Erro ao criar sindicância: {resultado['error']}")
    else:
        form = SindicanciaForm()

    resultado = db_service.get_inquiries(_user_id(request))
    if not resultado['success']:
        messages.error(request, f"Não foi possível carregar as sindicâncias: {resultado['error']}")
    sindicancias = [Sindicancia.model_validate(s) for s in resultado.get('data', [])]

    return render(request, 'Sindicancia/dashboard.html', {
        'form': form,
        'sindicancias': sindicancias,
        'pode_editar': has_sindicante_access(request.user),
    })


@login_required
def inquiry(request):
    inquiry_id = get_param(request, 'id')
    if not inquiry_id:
        return navigate_to(request, 'dashboard')

    sindicancia = _pagina_sindicancia(request, inquiry_id)

    if request.method == 'POST':
        form = OitivaForm(request.POST)
        if not has_sindicante_access(request.user):
            messages.error(request, "Apenas sindicantes podem agendar oitivas.")
        elif form.is_valid():
            dados = NovaOitiva.model_validate(form.cleaned_data).para_firestore()
            resultado = db_service.create_hearing(inquiry_id, dados)
            if resultado['success']:
                messages.success(request, "Oitiva agendada.")
                return navigate_to(request, 'inquiry', id=inquiry_id)
            messages.error(request, f"Erro ao agendar oitiva: {resultado['error']}")
    else:
        form = OitivaForm()

    resultado = db_service.get_hearings(inquiry_id)
    if not resultado['success']:
        messages.error(request, f"Não foi possível carregar as oitivas: {resultado['error']}")
    oitivas = [Oitiva.model_validate(o) for o in resultado.get('data', [])]

    return render(request, 'Sindicancia/inquiry.html', {
        'sindicancia': Sindicancia.model_validate(sindicancia),
        'oitivas': oitivas,
        'form': form,
    })


@login_required
def hearing(request):
    inquiry_id = get_param(request, 'inquiryId')
    hearing_id = get_param(request, 'id')
    if not inquiry_id or not hearing_id:
        return navigate_to(request, 'dashboard')

    sindicancia = _pagina_sindicancia(request, inquiry_id)

    if request.method == 'POST':
        form = OficioForm(request.POST, request.FILES)
        if not has_sindicante_access(request.user):
            messages.error(request, "Apenas sindicantes podem anexar ofícios.")
        elif form.is_valid():
            resultado = _enviar_oficio(inquiry_id, hearing_id, form.cleaned_data['oficio'])
            if resultado['success']:
                messages.success(request, f"Ofício '{resultado['fileName']}' anexado.")
            else:
                messages.error(request, resultado['error'])
            return navigate_to(request, 'hearing', inquiryId=inquiry_id, id=hearing_id)
    else:
        form = OficioForm()

    oitiva = _pagina_oitiva(inquiry_id, hearing_id)

    return render(request, 'Sindicancia/hearing.html', {
        'sindicancia': Sindicancia.model_validate(sindicancia),
        'oitiva': Oitiva.model_validate(oitiva),
        'oficio': oitiva.get('oficio'),
        'termo': get_template(oitiva.get('tipo'), _dados_termo(sindicancia, oitiva)),
        'form': form,
    })


@login_required
def realizar_oitiva(request):
    inquiry_id = get_param(request, 'inquiryId')
    hearing_id = get_param(request, 'id')
    if not inquiry_id or not hearing_id:
        return navigate_to(request, 'dashboard')

    sindicancia = _pagina_sindicancia(request, inquiry_id)
    oitiva = _pagina_oitiva(inquiry_id, hearing_id)

    if request.method == 'POST':
        if not has_sindicante_access(request.user):
            raise PermissionDenied
        resultado = db_service.update_hearing(inquiry_id, hearing_id, {
            'transcricao': request.POST.get('transcricao', ''),
        })
        if resultado['success']:
            messages.success(request, "Transcrição guardada.")
        else:
            messages.error(request, f"Erro ao guardar a transcrição: {resultado['error']}")
        return navigate_to(request, 'realizar-oitiva', inquiryId=inquiry_id, id=hearing_id)

    return render(request, 'Sindicancia/realizar_oitiva.html', {
        'sindicancia': Sindicancia.model_validate(sindicancia),
        'oitiva': Oitiva.model_validate(oitiva),
        'termo': get_template(oitiva.get('tipo'), _dados_termo(sindicancia, oitiva)),
    })


# --- Endpoints JSON ---

@login_required
@require_http_methods(['GET', 'POST'])
def sindicancias_json(request):
    if request.method == 'GET':
        resultado = db_service.get_inquiries(_user_id(request))
        return JsonResponse(resultado, status=200 if resultado['success'] else 500)

    if not has_sindicante_access(request.user):
        return _erro('Apenas sindicantes podem instaurar sindicâncias.', 403)
    try:
        dados = NovaSindicancia.model_validate(_json_body(request)).para_firestore()
    except PydanticValidationError as e:
        return _erro(_mensagem_validacao(e), 400)
    except ValidationError as e:
        return _erro(str(e), 400)

    resultado = db_service.create_inquiry(dados, _user_id(request))
    return JsonResponse(resultado, status=201 if resultado['success'] else 500)


@login_required
@require_http_methods(['GET', 'POST'])
def oitivas_json(request, inquiry_id):
    _, falha = _obter_sindicancia(request, inquiry_id)
    if falha:
        return _erro(falha[1], falha[0])

    if request.method == 'GET':
        resultado = db_service.get_hearings(inquiry_id)
        return JsonResponse(resultado, status=200 if resultado['success'] else 500)

    if not has_sindicante_access(request.user):
        return _erro('Apenas sindicantes podem agendar oitivas.', 403)
    try:
        dados = NovaOitiva.model_validate(_json_body(request)).para_firestore()
    except PydanticValidationError as e:
        return _erro(_mensagem_validacao(e), 400)
    except ValidationError as e:
        return _erro(str(e), 400)

    resultado = db_service.create_hearing(inquiry_id, dados)
    return JsonResponse(resultado, status=201 if resultado['success'] else 500)


@login_required
@require_http_methods(['GET', 'POST'])
def oitiva_json(request, inquiry_id, hearing_id):
    _, falha = _obter_sindicancia(request, inquiry_id)
    if falha:
        return _erro(falha[1], falha[0])

    if request.method == 'GET':
        oitiva, falha = _obter_oitiva(inquiry_id, hearing_id)
        if falha:
            return _erro(falha[1], falha[0])
        return JsonResponse({'success': True, 'data': oitiva})

    if not has_sindicante_access(request.user):
        return _erro('Apenas sindicantes podem alterar oitivas.', 403)
    try:
        dados = AtualizacaoOitiva.model_validate(_json_body(request)).para_firestore()
    except PydanticValidationError as e:
        return _erro(_mensagem_validacao(e), 400)
    except ValidationError as e:
        return _erro(str(e), 400)

    if not dados:
        return _erro('Nenhum campo para atualizar.', 400)

    resultado = db_service.update_hearing(inquiry_id, hearing_id, dados)
    return JsonResponse(resultado, status=200 if resultado['success'] else 500)


@login_required
@user_passes_test(has_sindicante_access)
@require_POST
def upload_oficio(request, inquiry_id, hearing_id):
    _, falha = _obter_sindicancia(request, inquiry_id)
    if falha:
        return _erro(falha[1], falha[0])
    _, falha = _obter_oitiva(inquiry_id, hearing_id)
    if falha:
        return _erro(falha[1], falha[0])

    ficheiro = request.FILES.get('oficio')
    if ficheiro is None:
        return _erro('Nenhum ficheiro foi enviado.', 400)

    try:
        file_manager.validate_file(ficheiro)
    except ValidationError as e:
        return _erro(str(e), 400)

    resultado = _enviar_oficio(inquiry_id, hearing_id, ficheiro)
    if not resultado['success']:
        return _erro(resultado['error'], 500)
    return JsonResponse(resultado)


@login_required
@user_passes_test(has_sindicante_access)
@require_POST
def excluir_oficio(request, inquiry_id, hearing_id):
    _, falha = _obter_sindicancia(request, inquiry_id)
    if falha:
        return _erro(falha[1], falha[0])
    oitiva, falha = _obter_oitiva(inquiry_id, hearing_id)
    if falha:
        return _erro(falha[1], falha[0])

    oficio = oitiva.get('oficio')
    if not oficio:
        return _erro('Esta oitiva não tem ofício anexado.', 404)

    resultado = file_manager.delete_document(oficio['storagePath'])
    if not resultado['success']:
        return _erro(resultado['error'], 500)

    resultado = db_service.update_hearing(inquiry_id, hearing_id, {'oficio': firestore.DELETE_FIELD})
    file_manager.clear_upload_progress(hearing_id)
    return JsonResponse(resultado, status=200 if resultado['success'] else 500)


@login_required
@user_passes_test(has_sindicante_access)
@require_http_methods(['GET', 'POST'])
def progresso_upload(request, hearing_id):
    # POST limpa o registo depois de a interface mostrar o resultado final
    if request.method == 'POST':
        file_manager.clear_upload_progress(hearing_id)
        return JsonResponse({'success': True})
    return JsonResponse(file_manager.get_upload_progress(hearing_id))


@login_required
@require_GET
def termo_json(request, inquiry_id, hearing_id):
    sindicancia, falha = _obter_sindicancia(request, inquiry_id)
    if falha:
        return _erro(falha[1], falha[0])
    oitiva, falha = _obter_oitiva(inquiry_id, hearing_id)
    if falha:
        return _erro(falha[1], falha[0])

    tipo = oitiva.get('tipo') or 'testemunha'
    return JsonResponse({
        'success': True,
        'tipo': tipo,
        'texto': get_template(tipo, _dados_termo(sindicancia, oitiva)),
    })


@login_required
@require_GET
def exportar_termo(request, inquiry_id, hearing_id):
    sindicancia, falha = _obter_sindicancia(request, inquiry_id)
    if falha:
        return _erro(falha[1], falha[0])
    oitiva, falha = _obter_oitiva(inquiry_id, hearing_id)
    if falha:
        return _erro(falha[1], falha[0])

    tipo = oitiva.get('tipo') or 'testemunha'
    texto = get_template(tipo, _dados_termo(sindicancia, oitiva))
    if oitiva.get('transcricao'):
        texto = f"{texto}\n\n**TRANSCRIÇÃO**\n\n{oitiva['transcricao']}"

    response = HttpResponse(
        exportar_termo_docx(texto),
        content_type='application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    )
    response['Content-Disposition'] = f'attachment; filename=Termo_{tipo}_{hearing_id}.docx'
    return response
