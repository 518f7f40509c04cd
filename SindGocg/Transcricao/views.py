# SindGocg/Transcricao/views.py
"""
Endpoints de proxy para a OpenAI: recebem o áudio ou o texto, juntam a
chave guardada no servidor e devolvem a resposta do Whisper/GPT.
"""
import logging
import time

from django.conf import settings
from django.http import Http404, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from SindGocg.exceptions import ConfigurationError
from . import openai_services

logger = logging.getLogger(__name__)

SEM_AUDIO_DETECTADO = '[Nenhum áudio detectado]'


def _erro(mensagem, status):
    return JsonResponse({'success': False, 'error': mensagem}, status=status)


def _verificar_pedido(request):
    """Método e chave da OpenAI. Devolve a resposta de erro ou None."""
    if request.method != 'POST':
        return _erro('Method not allowed. Use POST.', 405)
    try:
        openai_services.get_api_key()
    except ConfigurationError as e:
        logger.error("❌ OPENAI_API_KEY not found in environment variables")
        return _erro(str(e), 500)
    return None


@csrf_exempt
def transcribe(request):
    erro = _verificar_pedido(request)
    if erro:
        return erro

    audio = request.FILES.get('audio')
    if audio is None:
        return _erro('No audio file found in request', 400)

    logger.info(f"📤 Processing audio file: '{audio.name}' ({audio.content_type}, {audio.size} bytes)")

    try:
        resultado = openai_services.processar_audio(audio.read(), audio.content_type)
    except Exception as e:
        logger.error(f"❌ Error in transcribe API: {e}")
        return _erro(f'Server error: {e}', 500)

    if not resultado['rawText']:
        return JsonResponse({'success': True, 'formattedText': SEM_AUDIO_DETECTADO, 'rawText': ''})

    return JsonResponse({'success': True, **resultado})


@csrf_exempt
def enhance_text(request):
    erro = _verificar_pedido(request)
    if erro:
        return erro

    texto = request.POST.get('text')
    if not texto:
        return _erro('No text found in request', 400)

    logger.info(f"🔄 Enhancing text via GPT ({len(texto)} characters)")

    try:
        aprimorado = openai_services.aprimorar_texto(texto)
    except Exception as e:
        logger.error(f"❌ Error in enhance-text API: {e}")
        return _erro(f'Server error: {e}', 500)

    return JsonResponse({'success': True, 'enhancedText': aprimorado, 'originalText': texto})


@csrf_exempt
def get_openai_key(request):
    # Entrega a chave ao cliente: só para desenvolvimento, desligado por omissão
    if not settings.TRANSCRICAO_PERMITIR_CHAVE_LEGADA:
        raise Http404

    if request.method != 'POST':
        return JsonResponse({'error': 'Method not allowed'}, status=405)

    api_key = settings.OPENAI_API_KEY
    if not api_key:
        logger.error("OPENAI_API_KEY environment variable not set")
        return JsonResponse({'error': 'API key not configured'}, status=500)

    if not api_key.startswith('sk-'):
        logger.error("Invalid OpenAI API key format")
        return JsonResponse({'error': 'Invalid API key format'}, status=500)

    logger.warning("⚠️ Chave da OpenAI entregue pelo endpoint legado get-openai-key")
    response = JsonResponse({'apiKey': api_key, 'timestamp': int(time.time() * 1000)})
    response['Access-Control-Allow-Origin'] = '*'
    response['Access-Control-Allow-Methods'] = 'POST'
    response['Access-Control-Allow-Headers'] = 'Content-Type'
    response['Cache-Control'] = 'no-cache, no-store, must-revalidate'
    response['Pragma'] = 'no-cache'
    response['Expires'] = '0'
    return response
