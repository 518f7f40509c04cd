# SindGocg/Transcricao/openai_services.py
import logging
import os
from functools import lru_cache
from io import BytesIO

import httpx
import openai
from django.conf import settings
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from SindGocg.exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

# Extensão que o Whisper usa para reconhecer o formato do áudio
EXTENSOES_AUDIO = {
    'audio/webm': 'webm',
    'audio/mp4': 'mp4',
    'audio/ogg': 'ogg',
    'audio/wav': 'wav',
    'audio/x-wav': 'wav',
    'audio/mpeg': 'mp3',
}

PROMPT_FORMATACAO = """Você é um assistente de transcrição jurídica especializado em sindicâncias militares. Sua principal tarefa é receber o texto bruto de uma oitiva e transformá-lo em um documento formal, claro e bem estruturado.

Siga estas regras rigorosamente:

1. **Identificação dos Interlocutores:** Com base no contexto, inicie a linha com "**SINDICANTE:**" ou "**TESTEMUNHA:**".
2. **Correção e Clareza:** Corrija todos os erros gramaticais, de pontuação e ortográficos. Reformule frases hesitantes ou informais para uma linguagem mais clara e concisa, **sem jamais alterar o significado original do depoimento**.
3. **Formatação Profissional:** Organize o diálogo em parágrafos lógicos. Remova interjeições, repetições e vícios de linguagem (como "né?", "tipo assim", "aí") que não agregam valor ao depoimento.
4. **Estrutura:** Mantenha um fluxo de diálogo claro, pergunta-resposta.

O objetivo final é produzir um texto que possa ser diretamente copiado para um Termo de Oitiva oficial."""

PROMPT_APRIMORAMENTO = """Você é um especialista em redação jurídica militar. Sua tarefa é melhorar o texto fornecido, mantendo seu significado original, mas aprimorando:

1. **Clareza e Concisão**: Torne o texto mais claro e direto
2. **Gramática e Ortografia**: Corrija todos os erros gramaticais e ortográficos
3. **Linguagem Formal**: Use linguagem adequada para documentos oficiais militares
4. **Estrutura**: Organize melhor as ideias e fluxo do texto
5. **Terminologia**: Use terminologia militar/jurídica apropriada quando aplicável

IMPORTANTE:
- Preserve completamente o significado original
- Mantenha o tom respeitoso e profissional
- NÃO adicione informações que não estavam no texto original
- NÃO remova informações importantes

Texto para melhorar:"""


def get_api_key():
    api_key = settings.OPENAI_API_KEY
    if not api_key:
        raise ConfigurationError('OpenAI API key not configured on server')
    return api_key


def _http_client():
    # --- CORREÇÃO DE SSL PARA PROXY CORPORATIVO ---
    proxy_url = os.getenv("http_proxy") or os.getenv("HTTP_PROXY") or os.getenv("https_proxy") or os.getenv("HTTPS_PROXY")
    if proxy_url:
        logger.debug(f"Criando cliente HTTP com proxy {proxy_url} e verify=False")
        return httpx.Client(proxy=proxy_url, verify=False, timeout=settings.OPENAI_TIMEOUT)
    return httpx.Client(verify=False, timeout=settings.OPENAI_TIMEOUT)


@lru_cache(maxsize=4)
def _chat_model(api_key, max_tokens):
    model = ChatOpenAI(
        model=settings.OPENAI_MODELO_CHAT,
        temperature=0.3,
        max_tokens=max_tokens,
        top_p=1,
        frequency_penalty=0,
        presence_penalty=0,
        api_key=api_key,
        http_client=_http_client(),
    )
    logger.info(f"Modelo {settings.OPENAI_MODELO_CHAT} carregado (max_tokens={max_tokens})")
    return model


def get_model(max_tokens=1000):
    """O modelo só é criado na primeira utilização: sem chave, a falha aparece no pedido e não no arranque."""
    return _chat_model(get_api_key(), max_tokens)


@lru_cache(maxsize=1)
def _whisper_client(api_key):
    return openai.OpenAI(api_key=api_key, http_client=_http_client())


def nome_arquivo_audio(mime_type):
    base = (mime_type or '').split(';')[0].strip().lower()
    return f"audio.{EXTENSOES_AUDIO.get(base, 'webm')}"


def transcrever_audio(audio_bytes, mime_type='audio/webm'):
    """Envia o áudio ao Whisper (português) e devolve o texto bruto, possivelmente vazio."""
    client = _whisper_client(get_api_key())

    arquivo = BytesIO(audio_bytes)
    arquivo.name = nome_arquivo_audio(mime_type)

    try:
        resposta = client.audio.transcriptions.create(
            model=settings.OPENAI_MODELO_TRANSCRICAO,
            file=arquivo,
            language='pt',
            response_format='json',
            temperature=0.2,
        )
    except openai.APIStatusError as e:
        raise UpstreamError(f"Whisper transcription failed: Whisper API error: {e.status_code} - {e.message}", e.status_code) from e
    except openai.OpenAIError as e:
        raise UpstreamError(f"Whisper transcription failed: {e}") from e

    logger.info("✅ Whisper transcription successful")
    return (resposta.text or '').strip()


def formatar_transcricao(texto_bruto):
    """
    Formata o texto bruto de uma oitiva (interlocutores, gramática, parágrafos).
    Qualquer falha ou resposta vazia devolve o próprio texto bruto.
    """
    prompt = ChatPromptTemplate.from_messages([
        ("system", PROMPT_FORMATACAO),
        ("user", 'Formate e corrija o seguinte texto transcrito de uma oitiva militar:\n\n"{texto}"'),
    ])
    try:
        chain = prompt | get_model(max_tokens=1000) | StrOutputParser()
        formatado = chain.invoke({"texto": texto_bruto}).strip()
    except Exception as e:
        logger.warning(f"⚠️ Erro na formatação com GPT ({e}); usando texto bruto")
        return texto_bruto

    if not formatado:
        logger.warning("⚠️ GPT devolveu resposta vazia; usando texto bruto")
        return texto_bruto
    return formatado


def aprimorar_texto(texto):
    prompt = ChatPromptTemplate.from_messages([
        ("system", PROMPT_APRIMORAMENTO),
        ("user", "{texto}"),
    ])
    chain = prompt | get_model(max_tokens=1500) | StrOutputParser()
    try:
        aprimorado = chain.invoke({"texto": texto}).strip()
    except Exception as e:
        logger.error(f"❌ Erro ao aprimorar texto com GPT: {e}")
        raise UpstreamError(f"Failed to enhance text: {e}") from e

    if not aprimorado:
        logger.warning("⚠️ GPT devolveu resposta vazia no aprimoramento")
        return texto

    logger.info("✨ Texto aprimorado com GPT")
    return aprimorado


def processar_audio(audio_bytes, mime_type='audio/webm'):
    """Whisper seguido da formatação. rawText vazio indica que não havia fala no áudio."""
    texto_bruto = transcrever_audio(audio_bytes, mime_type)
    if not texto_bruto:
        return {'rawText': '', 'formattedText': ''}
    logger.info(f"📝 Transcrição bruta: {texto_bruto[:100]}...")
    return {'rawText': texto_bruto, 'formattedText': formatar_transcricao(texto_bruto)}
