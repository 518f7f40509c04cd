"""
Configurações do projeto SindGocg.

Os valores sensíveis (chaves da OpenAI, credenciais do Firebase) vêm do
ficheiro .env ou das variáveis de ambiente.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'sim', 'on')


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-sindgocg-dev-only')

DEBUG = _env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = [h.strip() for h in os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h.strip()]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'login',
    'Sindicancia',
    'Transcricao',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'SindGocg.middleware.RequestLogMiddleware',
]

ROOT_URLCONF = 'SindGocg.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'SindGocg.wsgi.application'


# Apenas utilizadores e sessões ficam no banco relacional.
# Sindicâncias e oitivas vivem no Firestore.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LOGIN_URL = 'login:login'
LOGIN_REDIRECT_URL = 'Sindicancia:dashboard'

LANGUAGE_CODE = 'pt-br'
TIME_ZONE = 'America/Sao_Paulo'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Áudio e textos longos chegam por multipart (limite de 50MB)
DATA_UPLOAD_MAX_MEMORY_SIZE = 50 * 1024 * 1024
FILE_UPLOAD_MAX_MEMORY_SIZE = 50 * 1024 * 1024


# --- OpenAI ---
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
OPENAI_MODELO_CHAT = os.getenv('OPENAI_MODELO_CHAT', 'gpt-4-turbo')
OPENAI_MODELO_TRANSCRICAO = os.getenv('OPENAI_MODELO_TRANSCRICAO', 'whisper-1')
OPENAI_TIMEOUT = float(os.getenv('OPENAI_TIMEOUT', '60'))


# --- Firebase ---
FIREBASE_CREDENTIALS = os.getenv('FIREBASE_CREDENTIALS')
FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET', 'sind-gocg.firebasestorage.app')


# --- Transcrição ---
# 'local' chama a OpenAI diretamente; 'proxy' envia cada segmento para /api/transcribe
TRANSCRICAO_MODO = os.getenv('TRANSCRICAO_MODO', 'local')
TRANSCRICAO_PROXY_URL = os.getenv('TRANSCRICAO_PROXY_URL', 'http://localhost:8000/api/transcribe')
TRANSCRICAO_SEGMENTO_MS = 5000
TRANSCRICAO_MIN_BYTES = 1024
TRANSCRICAO_TAXA_AMOSTRAGEM = 16000
TRANSCRICAO_PERMITIR_CHAVE_LEGADA = _env_bool('TRANSCRICAO_PERMITIR_CHAVE_LEGADA', False)


# --- Ofícios ---
OFICIO_EXTENSOES_PERMITIDAS = ['pdf', 'doc', 'docx']
OFICIO_TAMANHO_MAXIMO_MB = 10


LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simples': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simples',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': os.getenv('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
