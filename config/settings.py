import sys
from pathlib import Path

from celery.schedules import crontab
from decouple import Csv, config

# -------------------------------
# Diretórios base
# -------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = BASE_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

# -------------------------------
# Segurança e debug
# -------------------------------
SECRET_KEY = config('SECRET_KEY', default='dev-insecure-secret-key')
DEBUG = config('DEBUG', default=False, cast=bool)
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=Csv())

SESSION_COOKIE_SECURE   = config('SESSION_COOKIE_SECURE', default=False, cast=bool)
CSRF_COOKIE_SECURE      = config('CSRF_COOKIE_SECURE', default=False, cast=bool)
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

# -------------------------------
# CORS
# -------------------------------
CORS_ALLOW_ALL_ORIGINS = config('CORS_ALLOW_ALL_ORIGINS', default=False, cast=bool)
CORS_ALLOWED_ORIGINS   = config('CORS_ALLOWED_ORIGINS', default='http://localhost:3000', cast=Csv())
CORS_ALLOW_HEADERS     = config('CORS_ALLOW_HEADERS', default='Content-Type,X-API-Key', cast=Csv())

# -------------------------------
# Celery
# -------------------------------
CELERY_BROKER_URL                 = config('CELERY_BROKER_URL', default='redis://localhost:6379/1')
CELERY_RESULT_BACKEND             = config('CELERY_RESULT_BACKEND', default='redis://localhost:6379/2')
CELERY_TASK_ACKS_LATE             = True
CELERY_TASK_REJECT_ON_WORKER_LOST = True
CELERY_WORKER_PREFETCH_MULTIPLIER = 1
CELERY_TASK_ALWAYS_EAGER          = config('CELERY_TASK_ALWAYS_EAGER', default=False, cast=bool)
CELERY_ACCEPT_CONTENT             = ["json"]
CELERY_TASK_SERIALIZER            = "json"
CELERY_TASK_QUEUES = {
    "default":      {"exchange": "default",      "routing_key": "default"},
    "dead_letter":  {"exchange": "dead_letter",  "routing_key": "dead_letter"},
    "boleto_sync":  {"exchange": "boleto_sync",  "routing_key": "boleto_sync"},
}
CELERY_TASK_DEFAULT_QUEUE = 'default'
CELERY_TASK_DEFAULT_EXCHANGE = 'default'
CELERY_TASK_DEFAULT_ROUTING_KEY = 'default'

# --- AGENDADOR (CELERY BEAT) ---
CELERY_BEAT_SCHEDULE = {
    # Sincroniza o mês corrente de todos os clientes ativos, diariamente às 5h.
    'schedule-monthly-boleto-sync': {
        'task': 'central_consultor_api.tasks.schedule_monthly_boleto_sync',
        'schedule': crontab(minute=0, hour=5),
    },
}

# -------------------------------
# Redis / Cache (lock por cliente)
# -------------------------------
REDIS_URL = config('REDIS_URL', default='redis://localhost:6379/0')
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": REDIS_URL,
    }
}

# -------------------------------
# SGA (API de boletos)
# -------------------------------
SGA_TIMEOUT                = config('SGA_TIMEOUT', default=180, cast=float)
SGA_DETAIL_TIMEOUT         = config('SGA_DETAIL_TIMEOUT', default=30, cast=float)
SGA_PAGE_SIZE              = config('SGA_PAGE_SIZE', default=3000, cast=int)
SGA_DEFAULT_SITUATION_CODE = config('SGA_DEFAULT_SITUATION_CODE', default='2')
PDF_PROXY_TIMEOUT          = config('PDF_PROXY_TIMEOUT', default=30, cast=float)

# -------------------------------
# Sincronização / Links
# -------------------------------
APP_BASE_URL             = config('APP_BASE_URL', default='').rstrip('/')
SYNC_LOCK_TTL_SECONDS    = config('SYNC_LOCK_TTL_SECONDS', default=30 * 60, cast=int)
SYNC_BUSY_RETRY_SECONDS  = config('SYNC_BUSY_RETRY_SECONDS', default=60, cast=int)
SHORT_CODE_MAX_ATTEMPTS  = config('SHORT_CODE_MAX_ATTEMPTS', default=10, cast=int)

# -------------------------------
# Apps, Middleware, URLs
# -------------------------------
INSTALLED_APPS = [
    'corsheaders',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'drf_yasg',
    'django_prometheus',
    'central_consultor_api.apps.CentralConsultorConfig',
    'plugins.django_interface.apps.DjangoInterfaceConfig',
]

MIDDLEWARE = [
    'django_prometheus.middleware.PrometheusBeforeMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'plugins.django_interface.request_middleware.RequestContextMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django_prometheus.middleware.PrometheusAfterMiddleware',
]

ROOT_URLCONF = 'central_consultor_api.urls'
WSGI_APPLICATION = 'central_consultor_api.wsgi.application'
ASGI_APPLICATION = 'central_consultor_api.asgi.application'

# -------------------------------
# Templates
# -------------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
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

# -------------------------------
# REST Framework
# -------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "plugins.django_interface.authentication.ApiKeyAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "plugins.django_interface.permissions.HasValidApiKey",
    ),
    "UNAUTHENTICATED_USER": None,
}
SWAGGER_SETTINGS = {
    'SECURITY_DEFINITIONS': {
        'ApiKey': {
            'type': 'apiKey', 'name': 'X-API-Key', 'in': 'header'
        }
    },
}

# -------------------------------
# Banco de Dados
# -------------------------------
DATABASES = {
    'default': {
        'ENGINE':   'django.db.backends.postgresql',
        'NAME':     config('DB_NAME', default='central_consultor'),
        'USER':     config('DB_USER', default='postgres'),
        'PASSWORD': config('DB_PASS', default=''),
        'HOST':     config('DB_HOST', default='localhost'),
        'PORT':     config('DB_PORT', default='5432'),
    }
}

# -------------------------------
# Internacionalização
# -------------------------------
LANGUAGE_CODE = 'pt-br'
TIME_ZONE     = 'America/Sao_Paulo'
USE_I18N      = True
USE_TZ        = True

# -------------------------------
# Arquivos estáticos
# -------------------------------
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
