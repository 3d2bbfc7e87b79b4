"""
Django settings for training_portal project.
"""

from pathlib import Path
import os
from dotenv import load_dotenv

# Charge les variables d'environnement
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    """Lit un booléen depuis l'environnement ('true', '1', 'yes')."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes')


# ==================== CONFIGURATION DE BASE ====================

# Environnement (development/production)
DJANGO_ENV = os.environ.get('DJANGO_ENV', 'development')

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'cle-par-defaut-pour-dev-seulement')

DEBUG = (DJANGO_ENV == 'development')

if DJANGO_ENV == 'production':
    ALLOWED_HOSTS = [h.strip() for h in os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',') if h.strip()]
else:
    ALLOWED_HOSTS = ['127.0.0.1', 'localhost', 'testserver']

# ==================== APPLICATIONS ====================

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'widget_tweaks',
    'rest_framework',
    'users.apps.UsersConfig',
    'training.apps.TrainingConfig',
    'core.apps.CoreConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'users.middleware.IdentitySessionMiddleware',  # Session Gate: jetons du fournisseur d'identité
    'core.middleware.NoCacheMiddleware',  # Anti-cache pour empêcher le retour après déconnexion
]

ROOT_URLCONF = 'training_portal.urls'

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

WSGI_APPLICATION = 'training_portal.wsgi.application'

# ==================== BASE DE DONNÉES ====================

# Le miroir local des comptes est minuscule: SQLite suffit en dev/tests,
# PostgreSQL dès que DB_NAME est fourni.
if os.environ.get('DB_NAME'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ.get('DB_NAME'),
            'USER': os.environ.get('DB_USER', 'postgres'),
            'PASSWORD': os.environ.get('DB_PASSWORD', ''),
            'HOST': os.environ.get('DB_HOST', 'localhost'),
            'PORT': os.environ.get('DB_PORT', '5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# ==================== CACHE ====================

# Sert aux métadonnées vidéo (l'état des sessions de lecture est en base)
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'training-portal',
    }
}
if os.environ.get('REDIS_CACHE_URL'):
    CACHES['default'] = {
        'BACKEND': 'django.core.cache.backends.redis.RedisCache',
        'LOCATION': os.environ['REDIS_CACHE_URL'],
    }

# ==================== INTERNATIONALISATION ====================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# ==================== FICHIERS STATIQUES ====================

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STATICFILES_DIRS = [BASE_DIR / 'static']

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ==================== AUTHENTIFICATION ====================

# L'authentification est déléguée au fournisseur d'identité (Supabase);
# la table users_user n'est qu'un miroir local des comptes.
AUTH_USER_MODEL = 'users.User'
AUTHENTICATION_BACKENDS = [
    'users.backends.IdentityProviderBackend',
    # Comptes locaux (superutilisateurs) pour l'admin Django uniquement
    'django.contrib.auth.backends.ModelBackend',
]

LOGIN_URL = '/login/'
LOGIN_REDIRECT_URL = 'core:dashboard'
LOGOUT_REDIRECT_URL = '/login/'

SUPABASE_URL = os.environ.get('SUPABASE_URL', '')
SUPABASE_ANON_KEY = os.environ.get('SUPABASE_ANON_KEY', '')
IDENTITY_TIMEOUT = float(os.environ.get('IDENTITY_TIMEOUT', 10))

# ==================== CONFIGURATION DES SESSIONS ====================

# Les jetons du fournisseur vivent dans la session: 12 heures
SESSION_COOKIE_AGE = 43200
SESSION_EXPIRE_AT_BROWSER_CLOSE = False
SESSION_COOKIE_NAME = 'portal_sessionid'
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'

# ==================== SERVICES TIERS ====================

# HubSpot: hébergement vidéo + CRM
HUBSPOT_PRIVATE_APP_TOKEN = os.environ.get('HUBSPOT_PRIVATE_APP_TOKEN', '')
HUBSPOT_API_BASE = os.environ.get('HUBSPOT_API_BASE', 'https://api.hubapi.com')
HUBSPOT_VIDEO_ID = os.environ.get('HUBSPOT_VIDEO_ID', '206352108644')
# 'files' (Files API v3) ou 'marketing' (Marketing Videos v3)
HUBSPOT_VIDEO_SOURCE = os.environ.get('HUBSPOT_VIDEO_SOURCE', 'files')
HUBSPOT_VIDEO_CUSTOM_EVENT = os.environ.get('HUBSPOT_VIDEO_CUSTOM_EVENT', '')
HUBSPOT_TIMEOUT = float(os.environ.get('HUBSPOT_TIMEOUT', 10))

TRAINING_VIDEO_TITLE = os.environ.get('TRAINING_VIDEO_TITLE', 'US Sales Reps Introduction')
# Libellé repris dans les notes CRM ("Started watching the ...")
TRAINING_NOTE_LABEL = os.environ.get('TRAINING_NOTE_LABEL', 'Echo Barrier Sales Training video')
VIDEO_METADATA_CACHE_SECONDS = int(os.environ.get('VIDEO_METADATA_CACHE_SECONDS', 3600))
# États de lecture (PlaybackState) inactifs supprimés après ce délai
PLAYBACK_STATE_RETENTION_DAYS = int(os.environ.get('PLAYBACK_STATE_RETENTION_DAYS', 30))

# n8n: workflows d'invitation et de complétion de profil
N8N_INVITE_WEBHOOK = os.environ.get('N8N_INVITE_WEBHOOK', '')
N8N_PROFILE_WEBHOOK = os.environ.get('N8N_PROFILE_WEBHOOK', '')
WEBHOOK_TIMEOUT = float(os.environ.get('WEBHOOK_TIMEOUT', 10))

# ElevenLabs: agent conversationnel
ELEVENLABS_AGENT_ID = os.environ.get('ELEVENLABS_AGENT_ID', '')
ELEVENLABS_CONVERSATION_SIGNATURE = os.environ.get('ELEVENLABS_CONVERSATION_SIGNATURE', '')

# ==================== CELERY ====================

CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', 'redis://localhost:6379/1')
CELERY_TASK_ALWAYS_EAGER = env_bool('CELERY_TASK_ALWAYS_EAGER', False)
CELERY_TASK_IGNORE_RESULT = True
CELERY_TASK_SERIALIZER = 'json'
CELERY_ACCEPT_CONTENT = ['json']
CELERY_BEAT_SCHEDULE = {
    'cleanup-stale-playback-states': {
        'task': 'training.tasks.cleanup_stale_playback_states',
        'schedule': 24 * 60 * 60,
    },
}

# ==================== LOGGING ====================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'root': {
        'handlers': ['console'],
        'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
    },
}

# ==================== SÉCURITÉ PRODUCTION ====================

if DJANGO_ENV == 'production':
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True
    SECURE_SSL_REDIRECT = True
    SECURE_CONTENT_TYPE_NOSNIFF = True

    SECURE_HSTS_SECONDS = 31536000  # 1 an
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True

    CSRF_TRUSTED_ORIGINS = [f'https://{host}' for host in ALLOWED_HOSTS]

    STORAGES = {
        'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
        'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.ManifestStaticFilesStorage'},
    }
