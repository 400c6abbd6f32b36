"""
Django settings for the faculty_connect project.

Everything deployment-specific comes from the environment. Debug mode is
off unless DJANGO_DEBUG is set.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'dev-only-insecure-key-change-me')
DEBUG = env_bool('DJANGO_DEBUG', False)
ALLOWED_HOSTS = [h.strip() for h in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h.strip()]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'selection',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'faculty_connect.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'faculty_connect.wsgi.application'

# SQLite in IMMEDIATE mode takes the write lock when a transaction starts,
# so concurrent reservations queue on `timeout` instead of failing on a
# shared -> reserved lock upgrade.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('FACULTY_CONNECT_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
        'OPTIONS': {
            'timeout': int(os.environ.get('FACULTY_CONNECT_DB_TIMEOUT', '20')),
            'transaction_mode': 'IMMEDIATE',
        },
        'TEST': {
            'NAME': str(BASE_DIR / 'test_db.sqlite3'),
        },
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_AGE = 60 * 60 * 24
SESSION_COOKIE_SECURE = not DEBUG

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'selection': {
            'handlers': ['console'],
            'level': os.environ.get('FACULTY_CONNECT_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}

# Catalog and store tuning. Capacity is per subject a faculty teaches.
_ALL_FACULTY = ['f1', 'f2', 'f3']

FACULTY_CONNECT = {
    'FACULTIES': [
        {'id': 'f1', 'name': 'Dr. Eleanor Vance', 'capacity': 72},
        {'id': 'f2', 'name': 'Prof. Samuel Green', 'capacity': 72},
        {'id': 'f3', 'name': 'Dr. Olivia Chen', 'capacity': 72},
    ],
    'SUBJECTS': [
        {'id': 's1', 'name': 'Advanced Quantum Physics', 'faculty': _ALL_FACULTY},
        {'id': 's2', 'name': 'Organic Chemistry Symphony', 'faculty': _ALL_FACULTY},
        {'id': 's3', 'name': 'Computational Linguistics', 'faculty': _ALL_FACULTY},
        {'id': 's4', 'name': 'Ancient Civilizations & Mythology', 'faculty': _ALL_FACULTY},
        {'id': 's5', 'name': 'Modern Political Theory', 'faculty': _ALL_FACULTY},
        {'id': 's6', 'name': 'Astrobiology Fundamentals', 'faculty': _ALL_FACULTY},
    ],
    'ROLL_NUMBER_PATTERN': r'^2[0-3]09[15]A05[0-9A-K][0-9]$',
    'STORE_RETRY_ATTEMPTS': int(os.environ.get('FACULTY_CONNECT_RETRY_ATTEMPTS', '5')),
    'STORE_RETRY_BACKOFF': float(os.environ.get('FACULTY_CONNECT_RETRY_BACKOFF', '0.05')),
}
