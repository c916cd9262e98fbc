"""Shared Django settings for the onboarding portal."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Sequence

from django.core.exceptions import ImproperlyConfigured

import dj_database_url
import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.django import DjangoIntegration


BASE_DIR = Path(__file__).resolve().parent.parent.parent


def get_env_bool(name: str, default: bool = False) -> bool:
    """Return a boolean for an environment variable."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"true", "1", "yes", "on"}


def get_env_int(name: str, default: int) -> int:
    """Return an integer for ``name`` or ``default`` if unset."""

    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ImproperlyConfigured(
            f"Environment variable {name} must be an integer."
        ) from exc


def get_env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def get_secret_key(debug: bool) -> str:
    """Fetch the Django secret key from the environment."""

    secret_key = os.getenv("DJANGO_SECRET_KEY") or os.getenv("SECRET_KEY")
    if secret_key:
        return secret_key
    if debug:
        return "django-insecure-development-key"
    raise ImproperlyConfigured(
        "DJANGO_SECRET_KEY must be set in production environments."
    )


DEFAULT_ALLOWED_HOSTS = (
    "localhost",
    "127.0.0.1",
)

_SETTINGS_MODULE = os.getenv("DJANGO_SETTINGS_MODULE", "")
_DEFAULT_DEBUG_STATE = get_env_bool(
    "DJANGO_DEBUG", default=_SETTINGS_MODULE.endswith((".dev", ".test"))
)


def _normalise_list(values: Iterable[str]) -> list[str]:
    """Return a list of unique, stripped values preserving order."""

    normalised: list[str] = []
    for value in values:
        candidate = value.strip()
        if not candidate or candidate in normalised:
            continue
        normalised.append(candidate)
    return normalised


def _read_list_from_env(env_var: str) -> list[str]:
    raw_value = os.getenv(env_var)
    if not raw_value:
        return []
    return _normalise_list(raw_value.split(","))


def build_allowed_hosts(*env_vars: str, default: Iterable[str] | None = None) -> list[str]:
    """Aggregate allowed hosts from the first populated environment variables."""

    hosts: list[str] = []
    for env_var in env_vars:
        hosts.extend(_read_list_from_env(env_var))
    if not hosts:
        hosts.extend(DEFAULT_ALLOWED_HOSTS if default is None else default)
    return _normalise_list(hosts)


def get_csrf_trusted_origins(env_var: str, default: Iterable[str] | None = None) -> list[str]:
    """Fetch trusted origins allowing override per environment."""

    origins = _read_list_from_env(env_var)
    if origins:
        return origins
    return list(default or ())


def build_database_config(
    primary_env_var: str,
    *,
    fallback_env_vars: Sequence[str] = (),
    default_url: str | None = None,
    test_env_vars: Sequence[str] = (),
    conn_max_age: int = 600,
) -> dict[str, object]:
    """Build a Django database configuration from a ``*_DATABASE_URL`` variable."""

    database_url = os.getenv(primary_env_var)
    for candidate in fallback_env_vars:
        if database_url:
            break
        database_url = os.getenv(candidate)
    database_url = database_url or default_url
    if not database_url:
        raise ImproperlyConfigured(
            f"{primary_env_var} (or one of {', '.join(fallback_env_vars)}) must be set."
        )

    config = dj_database_url.parse(database_url, conn_max_age=conn_max_age)
    for candidate in test_env_vars:
        test_url = os.getenv(candidate)
        if test_url:
            test_config = dj_database_url.parse(test_url, conn_max_age=0)
            config["TEST"] = {
                key: test_config[key]
                for key in ("NAME", "USER", "PASSWORD", "HOST", "PORT")
                if key in test_config
            }
            break
    return config


ALLOWED_HOSTS = build_allowed_hosts("ALLOWED_HOSTS")
CSRF_TRUSTED_ORIGINS = get_csrf_trusted_origins(
    "CSRF_TRUSTED_ORIGINS",
    default=("https://localhost", "https://127.0.0.1"),
)
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

SECURE_SSL_REDIRECT = get_env_bool(
    "DJANGO_SECURE_SSL_REDIRECT", default=not _DEFAULT_DEBUG_STATE
)
SESSION_COOKIE_SECURE = get_env_bool(
    "DJANGO_SESSION_COOKIE_SECURE", default=not _DEFAULT_DEBUG_STATE
)
CSRF_COOKIE_SECURE = get_env_bool(
    "DJANGO_CSRF_COOKIE_SECURE", default=not _DEFAULT_DEBUG_STATE
)
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = os.getenv("DJANGO_SECURE_REFERRER_POLICY", "same-origin")
SECURE_HSTS_SECONDS = get_env_int("DJANGO_SECURE_HSTS_SECONDS", default=0)
X_FRAME_OPTIONS = "DENY"


def init_sentry() -> None:
    """Configure Sentry monitoring when a DSN is available."""

    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return None

    environment = (
        os.getenv("SENTRY_ENVIRONMENT")
        or os.getenv("DJANGO_ENV")
        or ("development" if _DEFAULT_DEBUG_STATE else "production")
    )

    # SSNs and dates of birth travel in request bodies; keep PII out of events.
    sentry_sdk.init(
        dsn=dsn,
        integrations=[DjangoIntegration(), CeleryIntegration()],
        environment=environment,
        send_default_pii=False,
        traces_sample_rate=get_env_float("SENTRY_TRACES_SAMPLE_RATE", 0.2),
    )
    sentry_sdk.set_tag("environment", environment)
    return None


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'apps.users',
    'apps.onboarding',
    'apps.api',
]

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'apps.api.authentication.BearerTokenAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
}

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'backend.urls'
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

ASGI_APPLICATION = 'backend.asgi.application'
WSGI_APPLICATION = 'backend.wsgi.application'

DATABASES = {
    'default': build_database_config(
        'DATABASE_URL',
        default_url='sqlite:///db.sqlite3',
        test_env_vars=('TEST_DATABASE_URL',),
    )
}

AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

MEDIA_URL = '/media/'
MEDIA_ROOT = BASE_DIR / 'media'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Onboarding workflow
ONBOARDING_UPLOAD_MAX_BYTES = get_env_int("ONBOARDING_UPLOAD_MAX_BYTES", 5 * 1024 * 1024)
ONBOARDING_VISA_EXPIRY_WARNING_DAYS = get_env_int("ONBOARDING_VISA_EXPIRY_WARNING_DAYS", 60)
ONBOARDING_API_TIMEOUT = get_env_float("ONBOARDING_API_TIMEOUT", 10.0)
DATA_UPLOAD_MAX_MEMORY_SIZE = ONBOARDING_UPLOAD_MAX_BYTES + 1024 * 1024


# Structured logging; workflow events are also persisted as LogEntry rows.
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(levelname)s %(name)s %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
        'database': {
            'level': 'INFO',
            'class': 'apps.onboarding.logging.DatabaseLogHandler',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
        },
        'apps.onboarding': {
            'handlers': ['console', 'database'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps.api': {
            'handlers': ['console', 'database'],
            'level': 'INFO',
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}


# Email configuration sourced from environment variables.
EMAIL_BACKEND = os.getenv(
    "EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend"
)
EMAIL_HOST = os.getenv("EMAIL_HOST", "localhost")
EMAIL_PORT = get_env_int("EMAIL_PORT", 587)
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = get_env_bool("EMAIL_USE_TLS", True)
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "no-reply@onboarding.local")


# Celery configuration shared with the worker process.
CELERY_BROKER_URL = os.getenv(
    "CELERY_BROKER_URL",
    os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0"),
)
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)
CELERY_TASK_DEFAULT_QUEUE = os.getenv("CELERY_TASK_DEFAULT_QUEUE", "onboarding")
CELERY_TASK_ALWAYS_EAGER = get_env_bool("CELERY_TASK_ALWAYS_EAGER", False)
CELERY_TASK_EAGER_PROPAGATES = get_env_bool(
    "CELERY_TASK_EAGER_PROPAGATES", CELERY_TASK_ALWAYS_EAGER
)
CELERY_TASK_SOFT_TIME_LIMIT = get_env_int("CELERY_TASK_SOFT_TIME_LIMIT", 60)
CELERY_TASK_TIME_LIMIT = get_env_int("CELERY_TASK_TIME_LIMIT", 300)


# Configure monitoring once settings are imported.
init_sentry()


# JWT bearer tokens for the API client.
JWT_AUTH_SECRET = (
    os.getenv("JWT_AUTH_SECRET")
    or os.getenv("DJANGO_SECRET_KEY")
    or os.getenv("SECRET_KEY")
    or get_secret_key(True)
)
JWT_AUTH_ALGORITHM = os.getenv("JWT_AUTH_ALGORITHM", "HS256")
JWT_TOKEN_TTL_SECONDS = get_env_int("JWT_TOKEN_TTL_SECONDS", 3600)
