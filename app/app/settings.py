"""
Django settings for app project.

Values are read from environment variables, the defaults
are meant for local development.

For more information on this file, see
https://docs.djangoproject.com/en/5.1/topics/settings/
"""

import os
import sys
from pathlib import Path

import sentry_sdk

BASE_DIR = Path(__file__).resolve().parent.parent

TESTING = "test" in sys.argv or "pytest" in sys.modules or "PYTEST_VERSION" in os.environ
"""Running with manage.py test or pytest."""


def env_bool(name: str, default=False) -> bool:
    value = os.environ.get(name, None)
    if value is None:
        return default

    return value.strip().lower() in ("1", "true", "yes", "on")


# Security
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-local-secret-key")
DEBUG = bool(int(os.environ.get("DJANGO_DEBUG", 0)))
ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]
CSRF_TRUSTED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("DJANGO_CSRF_TRUSTED_ORIGINS", "").split(",")
    if origin.strip()
]

if TESTING:
    ALLOWED_HOSTS = ["testserver", *ALLOWED_HOSTS]


# Application definition
INSTALLED_APPS = [
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "drf_spectacular",
    "core",
    "users",
    "teams",
    "events",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "app.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "app.wsgi.application"

# All records live in the remote backend
DATABASES = {}


# Sessions and cache
# Sessions are kept in signed cookies, mirrored tables in process memory.
SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SECURE = not DEBUG and not TESTING
CSRF_COOKIE_SECURE = not DEBUG and not TESTING
MESSAGE_STORAGE = "django.contrib.messages.storage.cookie.CookieStorage"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "club-portal",
        "TIMEOUT": None,
    }
}


# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("DJANGO_TIME_ZONE", "Europe/Berlin")
USE_I18N = True
USE_TZ = True


# Static files
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "static"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Remote backend
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

BACKEND_BOOTSTRAP_TIMEOUT = float(os.environ.get("BACKEND_BOOTSTRAP_TIMEOUT", 3))
BACKEND_REQUEST_TIMEOUT = float(os.environ.get("BACKEND_REQUEST_TIMEOUT", 10))
BACKEND_DEMO_MODE = env_bool("BACKEND_DEMO_MODE", default=TESTING)
"""Skip the remote backend and serve the demo dataset."""

OAUTH_REDIRECT_URL = os.environ.get("OAUTH_REDIRECT_URL", "http://localhost:8000/")

USERS_PAGE_SIZE = int(os.environ.get("USERS_PAGE_SIZE", 50))
EVENTS_PAGE_SIZE = int(os.environ.get("EVENTS_PAGE_SIZE", 200))


# REST Framework
DJANGO_ENABLE_API_SESSION_AUTH = env_bool("DJANGO_ENABLE_API_SESSION_AUTH")

REST_FRAMEWORK = {
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "users.authentication.BearerTokenAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "core.views.api_exception_handler",
    "TEST_REQUEST_DEFAULT_FORMAT": "json",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Club Portal API",
    "DESCRIPTION": "Calendar, teams, and members of a volleyball club.",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
}


# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING" if TESTING else "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "WARNING"),
            "propagate": False,
        },
    },
}


# Sentry
SENTRY_DSN = os.environ.get("SENTRY_DSN", None)

if SENTRY_DSN and not TESTING:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        traces_sample_rate=float(os.environ.get("SENTRY_TRACES_SAMPLE_RATE", 0.1)),
        environment=os.environ.get("SENTRY_ENVIRONMENT", "production"),
        send_default_pii=False,
    )
