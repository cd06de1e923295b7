"""
Django settings for the athlete_unknown_api project.

Deployment values are read from environment variables; the defaults are
meant for local development.
"""

import os
from pathlib import Path


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).lower() in ("1", "true", "yes")


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-athlete-unknown-development-key")

DEBUG = env_bool("DJANGO_DEBUG", False)

ALLOWED_HOSTS = [host for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if host]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django_prometheus",
    "athlete_unknown_app",
]

MIDDLEWARE = [
    "django_prometheus.middleware.PrometheusBeforeMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_prometheus.middleware.PrometheusAfterMiddleware",
]

ROOT_URLCONF = "athlete_unknown_api.urls"

WSGI_APPLICATION = "athlete_unknown_api.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django_prometheus.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_DATABASE_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

CACHES = {
    "default": {
        "BACKEND": "django_prometheus.cache.backends.locmem.LocMemCache",
        "LOCATION": "athlete-unknown-rounds",
    }
}

SESSION_ENGINE = "django.contrib.sessions.backends.db"
SESSION_COOKIE_AGE = 60 * 60 * 24 * 30

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Athlete Unknown backend
ATHLETE_UNKNOWN_API_URL = os.environ.get("ATHLETE_UNKNOWN_API_URL", "http://localhost:8080")
ATHLETE_UNKNOWN_API_TIMEOUT = float(os.environ.get("ATHLETE_UNKNOWN_API_TIMEOUT", "30"))
ATHLETE_UNKNOWN_ROUND_CACHE_SECONDS = int(os.environ.get("ATHLETE_UNKNOWN_ROUND_CACHE_SECONDS", "300"))
ATHLETE_UNKNOWN_GAME_CONFIG_FILE = os.environ.get("ATHLETE_UNKNOWN_GAME_CONFIG_FILE", "")
ATHLETE_UNKNOWN_REVEAL_POLICY = os.environ.get("ATHLETE_UNKNOWN_REVEAL_POLICY", "two_strike")
ATHLETE_UNKNOWN_SUBMIT_ONLY_CURRENT_DAY = env_bool("ATHLETE_UNKNOWN_SUBMIT_ONLY_CURRENT_DAY", True)

# Prometheus metrics
PROMETHEUS_METRICS_ENABLED = env_bool("PROMETHEUS_METRICS_ENABLED", True)
PROMETHEUS_METRICS_AUTH_USERNAME = os.environ.get("PROMETHEUS_METRICS_AUTH_USERNAME", "prometheus")
PROMETHEUS_METRICS_AUTH_PASSWORD = os.environ.get("PROMETHEUS_METRICS_AUTH_PASSWORD", "")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
}
