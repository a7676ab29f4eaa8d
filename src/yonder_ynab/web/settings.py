"""
Django settings for the import web endpoints.

There is no database and no session/auth machinery: the upload endpoint
authenticates with a shared secret and the Telegram webhook with Telegram's
secret token header. YONDER_CONFIG is filled in by app.configure_django().
"""

import os

# Security settings
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-secret-key-change-in-production")
DEBUG = os.environ.get("DJANGO_DEBUG", "False").lower() == "true"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,*").split(",")

# When TLS terminates at a reverse proxy, trust its X-Forwarded-Proto
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True

INSTALLED_APPS: list[str] = []

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "yonder_ynab.web.urls"

DATABASES = {}

# Bank exports are small; anything larger than this is not a Yonder CSV
DATA_UPLOAD_MAX_MEMORY_SIZE = 5 * 1024 * 1024

USE_TZ = True
TIME_ZONE = "UTC"

# Application configuration object (yonder_ynab.config.Config)
YONDER_CONFIG = None
