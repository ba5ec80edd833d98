# config/test.py
from .base import *  # noqa

DEBUG = False
SECRET_KEY = "test-secret"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
STORAGES["staticfiles"] = {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"}

SITE_NAME = "Blue Shop"
SITE_URL = "https://shop.example.com"
SITE_ADMIN_EMAIL = "owner@shop.example.com"
INQUIRY_ADMIN_EMAIL = ""
INQUIRY_AUTO_REPLY_ENABLED = True
INQUIRY_EXPORT_LIMIT = 5000
INQUIRY_EXPORT_BATCH_SIZE = 100
INQUIRY_PRODUCT_LOOKUP = "apps.catalog.lookup.resolve"
INQUIRY_HOOKS = {"pre_create": [], "pre_send": []}

# Throttling is exercised explicitly where needed.
REST_FRAMEWORK = {**REST_FRAMEWORK, "DEFAULT_THROTTLE_RATES": {"inquiry_submit": "1000/minute"}}
