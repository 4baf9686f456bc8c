# /refillstore/refillstore/settings.py
"""
Refillstore Django settings

CHANGE LOG
----------
2026-02-10 • Notebook pipeline config
- NOTEBOOK_* env vars for dispatch, worker auth, download TTL and generation timeout.
- Named "artifacts" storage in STORAGES for generated refills.
- Stripe keys moved here from the checkout view (single source of truth).

2026-01-28 • NOTEBOOK_PDF_ENGINE config
- Loads default PDF engine from env (NOTEBOOK_PDF_ENGINE).
- Validates against {'weasyprint','xhtml2pdf','pdfkit'}.
- Falls back to 'xhtml2pdf' if invalid, prints a warning.

2026-01-20 • Logging encoding → settings-level (UTF-8)
- RotatingFileHandler writes UTF-8 so calendar text (Japanese term names) greps cleanly.
"""

from pathlib import Path
import os
from dotenv import load_dotenv

# ========= Base / Env =========
BASE_DIR = Path(__file__).resolve().parent.parent

ENV_CANDIDATES = [
    Path(os.path.expanduser("~/refillstore/.env")),  # server: ~/refillstore/.env
    BASE_DIR / ".env",                                # Local: project root
    BASE_DIR.parent / ".env",                         # Local: repo root (if settings/ nested)
]
for _env in ENV_CANDIDATES:
    if _env.exists():
        load_dotenv(_env)
        print(f"[settings] Loaded env from: {_env}")
        break
else:
    load_dotenv()  # fallback (no-op if missing)


def _env_bool(name: str, default: str = "False") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"[settings][WARNING] {name}={raw!r} is not an integer; using {default}.")
        return default


# ========= Secret Key =========
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY") or ""
if not SECRET_KEY:
    # Local/test runs only; production must set DJANGO_SECRET_KEY in .env
    print("[settings][WARNING] DJANGO_SECRET_KEY not set; using an insecure development key.")
    SECRET_KEY = "django-insecure-refillstore-development-only"

DEBUG = _env_bool("DEBUG")

# ========= Hosts / CSRF / Security =========
ALLOWED_HOSTS = [
    "127.0.0.1",
    "localhost",
    "testserver",
] + (os.getenv("ADDITIONAL_HOSTS", "").split(",") if os.getenv("ADDITIONAL_HOSTS") else [])

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = not DEBUG
CSRF_COOKIE_SECURE = not DEBUG

# ========= Installed apps =========
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "corsheaders",
    "rest_framework",

    "academic_calendars",
    "notebook_orders",
]

# ========= Middleware =========
# CORS middleware stays first (django-cors-headers requirement)
MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

# ========= URL / Templates / WSGI =========
ROOT_URLCONF = "refillstore.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "refillstore.wsgi.application"

# ========= Database =========
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
        "OPTIONS": {"timeout": 30},
    }
}

# ========= Password validation =========
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# ========= I18N =========
LANGUAGE_CODE = "ja"
TIME_ZONE = "Asia/Tokyo"
USE_I18N = True
USE_TZ = True

# ========= Security headers =========
SECURE_CONTENT_TYPE_NOSNIFF = True

if not DEBUG:
    SECURE_HSTS_SECONDS = 31536000
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True

# ========= Static / Media =========
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

MEDIA_URL = "/media/"
MEDIA_ROOT = BASE_DIR / "media"

# ========= Storage =========
# "artifacts" holds generated refills; swap the backend (e.g. S3) without touching the worker.
NOTEBOOK_ARTIFACT_STORAGE = os.getenv("NOTEBOOK_ARTIFACT_STORAGE", "artifacts")

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
    "artifacts": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
        "OPTIONS": {"location": str(Path(os.getenv("NOTEBOOK_ARTIFACT_ROOT", str(MEDIA_ROOT / "artifacts"))))},
    },
}

# ========= Defaults =========
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ========= REST framework =========
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# ========= CORS / CSRF (single source of truth) =========
SITE_BASE_URL = os.getenv("SITE_BASE_URL", "http://localhost:8000").rstrip("/")

CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
for _o in (os.getenv("CORS_EXTRA_ORIGINS", "") or "").split(","):
    _o = _o.strip()
    if _o and _o not in CORS_ALLOWED_ORIGINS:
        CORS_ALLOWED_ORIGINS.append(_o)

CSRF_TRUSTED_ORIGINS = list(CORS_ALLOWED_ORIGINS)

CORS_ALLOW_HEADERS = list({
    "accept",
    "authorization",
    "content-type",
    "origin",
    "user-agent",
    "x-csrftoken",
    "x-debug-token",
})

# ========= PDF Engine =========
ALLOWED_PDF_ENGINES = {"weasyprint", "xhtml2pdf", "pdfkit"}

_pdf_engine = os.getenv("NOTEBOOK_PDF_ENGINE", "xhtml2pdf").lower()
if _pdf_engine not in ALLOWED_PDF_ENGINES:
    print(
        "[settings][WARNING] "
        f"Invalid NOTEBOOK_PDF_ENGINE '{_pdf_engine}' detected. "
        "Falling back to 'xhtml2pdf'. Allowed values: weasyprint, xhtml2pdf, pdfkit."
    )
    _pdf_engine = "xhtml2pdf"

NOTEBOOK_PDF_ENGINE = _pdf_engine

# Optional TTF with Japanese glyphs (term names, holidays). Base fonts render tofu without it.
NOTEBOOK_PDF_FONT_PATH = os.getenv("NOTEBOOK_PDF_FONT_PATH", "")

# ========= Notebook pipeline =========
NOTEBOOK_DISPATCH_URL = (os.getenv("NOTEBOOK_DISPATCH_URL") or "").strip()
NOTEBOOK_DISPATCH_TOKEN = (os.getenv("NOTEBOOK_DISPATCH_TOKEN") or "").strip()
NOTEBOOK_DISPATCH_TIMEOUT = _env_int("NOTEBOOK_DISPATCH_TIMEOUT", 10)
NOTEBOOK_DISPATCH_ATTEMPTS = _env_int("NOTEBOOK_DISPATCH_ATTEMPTS", 2)

# Token the worker endpoint expects from the dispatcher (usually the same value).
NOTEBOOK_WORKER_TOKEN = (os.getenv("NOTEBOOK_WORKER_TOKEN") or NOTEBOOK_DISPATCH_TOKEN).strip()

# Run the worker on commit when an order enters paid_processing (single-box deployments).
NOTEBOOK_GENERATE_ON_COMMIT = _env_bool("NOTEBOOK_GENERATE_ON_COMMIT")

NOTEBOOK_GENERATION_TIMEOUT_SECONDS = _env_int("NOTEBOOK_GENERATION_TIMEOUT_SECONDS", 300)
NOTEBOOK_DOWNLOAD_TTL_SECONDS = _env_int("NOTEBOOK_DOWNLOAD_TTL_SECONDS", 60 * 60 * 24 * 7)

NOTEBOOK_DEBUG_TRIGGER_TOKEN = (os.getenv("NOTEBOOK_DEBUG_TRIGGER_TOKEN") or "").strip()

# ========= Stripe =========
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_PRICE_ID = os.getenv("STRIPE_PRICE_ID")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")

# ========= Logging =========
LOG_DIR = Path(os.getenv("LOG_DIR", str(BASE_DIR / "logs")))
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "file": {
            "level": "INFO",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / "refillstore.log",
            "maxBytes": 1024 * 1024 * 15,
            "backupCount": 10,
            "formatter": "verbose",
            "encoding": "utf-8",
        },
        "console": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "refillstore": {
            "handlers": ["file", "console"],
            "level": "INFO",
            "propagate": True,
        },
        "django": {
            "handlers": ["file"],
            "level": "ERROR",
            "propagate": True,
        },
    },
}
