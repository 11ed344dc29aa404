import os
from dataclasses import dataclass, field

DEV_ENV_NAMES = {'development', 'dev', 'local', 'test'}
DEFAULT_CORS_ALLOWED_ORIGINS = frozenset({
    'http://127.0.0.1:3000',
    'http://localhost:3000',
    'http://127.0.0.1:5173',
    'http://localhost:5173',
    'http://127.0.0.1:5000',
    'http://localhost:5000',
})


def safe_int_env(name, default, minimum=None, maximum=None):
    raw = str(os.getenv(name, str(default)) or '').strip()
    try:
        value = int(raw)
    except Exception:
        value = int(default)
    if minimum is not None:
        value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


def safe_float_env(name, default, minimum=None, maximum=None):
    raw = str(os.getenv(name, str(default)) or '').strip()
    try:
        value = float(raw)
    except Exception:
        value = float(default)
    if minimum is not None:
        value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


def parse_cors_allowed_origins(raw=None):
    raw = (os.getenv('CORS_ALLOWED_ORIGINS', '') if raw is None else raw) or ''
    origins = {part.strip().lower() for part in raw.split(',') if part.strip()}
    return frozenset(origins) if origins else DEFAULT_CORS_ALLOWED_ORIGINS


def detect_runtime_env():
    return (
        os.getenv('SENTRY_ENVIRONMENT')
        or os.getenv('FLASK_ENV')
        or os.getenv('ENV')
        or ('production' if os.getenv('RENDER') else 'development')
    ).strip().lower()


@dataclass(frozen=True)
class AppConfig:
    """Central config object, built from the environment by load_config()."""

    flask_secret_key: str = ''
    log_level: str = 'INFO'
    sentry_dsn: str = ''
    sentry_environment: str = 'production'
    sentry_release: str = 'acadmix'
    sentry_traces_sample_rate: float = 0.0

    storage_domain_marker: str = 'cloudinary.com'
    storage_origin_host: str = 'res.cloudinary.com'
    cloud_name: str = ''

    pdf_proxy_connect_timeout: float = 5.0
    pdf_proxy_read_timeout: float = 30.0
    pdf_proxy_user_agent: str = 'Acadmix-Backend'
    pdf_proxy_chunk_size: int = 64 * 1024
    pdf_proxy_cache_max_age: int = 3600
    pdf_proxy_pool_size: int = 10
    pdf_proxy_rate_limit_max_requests: int = 120
    pdf_proxy_rate_limit_window_seconds: int = 60
    proxy_fix_x_for: int = 0

    cors_allowed_origins: frozenset = field(default_factory=lambda: DEFAULT_CORS_ALLOWED_ORIGINS)

    @property
    def pdf_proxy_timeout(self):
        return (self.pdf_proxy_connect_timeout, self.pdf_proxy_read_timeout)


def load_config() -> AppConfig:
    config = AppConfig(
        flask_secret_key=os.getenv('FLASK_SECRET_KEY', ''),
        log_level=(os.getenv('LOG_LEVEL', 'INFO') or 'INFO').strip().upper(),
        sentry_dsn=(os.getenv('SENTRY_DSN_BACKEND', '') or '').strip(),
        sentry_environment=(os.getenv('SENTRY_ENVIRONMENT', os.getenv('FLASK_ENV', 'production')) or 'production').strip(),
        sentry_release=(os.getenv('SENTRY_RELEASE', 'acadmix') or 'acadmix').strip(),
        sentry_traces_sample_rate=safe_float_env('SENTRY_TRACES_SAMPLE_RATE', 0.0, minimum=0.0, maximum=1.0),
        storage_domain_marker=(os.getenv('STORAGE_DOMAIN_MARKER', 'cloudinary.com') or 'cloudinary.com').strip().lower(),
        storage_origin_host=(os.getenv('STORAGE_ORIGIN_HOST', 'res.cloudinary.com') or 'res.cloudinary.com').strip().lower(),
        cloud_name=(os.getenv('CLOUDINARY_CLOUD_NAME', '') or '').strip(),
        pdf_proxy_connect_timeout=safe_float_env('PDF_PROXY_CONNECT_TIMEOUT', 5.0, minimum=0.5, maximum=60.0),
        pdf_proxy_read_timeout=safe_float_env('PDF_PROXY_READ_TIMEOUT', 30.0, minimum=1.0, maximum=300.0),
        pdf_proxy_user_agent=(os.getenv('PDF_PROXY_USER_AGENT', 'Acadmix-Backend') or 'Acadmix-Backend').strip(),
        pdf_proxy_chunk_size=safe_int_env('PDF_PROXY_CHUNK_SIZE', 64 * 1024, minimum=1024, maximum=8 * 1024 * 1024),
        pdf_proxy_cache_max_age=safe_int_env('PDF_PROXY_CACHE_MAX_AGE', 3600, minimum=0, maximum=86400),
        pdf_proxy_pool_size=safe_int_env('PDF_PROXY_POOL_SIZE', 10, minimum=1, maximum=200),
        pdf_proxy_rate_limit_max_requests=safe_int_env('PDF_PROXY_RATE_LIMIT_MAX_REQUESTS', 120, minimum=1, maximum=10000),
        pdf_proxy_rate_limit_window_seconds=safe_int_env('PDF_PROXY_RATE_LIMIT_WINDOW_SECONDS', 60, minimum=1, maximum=86400),
        proxy_fix_x_for=safe_int_env('PROXY_FIX_X_FOR', 0, minimum=0, maximum=10),
        cors_allowed_origins=parse_cors_allowed_origins(),
    )
    is_dev_like = detect_runtime_env() in DEV_ENV_NAMES
    if not is_dev_like and not config.flask_secret_key.strip():
        raise RuntimeError('FLASK_SECRET_KEY must be set in non-development environments.')
    return config
