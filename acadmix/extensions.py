import requests
import sentry_sdk
from requests.adapters import HTTPAdapter
from sentry_sdk.integrations.flask import FlaskIntegration

from acadmix.services.pdf_resolver import PdfUrlResolver


def build_http_session(pool_size=10):
    """Shared outbound session; one connection pool per scheme."""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session


def init_sentry(config):
    if not config.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=config.sentry_dsn,
        integrations=[FlaskIntegration()],
        traces_sample_rate=config.sentry_traces_sample_rate,
        send_default_pii=False,
        environment=config.sentry_environment,
        release=config.sentry_release,
    )
    return True


def init_extensions(app, config, http_session=None) -> None:
    if app is None:
        return
    state = app.extensions.setdefault('acadmix', {})
    state['config'] = config
    state['resolver'] = PdfUrlResolver.from_config(config)
    state['http_session'] = http_session or build_http_session(config.pdf_proxy_pool_size)
    state['sentry_enabled'] = init_sentry(config)
