"""Per-request hooks: request ids, Sentry route tags and CORS."""

import uuid

import sentry_sdk
from flask import g, request

CORS_PATH_PREFIXES = ('/api/', '/pdf-proxy')


def is_cors_path(path):
    return any(str(path or '').startswith(prefix) for prefix in CORS_PATH_PREFIXES)


def apply_cors_headers(response, allowed_origins):
    origin = str(request.headers.get('Origin', '') or '').strip()
    if not origin:
        return response
    if not is_cors_path(request.path):
        return response
    if origin.lower() not in allowed_origins:
        return response
    response.headers['Access-Control-Allow-Origin'] = origin
    response.headers['Vary'] = 'Origin'
    response.headers['Access-Control-Allow-Headers'] = 'Authorization, Content-Type'
    response.headers['Access-Control-Allow-Methods'] = 'GET, OPTIONS'
    response.headers['Access-Control-Expose-Headers'] = 'Content-Length, Content-Disposition, X-Request-ID'
    return response


def register_request_hooks(app, config):
    sentry_enabled = bool(config.sentry_dsn)

    @app.before_request
    def handle_options_preflight():
        if request.method == 'OPTIONS' and is_cors_path(request.path):
            return apply_cors_headers(app.make_default_options_response(), config.cors_allowed_origins)
        return None

    @app.before_request
    def attach_request_context():
        request_id = str(request.headers.get('X-Request-ID', '') or '').strip()[:120] or uuid.uuid4().hex
        g.request_id = request_id
        if not sentry_enabled:
            return
        sentry_sdk.set_tag('request.id', request_id)
        sentry_sdk.set_tag('route.path', request.path)
        sentry_sdk.set_tag('route.method', request.method)
        sentry_sdk.set_tag('route.endpoint', request.endpoint or '')
        sentry_sdk.set_tag('route.environment', config.sentry_environment or 'production')

    @app.after_request
    def attach_response_context(response):
        request_id = str(getattr(g, 'request_id', '') or '').strip()
        if request_id:
            response.headers['X-Request-ID'] = request_id
        if sentry_enabled:
            sentry_sdk.set_tag('route.status_code', str(response.status_code))
        return apply_cors_headers(response, config.cors_allowed_origins)
