import os

from dotenv import load_dotenv
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import load_config
from .extensions import init_extensions
from .logging_config import configure_logging
from .request_hooks import register_request_hooks


def create_app(config=None, http_session=None):
    """App factory entrypoint.

    ``config`` and ``http_session`` are injectable so tests can run without the
    environment or the network.
    """
    if config is None:
        load_dotenv()
        config = load_config()
    configure_logging(config.log_level)

    app = Flask(__name__)
    app.secret_key = config.flask_secret_key or os.urandom(32).hex()
    if config.proxy_fix_x_for:
        # Trust only the configured number of reverse-proxy hops for the client address.
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=config.proxy_fix_x_for, x_proto=1)
    init_extensions(app, config, http_session=http_session)
    register_request_hooks(app, config)

    from .blueprints import health_bp, pdf_proxy_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(pdf_proxy_bp)
    return app
