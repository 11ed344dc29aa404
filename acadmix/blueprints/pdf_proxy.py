import logging

import sentry_sdk
from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from acadmix.errors import InternalFault, PdfProxyError
from acadmix.logging_config import log_event
from acadmix.services import pdf_proxy_api_service

pdf_proxy_bp = Blueprint('pdf_proxy_api', __name__)


@pdf_proxy_bp.route('/pdf-proxy', methods=['GET'])
@pdf_proxy_bp.route('/api/pdf-proxy', methods=['GET'])
def pdf_proxy():
    state = current_app.extensions['acadmix']
    return pdf_proxy_api_service.proxy_pdf(
        request,
        config=state['config'],
        resolver=state['resolver'],
        session=state['http_session'],
    )


@pdf_proxy_bp.errorhandler(PdfProxyError)
def handle_pdf_proxy_error(exc):
    return jsonify(exc.to_dict()), exc.status_code


@pdf_proxy_bp.errorhandler(Exception)
def handle_unexpected_error(exc):
    if isinstance(exc, HTTPException):
        return exc
    log_event(
        logging.ERROR,
        'pdf_proxy_unexpected_error',
        url=request.args.get('url', ''),
        error=str(exc),
        error_type=type(exc).__name__,
    )
    if current_app.extensions['acadmix'].get('sentry_enabled'):
        sentry_sdk.capture_exception(exc)
    fault = InternalFault(str(exc))
    return jsonify(fault.to_dict()), fault.status_code
