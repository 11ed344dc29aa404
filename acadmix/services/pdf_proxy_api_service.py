"""Business logic handlers for the PDF proxy API."""

import logging
import time

from flask import Response, jsonify, stream_with_context

from acadmix.errors import (
    InternalFault,
    MalformedSourceUrl,
    MissingInput,
    ResourceNotFound,
    UpstreamFailure,
    UpstreamTimeout,
)
from acadmix.logging_config import log_event
from acadmix.services import rate_limit_service
from acadmix.services.pdf_fetch_service import (
    CandidatesExhausted,
    build_forward_headers,
    fetch_first_available,
    iter_response_body,
)

INLINE_DISPOSITION = 'inline; filename="document.pdf"'


def build_rate_limited_response(message, retry_after):
    response = jsonify({
        'error': message,
        'retry_after_seconds': int(max(1, retry_after)),
    })
    response.status_code = 429
    response.headers['Retry-After'] = str(int(max(1, retry_after)))
    return response


def resolve_source(resolver, source_url):
    try:
        resolution = resolver.resolve(source_url)
    except MalformedSourceUrl:
        log_event(logging.WARNING, 'pdf_proxy_malformed_url', url=source_url)
        return resolver.passthrough(source_url)
    if resolution.is_storage_origin:
        log_event(
            logging.INFO,
            'pdf_proxy_storage_url',
            base_identifier=resolution.base_identifier,
            candidates=len(resolution.candidates),
        )
    return resolution


def classify_exhaustion(resolution, exhausted):
    if resolution.is_storage_origin:
        log_event(
            logging.ERROR,
            'pdf_proxy_not_found',
            public_id=resolution.base_identifier,
            original_url=resolution.source_url,
            attempted=len(resolution.candidates),
        )
        return ResourceNotFound(resolution.base_identifier, resolution.source_url, len(resolution.candidates))

    failure = exhausted.last_failure
    if failure is not None and failure.status_code_seen is not None:
        log_event(
            logging.ERROR,
            'pdf_proxy_upstream_failure',
            url=failure.url,
            status=failure.status_code_seen,
            status_text=failure.reason,
        )
        return UpstreamFailure(failure.url, failure.status_code_seen, failure.reason)
    if failure is not None and failure.is_timeout:
        log_event(logging.ERROR, 'pdf_proxy_timeout', url=resolution.source_url)
        return UpstreamTimeout()
    message = str(failure.cause) if failure is not None else 'No candidate URL was attempted'
    return InternalFault(message)


def build_stream_response(outcome, *, chunk_size, cache_max_age):
    headers = {
        'Content-Disposition': INLINE_DISPOSITION,
        'Cache-Control': f'private, max-age={int(cache_max_age)}',
        'X-Pdf-Proxy-Source': str(outcome.index + 1),
    }
    if outcome.content_length:
        headers['Content-Length'] = outcome.content_length
    body = iter_response_body(outcome.response, chunk_size=chunk_size, url=outcome.url)
    response = Response(
        stream_with_context(body),
        status=200,
        headers=headers,
        content_type=outcome.content_type,
    )
    # Covers a client that disconnects before the first chunk is pulled.
    response.call_on_close(outcome.response.close)
    return response


def proxy_pdf(request, *, config, resolver, session, time_module=None):
    source_url = str(request.args.get('url', '') or '').strip()
    if not source_url:
        log_event(logging.WARNING, 'pdf_proxy_missing_url', path=request.path)
        raise MissingInput()

    client_key = rate_limit_service.normalize_rate_limit_key_part(
        rate_limit_service.client_address(request),
        fallback='anon_ip',
    )
    allowed, retry_after = rate_limit_service.check_rate_limit(
        f'pdf_proxy:{client_key}',
        config.pdf_proxy_rate_limit_max_requests,
        config.pdf_proxy_rate_limit_window_seconds,
        time_module=time_module or time,
    )
    if not allowed:
        log_event(logging.WARNING, 'rate_limit_hit', limit_name='pdf_proxy', retry_after=retry_after)
        return build_rate_limited_response('Too many PDF requests. Please wait and try again.', retry_after)

    log_event(logging.INFO, 'pdf_proxy_request', url=source_url)
    resolution = resolve_source(resolver, source_url)
    headers = build_forward_headers(
        request.headers.get('User-Agent', ''),
        default_user_agent=config.pdf_proxy_user_agent,
    )
    try:
        outcome = fetch_first_available(
            resolution.candidates,
            session=session,
            headers=headers,
            timeout=config.pdf_proxy_timeout,
        )
    except CandidatesExhausted as exhausted:
        raise classify_exhaustion(resolution, exhausted) from exhausted

    return build_stream_response(
        outcome,
        chunk_size=config.pdf_proxy_chunk_size,
        cache_max_age=config.pdf_proxy_cache_max_age,
    )
