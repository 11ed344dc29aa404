"""Sequential candidate fetching and body relay for proxied PDFs."""

import logging
from dataclasses import dataclass, field
from typing import List

import requests

from acadmix.errors import CandidateFetchFailure
from acadmix.logging_config import log_event

DEFAULT_CONTENT_TYPE = 'application/pdf'


class CandidatesExhausted(Exception):
    def __init__(self, failures):
        super().__init__(f'All {len(failures)} candidate URL(s) failed')
        self.failures = list(failures)

    @property
    def last_failure(self):
        return self.failures[-1] if self.failures else None


@dataclass
class FetchOutcome:
    url: str
    index: int
    response: requests.Response
    failures: List[CandidateFetchFailure] = field(default_factory=list)

    @property
    def content_type(self):
        return self.response.headers.get('Content-Type') or DEFAULT_CONTENT_TYPE

    @property
    def content_length(self):
        # iter_content() decodes compressed bodies, so an encoded length would not match.
        encoding = str(self.response.headers.get('Content-Encoding', '') or '').strip().lower()
        if encoding and encoding != 'identity':
            return None
        return self.response.headers.get('Content-Length')


def build_forward_headers(inbound_user_agent='', *, default_user_agent='Acadmix-Backend'):
    user_agent = str(inbound_user_agent or '').strip() or default_user_agent
    return {
        'User-Agent': user_agent,
        'Accept-Encoding': 'identity',
    }


def attempt_candidate(url, *, session, headers, timeout):
    """GET one candidate. Returns the open response on 2xx, raises CandidateFetchFailure otherwise."""
    try:
        response = session.get(url, headers=headers, timeout=timeout, stream=True)
    except requests.RequestException as exc:
        raise CandidateFetchFailure(url, error=exc) from exc
    if 200 <= response.status_code < 300:
        return response
    status_code = response.status_code
    reason = response.reason or ''
    response.close()
    raise CandidateFetchFailure(url, status_code=status_code, reason=reason)


def fetch_first_available(candidates, *, session, headers, timeout):
    """Try ``candidates`` strictly in order and return the first 2xx outcome.

    Later candidates are only requested after earlier ones failed. Raises
    ``CandidatesExhausted`` carrying every per-candidate failure when none work.
    """
    failures = []
    total = len(candidates)
    for index, url in enumerate(candidates):
        log_event(logging.INFO, 'pdf_proxy_attempt', attempt=index + 1, total=total, url=url)
        try:
            response = attempt_candidate(url, session=session, headers=headers, timeout=timeout)
        except CandidateFetchFailure as failure:
            log_event(
                logging.WARNING,
                'pdf_proxy_attempt_failed',
                attempt=index + 1,
                url=url,
                status=failure.status_code_seen,
                error=str(failure.cause) if failure.cause is not None else '',
            )
            failures.append(failure)
            continue
        log_event(
            logging.INFO,
            'pdf_proxy_success',
            attempt=index + 1,
            url=url,
            content_type=response.headers.get('Content-Type'),
            content_length=response.headers.get('Content-Length'),
        )
        return FetchOutcome(url=url, index=index, response=response, failures=failures)
    raise CandidatesExhausted(failures)


def iter_response_body(response, *, chunk_size, url=''):
    """Relay ``response`` chunk by chunk, always closing it at the end.

    Closing the generator (client disconnect) also closes the upstream response.
    """
    sent = 0
    try:
        for chunk in response.iter_content(chunk_size=chunk_size):
            if chunk:
                sent += len(chunk)
                yield chunk
    except requests.RequestException as exc:
        log_event(logging.ERROR, 'pdf_proxy_stream_error', url=url, bytes_sent=sent, error=str(exc))
        raise
    finally:
        response.close()
        log_event(logging.DEBUG, 'pdf_proxy_stream_closed', url=url, bytes_sent=sent)
