"""Error taxonomy for the PDF delivery path.

Every error that can reach a client derives from ``PdfProxyError`` and knows its
HTTP status and JSON body. ``MalformedSourceUrl`` and ``CandidateFetchFailure``
are recovered internally and never rendered directly.
"""

from requests.exceptions import Timeout


class PdfProxyError(Exception):
    status_code = 500
    error = 'Failed to proxy PDF'

    def __init__(self, message=None):
        super().__init__(message or self.error)
        self.message = message or self.error

    def to_dict(self):
        return {'error': self.error}


class MissingInput(PdfProxyError):
    status_code = 400
    error = 'URL parameter is required'


class MalformedSourceUrl(PdfProxyError):
    error = 'Malformed storage URL'

    def __init__(self, source_url):
        super().__init__(f'Could not extract object path from {source_url}')
        self.source_url = source_url


class CandidateFetchFailure(PdfProxyError):
    error = 'Candidate fetch failed'

    def __init__(self, url, status_code=None, reason='', error=None):
        detail = f'HTTP {status_code}' if status_code is not None else str(error or 'network error')
        super().__init__(f'{url}: {detail}')
        self.url = url
        self.status_code_seen = status_code
        self.reason = reason or ''
        self.cause = error

    @property
    def is_timeout(self):
        return isinstance(self.cause, Timeout)


class ResourceNotFound(PdfProxyError):
    status_code = 404
    error = 'PDF not found'

    def __init__(self, public_id, original_url, attempted):
        super().__init__('Unable to locate the PDF file. The file may have been deleted or the URL is incorrect.')
        self.public_id = public_id
        self.original_url = original_url
        self.attempted = attempted

    def to_dict(self):
        return {
            'error': self.error,
            'message': self.message,
            'publicId': self.public_id,
            'originalUrl': self.original_url,
            'attemptedVariations': self.attempted,
        }


class UpstreamFailure(PdfProxyError):
    error = 'Failed to fetch PDF'

    def __init__(self, url, status_code, reason=''):
        super().__init__(f'Upstream returned {status_code} for {url}')
        self.url = url
        self.status_code = int(status_code)
        self.reason = reason or ''

    def to_dict(self):
        return {
            'error': self.error,
            'status': self.status_code,
            'statusText': self.reason,
            'url': self.url,
        }


class UpstreamTimeout(PdfProxyError):
    status_code = 504
    error = 'Request timeout while fetching PDF'


class InternalFault(PdfProxyError):
    status_code = 500
    error = 'Failed to proxy PDF'

    def to_dict(self):
        return {'error': self.error, 'message': self.message}
