"""Candidate URL resolution for stored PDF objects.

The storage origin does not reliably keep the ``.pdf`` suffix on raw uploads, so a
single stored URL can only be fetched through one of a few spellings. The resolver
turns a source URL into the ordered list of spellings worth trying. It performs no
network I/O.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlsplit

from acadmix.errors import MalformedSourceUrl

OBJECT_PATH_RE = re.compile(r'/upload/(?:v\d+/)?(.+)$')
PDF_SUFFIX_RE = re.compile(r'\.pdf$', re.IGNORECASE)
CLOUD_SEGMENT_RE = re.compile(r'^https?://[^/]+/([^/]+)/(?:raw|image|video)/')


def _raw_without_extension(origin_base, base_identifier, source_url):
    return f'{origin_base}/raw/upload/{base_identifier}'


def _raw_with_pdf_extension(origin_base, base_identifier, source_url):
    return f'{origin_base}/raw/upload/{base_identifier}.pdf'


def _original_url(origin_base, base_identifier, source_url):
    return source_url


# Priority order. New fallbacks are appended here.
CANDIDATE_STRATEGIES = (
    _raw_without_extension,
    _raw_with_pdf_extension,
    _original_url,
)


@dataclass(frozen=True)
class Resolution:
    source_url: str
    candidates: Tuple[str, ...]
    base_identifier: Optional[str] = None

    @property
    def is_storage_origin(self):
        return self.base_identifier is not None


def extract_object_path(source_url):
    match = OBJECT_PATH_RE.search(source_url or '')
    if not match or not match.group(1):
        raise MalformedSourceUrl(source_url)
    return match.group(1)


def strip_pdf_suffix(object_path):
    return PDF_SUFFIX_RE.sub('', object_path)


class PdfUrlResolver:
    def __init__(self, *, domain_marker='cloudinary.com', origin_host='res.cloudinary.com',
                 cloud_name='', strategies=CANDIDATE_STRATEGIES):
        self.domain_marker = str(domain_marker or '').lower()
        self.origin_host = str(origin_host or '').strip('/')
        self.cloud_name = str(cloud_name or '').strip('/')
        self.strategies = tuple(strategies)

    @classmethod
    def from_config(cls, config):
        return cls(
            domain_marker=config.storage_domain_marker,
            origin_host=config.storage_origin_host,
            cloud_name=config.cloud_name,
        )

    def is_storage_origin(self, source_url):
        return bool(self.domain_marker) and self.domain_marker in str(source_url or '').lower()

    def origin_base(self, source_url):
        if self.cloud_name:
            return f'https://{self.origin_host}/{self.cloud_name}'
        match = CLOUD_SEGMENT_RE.match(source_url)
        if match:
            return f'https://{self.origin_host}/{match.group(1)}'
        # No cloud segment in the path (e.g. cloud name in the subdomain): keep the source host.
        parts = urlsplit(source_url)
        if parts.scheme and parts.netloc:
            return f'{parts.scheme}://{parts.netloc}'
        return f'https://{self.origin_host}'

    def passthrough(self, source_url):
        return Resolution(source_url=source_url, candidates=(source_url,))

    def resolve(self, source_url):
        """Return the ordered candidates for ``source_url``.

        Raises ``MalformedSourceUrl`` for storage-origin URLs without an
        ``/upload/`` object path. Other URLs resolve to themselves.
        """
        if not self.is_storage_origin(source_url):
            return self.passthrough(source_url)
        base_identifier = strip_pdf_suffix(extract_object_path(source_url))
        origin_base = self.origin_base(source_url)
        candidates = tuple(
            strategy(origin_base, base_identifier, source_url)
            for strategy in self.strategies
        )
        return Resolution(
            source_url=source_url,
            candidates=candidates,
            base_identifier=base_identifier,
        )
