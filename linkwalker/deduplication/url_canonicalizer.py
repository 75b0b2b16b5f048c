import re
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from ..utils.error_handler import ResolutionError

logger = logging.getLogger(__name__)

# RFC 3986 scheme prefix, excluding Windows drive paths like C:\
_SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z\d+\-.]*:')
_WINDOWS_PATH_RE = re.compile(r'^[a-zA-Z]:\\')
_BAD_HOST_CHARS = re.compile(r'[\s\x00-\x1f\x7f<>"{}|\\^`]')

HTTP_SCHEMES = frozenset({'http', 'https'})
DEFAULT_PORTS = {'http': 80, 'https': 443}


@dataclass(frozen=True)
class ParsedUrl:
    """A link as written in markup plus its resolved form"""
    link: str
    url: Optional[str] = None
    error: Optional[ResolutionError] = None

    @property
    def is_resolved(self) -> bool:
        return self.error is None


def is_absolute_url(value: str) -> bool:
    """Check whether a value carries its own scheme"""
    if _WINDOWS_PATH_RE.match(value):
        return False
    return bool(_SCHEME_RE.match(value))


def is_http_url(url: str) -> bool:
    return urlsplit(url).scheme.lower() in HTTP_SCHEMES


class URLCanonicalizer:
    """URL resolution and canonicalization"""

    def resolve(self, link: str, base_url: str) -> ParsedUrl:
        """
        Resolve a raw attribute value against a base URL

        Args:
            link: Attribute text exactly as it appeared in the markup
            base_url: Effective base URL of the document

        Returns:
            ParsedUrl carrying either the canonical URL or a ResolutionError
        """
        value = link.strip()
        try:
            if is_absolute_url(value):
                joined = value
            elif _WINDOWS_PATH_RE.match(value):
                # Keep urljoin from reading the drive letter as a scheme
                joined = urljoin(base_url, './' + value)
            else:
                joined = urljoin(base_url, value)
            return ParsedUrl(link=link, url=self.canonicalize(joined))
        except ValueError as e:
            logger.debug(f"Cannot resolve {link!r} against {base_url}: {e}")
            return ParsedUrl(link=link, error=ResolutionError(link, str(e)))

    def canonicalize(self, url: str) -> str:
        """
        Canonicalize URL to its dedup key

        Lower-cases scheme and host, drops default ports and the fragment,
        and keeps path and query untouched. Raises ValueError on input
        that cannot be a valid URL.
        """
        parsed = urlsplit(url)
        scheme = parsed.scheme.lower()

        if scheme not in HTTP_SCHEMES:
            # mailto:, data:, irc: etc. have no authority to normalize
            return urlunsplit((scheme, parsed.netloc, parsed.path, parsed.query, ''))

        # Raises ValueError for non-numeric or out of range ports
        port = parsed.port
        host = parsed.hostname
        if not host:
            raise ValueError(f"missing host in {url!r}")
        if _BAD_HOST_CHARS.search(host):
            raise ValueError(f"invalid host {host!r}")

        if ':' in host:
            if '[' not in parsed.netloc:
                # e.g. host:3000:3000
                raise ValueError(f"invalid host {host!r}")
            host = f"[{host}]"
        netloc = host
        if port is not None and port != DEFAULT_PORTS[scheme]:
            netloc = f"{host}:{port}"
        if parsed.username is not None:
            userinfo = parsed.username
            if parsed.password is not None:
                userinfo += f":{parsed.password}"
            netloc = f"{userinfo}@{netloc}"

        path = parsed.path or '/'
        return urlunsplit((scheme, netloc, path, parsed.query, ''))

    def base_url(self, html_base: str, page_url: str) -> str:
        """Effective document base for a <base href> value"""
        if is_absolute_url(html_base):
            return html_base
        joined = urljoin(page_url, html_base)
        return urlunsplit(urlsplit(joined)._replace(fragment=''))

    def origin(self, url: str) -> str:
        """scheme://host[:port], with default ports dropped"""
        parsed = urlsplit(self.canonicalize(url))
        return urlunsplit((parsed.scheme, parsed.netloc.rpartition('@')[2], '', '', ''))

    def is_same_origin(self, url1: str, url2: str) -> bool:
        return self.origin(url1) == self.origin(url2)
