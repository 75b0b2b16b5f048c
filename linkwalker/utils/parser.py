import logging
from types import MappingProxyType
from typing import List, Union

from bs4 import BeautifulSoup

from ..deduplication.url_canonicalizer import ParsedUrl, URLCanonicalizer

logger = logging.getLogger(__name__)

# attribute -> tags on which that attribute holds a URL
LINK_ATTRIBUTES = MappingProxyType({
    'background': frozenset({'body'}),
    'cite': frozenset({'blockquote', 'del', 'ins', 'q'}),
    'data': frozenset({'object'}),
    'href': frozenset({'a', 'area', 'embed', 'link'}),
    'icon': frozenset({'command'}),
    'longdesc': frozenset({'frame', 'iframe'}),
    'manifest': frozenset({'html'}),
    'poster': frozenset({'video'}),
    'pluginspage': frozenset({'embed'}),
    'pluginurl': frozenset({'embed'}),
    'src': frozenset({'audio', 'embed', 'frame', 'iframe', 'img', 'input',
                      'script', 'source', 'track', 'video'}),
    'srcset': frozenset({'img', 'source'}),
})

# <link rel=...> hints that point at origins, not documents
IGNORED_LINK_RELS = frozenset({'dns-prefetch', 'preconnect'})


class HTMLParser:
    """Extracts every URL-bearing attribute value from an HTML document"""

    def __init__(self, base_url: str, canonicalizer: URLCanonicalizer = None):
        self.base_url = base_url
        self.canonicalizer = canonicalizer or URLCanonicalizer()

    def parse(self, html_content: Union[str, bytes]) -> List[ParsedUrl]:
        """Parse HTML content and return its links, resolved against the document base"""
        soup = BeautifulSoup(html_content, 'html.parser')
        base_url = self.document_base(soup)

        links = []
        for attr, tags in LINK_ATTRIBUTES.items():
            for element in soup.find_all(list(tags), attrs={attr: True}):
                if element.name == 'link' and self._is_resource_hint(element):
                    continue
                for value in self._attribute_values(attr, element.get(attr)):
                    if value:
                        links.append(self.canonicalizer.resolve(value, base_url))
        return links

    def document_base(self, soup: BeautifulSoup) -> str:
        """Only the first <base href> counts"""
        base = soup.find('base', href=True)
        if base is None:
            return self.base_url
        try:
            return self.canonicalizer.base_url(base['href'], self.base_url)
        except ValueError as e:
            logger.debug(f"Ignoring <base href={base['href']!r}> on {self.base_url}: {e}")
            return self.base_url

    @staticmethod
    def _is_resource_hint(element) -> bool:
        # only a bare hint; "preconnect stylesheet" is still a stylesheet
        rel = element.get('rel') or ''
        if not isinstance(rel, str):
            rel = ' '.join(rel)
        return rel.strip().lower() in IGNORED_LINK_RELS

    @staticmethod
    def _attribute_values(attr: str, value) -> List[str]:
        if isinstance(value, list):
            # bs4 hands back multi-valued attributes as lists
            value = ' '.join(value)
        if value is None:
            return []
        if attr == 'srcset':
            values = []
            for candidate in value.split(','):
                tokens = candidate.split()
                if tokens:
                    values.append(tokens[0])
            return values
        return [value.strip()]


def get_links(source: Union[str, bytes], base_url: str) -> List[ParsedUrl]:
    """Shortcut for HTMLParser(base_url).parse(source)"""
    return HTMLParser(base_url).parse(source)
