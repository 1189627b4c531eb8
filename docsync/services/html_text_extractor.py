import logging
from typing import Callable, NamedTuple, Optional, Protocol

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

UNWANTED_TAGS = [
    'script', 'style', 'noscript',
    'nav', 'header', 'footer',
    'aside', 'form', 'button',
    'iframe', 'embed', 'object',
    'svg', 'canvas',
]

# class/id fragments that mark documentation-site chrome rather than content
UNWANTED_PATTERNS = [
    'nav', 'menu', 'sidebar', 'breadcrumb', 'toc',
    'banner', 'cookie', 'edit-page', 'feedback',
]


class ExtractedText(NamedTuple):
    title: Optional[str]
    plain_text: Optional[str]


class TextExtractor(Protocol):
    def extract(self, body: Optional[str]) -> ExtractedText: ...


class HtmlTextExtractor:
    """Pulls the page title and main-content text out of a rendered docs page."""

    def __init__(
        self,
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
    ):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract(self, body: Optional[str]) -> ExtractedText:
        if not body:
            return ExtractedText(None, None)

        soup = self._soup_factory(body)
        title = None
        if soup.title is not None and soup.title.string:
            title = soup.title.string.strip() or None
        if title is None:
            h1 = soup.find("h1")
            if h1 is not None:
                title = h1.get_text(" ", strip=True) or None

        return ExtractedText(title, self._content_text(soup))

    def _content_text(self, soup: BeautifulSoup) -> str:
        root = soup.find("main") or soup.find("article") or soup.body or soup

        for tag in UNWANTED_TAGS:
            for element in root.find_all(tag):
                element.decompose()

        for pattern in UNWANTED_PATTERNS:
            for element in root.find_all(class_=lambda x: x and pattern in x.lower()):
                element.decompose()
            for element in root.find_all(id=lambda x: x and pattern in x.lower()):
                element.decompose()

        # Paragraph breaks survive as blank lines so the chunker can cut on them.
        return root.get_text(separator="\n\n", strip=True)
