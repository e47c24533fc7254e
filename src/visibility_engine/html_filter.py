"""
HTML filter for turning page markup into plain text.

Strips scripts, styles and media, and optionally navigation and footer
regions, so that only readable content reaches the text comparison.
"""

import re

from bs4 import BeautifulSoup, Comment
from bs4.element import NavigableString, PreformattedString, Tag


class ContentFilter:
    """
    Extracts plain text from HTML.

    Keeps one line per block element so that line-level diffs stay
    meaningful; inline markup is flattened into the surrounding line.
    """

    # Tags that never carry readable text
    IGNORED_TAGS = ["script", "style", "noscript", "template"]

    # Media elements, removed to keep only text
    MEDIA_TAGS = ["img", "video", "audio", "picture", "svg", "canvas", "embed", "object", "iframe"]

    # Navigation and footer regions
    NAVIGATION_SELECTORS = [
        "nav",
        "header",
        "footer",
        ".nav",
        ".navigation",
        ".navbar",
        ".nav-bar",
        ".menu",
        ".main-menu",
        ".header",
        ".site-header",
        ".page-header",
        ".top-header",
        ".footer",
        ".site-footer",
        ".page-footer",
        ".bottom-footer",
        ".breadcrumb",
        ".breadcrumbs",
        "[role='navigation']",
        "[role='banner']",
        "[role='contentinfo']",
        ".navigation-wrapper",
        ".nav-wrapper",
        ".header-wrapper",
        ".footer-wrapper",
        ".site-navigation",
        ".primary-navigation",
        ".secondary-navigation",
        ".top-nav",
        ".bottom-nav",
        ".sidebar-nav",
        "#nav",
        "#navigation",
        "#navbar",
        "#header",
        "#footer",
        "#menu",
        "#main-menu",
        "#site-header",
        "#site-footer",
        "#page-header",
        "#page-footer",
    ]

    # Elements that start a new line of text
    BLOCK_TAGS = {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "dd",
        "details",
        "dialog",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "html",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "td",
        "th",
        "tr",
        "ul",
    }

    def __init__(self, ignore_nav_footer: bool = True):
        """
        Initialize the content filter.

        Args:
            ignore_nav_footer: Whether to remove navigation and footer elements
        """
        self.ignore_nav_footer = ignore_nav_footer

    def extract_text(self, html: str | None) -> str:
        """
        Extract readable text from HTML.

        Args:
            html: HTML string to parse

        Returns:
            Plain text, one line per block element, empty for empty input
        """
        if not html:
            return ""

        soup = BeautifulSoup(html, "lxml")
        self._remove_ignored_elements(soup)

        root = soup.body or soup
        lines: list[str] = []
        current: list[str] = []
        current_block: Tag | None = None

        for string in root.find_all(string=True):
            # Comments, doctypes and CDATA are not page text
            if isinstance(string, PreformattedString):
                continue
            block = self._block_parent(string)
            if block is not current_block and current:
                lines.append(self._normalize_whitespace(" ".join(current)))
                current = []
            current_block = block
            current.append(str(string))

        if current:
            lines.append(self._normalize_whitespace(" ".join(current)))

        return "\n".join(line for line in lines if line)

    def filter_html(self, html: str | None) -> str:
        """
        Return the filtered document as HTML instead of text.

        Args:
            html: HTML string to parse

        Returns:
            Serialized HTML with ignored elements removed
        """
        if not html:
            return ""

        soup = BeautifulSoup(html, "lxml")
        self._remove_ignored_elements(soup)
        return str(soup)

    def _remove_ignored_elements(self, soup: BeautifulSoup):
        """
        Remove elements that should not be considered as content.

        Args:
            soup: BeautifulSoup object
        """
        # Nested matches (e.g. <img> inside <picture>) go away with their ancestor
        for tag in soup.find_all(self.IGNORED_TAGS + self.MEDIA_TAGS):
            if not tag.decomposed:
                tag.decompose()

        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        if self.ignore_nav_footer:
            for element in soup.select(", ".join(self.NAVIGATION_SELECTORS)):
                if not element.decomposed:
                    element.decompose()

    def _block_parent(self, string: NavigableString) -> Tag | None:
        """Nearest enclosing block-level element of a text node."""
        for parent in string.parents:
            if parent.name in self.BLOCK_TAGS:
                return parent
        return None

    def _normalize_whitespace(self, text: str) -> str:
        """
        Normalize whitespace in text.

        Args:
            text: Input text

        Returns:
            Text with whitespace runs collapsed to single spaces
        """
        return re.sub(r"\s+", " ", text).strip()


def filter_html_content(
    html: str | None, ignore_nav_footer: bool = True, return_text: bool = True
) -> str:
    """
    Filter HTML content by removing unwanted elements.

    Args:
        html: Raw HTML content
        ignore_nav_footer: Whether to remove navigation/footer elements
        return_text: Return plain text (True) or filtered HTML (False)
    """
    content_filter = ContentFilter(ignore_nav_footer=ignore_nav_footer)
    if return_text:
        return content_filter.extract_text(html)
    return content_filter.filter_html(html)


def strip_tags_to_text(html: str | None, ignore_nav_footer: bool = True) -> str:
    """Extract plain text from HTML content."""
    return filter_html_content(html, ignore_nav_footer, return_text=True)


def extract_word_count(html: str | None, ignore_nav_footer: bool = True) -> int:
    """Count whitespace-separated words in the filtered text of HTML content."""
    return len(strip_tags_to_text(html, ignore_nav_footer).split())
