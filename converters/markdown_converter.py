"""Markdown rendering of delta documents via markdownify."""

import html
import logging
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup, Tag
from markdownify import MarkdownConverter as MarkdownifyConverter

from .delta_converter import DeltaToHtmlConverter, RenderCallbacks

logger = logging.getLogger('quill_delta_renderer.converters.markdownconverter')

CHECK_MARKERS = {'checked': '[x] ', 'unchecked': '[ ] '}


class DeltaMarkdownConverter(MarkdownifyConverter):
    """
    Converts delta documents to Markdown.

    The delta is first rendered to HTML by DeltaToHtmlConverter; the editor
    specific markup (``data-list`` items inside ``<ol>``, ``ql-ui`` spans,
    ``data-language`` code blocks) is normalized before markdownify runs.
    """

    def __init__(self, logger: logging.Logger = None, config: Dict[str, Any] = None, **kwargs):
        """Initialize markdown converter with logger and configuration."""
        markdownify_options = {
            'heading_style': 'ATX',  # Use # for headings
            'bullets': '-',  # Use - for unordered lists
            'escape_asterisks': False,
            'escape_underscores': False,
            'escape_misc': False,
            'code_language_callback': self._code_language,
        }
        markdownify_options.update(kwargs)
        super().__init__(**markdownify_options)

        self.logger = logger or logging.getLogger('quill_delta_renderer.converters.markdownconverter')
        self.config = config or {}

    def convert_delta(self, delta_ops: Any, callbacks: Optional[RenderCallbacks] = None) -> str:
        """
        Convert delta records to Markdown.

        Args:
            delta_ops: Raw delta records
            callbacks: Optional render hooks forwarded to the HTML renderer

        Returns:
            Markdown text ending with a single newline (empty for an empty document)
        """
        html_converter = DeltaToHtmlConverter(delta_ops, self.config, callbacks, self.logger)
        return self.convert_html(html_converter.convert())

    def convert_html(self, html_content: str) -> str:
        """Convert HTML produced by DeltaToHtmlConverter to Markdown."""
        if not html_content:
            return ''

        soup = BeautifulSoup(html_content, 'lxml')
        self._pre_process_html(soup)
        markdown = super().convert(str(soup.body or soup))
        return self._clean_markdown(markdown)

    def _pre_process_html(self, soup: BeautifulSoup) -> None:
        """Normalize editor markup so markdownify sees plain HTML lists."""
        for ui_span in soup.select('span.ql-ui'):
            ui_span.decompose()

        for list_tag in soup.find_all(['ol', 'ul']):
            items = list_tag.find_all('li', recursive=False)
            if items and items[0].get('data-list', 'ordered') != 'ordered':
                list_tag.name = 'ul'

        for item in soup.find_all('li'):
            marker = CHECK_MARKERS.get(item.get('data-list'))
            if marker:
                item.insert(0, marker)

    @staticmethod
    def _code_language(el: Tag) -> Optional[str]:
        return el.get('data-language') or None

    def _clean_markdown(self, markdown: str) -> str:
        """Collapse blank lines and trim trailing whitespace."""
        markdown = html.unescape(markdown)
        lines = [line.rstrip() for line in markdown.split('\n')]
        markdown = re.sub(r'\n{3,}', '\n\n', '\n'.join(lines)).strip()
        return markdown + '\n' if markdown else ''


def convert_delta_to_markdown(
    delta_ops: Any,
    config: Dict[str, Any] = None,
    callbacks: RenderCallbacks = None,
    logger: logging.Logger = None
) -> str:
    """Convenience function to render delta records as Markdown."""
    converter = DeltaMarkdownConverter(logger=logger, config=config)
    return converter.convert_delta(delta_ops, callbacks)


__all__: List[str] = ['DeltaMarkdownConverter', 'convert_delta_to_markdown']
