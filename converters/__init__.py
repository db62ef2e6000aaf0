"""Converters package: delta records to HTML, BeautifulSoup trees and Markdown."""

import logging

from .delta_converter import DeltaToHtmlConverter, RenderCallbacks
from .markdown_converter import DeltaMarkdownConverter, convert_delta_to_markdown
from .op_to_html import OpToHtmlConverter
from .ops_converter import InsertOpsConverter

logger = logging.getLogger('quill_delta_renderer.converters')


def convert_delta(delta_ops, config=None, callbacks=None, logger=None):
    """
    Convenience function to render delta records as HTML.

    This runs the full pipeline:
    1. Input conversion (records to operations, newline tokenising)
    2. Block pairing (operations to inline runs, blocks and standalone items)
    3. Same-style block merge
    4. Table grouping
    5. List nesting
    6. Tag and attribute resolution for every unit

    Args:
        delta_ops: List of delta insert records
        config: Optional converter options dictionary
        callbacks: Optional RenderCallbacks
        logger: Optional logger instance (uses module logger if not provided)

    Returns:
        str: Rendered HTML (empty string for empty or invalid input)

    Example:
        >>> from converters import convert_delta
        >>> convert_delta([{'insert': 'Hi'}, {'insert': '\\n', 'attributes': {'header': 1}}])
        '<h1>Hi</h1>'
    """
    if logger is None:
        logger = logging.getLogger('quill_delta_renderer.converters')

    converter = DeltaToHtmlConverter(delta_ops, config=config, callbacks=callbacks, logger=logger)
    return converter.convert()


__all__ = [
    'convert_delta',
    'convert_delta_to_markdown',
    'DeltaToHtmlConverter',
    'DeltaMarkdownConverter',
    'RenderCallbacks',
    'OpToHtmlConverter',
    'InsertOpsConverter',
]
