"""Markup string primitives used when serializing resolved tags."""

import html
from typing import Iterable, Optional, Tuple

TagAttribute = Tuple[str, Optional[str]]

BR_TAG = '<br/>'
SELF_CLOSING_TAGS = {'img', 'br'}


def encode_html(text: str, prevent_double_encoding: bool = True) -> str:
    """Escape markup characters, decoding existing entities first unless told not to."""
    if prevent_double_encoding:
        text = html.unescape(text)
    return html.escape(text, quote=True)


def make_attrs(attrs: Optional[Iterable[TagAttribute]]) -> str:
    """Render attributes; a pair with an empty value renders as a bare key."""
    if not attrs:
        return ''
    return ' '.join(
        f'{key}="{encode_html(str(value))}"' if value not in (None, '') else key
        for key, value in attrs
    )


def make_start_tag(tag: Optional[str], attrs: Optional[Iterable[TagAttribute]] = None) -> str:
    if not tag:
        return ''
    attrs_str = make_attrs(attrs)
    closing = '/>' if tag in SELF_CLOSING_TAGS else '>'
    return f"<{tag}{' ' + attrs_str if attrs_str else ''}{closing}"


def make_end_tag(tag: Optional[str] = '') -> str:
    return f'</{tag}>' if tag else ''
