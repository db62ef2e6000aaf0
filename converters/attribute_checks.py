"""Validity checks the renderer applies to attribute values and configured defaults."""

import re
from typing import Any

COLOR_LITERAL_PATTERN = re.compile(r'^[a-z]{1,50}$', re.IGNORECASE)

LINK_TARGETS = frozenset({'_self', '_blank', '_parent', '_top'})

LINK_RELS = frozenset({
    'alternate', 'author', 'bookmark', 'external', 'help', 'license', 'next',
    'nofollow', 'noopener', 'noreferrer', 'opener', 'prev', 'search',
    'sponsored', 'tag', 'ugc',
})


def is_valid_color_literal(value: Any) -> bool:
    """Named color such as ``red``; hex and rgb() values are not literals."""
    return isinstance(value, str) and bool(COLOR_LITERAL_PATTERN.match(value))


def is_valid_target(value: Any) -> bool:
    return isinstance(value, str) and value in LINK_TARGETS


def is_valid_rel(value: Any) -> bool:
    """Every whitespace-separated token must be a known relationship keyword."""
    if not isinstance(value, str):
        return False
    tokens = value.lower().split()
    return bool(tokens) and all(token in LINK_RELS for token in tokens)
