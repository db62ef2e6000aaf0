"""Converts raw delta records into Operation objects."""

import logging
import re
from typing import Any, Dict, List, Optional

from models import NEW_LINE, DataType, InsertData, InsertDataCustom, Operation

logger = logging.getLogger('quill_delta_renderer.converters.opsconverter')

# Embed kinds in lookup order; anything else becomes a custom embed.
EMBED_TYPES = (
    DataType.IMAGE.value,
    DataType.VIDEO.value,
    DataType.IFRAME.value,
    DataType.FORMULA.value,
    DataType.DIVIDER.value,
)
URL_TYPES = {DataType.IMAGE.value, DataType.VIDEO.value, DataType.IFRAME.value}

NEW_LINE_SPLIT = re.compile(r'(\n)')


class InsertOpsConverter:
    """Builds the Operation list the grouping stages consume."""

    def __init__(self, logger: logging.Logger = None):
        """Initialize with optional logger."""
        self.logger = logger or logging.getLogger('quill_delta_renderer.converters.opsconverter')

    def convert(self, delta_ops: Any) -> List[Operation]:
        """
        Convert raw records into operations, dropping anything unusable.

        Args:
            delta_ops: List of ``{'insert': ..., 'attributes': {...}}`` records

        Returns:
            Operations in document order (empty for non-list input)
        """
        if not isinstance(delta_ops, (list, tuple)):
            self.logger.debug(f"Ignoring non-list delta input of type {type(delta_ops).__name__}")
            return []

        results: List[Operation] = []
        for raw in delta_ops:
            for record in self.denormalize(raw):
                insert = self.convert_insert_value(record.get('insert'))
                if insert is None:
                    self.logger.debug(f"Dropping unrecognized insert: {record.get('insert')!r}")
                    continue
                attributes = record.get('attributes')
                attributes = dict(attributes) if isinstance(attributes, dict) else {}
                results.append(Operation(insert, attributes, origin=raw))
        return results

    @staticmethod
    def denormalize(raw: Any) -> List[Dict[str, Any]]:
        """Split a multi-line text record into text and newline records."""
        if not isinstance(raw, dict) or not raw.get('insert'):
            return []

        insert = raw['insert']
        if not isinstance(insert, str) or insert == NEW_LINE or NEW_LINE not in insert:
            return [raw]

        attributes = raw.get('attributes')
        return [
            {'insert': token, 'attributes': dict(attributes) if isinstance(attributes, dict) else {}}
            for token in NEW_LINE_SPLIT.split(insert)
            if token
        ]

    @staticmethod
    def convert_insert_value(value: Any) -> Optional[InsertData]:
        """Classify an insert value; None when it cannot be classified."""
        if isinstance(value, str):
            return InsertData(DataType.TEXT.value, value) if value else None

        if not isinstance(value, dict) or not value:
            return None

        for embed_type in EMBED_TYPES:
            if embed_type in value:
                embed_value = value[embed_type]
                if embed_value is None and embed_type not in URL_TYPES:
                    return None
                if embed_type in URL_TYPES:
                    embed_value = '' if embed_value is None else str(embed_value)
                return InsertData(embed_type, embed_value)

        key = next(iter(value))
        return InsertDataCustom(key, value[key])
