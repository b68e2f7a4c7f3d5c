# ayelearn/models/json_list.py
import json
import logging
from typing import Any, List

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


def parse_json_list(value: Any) -> List[Any]:
    """
    Parse stored JSON text into a list.

    Absent, malformed or non-list values all read back as an empty list.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str) or not value.strip():
        return []
    try:
        parsed = json.loads(value)
    except ValueError:
        logger.warning(f"Malformed JSON array in column value: {value[:50]!r}")
        return []
    return parsed if isinstance(parsed, list) else []


class JSONList(TypeDecorator):
    """Text column holding a JSON array of strings."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return json.dumps([])
        return json.dumps(list(value))

    def process_result_value(self, value, dialect):
        return parse_json_list(value)
