"""Conversion of a client value tree into the transport tree.

The client keeps :class:`FileReference` objects in its form state. Before a
submission crosses the wire every reference is replaced by a metadata record
``{"name", "size", "mediaType"}``; the binary itself is never sent, and no
download of the original file exists in this system.
"""

import os
import json
import logging
import mimetypes
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping

from permit_portal.core.exceptions import MalformedPayloadError, RawBinaryValueError

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class FileReference:
    """A file picked on the client. Only its metadata ever leaves the client."""
    name: str
    size: int
    media_type: str = DEFAULT_MEDIA_TYPE

    @classmethod
    def from_path(cls, path: str, media_type: str = None) -> "FileReference":
        guessed, _ = mimetypes.guess_type(path)
        return cls(
            name=os.path.basename(path),
            size=os.path.getsize(path),
            media_type=media_type or guessed or DEFAULT_MEDIA_TYPE,
        )

    def to_metadata(self) -> Dict[str, Any]:
        return {"name": self.name, "size": self.size, "mediaType": self.media_type}


def is_attachment_metadata(value: Any) -> bool:
    return (
        isinstance(value, Mapping)
        and isinstance(value.get("name"), str)
        and isinstance(value.get("size"), int)
        and not isinstance(value.get("size"), bool)
    )


def _sort_key(item: Any) -> str:
    return json.dumps(item, sort_keys=True, default=str)


def serialize_value_tree(value: Any, path: str = "") -> Any:
    """Replace file references with metadata records and dates with ISO strings.

    Already serialized trees pass through unchanged. Raw bytes raise
    :class:`RawBinaryValueError`.
    """
    if isinstance(value, FileReference):
        return value.to_metadata()
    elif isinstance(value, (datetime, date)):
        return value.isoformat()
    elif isinstance(value, Mapping):
        return {
            str(key): serialize_value_tree(item, f"{path}.{key}" if path else str(key))
            for key, item in value.items()
        }
    elif isinstance(value, (list, tuple)):
        return [serialize_value_tree(item, f"{path}[{i}]") for i, item in enumerate(value)]
    elif isinstance(value, (set, frozenset)):
        # Items may serialize to dicts, which do not order; sort on their JSON form
        items = [serialize_value_tree(item, path) for item in value]
        return sorted(items, key=_sort_key)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raise RawBinaryValueError(path or "<root>")
    return value


def encode_payload(values: Mapping[str, Any]) -> str:
    return json.dumps(serialize_value_tree(values))


def decode_payload(raw: str) -> Dict[str, Any]:
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedPayloadError(f"Payload is not valid JSON: {e}") from e
    if not isinstance(decoded, dict):
        raise MalformedPayloadError(f"Payload must be a JSON object, got {type(decoded).__name__}")
    return decoded
