import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from permit_portal.forms.attachments import is_attachment_metadata
from permit_portal.schemas.application_schema import ApplicationRecord, DocumentEntry


def utc_now_iso() -> str:
    """Current UTC time as `YYYY-MM-DDTHH:MM:SS.mmmZ`, the format the web client writes."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def humanize_key(key: str) -> str:
    """`architecturalDrawings` -> `Architectural Drawings`."""
    spaced = re.sub(r"([A-Z])", r" \1", key).strip()
    return spaced[:1].upper() + spaced[1:]


def _entry(slot: str, key: str, value: Any) -> DocumentEntry:
    if is_attachment_metadata(value):
        return DocumentEntry(
            slot=slot,
            label=humanize_key(key),
            name=value["name"],
            size=value["size"],
            mediaType=value.get("mediaType") or value.get("type"),
            uploaded=True,
        )
    return DocumentEntry(slot=slot, label=humanize_key(key))


def extract_documents(data: Optional[Dict[str, Any]]) -> List[DocumentEntry]:
    """Collect attachment records from a submitted value tree.

    Looks at `doc*` groups one level deep and at attachment leaves anywhere at
    the top level. Checklist booleans are not documents. No entry is ever
    downloadable; only metadata is stored.
    """
    documents: List[DocumentEntry] = []
    for key, value in (data or {}).items():
        if isinstance(value, list):
            documents.extend(
                _entry(f"{key}.{i}", key, item)
                for i, item in enumerate(value)
                if is_attachment_metadata(item)
            )
        elif is_attachment_metadata(value):
            documents.append(_entry(key, key, value))
        elif key.startswith("doc") and isinstance(value, dict):
            for slot, item in value.items():
                if item is None or is_attachment_metadata(item):
                    documents.append(_entry(f"{key}.{slot}", slot, item))
    return documents


def build_application_response(record: ApplicationRecord, include_documents: bool = False) -> Dict[str, Any]:
    response = record.model_dump(mode="json")
    if include_documents:
        response["documents"] = [doc.model_dump() for doc in extract_documents(record.data)]
    return response
