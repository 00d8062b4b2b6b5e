"""
Payload serialization for create/update actions.

Payloads with uploads or nested values travel as multipart form data:
file-like values become file parts, lists/dicts are JSON-stringified,
scalars are sent as text. Flat payloads stay JSON.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class FormPayload:
    """Multipart body: plain text fields plus file parts"""
    fields: Dict[str, str] = field(default_factory=dict)
    files: List[Tuple[str, Tuple[str, Any]]] = field(default_factory=list)

    def parts(self) -> List[Tuple[str, Tuple[Optional[str], Any]]]:
        """httpx `files=` list; text fields are parts without a filename so the body is always multipart"""
        text_parts = [(name, (None, value)) for name, value in self.fields.items()]
        return [*text_parts, *self.files]


def is_file_like(value: Any) -> bool:
    if isinstance(value, (bytes, bytearray)):
        return True
    if hasattr(value, "read"):
        return True
    # (filename, content) or (filename, content, content_type)
    return (
        isinstance(value, tuple)
        and len(value) in (2, 3)
        and isinstance(value[0], str)
        and (isinstance(value[1], (bytes, bytearray)) or hasattr(value[1], "read"))
    )


def _file_values(value: Any) -> List[Any]:
    if is_file_like(value):
        return [value]
    if isinstance(value, (list, tuple)) and value and all(is_file_like(v) for v in value):
        return list(value)
    return []


def needs_multipart(payload: Dict[str, Any]) -> bool:
    for value in payload.values():
        if _file_values(value):
            return True
        if isinstance(value, (list, tuple, dict)):
            return True
    return False


def _file_part(key: str, value: Any, index: int) -> Tuple[str, Any]:
    if isinstance(value, tuple):
        return value
    if isinstance(value, (bytes, bytearray)):
        return (f"{key}-{index}", bytes(value))
    name = os.path.basename(getattr(value, "name", "") or f"{key}-{index}")
    return (name, value)


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, default=str)
    return str(value)


def to_form(payload: Dict[str, Any]) -> FormPayload:
    form = FormPayload()
    for key, value in payload.items():
        if value is None:
            continue
        files = _file_values(value)
        if files:
            for index, item in enumerate(files):
                form.files.append((key, _file_part(key, item, index)))
            continue
        form.fields[key] = _text(value)
    return form


def encode_payload(payload: Optional[Dict[str, Any]]) -> Tuple[Optional[Dict[str, Any]], Optional[FormPayload]]:
    """Return (json_body, form_body); exactly one is set for a non-empty payload"""
    if not payload:
        return None, None
    if needs_multipart(payload):
        return None, to_form(payload)
    return {k: v for k, v in payload.items() if v is not None}, None
