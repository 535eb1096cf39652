"""Field and form descriptors shared by the matching engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple

RECORD_KEYS = ("id", "type", "label", "name", "placeholder", "class", "value")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class FieldDescriptor:
    id: str = ""
    type: str = ""
    label: str = ""
    name: str = ""
    placeholder: str = ""
    css_class: str = ""
    value: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "FieldDescriptor":
        """Build a descriptor from a stored record, mapping absent/None to ''."""
        return cls(
            id=_text(record.get("id")),
            type=_text(record.get("type")),
            label=_text(record.get("label")),
            name=_text(record.get("name")),
            placeholder=_text(record.get("placeholder")),
            css_class=_text(record.get("class")),
            value=_text(record.get("value")),
        )

    def to_record(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "name": self.name,
            "placeholder": self.placeholder,
            "class": self.css_class,
            "value": self.value,
        }

    def display_name(self) -> str:
        for candidate in (self.name, self.id, self.label, self.placeholder):
            if candidate:
                return candidate
        return "<unnamed>"


@dataclass(frozen=True)
class FormDescriptor:
    id: str
    fields: Tuple[FieldDescriptor, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, form_id: str, fields: Iterable[FieldDescriptor]) -> "FormDescriptor":
        return cls(id=form_id, fields=tuple(fields))


__all__ = [
    "RECORD_KEYS",
    "FieldDescriptor",
    "FormDescriptor",
]
