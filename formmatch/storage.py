import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from pipelines.matching.descriptors import FieldDescriptor

from .schema import split_valid_records

# Repository statistic keys -> export document keys
EXPORT_STAT_KEYS = {
    "forms_detected": "formsDetected",
    "forms_filled": "formsFilled",
    "fields_learned": "fieldsLearned",
    "last_used": "lastUsed",
}


def empty_store() -> Dict[str, Any]:
    return {"formData": {}, "statistics": {}}


def load_store(path: Path, strict: bool = False) -> Any:
    """Read a store file; missing, blank or unreadable files give an empty store.

    With ``strict``, malformed JSON raises ValueError instead.
    """
    if not path.exists():
        return empty_store()
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return empty_store()
            return json.loads(content)
    except json.JSONDecodeError as e:
        if strict:
            raise ValueError(f"Invalid JSON in {path}: {e}")
        return empty_store()
    except IOError:
        return empty_store()


def save_store(path: Path, store: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(store, f, indent=2, ensure_ascii=False)


def build_export(
    forms: Mapping[str, Mapping[str, Sequence[FieldDescriptor]]],
    statistics: Mapping[str, Any],
) -> Dict[str, Any]:
    form_data = {
        origin: {form_id: [f.to_record() for f in fields] for form_id, fields in by_id.items()}
        for origin, by_id in forms.items()
    }
    stats = {EXPORT_STAT_KEYS[k]: v for k, v in statistics.items() if k in EXPORT_STAT_KEYS}
    return {
        "formData": form_data,
        "statistics": stats,
        "exportDate": datetime.now().isoformat(),
    }


def stored_forms_from_export(
    store: Mapping[str, Any],
) -> Tuple[Dict[str, Dict[str, List[FieldDescriptor]]], int]:
    """Turn an export document back into descriptors.

    Returns the forms and the number of invalid records that were skipped.
    """
    forms: Dict[str, Dict[str, List[FieldDescriptor]]] = {}
    skipped = 0
    form_data = store.get("formData") or {}
    for origin, by_id in form_data.items():
        if not isinstance(by_id, dict):
            continue
        for form_id, records in by_id.items():
            if not isinstance(records, list):
                continue
            parts = split_valid_records(records)
            skipped += len(parts["invalid"])
            if parts["valid"]:
                forms.setdefault(origin, {})[form_id] = [
                    FieldDescriptor.from_record(r) for r in parts["valid"]
                ]
    return forms, skipped


def statistics_from_export(store: Mapping[str, Any]) -> Dict[str, int]:
    """Repository statistic counters carried by an export document."""
    stats = store.get("statistics") or {}
    counters: Dict[str, int] = {}
    for key, export_key in EXPORT_STAT_KEYS.items():
        value = stats.get(export_key)
        if key != "last_used" and isinstance(value, int) and value > 0:
            counters[key] = value
    return counters
