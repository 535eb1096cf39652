from typing import Any, Dict, List

from pipelines.matching.descriptors import RECORD_KEYS

STAT_INT_FIELDS = ["formsDetected", "formsFilled", "fieldsLearned"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def validate_field_record(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    A field record needs a string for every known key it carries and at
    least one non-empty identifier (id or name) or label.
    """
    if not isinstance(data, dict):
        return ["Field record must be an object"]

    errors: List[str] = []
    for key in RECORD_KEYS:
        if key in data and data[key] is not None and not isinstance(data[key], str):
            errors.append(f"Field '{key}' must be a string if provided")

    if not any(_is_non_empty_str(data.get(k)) for k in ("id", "name", "label")):
        errors.append("Field record needs a non-empty id, name or label")

    return errors


def validate_store(data: Any) -> List[str]:
    """
    Validate an export document: ``{"formData": {origin: {form_id: [records]}}}``
    with optional ``statistics``. Errors are prefixed with the record's path.
    """
    if not isinstance(data, dict):
        return ["Store must be an object"]

    errors: List[str] = []
    form_data = data.get("formData")
    if not isinstance(form_data, dict):
        errors.append("Missing required object: formData")
    else:
        for origin, forms in form_data.items():
            if not _is_non_empty_str(origin):
                errors.append("Origin keys must be non-empty strings")
                continue
            if not isinstance(forms, dict):
                errors.append(f"{origin}: forms must be an object keyed by form id")
                continue
            for form_id, records in forms.items():
                if not isinstance(records, list):
                    errors.append(f"{origin}/{form_id}: fields must be a list")
                    continue
                for i, record in enumerate(records):
                    for e in validate_field_record(record):
                        errors.append(f"{origin}/{form_id}[{i}]: {e}")

    stats = data.get("statistics")
    if stats is not None:
        if not isinstance(stats, dict):
            errors.append("Field 'statistics' must be an object if provided")
        else:
            for f in STAT_INT_FIELDS:
                if f in stats and not (isinstance(stats[f], int) and stats[f] >= 0):
                    errors.append(f"Statistic '{f}' must be a non-negative integer")

    return errors


def split_valid_records(records: List[Dict[str, Any]]) -> Dict[str, List]:
    """Partition records into ``valid`` ones and ``invalid`` (index, errors) pairs."""
    valid: List[Dict[str, Any]] = []
    invalid: List = []
    for i, record in enumerate(records):
        errors = validate_field_record(record)
        if errors:
            invalid.append((i, errors))
        else:
            valid.append(record)
    return {"valid": valid, "invalid": invalid}
