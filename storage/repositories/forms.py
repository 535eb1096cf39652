"""
Forms Repository.

Responsibilities:
- CRUD operations for the stored_fields and statistics tables.
- Transaction-safe writes.
- Hand stored forms to the matching engine as descriptors.

Non-Responsibilities:
- No matching or scoring.
- No decision about which fields are worth learning.

Invariant:
Repositories must not encode domain decisions.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from formmatch.database import Statistic, StoredField
from pipelines.matching.descriptors import FieldDescriptor

STATISTIC_KEYS = ("forms_detected", "forms_filled", "fields_learned")


class FormRepository:
    def __init__(self, session):
        self.session = session

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _form_rows(self, origin: str, form_id: str) -> List[StoredField]:
        return (
            self.session.query(StoredField)
            .filter_by(origin=origin, form_id=form_id)
            .order_by(StoredField.position)
            .all()
        )

    def save_form(self, origin: str, form_id: str, fields: Sequence[FieldDescriptor]) -> int:
        """Replace every stored field of one form. Returns the number saved."""
        self.session.query(StoredField).filter_by(origin=origin, form_id=form_id).delete()
        for position, field in enumerate(fields):
            self.session.add(StoredField.from_descriptor(origin, form_id, position, field))
        self._commit()
        return len(fields)

    def update_field(self, origin: str, form_id: str, field: FieldDescriptor) -> bool:
        """Replace the stored field sharing a non-empty id or name, else append.

        Returns True when the field was appended.
        """
        rows = self._form_rows(origin, form_id)
        for row in rows:
            same_id = field.id and row.field_id == field.id
            same_name = field.name and row.name == field.name
            if same_id or same_name:
                replacement = StoredField.from_descriptor(origin, form_id, row.position, field)
                for column in ("field_id", "type", "label", "name", "placeholder", "css_class", "value"):
                    setattr(row, column, getattr(replacement, column))
                self._commit()
                return False

        position = rows[-1].position + 1 if rows else 0
        self.session.add(StoredField.from_descriptor(origin, form_id, position, field))
        self._commit()
        return True

    def delete_forms(self, origin: str, form_id: Optional[str] = None) -> int:
        """Delete one form, or every form of ``origin`` when no form id is given."""
        query = self.session.query(StoredField).filter_by(origin=origin)
        if form_id is not None:
            query = query.filter_by(form_id=form_id)
        deleted = query.delete()
        self._commit()
        return deleted

    def load_forms(self) -> Dict[str, Dict[str, List[FieldDescriptor]]]:
        """Return ``{origin: {form_id: [FieldDescriptor, ...]}}``."""
        forms: Dict[str, Dict[str, List[FieldDescriptor]]] = {}
        rows = (
            self.session.query(StoredField)
            .order_by(StoredField.origin, StoredField.form_id, StoredField.position)
            .all()
        )
        for row in rows:
            forms.setdefault(row.origin, {}).setdefault(row.form_id, []).append(row.to_descriptor())
        return forms

    def count_fields(self) -> int:
        return self.session.query(StoredField).count()

    def clear(self) -> int:
        deleted = self.session.query(StoredField).delete()
        self._commit()
        return deleted

    def increment_statistic(self, key: str, amount: int = 1) -> int:
        stat = self.session.get(Statistic, key)
        if stat is None:
            stat = Statistic(key=key, count=0)
            self.session.add(stat)
        stat.count = (stat.count or 0) + amount
        stat.updated_at = datetime.now()
        self._commit()
        return stat.count

    def get_statistics(self) -> Dict[str, object]:
        stats: Dict[str, object] = {key: 0 for key in STATISTIC_KEYS}
        for stat in self.session.query(Statistic).all():
            stats[stat.key] = stat.count
        last_used = self.session.query(func.max(Statistic.updated_at)).scalar()
        stats["last_used"] = last_used.isoformat() if last_used else None
        return stats

    def reset_statistics(self) -> None:
        self.session.query(Statistic).delete()
        self._commit()
