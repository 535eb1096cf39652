"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for learned form fields and usage statistics.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, Integer, String, DateTime, UniqueConstraint
from sqlalchemy.orm import declarative_base, sessionmaker

from pipelines.matching.descriptors import FieldDescriptor

Base = declarative_base()


class StoredField(Base):
    """One learned field of a form observed on an origin."""

    __tablename__ = "stored_fields"
    __table_args__ = (
        UniqueConstraint("origin", "form_id", "position", name="uq_stored_field_position"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)
    origin = Column(String, nullable=False, index=True)  # host name
    form_id = Column(String, nullable=False)
    position = Column(Integer, nullable=False)  # order within the form
    field_id = Column(String, nullable=False, default="")
    type = Column(String, nullable=False, default="")
    label = Column(String, nullable=False, default="")
    name = Column(String, nullable=False, default="")
    placeholder = Column(String, nullable=False, default="")
    css_class = Column(String, nullable=False, default="")
    value = Column(String, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    @classmethod
    def from_descriptor(cls, origin: str, form_id: str, position: int, field: FieldDescriptor) -> "StoredField":
        return cls(
            origin=origin,
            form_id=form_id,
            position=position,
            field_id=field.id,
            type=field.type,
            label=field.label,
            name=field.name,
            placeholder=field.placeholder,
            css_class=field.css_class,
            value=field.value,
        )

    def to_descriptor(self) -> FieldDescriptor:
        return FieldDescriptor(
            id=self.field_id or "",
            type=self.type or "",
            label=self.label or "",
            name=self.name or "",
            placeholder=self.placeholder or "",
            css_class=self.css_class or "",
            value=self.value or "",
        )


class Statistic(Base):
    """Named usage counter (forms_detected, forms_filled, fields_learned)."""

    __tablename__ = "statistics"

    key = Column(String, primary_key=True)
    count = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


def _engine(db_path: Path):
    return create_engine(f"sqlite:///{db_path}")


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(_engine(db_path))


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    Session = sessionmaker(bind=_engine(db_path))
    return Session()
