"""
Atomic upsert utilities using ON CONFLICT

Replaces the unsafe check-then-insert pattern with a single
INSERT ... ON CONFLICT DO UPDATE statement. Both PostgreSQL and SQLite
(3.24+) support the clause, so the dialect-specific insert construct is
picked from the session's bind.

Usage:
    from apps.shared.upsert import atomic_upsert

    # Replace this unsafe pattern:
    existing = db.query(Model).filter(Model.key == value).first()
    if existing:
        existing.value = new_value
    else:
        db.add(Model(key=value, value=new_value))
    db.commit()

    # With this atomic operation:
    atomic_upsert(db, Model, 'key', value, {'value': new_value})
"""

from typing import Type, Any, Dict

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from apps.shared.database import Base


def _insert_for(db: Session):
    """Return the dialect-specific insert() that knows about ON CONFLICT."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise ValueError(f"Atomic upsert is not supported on dialect '{dialect}'")


def atomic_upsert(
    db: Session,
    model: Type[Base],
    unique_field: str,
    unique_value: Any,
    update_data: Dict[str, Any],
    auto_update_timestamp: bool = True,
    timestamp_field: str = 'updated_at'
) -> None:
    """
    Perform an atomic upsert on a table with a unique constraint.

    Args:
        db: SQLAlchemy database session
        model: SQLAlchemy model class (e.g., SiteSetting)
        unique_field: Name of the unique field (e.g., 'key')
        unique_value: Value for the unique field (e.g., 'site_title')
        update_data: Dictionary of fields to set (e.g., {'value': 'My Portfolio'})
        auto_update_timestamp: If True, automatically update timestamp_field to NOW()
        timestamp_field: Name of timestamp field to auto-update (default: 'updated_at')

    Example:
        atomic_upsert(
            db=db,
            model=SiteSetting,
            unique_field='key',
            unique_value='primary_color',
            update_data={'value': '#3B82F6'}
        )

    The statement is executed but not committed; the caller owns the
    transaction.

    Raises:
        ValueError: If model doesn't have required unique field or timestamp field
    """
    # Validate model has the unique field
    if not hasattr(model, unique_field):
        raise ValueError(f"Model {model.__name__} does not have field '{unique_field}'")

    # Validate timestamp field exists if auto-update is enabled
    if auto_update_timestamp and not hasattr(model, timestamp_field):
        raise ValueError(f"Model {model.__name__} does not have field '{timestamp_field}'")

    insert = _insert_for(db)

    # Build values dictionary for INSERT
    insert_values = {unique_field: unique_value, **update_data}
    stmt = insert(model).values(**insert_values)

    # Build ON CONFLICT DO UPDATE clause
    update_dict = update_data.copy()
    if auto_update_timestamp:
        update_dict[timestamp_field] = func.now()

    stmt = stmt.on_conflict_do_update(
        index_elements=[unique_field],
        set_=update_dict
    )

    db.execute(stmt)
