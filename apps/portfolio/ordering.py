"""
Section ordering.

sort_order is a cross-row invariant, so every multi-row change here loads the
affected rows, computes the new positions in memory and writes them back in a
single transaction.
"""
import logging
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from apps.shared.database import transaction, supports_row_locks
from apps.portfolio.exceptions import NotFound, ValidationError, storage_errors
from apps.portfolio.models import Section, utcnow

logger = logging.getLogger(__name__)


def ordered(query):
    """Apply the canonical listing order: sort_order, then id for ties."""
    return query.order_by(Section.sort_order.asc(), Section.id.asc())


def next_sort_order(db: Session) -> int:
    """Position for a newly appended section (1 on an empty table)."""
    current = db.query(func.max(Section.sort_order)).scalar()
    return (current or 0) + 1


def _coerce_ids(section_ids: Iterable) -> list[int]:
    ids = []
    for raw in section_ids:
        if isinstance(raw, bool):
            raise ValidationError(f"Invalid section id: {raw!r}")
        try:
            ids.append(int(raw))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid section id: {raw!r}") from None
    if len(set(ids)) != len(ids):
        raise ValidationError("Section ids in a reorder must be unique")
    return ids


def reorder(db: Session, section_ids: Iterable) -> int:
    """
    Assign sort_order = position + 1 to each id, in sequence order.

    Sections not named in ``section_ids`` keep their sort_order, so callers
    should send the full current id list. Unknown ids fail the whole batch
    with NotFound before anything is written.

    Returns the number of sections repositioned.
    """
    ids = _coerce_ids(section_ids)

    with storage_errors(db, "Reorder sections"), transaction(db):
        query = db.query(Section).filter(Section.id.in_(ids))
        if supports_row_locks(db):
            query = query.with_for_update()
        rows = {section.id: section for section in query.all()}

        missing = [section_id for section_id in ids if section_id not in rows]
        if missing:
            raise NotFound(f"Sections not found: {', '.join(str(m) for m in missing)}")

        now = utcnow()
        for position, section_id in enumerate(ids, start=1):
            section = rows[section_id]
            section.sort_order = position
            section.updated_at = now

    logger.info("Reordered %d sections", len(ids))
    return len(ids)


def compact(db: Session) -> int:
    """
    Renumber every section to 1..N keeping the current listing order.

    Closes the gaps deletes leave behind and resolves duplicate positions.
    Returns the number of sections whose sort_order changed.
    """
    changed = 0
    with storage_errors(db, "Compact section order"), transaction(db):
        query = ordered(db.query(Section))
        if supports_row_locks(db):
            query = query.with_for_update()

        now = utcnow()
        for position, section in enumerate(query.all(), start=1):
            if section.sort_order != position:
                section.sort_order = position
                section.updated_at = now
                changed += 1

    if changed:
        logger.info("Compacted section order, %d sections moved", changed)
    return changed
