"""
Whole-site backup and restore.

A snapshot is a plain JSON-compatible dict:

    {
        "sections": [...],          # every section, page order
        "settings": {"key": "value", ...},
        "exported_at": "2026-01-01T12:00:00+00:00",
        "version": "1.0.0"
    }

Importing a snapshot replaces ALL sections and settings in one transaction.
Section ids are not carried over; the database assigns new ones.
"""
import logging
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from apps.shared.database import transaction
from apps.portfolio.exceptions import InvalidFormat, ValidationError, storage_errors
from apps.portfolio.models import Section, SiteSetting
from apps.portfolio.repository import SectionRepository, SiteSettingsRepository, setting_value
from apps.portfolio.schemas import SnapshotSection
from apps.portfolio.serialization import dump_blob

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0.0"
SUPPORTED_MAJOR_VERSION = 1

EXPORT_FILENAME = "portfolio-backup.json"


def export_snapshot(db: Session) -> dict:
    """Read every section and setting into a snapshot. Pure read."""
    return {
        "sections": SectionRepository(db).list_all(),
        "settings": SiteSettingsRepository(db).get_all(),
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "version": SNAPSHOT_VERSION,
    }


def _check_version(version) -> None:
    if version is None:
        return
    try:
        major = int(str(version).split(".", 1)[0])
    except ValueError:
        raise InvalidFormat(f"Unrecognized snapshot version: {version!r}") from None
    if major > SUPPORTED_MAJOR_VERSION:
        raise InvalidFormat(
            f"Snapshot version {version} is newer than supported ({SNAPSHOT_VERSION})"
        )


def _parse_sections(entries: list) -> list[Section]:
    rows = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidFormat(f"sections[{index}] must be an object")
        try:
            parsed = SnapshotSection.model_validate(entry)
        except PydanticValidationError as exc:
            problem = exc.errors()[0]
            location = ".".join(str(part) for part in problem["loc"])
            raise InvalidFormat(f"sections[{index}].{location}: {problem['msg']}") from None

        rows.append(Section(
            name=parsed.name,
            type=parsed.type,
            title=parsed.title,
            content=dump_blob(parsed.content, "content"),
            custom_html=parsed.custom_html,
            custom_css=parsed.custom_css,
            custom_js=parsed.custom_js,
            is_visible=parsed.is_visible,
            sort_order=parsed.sort_order if parsed.sort_order is not None else index + 1,
            settings=dump_blob(parsed.settings, "settings"),
        ))
    return rows


def _parse_settings(settings: dict) -> list[SiteSetting]:
    try:
        return [
            SiteSetting(key=key, value=setting_value(key, value))
            for key, value in settings.items()
        ]
    except ValidationError as exc:
        raise InvalidFormat(f"settings: {exc.message}") from None


def import_snapshot(db: Session, snapshot) -> dict:
    """
    Replace all sections and settings with the snapshot's contents.

    The snapshot is fully validated before anything is deleted. Delete and
    reinsert run in one transaction, so a failure part-way leaves the
    previous data untouched.

    Returns counts of imported sections and settings.
    """
    if not isinstance(snapshot, dict):
        raise InvalidFormat("Invalid import data format")
    sections = snapshot.get("sections")
    settings = snapshot.get("settings")
    if not isinstance(sections, list) or not isinstance(settings, dict):
        raise InvalidFormat("Invalid import data format: 'sections' list and 'settings' object are required")
    _check_version(snapshot.get("version"))

    section_rows = _parse_sections(sections)
    setting_rows = _parse_settings(settings)

    with storage_errors(db, "Snapshot import"), transaction(db):
        db.query(Section).delete()
        db.query(SiteSetting).delete()
        db.flush()
        db.add_all(section_rows)
        db.add_all(setting_rows)

    logger.info(
        "Imported snapshot: %d sections, %d settings", len(section_rows), len(setting_rows)
    )
    return {"sections": len(section_rows), "settings": len(setting_rows)}
