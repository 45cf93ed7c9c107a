"""
Section and site-settings repositories.

All reads go to the database; nothing is cached between calls. Sections are
returned as plain dicts with content/settings already deserialized.
"""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from apps.shared.database import transaction
from apps.shared.upsert import atomic_upsert
from apps.portfolio.exceptions import NotFound, ValidationError, storage_errors
from apps.portfolio.models import (
    Section,
    SiteSetting,
    SECTION_TYPES,
    NAME_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    utcnow,
)
from apps.portfolio.ordering import ordered, next_sort_order
from apps.portfolio.serialization import dump_blob

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "type",
    "title",
    "content",
    "custom_html",
    "custom_css",
    "custom_js",
    "is_visible",
    "settings",
)

TEXT_FIELDS = ("title", "custom_html", "custom_css", "custom_js")
BLOB_FIELDS = ("content", "settings")

# Column widths; custom_* are unbounded Text
MAX_LENGTHS = {"name": NAME_MAX_LENGTH, "title": TITLE_MAX_LENGTH}


def _check_length(field: str, value: str) -> str:
    limit = MAX_LENGTHS.get(field)
    if limit is not None and len(value) > limit:
        raise ValidationError(f"{field} must be at most {limit} characters")
    return value


def _require_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name and type are required")
    return _check_length("name", name)


def _require_type(section_type) -> str:
    if not isinstance(section_type, str) or not section_type:
        raise ValidationError("Name and type are required")
    if section_type not in SECTION_TYPES:
        raise ValidationError(
            f"Unknown section type '{section_type}'. Allowed: {', '.join(SECTION_TYPES)}"
        )
    return section_type


def _text(field: str, value) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return _check_length(field, value)


def _visible(value) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("is_visible must be true or false")
    return value


def _column_value(field: str, value):
    """Validate one updatable field and convert it to its stored form."""
    if field == "name":
        return _require_name(value)
    if field == "type":
        return _require_type(value)
    if field == "is_visible":
        return _visible(value)
    if field in BLOB_FIELDS:
        return dump_blob(value, field)
    return _text(field, value)


class SectionRepository:
    """CRUD over the sections table."""

    def __init__(self, db: Session):
        self.db = db

    def _row(self, section_id) -> Section:
        section = self.db.query(Section).filter(Section.id == section_id).first()
        if not section:
            raise NotFound(f"Section {section_id} not found")
        return section

    def list_public(self) -> list[dict]:
        """Visible sections in page order."""
        with storage_errors(self.db, "List sections"):
            sections = ordered(
                self.db.query(Section).filter(Section.is_visible == True)  # noqa: E712
            ).all()
            return [section.to_dict() for section in sections]

    def list_all(self) -> list[dict]:
        """Every section, hidden ones included, in page order."""
        with storage_errors(self.db, "List sections"):
            return [section.to_dict() for section in ordered(self.db.query(Section)).all()]

    def get(self, section_id) -> dict:
        with storage_errors(self.db, "Fetch section"):
            return self._row(section_id).to_dict()

    def create(
        self,
        name: str,
        type: str,
        title: Optional[str] = "",
        content: Optional[dict] = None,
        custom_html: Optional[str] = "",
        custom_css: Optional[str] = "",
        custom_js: Optional[str] = "",
        is_visible: Optional[bool] = True,
        settings: Optional[dict] = None,
    ) -> dict:
        """
        Append a new section at the end of the page.

        name and type are required; everything else falls back to an empty
        value (visible by default).
        """
        section = Section(
            name=_require_name(name),
            type=_require_type(type),
            title=_text("title", title),
            content=dump_blob(content, "content"),
            custom_html=_text("custom_html", custom_html),
            custom_css=_text("custom_css", custom_css),
            custom_js=_text("custom_js", custom_js),
            is_visible=True if is_visible is None else _visible(is_visible),
            settings=dump_blob(settings, "settings"),
        )

        with storage_errors(self.db, "Create section"):
            with transaction(self.db):
                section.sort_order = next_sort_order(self.db)
                self.db.add(section)
            self.db.refresh(section)
            logger.info(
                "Created section %s (%s) at position %s", section.id, section.type, section.sort_order
            )
            return section.to_dict()

    def update(self, section_id, **fields: Any) -> dict:
        """
        Replace the given fields on a section.

        Fields not passed keep their value. content and settings are replaced
        wholesale, never merged.
        """
        unknown = sorted(set(fields) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

        values = {field: _column_value(field, value) for field, value in fields.items()}

        with storage_errors(self.db, "Update section"):
            with transaction(self.db):
                section = self._row(section_id)
                for field, value in values.items():
                    setattr(section, field, value)
                section.updated_at = utcnow()
            self.db.refresh(section)
            logger.info("Updated section %s (%s)", section.id, ", ".join(values) or "touch")
            return section.to_dict()

    def delete(self, section_id) -> None:
        """Remove a section. Other sections keep their sort_order."""
        with storage_errors(self.db, "Delete section"), transaction(self.db):
            self.db.delete(self._row(section_id))
        logger.info("Deleted section %s", section_id)

    def count(self) -> int:
        with storage_errors(self.db, "Count sections"):
            return self.db.query(Section).count()


def setting_value(key, value) -> Optional[str]:
    """Settings are strings; numbers and booleans are stored in their text form."""
    if not isinstance(key, str) or not key:
        raise ValidationError("Setting keys must be non-empty strings")
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValidationError(f"Setting '{key}' must be a string")


class SiteSettingsRepository:
    """Key/value site settings with upsert semantics."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> dict[str, Optional[str]]:
        with storage_errors(self.db, "Fetch settings"):
            return {setting.key: setting.value for setting in self.db.query(SiteSetting).all()}

    def update(self, values: dict) -> dict[str, Optional[str]]:
        """Upsert every key in ``values`` in one transaction; returns all settings."""
        if not isinstance(values, dict):
            raise ValidationError("Settings must be an object of key/value pairs")
        cleaned = {key: setting_value(key, value) for key, value in values.items()}

        with storage_errors(self.db, "Update settings"), transaction(self.db):
            for key, value in cleaned.items():
                atomic_upsert(
                    db=self.db,
                    model=SiteSetting,
                    unique_field="key",
                    unique_value=key,
                    update_data={"value": value},
                )
        logger.info("Updated settings: %s", ", ".join(cleaned) or "none")
        return self.get_all()
