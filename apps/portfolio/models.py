"""
Portfolio database models.

Stores the ordered page sections and the site-wide key/value settings.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, func

from apps.shared.database import Base
from apps.portfolio.serialization import load_blob

SECTION_TYPES = ("hero", "about", "projects", "contact", "custom")
NAME_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 200


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Section(Base):
    """
    One ordered, typed block of portfolio content.

    - content/settings are JSON text; use the *_data properties to read them
    - sort_order is the page position, ties broken by id
    - custom_html/css/js are injected verbatim by the frontend (admin-only input)
    """
    __tablename__ = "sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(TITLE_MAX_LENGTH), default="")
    content = Column(Text)
    custom_html = Column(Text, default="")
    custom_css = Column(Text, default="")
    custom_js = Column(Text, default="")
    is_visible = Column(Boolean, nullable=False, default=True, index=True)
    sort_order = Column(Integer, nullable=False, default=0, index=True)
    settings = Column(Text, default="{}")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def content_data(self) -> dict:
        return load_blob(self.content, "content", self.id)

    @property
    def settings_data(self) -> dict:
        return load_blob(self.settings, "settings", self.id)

    def to_dict(self) -> dict:
        """Convert section to dictionary for API responses and snapshots."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "title": self.title or "",
            "content": self.content_data,
            "custom_html": self.custom_html or "",
            "custom_css": self.custom_css or "",
            "custom_js": self.custom_js or "",
            "is_visible": bool(self.is_visible),
            "sort_order": self.sort_order,
            "settings": self.settings_data,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class SiteSetting(Base):
    """Global key/value configuration (site_title, primary_color, ...)."""
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(Text)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
