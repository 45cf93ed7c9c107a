"""
Section renderer dispatch.

Maps a section's type to the strategy the public page uses for it. A strategy
produces a render context: the section with its fallback heading applied and
its content normalized to the type's shape. HTML itself is the frontend's job.
"""
import logging
from typing import Optional, Type

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from apps.portfolio.content import (
    CONTENT_MODELS,
    ContentModel,
    CustomContent,
)
from apps.portfolio.repository import SectionRepository, SiteSettingsRepository

logger = logging.getLogger(__name__)


class SectionRenderer:
    """Render strategy for one section type."""

    def __init__(self, content_model: Type[ContentModel], default_title: Optional[str]):
        self.content_model = content_model
        self.default_title = default_title

    def normalize_content(self, section: dict) -> dict:
        content = section.get("content") or {}
        try:
            return self.content_model.model_validate(content).model_dump()
        except PydanticValidationError as exc:
            # Content shapes are advisory; render what was stored
            logger.warning(
                "Section %s content does not match the %s shape: %s",
                section.get("id"), section.get("type"), exc.errors()[0].get("msg"),
            )
            return dict(content)

    def render(self, section: dict) -> dict:
        return {
            "id": section["id"],
            "name": section["name"],
            "type": section["type"],
            "title": section.get("title") or self.default_title,
            "content": self.normalize_content(section),
            "custom_html": section.get("custom_html", ""),
            "custom_css": section.get("custom_css", ""),
            "custom_js": section.get("custom_js", ""),
            "settings": section.get("settings") or {},
        }


RENDERERS = {
    "hero": SectionRenderer(CONTENT_MODELS["hero"], "Welcome to My Portfolio"),
    "about": SectionRenderer(CONTENT_MODELS["about"], "About Me"),
    "projects": SectionRenderer(CONTENT_MODELS["projects"], "My Projects"),
    "contact": SectionRenderer(CONTENT_MODELS["contact"], "Get In Touch"),
    "custom": SectionRenderer(CustomContent, None),
}


def renderer_for(section_type: str) -> SectionRenderer:
    """Unknown types render like custom sections."""
    return RENDERERS.get(section_type, RENDERERS["custom"])


def render_section(section: dict) -> dict:
    return renderer_for(section["type"]).render(section)


def render_page(db: Session) -> dict:
    """Everything the public page needs: site settings plus visible sections in order."""
    sections = SectionRepository(db).list_public()
    return {
        "settings": SiteSettingsRepository(db).get_all(),
        "sections": [render_section(section) for section in sections],
    }
