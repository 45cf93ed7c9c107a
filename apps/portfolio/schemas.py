"""
Pydantic schemas for the Portfolio API.

Defines request/response models with validation.
"""
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SectionType = Literal["hero", "about", "projects", "contact", "custom"]


class SectionCreate(BaseModel):
    """Schema for creating a new section. Only name and type are required."""
    name: str = Field(..., min_length=1, max_length=100)
    type: SectionType
    title: str = Field("", max_length=200)
    content: dict[str, Any] = Field(default_factory=dict)
    custom_html: str = ""
    custom_css: str = ""
    custom_js: str = ""
    is_visible: bool = True
    settings: dict[str, Any] = Field(default_factory=dict)


class SectionUpdate(BaseModel):
    """Schema for updating a section. All fields optional; sent fields replace stored ones."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[SectionType] = None
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[dict[str, Any]] = None
    custom_html: Optional[str] = None
    custom_css: Optional[str] = None
    custom_js: Optional[str] = None
    is_visible: Optional[bool] = None
    settings: Optional[dict[str, Any]] = None


class SectionResponse(BaseModel):
    """Schema for section responses."""
    id: int
    name: str
    type: str
    title: str
    content: dict[str, Any]
    custom_html: str
    custom_css: str
    custom_js: str
    is_visible: bool
    sort_order: int
    settings: dict[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReorderRequest(BaseModel):
    """
    Full top-to-bottom id sequence for the page.

    The older admin client body ``{"sections": [{"id": 3}, {"id": 1}]}`` is
    accepted too and read as the same id sequence.
    """
    section_ids: list[int]

    @model_validator(mode="before")
    @classmethod
    def accept_section_objects(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "section_ids" in data:
            return data
        if isinstance(data.get("sections"), list):
            return {
                "section_ids": [
                    item.get("id") if isinstance(item, dict) else item
                    for item in data["sections"]
                ]
            }
        return data


class MessageResponse(BaseModel):
    message: str


class ReorderResponse(MessageResponse):
    count: int


class ImportResponse(MessageResponse):
    sections: int
    settings: int


class SnapshotSection(BaseModel):
    """
    One section entry inside a backup snapshot.

    Extra keys (id, timestamps) are ignored: imported sections get fresh ids.
    """
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=100)
    type: SectionType
    title: Optional[str] = Field("", max_length=200)
    content: Optional[dict[str, Any]] = None
    custom_html: Optional[str] = ""
    custom_css: Optional[str] = ""
    custom_js: Optional[str] = ""
    is_visible: bool = True
    sort_order: Optional[int] = None
    settings: Optional[dict[str, Any]] = None

    @field_validator("title", "custom_html", "custom_css", "custom_js")
    @classmethod
    def none_as_empty(cls, value: Optional[str]) -> str:
        return value or ""
