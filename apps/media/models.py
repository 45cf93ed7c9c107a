"""
Media database models.

Uploaded files live on disk; this table records what was stored and where.
"""
import os

from sqlalchemy import Column, Integer, String, DateTime, func

from apps.shared.database import Base

MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "/uploads")


class Media(Base):
    """One uploaded file. Section content references it by URL only."""
    __tablename__ = "media"

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False, unique=True)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)
    path = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    @property
    def url(self) -> str:
        return f"{MEDIA_BASE_URL.rstrip('/')}/{self.filename}"

    def to_dict(self) -> dict:
        """Convert media record to dictionary for API responses."""
        return {
            "id": self.id,
            "filename": self.filename,
            "original_name": self.original_name,
            "mime_type": self.mime_type,
            "size": self.size,
            "url": self.url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
