"""
Default content for a fresh install.

Run at service startup; never touches a database that already has sections,
and never overwrites an existing setting.
"""
import logging

from sqlalchemy.orm import Session

from apps.shared.database import transaction
from apps.portfolio.exceptions import storage_errors
from apps.portfolio.models import Section, SiteSetting
from apps.portfolio.serialization import dump_blob

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS = [
    {
        "name": "hero",
        "type": "hero",
        "title": "Welcome to My Portfolio",
        "content": {
            "subtitle": "Full Stack Developer & Designer",
            "description": "I create beautiful and functional web applications.",
            "buttonText": "View My Work",
            "buttonLink": "#projects",
        },
    },
    {
        "name": "about",
        "type": "about",
        "title": "About Me",
        "content": {
            "description": (
                "I am a passionate developer with experience in modern web technologies. "
                "I love creating solutions that make a difference."
            ),
            "skills": ["React", "Node.js", "JavaScript", "Python", "SQL"],
        },
    },
    {
        "name": "projects",
        "type": "projects",
        "title": "My Projects",
        "content": {
            "projects": [
                {
                    "title": "Portfolio Builder",
                    "description": "A customizable portfolio website builder",
                    "technologies": ["React", "Node.js", "SQLite"],
                    "image": "",
                    "link": "",
                    "github": "",
                }
            ]
        },
    },
    {
        "name": "contact",
        "type": "contact",
        "title": "Get In Touch",
        "content": {
            "description": "Feel free to reach out for collaborations or just a friendly hello!",
            "email": "your.email@example.com",
            "phone": "+1 (555) 123-4567",
            "social": {
                "github": "https://github.com/yourusername",
                "linkedin": "https://linkedin.com/in/yourusername",
                "twitter": "https://twitter.com/yourusername",
            },
        },
    },
]

DEFAULT_SETTINGS = {
    "site_title": "My Portfolio",
    "site_description": "A customizable portfolio website",
    "theme": "light",
    "primary_color": "#3B82F6",
    "font_family": "Inter",
}


def seed_defaults(db: Session) -> dict:
    """
    Insert the starter sections (only into an empty table) and any missing
    default settings. Returns how many of each were created.
    """
    created = {"sections": 0, "settings": 0}

    with storage_errors(db, "Seed defaults"), transaction(db):
        if db.query(Section).count() == 0:
            for position, section in enumerate(DEFAULT_SECTIONS, start=1):
                db.add(Section(
                    name=section["name"],
                    type=section["type"],
                    title=section["title"],
                    content=dump_blob(section["content"]),
                    sort_order=position,
                    settings=dump_blob({}),
                ))
            created["sections"] = len(DEFAULT_SECTIONS)

        existing = {key for (key,) in db.query(SiteSetting.key).all()}
        for key, value in DEFAULT_SETTINGS.items():
            if key not in existing:
                db.add(SiteSetting(key=key, value=value))
                created["settings"] += 1

    if created["sections"] or created["settings"]:
        logger.info(
            "Seeded %d default sections and %d default settings",
            created["sections"], created["settings"],
        )
    return created
