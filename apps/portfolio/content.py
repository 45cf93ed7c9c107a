"""
Per-type content shapes.

These describe what each section type's ``content`` usually looks like and
fill in render-time defaults. They are advisory: the repository stores any
mapping verbatim and never validates against them.
"""
from pydantic import BaseModel, ConfigDict, Field


class ContentModel(BaseModel):
    # Unknown keys survive normalization
    model_config = ConfigDict(extra="allow")


class HeroContent(ContentModel):
    subtitle: str = ""
    description: str = ""
    buttonText: str = ""
    buttonLink: str = "#projects"
    secondaryButtonText: str = ""
    secondaryButtonLink: str = "#contact"


class AboutContent(ContentModel):
    description: str = ""
    image: str = ""
    skills: list[str] = Field(default_factory=list)


class ProjectItem(ContentModel):
    title: str = ""
    description: str = ""
    image: str = ""
    link: str = ""
    github: str = ""
    technologies: list[str] = Field(default_factory=list)


class ProjectsContent(ContentModel):
    description: str = ""
    projects: list[ProjectItem] = Field(default_factory=list)


class SocialLinks(ContentModel):
    github: str = ""
    linkedin: str = ""
    twitter: str = ""


class ContactContent(ContentModel):
    description: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    social: SocialLinks = Field(default_factory=SocialLinks)


class CustomContent(ContentModel):
    description: str = ""


CONTENT_MODELS = {
    "hero": HeroContent,
    "about": AboutContent,
    "projects": ProjectsContent,
    "contact": ContactContent,
    "custom": CustomContent,
}
