"""RefinementContext — what the judge and refiner know about the project.

The refinement loop treats this as opaque and only passes it through to the
ports.
"""

from pydantic import BaseModel, Field


class RepositoryInfo(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    description: str = ""
    language: str = ""
    topics: list[str] = Field(default_factory=list)


class ProjectAnalysis(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    description: str = ""
    project_type: str = "library"
    audience: str = "developers"
    style: str = "professional"


class ColorPalette(BaseModel, frozen=True):
    primary: str
    secondary: str
    accent: str
    background: str
    text: str


class Typography(BaseModel, frozen=True):
    heading_font: str = "Inter"
    body_font: str = "Inter"


class DesignSystem(BaseModel, frozen=True):
    colors: ColorPalette
    typography: Typography = Field(default_factory=Typography)
    layout: str = "hero-centered"


class RefinementContext(BaseModel, frozen=True):
    """Repository facts, project analysis, and design tokens for one page."""

    repository: RepositoryInfo
    analysis: ProjectAnalysis
    design: DesignSystem
