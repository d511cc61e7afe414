"""Pydantic v2 models for the slide document read model.

These models are a read-only view of a presentation package. They are
rebuilt on every parse and never serialized back into the package; edits go
through the operation model and the transform engine instead.

Geometry is reported in inches and font sizes in points. Inside the XML the
same quantities are EMUs (English Metric Units, 914400 per inch) and
hundredths of a point.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Constants
EMU_PER_INCH = 914400
CENTIPOINTS_PER_POINT = 100

# Theme colour scheme slots, in the order they appear in <a:clrScheme>
COLOR_SCHEME_SLOTS = (
    "dk1",
    "lt1",
    "dk2",
    "lt2",
    "accent1",
    "accent2",
    "accent3",
    "accent4",
    "accent5",
    "accent6",
    "hlink",
    "folHlink",
)


def emu_to_inches(value: int) -> float:
    """Convert EMUs to inches."""
    return value / EMU_PER_INCH


def inches_to_emu(value: float) -> int:
    """Convert inches to EMUs, rounded to the nearest unit."""
    return int(round(value * EMU_PER_INCH))


class ElementType(str, Enum):
    """Kinds of element reported in a slide's flattened element list."""

    SHAPE = "shape"
    PICTURE = "picture"


# ============================================================================
# Geometry Models
# ============================================================================


class Position(BaseModel):
    """Top-left offset in inches."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(description="Left position in inches")
    y: float = Field(description="Top position in inches")


class Size(BaseModel):
    """Extent in inches."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(description="Width in inches")
    height: float = Field(description="Height in inches")


# ============================================================================
# Text Models
# ============================================================================


class TextRun(BaseModel):
    """A run of text with consistent formatting.

    Only directly declared formatting is captured; values inherited from the
    layout, master or theme are left as ``None``.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="The text content")
    bold: bool = Field(default=False)
    italic: bool = Field(default=False)
    font_size_pt: Optional[float] = Field(default=None, description="Font size in points")
    font_family: Optional[str] = Field(default=None, description="Latin typeface")
    color_hex: Optional[str] = Field(default=None, description="Solid fill colour (#RRGGBB)")


# ============================================================================
# Shape & Slide Models
# ============================================================================


class ShapeElement(BaseModel):
    """A single shape or picture from the slide's shape tree."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(description="Shape identifier from <p:cNvPr id>")
    name: Optional[str] = Field(description="Shape name from <p:cNvPr name>")
    type: ElementType = Field(default=ElementType.SHAPE)
    placeholder_type: Optional[str] = Field(
        default=None,
        description="Placeholder role (title, body, ...) if the shape is a placeholder",
    )
    position: Optional[Position] = Field(default=None)
    size: Optional[Size] = Field(default=None)
    text: Optional[str] = Field(default=None, description="Run texts joined with single spaces")
    text_runs: list[TextRun] = Field(default_factory=list)
    image_rel_id: Optional[str] = Field(
        default=None,
        description="Relationship id of the embedded image (pictures only)",
    )


class Slide(BaseModel):
    """Flattened view of one slide part."""

    model_config = ConfigDict(frozen=True)

    part_path: str = Field(description="Zip entry the slide was read from")
    elements: list[ShapeElement] = Field(default_factory=list)

    @property
    def text_elements(self) -> list[ShapeElement]:
        """Elements that carry text, in document order."""
        return [element for element in self.elements if element.text]

    @property
    def shapes(self) -> list[ShapeElement]:
        """Shape elements (pictures excluded), in document order."""
        return [element for element in self.elements if element.type == ElementType.SHAPE]

    def find_by_text(self, text: str) -> list[ShapeElement]:
        """Find elements owning a run whose text equals ``text``."""
        return [
            element
            for element in self.elements
            if any(run.text == text for run in element.text_runs)
        ]


# ============================================================================
# Theme & Package Models
# ============================================================================


class FontScheme(BaseModel):
    """Major (heading) and minor (body) theme typefaces."""

    model_config = ConfigDict(frozen=True)

    major: Optional[str] = None
    minor: Optional[str] = None


class Theme(BaseModel):
    """Theme colour scheme and font scheme."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, description="Theme name")
    color_scheme: dict[str, str] = Field(
        default_factory=dict,
        description="Slot name (dk1, lt1, ..., folHlink) to #RRGGBB",
    )
    font_scheme: FontScheme = Field(default_factory=FontScheme)


class ImageRef(BaseModel):
    """A media part stored in the package."""

    model_config = ConfigDict(frozen=True)

    part_path: str
    file_name: str
    extension: str


class ParsedPresentation(BaseModel):
    """Everything the read side extracts from a package."""

    model_config = ConfigDict(frozen=True)

    slides: list[Slide] = Field(default_factory=list)
    theme: Optional[Theme] = None
    images: list[ImageRef] = Field(default_factory=list)

    @property
    def slide_count(self) -> int:
        """Number of slide parts found."""
        return len(self.slides)

    @property
    def first_slide(self) -> Optional[Slide]:
        """The editable slide, if any."""
        return self.slides[0] if self.slides else None
