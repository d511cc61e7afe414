"""Pytest configuration and fixtures."""

import io
import zipfile
from typing import Callable

import pytest
from pptx import Presentation
from pptx.util import Inches, Pt

from slideops.config import SLIDE_PART, THEME_PART


CONTENT_TYPES_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Default Extension="png" ContentType="image/png"/>'
    '<Default Extension="jpeg" ContentType="image/jpeg"/>'
    "</Types>"
)

# Shapes, in document order:
#   id 2  title placeholder "Hello" at (1in, 1in), 2in x 1in
#   id 3  text box "World" + "R&D" at (3in, 1in)
#   id 4  group
#     id 5  nested group
#       id 6  shape "Nested" without a transform
#     id 7  picture at (5in, 5in)
#   id 8  body placeholder "Hello" without a transform
SLIDE_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<p:sld xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main">
  <p:cSld>
    <p:spTree>
      <p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>
      <p:grpSpPr/>
      <p:sp>
        <p:nvSpPr><p:cNvPr id="2" name="Title 1"/><p:cNvSpPr><a:spLocks noGrp="1"/></p:cNvSpPr><p:nvPr><p:ph type="title"/></p:nvPr></p:nvSpPr>
        <p:spPr><a:xfrm><a:off x="914400" y="914400"/><a:ext cx="1828800" cy="914400"/></a:xfrm></p:spPr>
        <p:txBody><a:bodyPr/><a:lstStyle/><a:p><a:r><a:rPr lang="en-US" sz="2400" b="1"><a:solidFill><a:srgbClr val="1f4e79"/></a:solidFill><a:latin typeface="Georgia"/></a:rPr><a:t>Hello</a:t></a:r></a:p></p:txBody>
      </p:sp>
      <p:sp>
        <p:nvSpPr><p:cNvPr id="3" name="TextBox 2"/><p:cNvSpPr txBox="1"/><p:nvPr/></p:nvSpPr>
        <p:spPr><a:xfrm><a:off x="2743200" y="914400"/><a:ext cx="1828800" cy="914400"/></a:xfrm></p:spPr>
        <p:txBody><a:bodyPr/><a:lstStyle/><a:p><a:r><a:rPr lang="en-US" i="1" sz="1800"/><a:t>World</a:t></a:r><a:r><a:rPr lang="en-US"><a:solidFill><a:schemeClr val="accent1"/></a:solidFill><a:cs typeface="Arial"/></a:rPr><a:t>R&amp;D</a:t></a:r></a:p><a:p><a:endParaRPr lang="en-US" sz="1800"/></a:p></p:txBody>
      </p:sp>
      <p:grpSp>
        <p:nvGrpSpPr><p:cNvPr id="4" name="Group 3"/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>
        <p:grpSpPr/>
        <p:grpSp>
          <p:nvGrpSpPr><p:cNvPr id="5" name="Group 4"/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>
          <p:grpSpPr/>
          <p:sp>
            <p:nvSpPr><p:cNvPr id="6" name="Nested 5"/><p:cNvSpPr/><p:nvPr/></p:nvSpPr>
            <p:spPr/>
            <p:txBody><a:bodyPr/><a:lstStyle/><a:p><a:r><a:rPr lang="en-US"><a:ln w="12700"><a:solidFill><a:srgbClr val="00FF00"/></a:solidFill></a:ln><a:solidFill><a:srgbClr val="FF0000"/></a:solidFill></a:rPr><a:t>Nested</a:t></a:r></a:p></p:txBody>
          </p:sp>
        </p:grpSp>
        <p:pic>
          <p:nvPicPr><p:cNvPr id="7" name="Picture 6"/><p:cNvPicPr/><p:nvPr/></p:nvPicPr>
          <p:blipFill><a:blip r:embed="rId2"/><a:stretch><a:fillRect/></a:stretch></p:blipFill>
          <p:spPr><a:xfrm><a:off x="4572000" y="4572000"/><a:ext cx="914400" cy="914400"/></a:xfrm></p:spPr>
        </p:pic>
      </p:grpSp>
      <p:sp>
        <p:nvSpPr><p:cNvPr id="8" name="Content Placeholder 7"/><p:cNvSpPr/><p:nvPr><p:ph idx="1"/></p:nvPr></p:nvSpPr>
        <p:spPr/>
        <p:txBody><a:bodyPr/><a:lstStyle/><a:p><a:r><a:t>Hello</a:t></a:r></a:p></p:txBody>
      </p:sp>
    </p:spTree>
  </p:cSld>
  <p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>
</p:sld>
"""

THEME_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<a:theme xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" name="Office Theme">
  <a:themeElements>
    <a:clrScheme name="Office">
      <a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>
      <a:lt1><a:sysClr val="window" lastClr="ffffff"/></a:lt1>
      <a:dk2><a:srgbClr val="44546A"/></a:dk2>
      <a:lt2><a:srgbClr val="E7E6E6"/></a:lt2>
      <a:accent1><a:srgbClr val="4472C4"/></a:accent1>
      <a:accent2><a:srgbClr val="ED7D31"/></a:accent2>
      <a:accent3><a:srgbClr val="A5A5A5"/></a:accent3>
      <a:accent4><a:srgbClr val="FFC000"/></a:accent4>
      <a:accent5><a:srgbClr val="5B9BD5"/></a:accent5>
      <a:accent6><a:srgbClr val="70AD47"/></a:accent6>
      <a:hlink><a:srgbClr val="0563C1"/></a:hlink>
      <a:folHlink><a:srgbClr val="954F72"/></a:folHlink>
    </a:clrScheme>
    <a:fontScheme name="Office">
      <a:majorFont><a:latin typeface="Calibri Light"/><a:ea typeface=""/><a:cs typeface=""/></a:majorFont>
      <a:minorFont><a:latin typeface="Calibri"/><a:ea typeface=""/><a:cs typeface=""/></a:minorFont>
    </a:fontScheme>
  </a:themeElements>
</a:theme>
"""

PackageFactory = Callable[..., bytes]


def build_package(parts: dict[str, str | bytes]) -> bytes:
    """Zip the given parts (path to text or bytes) into package bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for path, content in parts.items():
            archive.writestr(path, content)
    return buffer.getvalue()


@pytest.fixture
def slide_xml() -> str:
    """Raw XML of the reference slide."""
    return SLIDE_XML


@pytest.fixture
def theme_xml() -> str:
    """Raw XML of the reference theme."""
    return THEME_XML


@pytest.fixture
def make_package() -> PackageFactory:
    """Factory building a package from the reference parts plus overrides.

    Passing ``None`` for a part removes it.
    """

    def factory(**overrides: str | bytes | None) -> bytes:
        parts: dict[str, str | bytes | None] = {
            "[Content_Types].xml": CONTENT_TYPES_XML,
            SLIDE_PART: SLIDE_XML,
            THEME_PART: THEME_XML,
            "ppt/media/image1.PNG": b"\x89PNG\r\n\x1a\nfake",
            "ppt/media/image2.jpeg": b"\xff\xd8\xff\xe0fake",
        }
        for key, value in overrides.items():
            parts[key] = value
        return build_package({k: v for k, v in parts.items() if v is not None})

    return factory


@pytest.fixture
def sample_package(make_package: PackageFactory) -> bytes:
    """Package bytes with the reference slide, theme and two media parts."""
    return make_package()


@pytest.fixture
def pptx_deck() -> bytes:
    """A real two-slide deck produced by python-pptx.

    Slide 1 has text boxes "Hello" at (1in, 1in) and "World" at (3in, 1in).
    """
    prs = Presentation()
    blank_layout = prs.slide_layouts[6]  # Blank layout

    slide = prs.slides.add_slide(blank_layout)
    for text, left in (("Hello", 1), ("World", 3)):
        box = slide.shapes.add_textbox(Inches(left), Inches(1), Inches(2), Inches(1))
        run = box.text_frame.paragraphs[0].add_run()
        run.text = text
        run.font.size = Pt(24)

    second = prs.slides.add_slide(blank_layout)
    second.shapes.add_textbox(Inches(1), Inches(1), Inches(4), Inches(1)).text_frame.text = "Second"

    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()
