"""Walk a slide's shape tree into flattened ShapeElement models.

The walker reads the slide XML with lxml and visits the children of
``<p:spTree>``. Three node kinds are understood:

    <p:sp>      shape (possibly with a text body)
    <p:pic>     picture
    <p:grpSp>   group, whose children are walked with the same procedure

Group children are flattened depth-first into the slide's element list, so
a shape nested three groups deep appears in document order next to its
top-level siblings. Everything else in the tree (connectors, graphic
frames, alternate content) is ignored.
"""

import logging
from typing import Any, Union

from lxml import etree
from pptx.oxml.ns import qn

from slideops.dsl.schema import (
    CENTIPOINTS_PER_POINT,
    ElementType,
    Position,
    ShapeElement,
    Size,
    Slide,
    TextRun,
    emu_to_inches,
)
from slideops.errors import ParseDegraded

logger = logging.getLogger("slideops.parser")

_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)

_TRUE_VALUES = ("1", "true")


def parse_xml(xml: Union[str, bytes]) -> Any:
    """Parse raw part XML into an lxml element."""
    if isinstance(xml, str):
        xml = xml.encode("utf-8")
    return etree.fromstring(xml, _XML_PARSER)


class ShapeExtractor:
    """Extracts shapes and pictures from slide XML."""

    def extract_slide(self, xml: Union[str, bytes], part_path: str) -> Slide:
        """Extract a Slide from raw slide XML.

        A slide that cannot be parsed at all is returned empty.

        Args:
            xml: Raw slide part content.
            part_path: Zip entry name of the slide.

        Returns:
            Slide with flattened elements.
        """
        try:
            root = parse_xml(xml)
        except etree.XMLSyntaxError as e:
            logger.warning(f"Could not parse {part_path}: {e}")
            return Slide(part_path=part_path)

        shape_tree = root.find(f"{qn('p:cSld')}/{qn('p:spTree')}")
        if shape_tree is None:
            return Slide(part_path=part_path)

        elements: list[ShapeElement] = []
        self.extract_shapes(shape_tree, elements)
        return Slide(part_path=part_path, elements=elements)

    def extract_shapes(self, container: Any, elements: list[ShapeElement]) -> None:
        """Visit a shape-tree container, appending to ``elements``.

        Args:
            container: ``<p:spTree>`` or ``<p:grpSp>`` element.
            elements: Accumulator for the flattened element list.
        """
        for child in container:
            if child.tag == qn("p:grpSp"):
                self.extract_shapes(child, elements)
                continue

            if child.tag == qn("p:sp"):
                extract = self._extract_shape
            elif child.tag == qn("p:pic"):
                extract = self._extract_picture
            else:
                continue

            try:
                elements.append(extract(child))
            except ParseDegraded as e:
                logger.warning(f"Skipping shape: {e}")

    def _extract_shape(self, sp: Any) -> ShapeElement:
        """Extract a ``<p:sp>`` element.

        Raises:
            ParseDegraded: On unexpected structure inside the shape.
        """
        try:
            shape_id, name = self._extract_identity(sp.find(qn("p:nvSpPr")))
            text_runs = self._extract_text_runs(sp.find(qn("p:txBody")))
            position, size = self._extract_geometry(sp.find(qn("p:spPr")))

            return ShapeElement(
                id=shape_id,
                name=name,
                type=ElementType.SHAPE,
                placeholder_type=self._extract_placeholder(sp.find(qn("p:nvSpPr"))),
                position=position,
                size=size,
                text=" ".join(run.text for run in text_runs) if text_runs else None,
                text_runs=text_runs,
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ParseDegraded(f"shape could not be parsed: {e}") from e

    def _extract_picture(self, pic: Any) -> ShapeElement:
        """Extract a ``<p:pic>`` element.

        Raises:
            ParseDegraded: On unexpected structure inside the picture.
        """
        try:
            shape_id, name = self._extract_identity(pic.find(qn("p:nvPicPr")))
            position, size = self._extract_geometry(pic.find(qn("p:spPr")))

            rel_id = None
            blip = pic.find(f"{qn('p:blipFill')}/{qn('a:blip')}")
            if blip is not None:
                rel_id = blip.get(qn("r:embed"))

            return ShapeElement(
                id=shape_id,
                name=name,
                type=ElementType.PICTURE,
                position=position,
                size=size,
                image_rel_id=rel_id,
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ParseDegraded(f"picture could not be parsed: {e}") from e

    def _extract_identity(self, nv_props: Any) -> tuple[str | None, str | None]:
        """Read id and name from the ``<p:cNvPr>`` under non-visual properties."""
        if nv_props is None:
            return None, None
        c_nv_pr = nv_props.find(qn("p:cNvPr"))
        if c_nv_pr is None:
            return None, None
        return c_nv_pr.get("id"), c_nv_pr.get("name")

    def _extract_placeholder(self, nv_sp_pr: Any) -> str | None:
        """Read the placeholder role, defaulting to ``body`` for untyped placeholders."""
        if nv_sp_pr is None:
            return None
        ph = nv_sp_pr.find(f"{qn('p:nvPr')}/{qn('p:ph')}")
        if ph is None:
            return None
        return ph.get("type") or "body"

    def _extract_geometry(self, sp_pr: Any) -> tuple[Position | None, Size | None]:
        """Read offset and extent from ``<a:xfrm>``, converted to inches.

        XML structure example:
            <a:xfrm>
                <a:off x="914400" y="914400"/>
                <a:ext cx="2743200" cy="914400"/>
            </a:xfrm>
        """
        if sp_pr is None:
            return None, None
        xfrm = sp_pr.find(qn("a:xfrm"))
        if xfrm is None:
            return None, None

        position = None
        off = xfrm.find(qn("a:off"))
        if off is not None:
            x = _int_attr(off, "x")
            y = _int_attr(off, "y")
            if x is not None and y is not None:
                position = Position(x=emu_to_inches(x), y=emu_to_inches(y))

        size = None
        ext = xfrm.find(qn("a:ext"))
        if ext is not None:
            cx = _int_attr(ext, "cx")
            cy = _int_attr(ext, "cy")
            if cx is not None and cy is not None:
                size = Size(width=emu_to_inches(cx), height=emu_to_inches(cy))

        return position, size

    def _extract_text_runs(self, tx_body: Any) -> list[TextRun]:
        """Collect non-empty runs from every paragraph, in order."""
        if tx_body is None:
            return []

        runs: list[TextRun] = []
        for paragraph in tx_body.iterfind(qn("a:p")):
            for run in paragraph.iterfind(qn("a:r")):
                t = run.find(qn("a:t"))
                if t is None or not t.text:
                    continue
                runs.append(self._extract_run(t.text, run.find(qn("a:rPr"))))
        return runs

    def _extract_run(self, text: str, r_pr: Any) -> TextRun:
        """Build a TextRun from run text and its ``<a:rPr>``."""
        if r_pr is None:
            return TextRun(text=text)

        font_size_pt = None
        sz = _int_attr(r_pr, "sz")
        if sz is not None:
            font_size_pt = sz / CENTIPOINTS_PER_POINT

        font_family = None
        latin = r_pr.find(qn("a:latin"))
        if latin is not None:
            font_family = latin.get("typeface")

        color_hex = None
        srgb = r_pr.find(f"{qn('a:solidFill')}/{qn('a:srgbClr')}")
        if srgb is not None and srgb.get("val"):
            color_hex = f"#{srgb.get('val').upper()}"

        return TextRun(
            text=text,
            bold=r_pr.get("b") in _TRUE_VALUES,
            italic=r_pr.get("i") in _TRUE_VALUES,
            font_size_pt=font_size_pt,
            font_family=font_family,
            color_hex=color_hex,
        )


def _int_attr(element: Any, name: str) -> int | None:
    """Read an integer attribute, None when absent or malformed."""
    value = element.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
