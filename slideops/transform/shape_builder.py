"""Build serialized ``<p:sp>`` text-box fragments for insertion into a slide."""

import re

from slideops.dsl.schema import CENTIPOINTS_PER_POINT, inches_to_emu
from slideops.transform.xml_text import escape_attr, escape_text

_SHAPE_ID = re.compile(r"<p:cNvPr(?=[\s/>])[^>]*?\sid\s*=\s*[\"'](\d+)[\"']")


def next_shape_id(xml: str) -> int:
    """Return one more than the largest ``<p:cNvPr id>`` in the slide (1 if none)."""
    ids = [int(value) for value in _SHAPE_ID.findall(xml)]
    return max(ids, default=0) + 1


class TextBoxBuilder:
    """Serializes a rectangular text box with one paragraph per text line."""

    def build(
        self,
        shape_id: int,
        text: str,
        x: float,
        y: float,
        width: float,
        height: float,
        font_size_pt: float,
        font_family: str,
        color: str,
    ) -> str:
        """Build a compact ``<p:sp>`` fragment.

        Args:
            shape_id: Identifier for ``<p:cNvPr id>``.
            text: Text; each ``\\n``-separated line becomes a paragraph.
            x: Left offset in inches.
            y: Top offset in inches.
            width: Width in inches.
            height: Height in inches.
            font_size_pt: Font size in points for every run.
            font_family: Latin typeface for every run.
            color: Colour as ``#RRGGBB`` for every run.

        Returns:
            Serialized shape with no insignificant whitespace.
        """
        paragraphs = "".join(
            self._paragraph(line.rstrip("\r"), font_size_pt, font_family, color)
            for line in text.split("\n")
        )
        return (
            "<p:sp>"
            "<p:nvSpPr>"
            f'<p:cNvPr id="{shape_id}" name="TextBox {shape_id}"/>'
            '<p:cNvSpPr txBox="1"/>'
            "<p:nvPr/>"
            "</p:nvSpPr>"
            "<p:spPr>"
            "<a:xfrm>"
            f'<a:off x="{inches_to_emu(x)}" y="{inches_to_emu(y)}"/>'
            f'<a:ext cx="{inches_to_emu(width)}" cy="{inches_to_emu(height)}"/>'
            "</a:xfrm>"
            '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>'
            "<a:noFill/>"
            "</p:spPr>"
            "<p:txBody>"
            '<a:bodyPr wrap="square" rtlCol="0"><a:spAutoFit/></a:bodyPr>'
            "<a:lstStyle/>"
            f"{paragraphs}"
            "</p:txBody>"
            "</p:sp>"
        )

    def _paragraph(self, line: str, font_size_pt: float, font_family: str, color: str) -> str:
        size = int(round(font_size_pt * CENTIPOINTS_PER_POINT))
        return (
            "<a:p><a:r>"
            f'<a:rPr lang="en-US" sz="{size}" dirty="0">'
            f'<a:solidFill><a:srgbClr val="{color.lstrip("#")}"/></a:solidFill>'
            f'<a:latin typeface="{escape_attr(font_family)}"/>'
            "</a:rPr>"
            f"<a:t>{escape_text(line)}</a:t>"
            "</a:r></a:p>"
        )
