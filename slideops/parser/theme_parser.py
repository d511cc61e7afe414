"""Extract the colour scheme and font scheme from a theme part.

Parses <a:clrScheme> and <a:fontScheme> from ``ppt/theme/theme1.xml``.
Only the twelve scheme slots are read; colours are reported as ``#RRGGBB``.
"""

import logging
from typing import Any

from lxml import etree
from pptx.oxml.ns import qn

from slideops.config import THEME_PART
from slideops.dsl.schema import COLOR_SCHEME_SLOTS, FontScheme, Theme
from slideops.errors import ParseDegraded
from slideops.package.loader import SlidePackage
from slideops.parser.shape_extractor import parse_xml

logger = logging.getLogger("slideops.parser")


class ThemeParser:
    """Extracts the theme from a presentation package."""

    def extract_theme(self, package: SlidePackage, part_path: str = THEME_PART) -> Theme | None:
        """Extract the theme, if the package has one.

        Args:
            package: The loaded package.
            part_path: Theme part to read.

        Returns:
            Theme, or None when the part is absent or cannot be parsed.
        """
        if not package.has_part(part_path):
            return None

        try:
            return self.parse_theme(package.read_bytes(part_path))
        except ParseDegraded as e:
            logger.warning(f"Ignoring theme {part_path}: {e}")
            return None

    def parse_theme(self, xml: str | bytes) -> Theme:
        """Parse raw theme XML.

        XML structure example:
            <a:theme name="Office Theme">
              <a:themeElements>
                <a:clrScheme name="Office">
                  <a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>
                  <a:accent1><a:srgbClr val="4472C4"/></a:accent1>
                  ...
                </a:clrScheme>
                <a:fontScheme name="Office">
                  <a:majorFont><a:latin typeface="Calibri Light"/></a:majorFont>
                  <a:minorFont><a:latin typeface="Calibri"/></a:minorFont>
                </a:fontScheme>
              </a:themeElements>
            </a:theme>

        Raises:
            ParseDegraded: If the XML is malformed.
        """
        try:
            root = parse_xml(xml)
        except etree.XMLSyntaxError as e:
            raise ParseDegraded(f"theme XML is malformed: {e}") from e

        try:
            elements = root.find(qn("a:themeElements"))
            return Theme(
                name=root.get("name"),
                color_scheme=self._extract_colors(elements),
                font_scheme=self._extract_fonts(elements),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ParseDegraded(f"theme could not be parsed: {e}") from e

    def _extract_colors(self, theme_elements: Any) -> dict[str, str]:
        colors: dict[str, str] = {}
        if theme_elements is None:
            return colors
        clr_scheme = theme_elements.find(qn("a:clrScheme"))
        if clr_scheme is None:
            return colors

        for slot in COLOR_SCHEME_SLOTS:
            slot_elem = clr_scheme.find(qn(f"a:{slot}"))
            if slot_elem is None:
                continue
            hex_color = self._extract_color_value(slot_elem)
            if hex_color:
                colors[slot] = hex_color
        return colors

    def _extract_color_value(self, slot_elem: Any) -> str | None:
        """Read a slot's colour.

        - <a:srgbClr val="RRGGBB"/>                  direct RGB
        - <a:sysClr val="windowText" lastClr="RRGGBB"/>  system colour, last rendered value
        """
        srgb = slot_elem.find(qn("a:srgbClr"))
        if srgb is not None and srgb.get("val"):
            return f"#{srgb.get('val').upper()}"

        sys_clr = slot_elem.find(qn("a:sysClr"))
        if sys_clr is not None and sys_clr.get("lastClr"):
            return f"#{sys_clr.get('lastClr').upper()}"

        return None

    def _extract_fonts(self, theme_elements: Any) -> FontScheme:
        if theme_elements is None:
            return FontScheme()
        font_scheme = theme_elements.find(qn("a:fontScheme"))
        if font_scheme is None:
            return FontScheme()

        def typeface(kind: str) -> str | None:
            latin = font_scheme.find(f"{qn(kind)}/{qn('a:latin')}")
            if latin is None:
                return None
            return latin.get("typeface") or None

        return FontScheme(major=typeface("a:majorFont"), minor=typeface("a:minorFont"))
