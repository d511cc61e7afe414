"""Apply declarative operations to raw slide XML text.

The engine never builds a DOM. Each operation takes the current serialized
slide and returns a new one in which only the matched spans differ, so
attribute order, namespace declarations and whitespace elsewhere survive
untouched.

Operations in a list are applied strictly in order and each one sees the
previous one's output. An operation that matches nothing returns its input
unchanged; this is not an error.

Formatting operations (``color_change``, ``font_change``, ``size_change``)
ignore their target and rewrite the whole slide.
"""

import logging
import re
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from slideops.config import SLIDE_PART, get_settings
from slideops.dsl.operations import (
    ColorChanges,
    FontChanges,
    Operation,
    OperationKind,
    ShapeCreateChanges,
    SizeChanges,
    TextEditChanges,
    TextTarget,
    TranslateChanges,
    is_hex_color,
    normalize_operations,
)
from slideops.dsl.schema import CENTIPOINTS_PER_POINT
from slideops.errors import UnknownOperationKind
from slideops.package.loader import SlidePackage
from slideops.transform.shape_builder import TextBoxBuilder, next_shape_id
from slideops.transform.xml_text import (
    contains_text_leaf,
    iter_element_spans,
    replace_child_elements,
    replace_text_leaves,
    set_attribute,
)

logger = logging.getLogger("slideops.transform")

# Run-level formatting nodes rewritten by the formatting operations
RUN_PROPERTY_TAGS = ("a:rPr", "a:endParaRPr")

_RUN_PROPERTIES = re.compile(
    r"(<(a:rPr|a:endParaRPr)(?=[\s>])[^>]*?(?<!/)>)(.*?)(</\2>)",
    re.DOTALL,
)

SHAPE_TREE_CLOSE = "</p:spTree>"


class TransformEngine:
    """Applies operations to serialized slide XML."""

    def __init__(self, default_font_family: str | None = None) -> None:
        """Initialize the transform engine.

        Args:
            default_font_family: Typeface for created shapes that name none.
                Defaults to the DEFAULT_FONT_FAMILY setting.
        """
        self.default_font_family = default_font_family or get_settings().default_font_family
        self.text_box_builder = TextBoxBuilder()
        self._handlers: dict[OperationKind, Callable[[str, Operation], str]] = {
            OperationKind.TEXT_EDIT: self._apply_text_edit,
            OperationKind.TRANSLATE: self._apply_translate,
            OperationKind.COLOR_CHANGE: self._apply_color_change,
            OperationKind.FONT_CHANGE: self._apply_font_change,
            OperationKind.SIZE_CHANGE: self._apply_size_change,
            OperationKind.SHAPE_CREATE: self._apply_shape_create,
            OperationKind.SHAPE_DELETE: self._apply_shape_delete,
        }

    def apply(self, xml: str, operations: Iterable[Operation | Mapping[str, Any]]) -> str:
        """Apply operations in order.

        Args:
            xml: Serialized slide XML.
            operations: Operations or raw operation dicts (normalized here).

        Returns:
            The transformed XML.
        """
        result = xml
        for raw_operation in operations:
            try:
                [operation] = normalize_operations([raw_operation])
            except ValidationError as e:
                logger.warning(f"Skipping malformed operation: {e}")
                continue
            result = self.apply_operation(result, operation)
        return result

    def apply_operation(self, xml: str, operation: Operation) -> str:
        """Apply one operation.

        Unknown kinds and invalid payloads leave the XML unchanged.

        Args:
            xml: Serialized slide XML.
            operation: The operation to apply.

        Returns:
            The transformed XML.
        """
        try:
            handler = self._handler_for(operation)
        except UnknownOperationKind as e:
            logger.warning(f"Skipping operation: {e}")
            return xml

        try:
            return handler(xml, operation)
        except ValidationError as e:
            logger.warning(f"Skipping {operation.kind} with invalid payload: {e}")
            return xml

    def apply_to_package(
        self,
        package: SlidePackage,
        operations: Iterable[Operation | Mapping[str, Any]],
        part_path: str = SLIDE_PART,
    ) -> str:
        """Apply operations to a part of a loaded package.

        The package itself is not modified.

        Args:
            package: The loaded package.
            operations: Operations to apply.
            part_path: Part to transform.

        Returns:
            The transformed part text.

        Raises:
            PartMissing: If the part is not in the package.
        """
        return self.apply(package.read_text(part_path), operations)

    def _handler_for(self, operation: Operation) -> Callable[[str, Operation], str]:
        kind = operation.known_kind
        if kind is None:
            raise UnknownOperationKind(operation.kind)
        return self._handlers[kind]

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _apply_text_edit(self, xml: str, operation: Operation) -> str:
        original = TextTarget.model_validate(operation.target).original_text
        text = TextEditChanges.model_validate(operation.changes).text
        if not original or not text:
            return xml

        result, count = replace_text_leaves(xml, original, text)
        self._log_matches(operation, count)
        return result

    def _apply_translate(self, xml: str, operation: Operation) -> str:
        translations = TranslateChanges.model_validate(operation.changes).translations

        result = xml
        total = 0
        for original, translated in translations.items():
            if not original:
                continue
            result, count = replace_text_leaves(result, original, translated)
            total += count
        self._log_matches(operation, total)
        return result

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def _apply_color_change(self, xml: str, operation: Operation) -> str:
        color = ColorChanges.model_validate(operation.changes).color
        if not color:
            return xml
        if not is_hex_color(color):
            logger.warning(f"Skipping color_change with invalid color {color!r}")
            return xml

        fill = f'<a:solidFill><a:srgbClr val="{color[1:]}"/></a:solidFill>'
        total = 0

        def recolor(match: re.Match) -> str:
            nonlocal total
            body, count = replace_child_elements(match.group(3), "a:solidFill", lambda _: fill)
            total += count
            return f"{match.group(1)}{body}{match.group(4)}"

        result = _RUN_PROPERTIES.sub(recolor, xml)
        self._log_matches(operation, total)
        return result

    def _apply_font_change(self, xml: str, operation: Operation) -> str:
        font_family = FontChanges.model_validate(operation.changes).font_family
        if not font_family:
            return xml

        result, count = set_attribute("a:latin|a:cs", "typeface", font_family)(xml)
        self._log_matches(operation, count)
        return result

    def _apply_size_change(self, xml: str, operation: Operation) -> str:
        font_size_pt = SizeChanges.model_validate(operation.changes).font_size_pt
        if not font_size_pt:
            return xml

        size = str(int(round(font_size_pt * CENTIPOINTS_PER_POINT)))
        result, count = set_attribute("|".join(RUN_PROPERTY_TAGS), "sz", size)(xml)
        self._log_matches(operation, count)
        return result

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def _apply_shape_create(self, xml: str, operation: Operation) -> str:
        changes = ShapeCreateChanges.model_validate(operation.changes)
        if not changes.text:
            return xml

        insert_at = xml.rfind(SHAPE_TREE_CLOSE)
        if insert_at < 0:
            self._log_matches(operation, 0)
            return xml

        color = changes.color if is_hex_color(changes.color) else "#000000"
        shape_id = next_shape_id(xml)
        fragment = self.text_box_builder.build(
            shape_id=shape_id,
            text=changes.text,
            x=changes.x,
            y=changes.y,
            width=changes.width,
            height=changes.height,
            font_size_pt=changes.font_size_pt,
            font_family=changes.font_family or self.default_font_family,
            color=color,
        )
        logger.debug(f"shape_create inserted shape id={shape_id}")
        return xml[:insert_at] + fragment + xml[insert_at:]

    def _apply_shape_delete(self, xml: str, operation: Operation) -> str:
        original = TextTarget.model_validate(operation.target).original_text
        if not original:
            return xml

        for start, end in iter_element_spans(xml, "p:sp"):
            if contains_text_leaf(xml[start:end], original):
                self._log_matches(operation, 1)
                return xml[:start] + xml[end:]

        self._log_matches(operation, 0)
        return xml

    def _log_matches(self, operation: Operation, count: int) -> None:
        if count:
            logger.debug(f"{operation.kind} rewrote {count} node(s)")
        else:
            logger.debug(f"{operation.kind} matched nothing")
