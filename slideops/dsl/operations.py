"""Pydantic v2 models for declarative slide edit operations.

An operation is the wire contract with the instruction-interpretation
collaborator::

    {"kind": "text_edit", "target": {"originalText": "Hello"}, "changes": {"text": "Hi"}}

``Operation`` keeps ``target`` and ``changes`` as plain mappings so that
unknown kinds survive normalization. The typed payload models below are
applied by the transform engine when an operation executes.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from slideops.errors import InvalidOperationPlan

logger = logging.getLogger("slideops.transform")

DEFAULT_EXPLANATION = "Changes will be applied as requested."

_HEX_COLOR = re.compile(r"^#?([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")
_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class OperationKind(str, Enum):
    """Operation kinds the transform engine implements."""

    TEXT_EDIT = "text_edit"
    TRANSLATE = "translate"
    COLOR_CHANGE = "color_change"
    FONT_CHANGE = "font_change"
    SIZE_CHANGE = "size_change"
    SHAPE_CREATE = "shape_create"
    SHAPE_DELETE = "shape_delete"


def normalize_color(value: str) -> str:
    """Normalize a colour to ``#RRGGBB`` with uppercase hex digits.

    Accepts ``RRGGBB``, ``#rrggbb`` and 3-digit shorthand. Values that are not
    hex colours are only prefixed and upper-cased; the engine skips them.

    Args:
        value: Colour as declared by the producer.

    Returns:
        Normalized colour string.
    """
    color = value.strip()
    match = _HEX_COLOR.match(color)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return f"#{digits.upper()}"
    if not color.startswith("#"):
        color = "#" + color
    return color.upper()


def is_hex_color(value: str) -> bool:
    """Check for the normalized ``#RRGGBB`` form."""
    return bool(re.fullmatch(r"#[0-9A-F]{6}", value))


# ============================================================================
# Operation Envelope
# ============================================================================


class Operation(BaseModel):
    """A single declarative edit instruction."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str = Field(
        default=OperationKind.TEXT_EDIT.value,
        validation_alias=AliasChoices("kind", "type"),
        description="Operation kind; unknown kinds are kept and skipped at execution",
    )
    target: dict[str, Any] = Field(default_factory=dict, description="Target selector")
    changes: dict[str, Any] = Field(default_factory=dict, description="Kind-specific payload")

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("kind"):
            data.pop("kind", None)
            if not data.get("type"):
                data.pop("type", None)
                data["kind"] = OperationKind.TEXT_EDIT.value
        for key in ("target", "changes"):
            if data.get(key) is None:
                data[key] = {}
        return data

    @field_validator("kind", mode="before")
    @classmethod
    def _kind_to_str(cls, value: Any) -> Any:
        if isinstance(value, OperationKind):
            return value.value
        return value

    @field_validator("changes")
    @classmethod
    def _normalize_changes(cls, changes: dict[str, Any]) -> dict[str, Any]:
        changes = dict(changes)
        if isinstance(changes.get("color"), str) and changes["color"]:
            changes["color"] = normalize_color(changes["color"])
        if "fontSizePt" not in changes and "fontSize" in changes:
            changes["fontSizePt"] = changes.pop("fontSize")
        return changes

    @property
    def known_kind(self) -> Optional[OperationKind]:
        """The kind as an enum member, or None for unrecognized kinds."""
        try:
            return OperationKind(self.kind)
        except ValueError:
            return None

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the wire field names."""
        return {"kind": self.kind, "target": dict(self.target), "changes": dict(self.changes)}


# ============================================================================
# Typed Payloads
# ============================================================================


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class TextTarget(_Payload):
    """Selector addressing run text by exact literal content."""

    original_text: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("originalText", "identifier"),
    )


class TextEditChanges(_Payload):
    text: Optional[str] = None


class TranslateChanges(_Payload):
    translations: dict[str, str] = Field(default_factory=dict)


class ColorChanges(_Payload):
    color: Optional[str] = None


class FontChanges(_Payload):
    font_family: Optional[str] = Field(default=None, alias="fontFamily")


class SizeChanges(_Payload):
    font_size_pt: Optional[float] = Field(default=None, alias="fontSizePt", gt=0)


class ShapeCreateChanges(_Payload):
    """Payload for shape_create. Geometry in inches, size in points."""

    text: Optional[str] = None
    x: float = 7.0
    y: float = 1.5
    width: float = Field(default=2.0, ge=0)
    height: float = Field(default=4.0, ge=0)
    font_size_pt: float = Field(default=18.0, alias="fontSizePt", gt=0)
    font_family: Optional[str] = Field(default=None, alias="fontFamily")
    color: str = "#000000"

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Explicit nulls fall back to the defaults
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @model_validator(mode="before")
    @classmethod
    def _drop_unusable_size(cls, data: Any) -> Any:
        # A zero or negative size means "not given"
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("fontSizePt", "font_size_pt"):
            value = data.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value <= 0:
                del data[key]
        return data


# ============================================================================
# Operation Plans
# ============================================================================


class OperationPlan(BaseModel):
    """Operations plus a human-readable explanation, as returned by the interpreter."""

    model_config = ConfigDict(frozen=True)

    operations: list[Operation] = Field(default_factory=list)
    explanation: str = DEFAULT_EXPLANATION


def normalize_operations(raw_operations: list[Any]) -> list[Operation]:
    """Normalize raw operation dicts (or Operations) into Operation models."""
    return [
        op if isinstance(op, Operation) else Operation.model_validate(op or {})
        for op in raw_operations
    ]


def parse_operation_plan(response_text: str) -> OperationPlan:
    """Decode an interpreter reply into an OperationPlan.

    The reply may wrap its JSON in a fenced markdown code block. Operations
    that fail validation are logged and left out of the plan.

    Args:
        response_text: Raw reply text.

    Returns:
        OperationPlan with the valid operations.

    Raises:
        InvalidOperationPlan: If the reply is not a JSON object, or its
            ``operations`` or ``explanation`` have the wrong shape.
    """
    json_str = response_text
    fenced = _FENCED_BLOCK.search(response_text)
    if fenced:
        json_str = fenced.group(1).strip()

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise InvalidOperationPlan(f"Failed to parse operation plan as JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise InvalidOperationPlan("Operation plan must be a JSON object")

    raw_operations = parsed.get("operations") or []
    if not isinstance(raw_operations, list):
        raise InvalidOperationPlan("Operation plan 'operations' must be a list")

    operations: list[Operation] = []
    for index, raw_operation in enumerate(raw_operations):
        try:
            operations.extend(normalize_operations([raw_operation]))
        except ValidationError as e:
            logger.warning(f"Skipping malformed operation #{index}: {e}")

    try:
        return OperationPlan(
            operations=operations,
            explanation=parsed.get("explanation") or DEFAULT_EXPLANATION,
        )
    except ValidationError as e:
        raise InvalidOperationPlan(f"Invalid operation plan: {e}") from e
