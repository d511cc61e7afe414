"""slideops - read model and format-preserving edit engine for PPTX slides."""

from slideops.dsl.operations import Operation, OperationKind, OperationPlan, parse_operation_plan
from slideops.errors import (
    InvalidOperationPlan,
    PackageCorrupt,
    ParseDegraded,
    PartMissing,
    SlideOpsError,
    UnknownOperationKind,
)
from slideops.pipeline import EditResult, SlideEditor

__version__ = "0.1.0"

__all__ = [
    "EditResult",
    "InvalidOperationPlan",
    "Operation",
    "OperationKind",
    "OperationPlan",
    "PackageCorrupt",
    "ParseDegraded",
    "PartMissing",
    "SlideEditor",
    "SlideOpsError",
    "UnknownOperationKind",
    "parse_operation_plan",
]
