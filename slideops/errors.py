"""Exception types raised by slideops.

Only package-level failures (``PackageCorrupt``, ``PartMissing``) propagate
to callers. ``ParseDegraded`` and ``UnknownOperationKind`` are raised and
caught internally so that content problems degrade to null fields or no-op
operations.
"""


class SlideOpsError(Exception):
    """Base class for all slideops errors."""


class PackageCorrupt(SlideOpsError):
    """The input bytes are not a readable zip container."""


class PartMissing(SlideOpsError):
    """A required part is absent from the package."""

    def __init__(self, path: str):
        super().__init__(f"Required part not found in package: {path}")
        self.path = path


class ParseDegraded(SlideOpsError):
    """A shape or theme could not be parsed; the caller continues without it."""


class UnknownOperationKind(SlideOpsError):
    """An operation kind the transform engine does not implement."""

    def __init__(self, kind: str):
        super().__init__(f"Unknown operation kind: {kind!r}")
        self.kind = kind


class InvalidOperationPlan(SlideOpsError):
    """An operation plan could not be decoded as JSON."""
