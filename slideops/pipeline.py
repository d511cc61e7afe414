"""End-to-end slide editing: load, parse, transform, write.

``SlideEditor`` wires the loader, reader, transform engine and writer
together. Interpreting natural-language instructions into operations is not
done here; callers pass operations in (see ``parse_operation_plan`` for
decoding an interpreter's JSON reply).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

from slideops.config import SLIDE_PART
from slideops.dsl.operations import Operation
from slideops.dsl.schema import ParsedPresentation
from slideops.package.loader import PackageLoader, PackageSource, SlidePackage
from slideops.package.writer import PackageWriter, WrittenPackage
from slideops.parser.description import describe_presentation
from slideops.parser.pptx_reader import PPTXReader
from slideops.transform.engine import TransformEngine

logger = logging.getLogger("slideops.pipeline")


@dataclass
class EditResult:
    """Outcome of an edit request."""

    operations: list[Mapping[str, Any] | Operation] = field(default_factory=list)
    output: WrittenPackage | None = None

    @property
    def modified(self) -> bool:
        """Whether a modified package was written."""
        return self.output is not None


class SlideEditor:
    """Parses presentation packages and applies operation lists to them."""

    def __init__(
        self,
        loader: PackageLoader | None = None,
        reader: PPTXReader | None = None,
        engine: TransformEngine | None = None,
        writer: PackageWriter | None = None,
    ) -> None:
        """Initialize the editor.

        Args:
            loader: Package loader.
            reader: Document model reader.
            engine: Transform engine.
            writer: Package writer.
        """
        self.loader = loader or PackageLoader()
        self.reader = reader or PPTXReader()
        self.engine = engine or TransformEngine()
        self.writer = writer or PackageWriter()

    def parse(self, source: PackageSource) -> ParsedPresentation:
        """Load a package and extract its document model."""
        return self.reader.read_package(self._load(source))

    def describe(self, source: Union[PackageSource, ParsedPresentation]) -> str:
        """Summarize a package (or an already parsed presentation) as text."""
        if not isinstance(source, ParsedPresentation):
            source = self.parse(source)
        return describe_presentation(source)

    def edit(
        self,
        source: PackageSource,
        operations: Iterable[Operation | Mapping[str, Any]],
        output_dir: Union[str, Path, None] = None,
    ) -> EditResult:
        """Apply operations to the first slide and write the modified package.

        Nothing is written when the operation list is empty.

        Args:
            source: Package bytes, a path, a binary file object, or a loaded package.
            operations: Operations to apply, in order.
            output_dir: Destination directory. Defaults to the OUTPUT_DIR setting.

        Returns:
            EditResult with the written package location, if any.

        Raises:
            PackageCorrupt: If the source is not a zip container.
            PartMissing: If the slide part is absent.
        """
        operations = list(operations)
        package = self._load(source)

        if not operations:
            logger.info("No modifications to apply")
            return EditResult(operations=operations)

        slide_xml = self.engine.apply_to_package(package, operations, SLIDE_PART)
        output = self.writer.write(package, {SLIDE_PART: slide_xml}, output_dir)
        logger.info(f"Applied {len(operations)} operation(s) -> {output.filename}")
        return EditResult(operations=operations, output=output)

    def edit_to_bytes(
        self,
        source: PackageSource,
        operations: Iterable[Operation | Mapping[str, Any]],
    ) -> bytes:
        """Apply operations and return the re-serialized package bytes."""
        package = self._load(source)
        slide_xml = self.engine.apply_to_package(package, list(operations), SLIDE_PART)
        return self.writer.to_bytes(package, {SLIDE_PART: slide_xml})

    def _load(self, source: Union[PackageSource, SlidePackage]) -> SlidePackage:
        if isinstance(source, SlidePackage):
            return source
        return self.loader.load(source)
