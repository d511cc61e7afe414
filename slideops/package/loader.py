"""Open presentation packages and expose their parts as raw bytes/text."""

import io
import logging
import re
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Union

from slideops.config import MEDIA_PREFIX, SLIDE_PART
from slideops.errors import PackageCorrupt, PartMissing

logger = logging.getLogger("slideops.package")

_SLIDE_PART_PATTERN = re.compile(r"^ppt/slides/slide(\d+)\.xml$")

PackageSource = Union[bytes, str, Path, BinaryIO]


@dataclass(frozen=True)
class PackagePart:
    """Raw XML content of one package entry."""

    path: str
    raw_text: str


@dataclass
class SlidePackage:
    """An opened package: entries in their original order, with zip metadata.

    Entry bytes are never modified in place. Writers take a mapping of
    replacement texts and copy everything else through.
    """

    entries: list[zipfile.ZipInfo] = field(default_factory=list)
    data: dict[str, bytes] = field(default_factory=dict)

    @property
    def part_names(self) -> list[str]:
        """Entry names in archive order."""
        return [info.filename for info in self.entries]

    def has_part(self, path: str) -> bool:
        """Check whether an entry exists."""
        return path in self.data

    def read_bytes(self, path: str) -> bytes:
        """Return an entry's raw bytes.

        Raises:
            PartMissing: If the entry does not exist.
        """
        try:
            return self.data[path]
        except KeyError:
            raise PartMissing(path) from None

    def read_text(self, path: str) -> str:
        """Return an entry decoded as UTF-8.

        Raises:
            PartMissing: If the entry does not exist.
        """
        return self.read_bytes(path).decode("utf-8")

    def part(self, path: str) -> PackagePart:
        """Return an entry as a PackagePart."""
        return PackagePart(path=path, raw_text=self.read_text(path))

    def slide_parts(self) -> list[str]:
        """Slide part names sorted by slide number."""
        numbered = []
        for name in self.data:
            match = _SLIDE_PART_PATTERN.match(name)
            if match:
                numbered.append((int(match.group(1)), name))
        return [name for _, name in sorted(numbered)]

    def media_parts(self) -> list[str]:
        """Media part names in archive order."""
        return [
            name
            for name in self.part_names
            if name.startswith(MEDIA_PREFIX) and not name.endswith("/")
        ]


class PackageLoader:
    """Reads a zip-of-XML presentation package into memory."""

    def __init__(self, required_parts: tuple[str, ...] = (SLIDE_PART,)) -> None:
        """Initialize the loader.

        Args:
            required_parts: Parts that must be present for a load to succeed.
        """
        self.required_parts = required_parts

    def load(self, source: PackageSource) -> SlidePackage:
        """Load a package.

        Args:
            source: Package bytes, a path, or a binary file object.

        Returns:
            SlidePackage holding every entry.

        Raises:
            PackageCorrupt: If the source is not a zip container.
            PartMissing: If a required part is absent.
        """
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)

        try:
            with zipfile.ZipFile(source) as archive:
                package = SlidePackage()
                for info in archive.infolist():
                    package.entries.append(info)
                    package.data[info.filename] = archive.read(info)
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            zlib.error,
            EOFError,
            NotImplementedError,  # unsupported compression method
            RuntimeError,  # encrypted entry
        ) as e:
            raise PackageCorrupt(f"Not a valid presentation package: {e}") from e

        for path in self.required_parts:
            if not package.has_part(path):
                raise PartMissing(path)

        logger.debug(f"Loaded package with {len(package.entries)} parts")
        return package
