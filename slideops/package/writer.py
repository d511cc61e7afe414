"""Re-serialize presentation packages with replaced part contents."""

import io
import logging
import uuid
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Mapping, Union

from slideops.config import get_settings
from slideops.errors import PartMissing
from slideops.package.loader import SlidePackage

logger = logging.getLogger("slideops.package")


@dataclass(frozen=True)
class WrittenPackage:
    """Location of a package written to disk."""

    filename: str
    path: Path


class PackageWriter:
    """Writes a SlidePackage back to zip bytes, splicing in replacement parts."""

    def __init__(self, compression_level: int | None = None) -> None:
        """Initialize the writer.

        Args:
            compression_level: Deflate level (0-9). Defaults to the
                ZIP_COMPRESSION_LEVEL setting.
        """
        if compression_level is None:
            compression_level = get_settings().zip_compression_level
        self.compression_level = compression_level

    def to_bytes(
        self,
        package: SlidePackage,
        replacements: Mapping[str, str] | None = None,
    ) -> bytes:
        """Serialize a package.

        Args:
            package: The loaded package.
            replacements: Part path to new raw text. Every other part is
                copied through unchanged.

        Returns:
            The new package as bytes.

        Raises:
            PartMissing: If a replacement names a part the package lacks.
        """
        buffer = io.BytesIO()
        self.write_to(package, buffer, replacements)
        return buffer.getvalue()

    def write_to(
        self,
        package: SlidePackage,
        output: Union[str, Path, BinaryIO],
        replacements: Mapping[str, str] | None = None,
    ) -> None:
        """Serialize a package to a path or binary file object."""
        replacements = dict(replacements or {})
        for path in replacements:
            if not package.has_part(path):
                raise PartMissing(path)

        with zipfile.ZipFile(
            output,
            mode="w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=self.compression_level,
        ) as archive:
            for info in package.entries:
                if info.filename in replacements:
                    payload = replacements[info.filename].encode("utf-8")
                else:
                    payload = package.data[info.filename]

                entry = zipfile.ZipInfo(info.filename, date_time=info.date_time)
                entry.external_attr = info.external_attr
                entry.create_system = info.create_system
                entry.comment = info.comment
                entry.compress_type = zipfile.ZIP_DEFLATED
                archive.writestr(entry, payload, compresslevel=self.compression_level)

        logger.debug(
            f"Serialized {len(package.entries)} parts ({len(replacements)} replaced)"
        )

    def write(
        self,
        package: SlidePackage,
        replacements: Mapping[str, str] | None = None,
        output_dir: Union[str, Path, None] = None,
    ) -> WrittenPackage:
        """Write a package under a freshly generated unique file name.

        Args:
            package: The loaded package.
            replacements: Part path to new raw text.
            output_dir: Destination directory. Defaults to the OUTPUT_DIR
                setting; created if missing.

        Returns:
            WrittenPackage with the generated file name and full path.
        """
        directory = Path(output_dir) if output_dir is not None else get_settings().output_path
        directory.mkdir(parents=True, exist_ok=True)

        filename = f"modified-{uuid.uuid4()}.pptx"
        path = directory / filename
        self.write_to(package, path, replacements)

        logger.info(f"Wrote modified package {filename}")
        return WrittenPackage(filename=filename, path=path)
