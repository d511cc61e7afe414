"""High-level PPTX reading into the slide document model."""

import logging
from pathlib import PurePosixPath

from slideops.dsl.schema import ImageRef, ParsedPresentation, Slide
from slideops.package.loader import PackageLoader, PackageSource, SlidePackage
from slideops.parser.shape_extractor import ShapeExtractor
from slideops.parser.theme_parser import ThemeParser

logger = logging.getLogger("slideops.parser")


class PPTXReader:
    """Reads presentation packages and extracts the document model."""

    def __init__(self) -> None:
        """Initialize the PPTX reader."""
        self.loader = PackageLoader()
        self.shape_extractor = ShapeExtractor()
        self.theme_parser = ThemeParser()

    def read(self, source: PackageSource) -> ParsedPresentation:
        """Load a package and extract slides, theme and images.

        Args:
            source: Package bytes, a path, or a binary file object.

        Returns:
            ParsedPresentation for the package.

        Raises:
            PackageCorrupt: If the source is not a zip container.
            PartMissing: If the first slide part is absent.
        """
        return self.read_package(self.loader.load(source))

    def read_package(self, package: SlidePackage) -> ParsedPresentation:
        """Extract the document model from an already loaded package.

        Args:
            package: The loaded package.

        Returns:
            ParsedPresentation for the package.
        """
        slides = [self._extract_slide(package, path) for path in package.slide_parts()]
        parsed = ParsedPresentation(
            slides=slides,
            theme=self.theme_parser.extract_theme(package),
            images=self.extract_images(package),
        )
        logger.info(
            f"Parsed {parsed.slide_count} slide(s), {len(parsed.images)} image(s), "
            f"theme={'yes' if parsed.theme else 'no'}"
        )
        return parsed

    def read_slide(self, source: PackageSource, slide_number: int = 1) -> Slide:
        """Read a specific slide from a package.

        Args:
            source: Package bytes, a path, or a binary file object.
            slide_number: 1-based slide number to extract.

        Returns:
            Slide for the specified slide number.

        Raises:
            IndexError: If slide_number is out of range.
        """
        slides = self.read(source).slides
        if slide_number < 1 or slide_number > len(slides):
            raise IndexError(f"Slide {slide_number} not found. File has {len(slides)} slides.")
        return slides[slide_number - 1]

    def extract_images(self, package: SlidePackage) -> list[ImageRef]:
        """List the package's media parts.

        Args:
            package: The loaded package.

        Returns:
            One ImageRef per media part.
        """
        images = []
        for part_path in package.media_parts():
            file_name = PurePosixPath(part_path).name
            extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
            images.append(
                ImageRef(part_path=part_path, file_name=file_name, extension=extension)
            )
        return images

    def _extract_slide(self, package: SlidePackage, part_path: str) -> Slide:
        return self.shape_extractor.extract_slide(package.read_bytes(part_path), part_path)
