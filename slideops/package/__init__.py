"""Package module - reads and re-serializes zip-of-XML presentation packages."""

from slideops.package.loader import PackageLoader, PackagePart, SlidePackage
from slideops.package.writer import PackageWriter, WrittenPackage

__all__ = [
    "PackageLoader",
    "PackagePart",
    "PackageWriter",
    "SlidePackage",
    "WrittenPackage",
]
