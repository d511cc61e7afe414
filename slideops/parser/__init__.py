"""PPTX Parser module - extracts the slide document model from packages.

This module provides read-only extraction of:
- Shapes and pictures, flattened through nested groups
- Position and size in inches
- Text runs with bold/italic, size, typeface and solid colour
- Theme colour scheme and font scheme
- Media part references
"""

from slideops.parser.description import describe_presentation
from slideops.parser.pptx_reader import PPTXReader
from slideops.parser.shape_extractor import ShapeExtractor
from slideops.parser.theme_parser import ThemeParser

__all__ = [
    "PPTXReader",
    "ShapeExtractor",
    "ThemeParser",
    "describe_presentation",
]
