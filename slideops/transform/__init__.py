"""Transform module - applies edit operations to raw slide XML.

Operations are applied as format-preserving text patches:
- text_edit / translate replace exact run text
- color_change / font_change / size_change rewrite every run's formatting
- shape_create appends a text box at the top of the z-order
- shape_delete removes the first shape containing a given run text
"""

from slideops.transform.engine import TransformEngine
from slideops.transform.shape_builder import TextBoxBuilder, next_shape_id

__all__ = [
    "TextBoxBuilder",
    "TransformEngine",
    "next_shape_id",
]
