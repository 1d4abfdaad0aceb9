"""
Utilities module - File handling helpers.
"""

from .file_utils import (
    is_readable_file,
    read_template_file,
)

__all__ = [
    "is_readable_file",
    "read_template_file",
]
