"""
File Utilities
==============
Readability checks and scoped reads for template files.
"""

import os
from typing import Optional


def is_readable_file(path: Optional[str]) -> bool:
    """
    Check that a path points to a regular file the process can read.

    Args:
        path: File path (None or empty is treated as not readable)

    Returns:
        True if the file exists and is readable
    """
    if not path or not isinstance(path, str):
        return False

    return os.path.isfile(path) and os.access(path, os.R_OK)


def read_template_file(path: Optional[str]) -> Optional[str]:
    """
    Read a template file if it is configured and readable.

    Unreadable or missing templates are not an error; callers fall back
    to their defaults.

    Args:
        path: Template file path

    Returns:
        File contents, or None if the file cannot be read
    """
    if not is_readable_file(path):
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Template {path} could not be read, using default: {e}")
        return None
