"""
Rendering module - Sandboxed message and payload templates.
"""

from .templates import (
    DEFAULT_MESSAGE_TEMPLATE,
    build_template_context,
    render_string,
    render_message_template,
    render_payload_template,
)

__all__ = [
    "DEFAULT_MESSAGE_TEMPLATE",
    "build_template_context",
    "render_string",
    "render_message_template",
    "render_payload_template",
]
