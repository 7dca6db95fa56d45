"""
Query templating: render placeholder text and decode it into documents.
"""

from .engine import (
    TemplateEngine,
    build,
    decode_extended_json,
    decode_json,
    extended_json_decoder,
    render,
)

__all__ = [
    "TemplateEngine",
    "build",
    "render",
    "decode_extended_json",
    "decode_json",
    "extended_json_decoder",
]
