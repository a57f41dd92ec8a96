"""Utility functions for droidship.

This sub-package provides utility functions for:
- Command formatting and secret masking
- Artifact and log tag validation
- File and path operations (``droidship.utils.file_utils``)
"""

from .helpers import count_lines, format_command, mask_secrets
from .validation import has_priority, validate_artifact, validate_log_tag

__all__ = [
    "count_lines",
    "format_command",
    "has_priority",
    "mask_secrets",
    "validate_artifact",
    "validate_log_tag",
]
