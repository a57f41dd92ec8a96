"""Validation utility functions for droidship."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Tuple

# logcat filterspec priorities
LOG_PRIORITIES = "VDIWEFS"

_TAG_PATTERN = re.compile(r"^[^\s:]+(:[" + LOG_PRIORITIES + r"])?$")


def validate_artifact(artifact: Path, expected_suffix: str) -> Tuple[bool, str]:
    """Validate that an artifact exists and has the expected extension.

    Args:
        artifact: Path to the APK or AAB.
        expected_suffix: ``.apk`` or ``.aab``.

    Returns:
        Tuple of (is_valid, error_message).
    """
    path = Path(artifact)
    if not path.is_file():
        return False, f"Artifact not found: {path}"

    if path.suffix.lower() != expected_suffix:
        return False, f"Artifact {path.name} is not a {expected_suffix} file"

    return True, ""


def validate_log_tag(tag: str) -> Tuple[bool, str]:
    """Validate a logcat tag, optionally carrying a ``:<priority>`` suffix."""
    if not tag:
        return False, "Log tag cannot be empty"

    if not _TAG_PATTERN.match(tag):
        return False, f"Invalid log tag {tag!r}: expected TAG or TAG:{{{','.join(LOG_PRIORITIES)}}}"

    return True, ""


def has_priority(tag: str) -> bool:
    """Whether a logcat filter spec already embeds a priority."""
    return ":" in tag
