"""Helper utility functions for droidship."""

from __future__ import annotations

import re
import shlex
from typing import Sequence

# bundletool takes signing secrets as ``pass:<secret>`` (or ``file:<path>``)
_SECRET_PATTERN = re.compile(r"(--(?:ks-pass|key-pass)=pass:).*")

MASK = "****"


def mask_secrets(argv: Sequence[str]) -> list[str]:
    """Return a copy of ``argv`` with inline passwords replaced by a mask.

    Args:
        argv: Command argument vector.

    Returns:
        New list safe to write to logs or error messages.
    """
    return [_SECRET_PATTERN.sub(lambda m: m.group(1) + MASK, str(arg)) for arg in argv]


def format_command(argv: Sequence[str]) -> str:
    """Render an argument vector as a copy-pasteable, masked shell line."""
    return shlex.join(mask_secrets(argv))


def count_lines(text: str) -> int:
    """Count newline-terminated lines in ``text``."""
    return text.count("\n")
