"""Route Patterns - Path pattern compilation.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

A pattern is a path template with literal text and ``:name`` variable
tokens, e.g. ``/users/:userid/invoices``. Compiling a pattern turns every
token into a capture group and anchors the whole expression, so a path has
to match the entire pattern.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

VARIABLE_TOKEN = re.compile(r":([a-zA-Z0-9_-]+)")
VARIABLE_CAPTURE = "([a-zA-Z0-9_-]+)"
PATTERN_START = "^"
PATTERN_END = r"\Z"


class CompileError(Exception):
    """Raised when a pattern cannot be compiled into a matcher."""

    def __init__(self, pattern: object, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


@dataclass(frozen=True)
class CompiledPattern:
    """Compiled, executable form of a route pattern."""

    pattern: str
    source: str
    regex: re.Pattern = field(repr=False)
    variables: Dict[str, int] = field(default_factory=dict)

    @property
    def group_count(self) -> int:
        """Number of capture groups (one per token, not per name)."""
        return self.regex.groups

    def matches(self, path: str) -> bool:
        """Check if the whole path matches."""
        return self.regex.match(path) is not None

    def captures(self, path: str) -> Optional[Tuple[str, ...]]:
        """Get the captured substrings, in token order."""
        match = self.regex.match(path)
        if match is None:
            return None
        return match.groups()


def extract_variables(pattern: str) -> Dict[str, int]:
    """Map each variable name to its capture position.

    Positions count every token, so when a name repeats its position is
    that of the last occurrence.
    """
    return {
        match.group(1): position
        for position, match in enumerate(VARIABLE_TOKEN.finditer(pattern))
    }


def duplicate_variables(pattern: str) -> List[str]:
    """Get variable names that occur more than once in a pattern."""
    seen = set()
    duplicates = []

    for match in VARIABLE_TOKEN.finditer(pattern):
        name = match.group(1)
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)

    return duplicates


def _build_source(pattern: str) -> str:
    parts = [PATTERN_START]
    last = 0

    for match in VARIABLE_TOKEN.finditer(pattern):
        parts.append(re.escape(pattern[last:match.start()]))
        parts.append(VARIABLE_CAPTURE)
        last = match.end()

    parts.append(re.escape(pattern[last:]))
    parts.append(PATTERN_END)
    return "".join(parts)


def compile_pattern(
    pattern: str,
    reject_duplicates: bool = False,
) -> CompiledPattern:
    """Compile a route pattern.

    Args:
        pattern: Path pattern, e.g. "/users/:id"
        reject_duplicates: Fail on repeated variable names instead of
            letting the last occurrence win

    Returns:
        CompiledPattern for the pattern

    Raises:
        CompileError: If the pattern cannot be compiled
    """
    if not isinstance(pattern, str):
        raise CompileError(pattern, f"expected str, got {type(pattern).__name__}")

    duplicates = duplicate_variables(pattern)
    if duplicates:
        if reject_duplicates:
            raise CompileError(
                pattern,
                f"duplicate variable names: {', '.join(duplicates)}",
            )
        logger.warning(
            f"Pattern {pattern!r} repeats variables {duplicates}; "
            f"the last occurrence of each wins"
        )

    source = _build_source(pattern)
    try:
        regex = re.compile(source)
    except re.error as e:
        raise CompileError(pattern, str(e)) from e

    variables = extract_variables(pattern)
    logger.debug(f"Compiled pattern {pattern!r} -> {source!r}")

    return CompiledPattern(
        pattern=pattern,
        source=source,
        regex=regex,
        variables=variables,
    )


__all__ = [
    "VARIABLE_TOKEN",
    "VARIABLE_CAPTURE",
    "PATTERN_START",
    "PATTERN_END",
    "CompileError",
    "CompiledPattern",
    "compile_pattern",
    "extract_variables",
    "duplicate_variables",
]
