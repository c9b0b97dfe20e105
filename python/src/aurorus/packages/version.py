"""
Version Comparison

Compares free-form package version strings segment by segment. Each version is
split into maximal runs of digits and non-digits; digit runs compare by
numeric value and everything else compares bytewise.
"""

import re
from enum import Enum

_SEGMENT_RE = re.compile(r"[0-9]+|[^0-9]+")
_TRAILING_SEPARATORS_RE = re.compile(r"[\s.\-_+~:]+$")


class VersionOrder(Enum):
    """Ordering of two versions."""
    LESS = -1
    EQUAL = 0
    GREATER = 1
    INCOMPARABLE = None


def split_segments(version: str) -> list[tuple[int, str] | bytes]:
    """Split ``version`` into numeric and byte-string segments.

    A digit run becomes ``(digit_count, digits)`` with leading zeros removed,
    which orders like the number itself without converting it to ``int``.
    Trailing separators are dropped, so ``"1.0."`` and ``"1.0"`` produce the
    same segments.
    """
    text = _TRAILING_SEPARATORS_RE.sub("", version.strip())

    segments: list[tuple[int, str] | bytes] = []
    for run in _SEGMENT_RE.findall(text):
        if run[0] in "0123456789":
            digits = run.lstrip("0") or "0"
            segments.append((len(digits), digits))
        else:
            segments.append(run.encode("utf-8"))
    return segments


def _compare_segment(left: tuple[int, str] | bytes, right: tuple[int, str] | bytes) -> int:
    left_numeric = isinstance(left, tuple)
    right_numeric = isinstance(right, tuple)
    if left_numeric != right_numeric:
        # A number outranks text at the same position
        return 1 if left_numeric else -1
    if left == right:
        return 0
    return -1 if left < right else 1


def compare_versions(a: str, b: str) -> VersionOrder:
    """Compare two version strings.

    Returns ``VersionOrder.INCOMPARABLE`` when either side has no usable
    segments; callers must not treat that as an update.
    """
    left = split_segments(a or "")
    right = split_segments(b or "")
    if not left or not right:
        return VersionOrder.INCOMPARABLE

    for left_segment, right_segment in zip(left, right):
        result = _compare_segment(left_segment, right_segment)
        if result:
            return VersionOrder(result)

    if len(left) == len(right):
        return VersionOrder.EQUAL
    return VersionOrder.LESS if len(left) < len(right) else VersionOrder.GREATER


def is_newer(installed: str, remote: str) -> bool:
    """True when ``remote`` is strictly newer than ``installed``."""
    return compare_versions(installed, remote) is VersionOrder.LESS
