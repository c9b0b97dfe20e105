"""
Dependency Resolution

Extracts runtime dependencies from a .SRCINFO manifest and splits them into
installed and missing packages.
"""

import re
from collections.abc import Callable, Iterable

_DEPENDS_RE = re.compile(r"^depends\s*=(.*)$")
_CONSTRAINT_RE = re.compile(r"[<>=]")


def strip_constraint(token: str) -> str:
    """Drop a version constraint: ``glibc>=2.35`` becomes ``glibc``."""
    return _CONSTRAINT_RE.split(token, maxsplit=1)[0].strip()


def extract_dependencies(manifest_text: str) -> list[str]:
    """Return the ``depends`` entries of a manifest in declaration order.

    Only the plain ``depends`` key counts; ``makedepends``, ``optdepends``
    and architecture specific keys are skipped. Duplicates are kept.
    """
    dependencies = []
    for line in manifest_text.splitlines():
        match = _DEPENDS_RE.match(line.strip())
        if not match:
            continue
        name = strip_constraint(match.group(1).strip())
        if name:
            dependencies.append(name)
    return dependencies


def classify(
    dependencies: Iterable[str], is_installed: Callable[[str], bool]
) -> tuple[frozenset[str], tuple[str, ...]]:
    """Split ``dependencies`` into an installed set and an ordered missing list."""
    seen: dict[str, bool] = {}
    installed = set()
    missing = []
    for name in dependencies:
        if name not in seen:
            seen[name] = is_installed(name)
        if seen[name]:
            installed.add(name)
        else:
            missing.append(name)
    return frozenset(installed), tuple(missing)
