"""
Package Catalog

Merges AUR search results and repository search output into one numbered
catalog. Indices run from N (most popular AUR package, shown first) down to 1
(last repository package). The index table is built once at merge time and
every selection is resolved through it.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from .errors import SelectionError
from .models import PackageRecord, PackageSource


@dataclass(frozen=True)
class CatalogEntry:
    """A record and the index it is listed under."""
    index: int
    record: PackageRecord


@dataclass(frozen=True)
class Catalog:
    """Numbered, selectable view over one query's search results."""
    entries: tuple[CatalogEntry, ...] = ()
    _by_index: dict[int, PackageRecord] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._by_index.update((entry.index, entry.record) for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def remote_count(self) -> int:
        return sum(1 for entry in self.entries if entry.record.is_remote)

    def lookup(self, index: int) -> PackageRecord:
        """Return the record listed under ``index``."""
        try:
            return self._by_index[index]
        except KeyError:
            raise SelectionError(
                f"Invalid selection. Please enter a number between 1 and {len(self)}."
            ) from None

    def select(self, raw: str) -> PackageRecord:
        """Resolve user input such as ``"3"`` to a record."""
        text = raw.strip()
        if not (text.isascii() and text.isdigit()):
            raise SelectionError(
                f"Invalid selection '{raw}'. Please enter a number between 1 and {len(self)}."
            )
        return self.lookup(int(text))

    def index_of(self, record: PackageRecord) -> int:
        """Return the index a record is listed under."""
        for entry in self.entries:
            if entry.record is record:
                return entry.index
        raise SelectionError(f"{record.name} is not part of this catalog")


def parse_local_lines(lines: Sequence[str]) -> list[PackageRecord]:
    """Parse ``pacman -Ss`` style output into package records.

    A header line is unindented and carries a bracketed tag, e.g.
    ``extra/firefox 120.0-1 [installed]``; an indented line directly after it
    is its description. Other lines are ignored.
    """
    records: list[PackageRecord] = []
    header: dict | None = None

    def flush(description: str | None = None):
        if header is not None:
            records.append(PackageRecord(source=PackageSource.LOCAL, description=description, **header))

    for line in lines:
        if line[:1].isspace():
            if header is not None:
                flush(line.strip() or None)
                header = None
            continue

        flush()
        header = None

        bracket = line.find("[")
        if bracket == -1:
            continue
        tokens = line[:bracket].split()
        if not tokens:
            continue

        repository, _, name = tokens[0].rpartition("/")
        header = {
            "name": name,
            "version": tokens[1] if len(tokens) > 1 else "",
            "repository": repository or None,
        }

    flush()
    return records


def merge(remote: Sequence[PackageRecord], local_lines: Sequence[str]) -> Catalog:
    """Build a catalog from AUR records and repository search output."""
    local = parse_local_lines(local_lines)
    # sorted() is stable, so equally popular packages keep their arrival order
    ranked_remote = sorted(remote, key=lambda record: record.popularity or 0, reverse=True)

    total = len(ranked_remote) + len(local)
    entries = tuple(
        CatalogEntry(index=total - position, record=record)
        for position, record in enumerate([*ranked_remote, *local])
    )
    return Catalog(entries=entries)
