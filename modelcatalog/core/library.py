"""Ordered, read-only collections of named catalog building blocks."""

from __future__ import annotations

from typing import Callable, Dict, Generic, Iterator, List, Sequence, Tuple, TypeVar

from modelcatalog.core.errors import CatalogError, DuplicateLibraryEntryError, MalformedSpecError

T = TypeVar("T")


class NamedLibrary(Generic[T]):
    """Declaration-ordered registry of named entries.

    Subclasses set ``kind`` for messages and override ``_missing`` to raise
    the error type that fits their entries.
    """

    kind = "entry"

    def __init__(self, entries: Sequence[Tuple[str, T]]) -> None:
        self._names: List[str] = []
        self._index: Dict[str, T] = {}
        for name, entry in entries:
            if not name:
                raise MalformedSpecError(f"{self.kind} library entries must be named")
            if name in self._index:
                raise DuplicateLibraryEntryError(f"Duplicate {self.kind} '{name}' in library")
            self._names.append(name)
            self._index[name] = entry

    def _missing(self, name: str) -> CatalogError:
        return CatalogError("unknown_entry", f"Unknown {self.kind} '{name}'")

    def get(self, name: str) -> T:
        """Look up an entry by name, failing loudly when absent."""
        try:
            return self._index[name]
        except KeyError:
            raise self._missing(name) from None

    def __getitem__(self, name: str) -> T:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[T]:
        return iter([self._index[name] for name in self._names])

    def __len__(self) -> int:
        return len(self._names)

    def names(self) -> List[str]:
        """Return entry names in declaration order."""
        return list(self._names)

    def items(self) -> List[Tuple[str, T]]:
        """Return ``(name, entry)`` pairs in declaration order."""
        return [(name, self._index[name]) for name in self._names]

    def filter(self, predicate: Callable[[T], bool]) -> Tuple[T, ...]:
        """Return every entry satisfying ``predicate``, in declaration order."""
        return tuple(entry for entry in self if predicate(entry))


__all__ = ["NamedLibrary"]
