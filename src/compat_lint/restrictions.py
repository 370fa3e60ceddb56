"""Restriction table: which exports of which modules are off limits."""
from collections.abc import Iterable
from dataclasses import dataclass

from compat_lint.config import RestrictedImport


@dataclass(frozen=True)
class Restriction:
    """Restricted export names of a single module."""

    module: str
    names: frozenset[str]


class RestrictionTable:
    """Immutable lookup from module specifier to its Restriction.

    Built once per run and shared read-only between concurrent analyses.
    """

    def __init__(self, restrictions: Iterable[Restriction]):
        self._by_module: dict[str, Restriction] = {}
        for restriction in restrictions:
            if restriction.module in self._by_module:
                raise ValueError(f"module listed more than once: {restriction.module}")
            self._by_module[restriction.module] = restriction

    @classmethod
    def from_config(cls, entries: Iterable[RestrictedImport]) -> "RestrictionTable":
        """Build a table from validated config entries."""
        return cls(Restriction(e.module, frozenset(e.imports)) for e in entries)

    def lookup(self, module: str) -> Restriction | None:
        """Return the restriction for ``module`` or None if it is unrestricted."""
        return self._by_module.get(module)

    def is_restricted(self, module: str, name: str) -> bool:
        restriction = self._by_module.get(module)
        return restriction is not None and name in restriction.names

    def __len__(self) -> int:
        return len(self._by_module)

    def __iter__(self):
        return iter(self._by_module.values())
