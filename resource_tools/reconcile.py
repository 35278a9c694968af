from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Set


@dataclass
class Reconciliation:
    """Partition of a declared candidate list into used / unused.

    Built from a separate confirmed-used set so the candidate list is never
    mutated while it is being scanned.
    """
    declared: List[str]
    confirmed: Set[str] = field(default_factory=set)

    def mark_used(self, identifiers: Iterable[str]) -> None:
        self.confirmed.update(identifiers)

    @property
    def unused(self) -> List[str]:
        return [ident for ident in self.declared if ident not in self.confirmed]

    @property
    def used(self) -> List[str]:
        return [ident for ident in self.declared if ident in self.confirmed]

    @property
    def total(self) -> int:
        return len(self.declared)


def undeclared(observed: Iterable[str], declared: Iterable[str]) -> List[str]:
    """Identifiers seen in use but never declared."""
    declared_set = set(declared)
    return sorted(set(observed) - declared_set)
