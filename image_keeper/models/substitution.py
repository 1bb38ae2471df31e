"""Per-part substitution state threaded through sequential drawing processing."""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass
class SubstitutionState:
    """
    Occurrence counters for relation ids within one part.

    A counter is 1 after the first use of a relation id and is incremented
    for every reuse. ``scrubs`` lists ``(payload, relation_id)`` pairs whose
    literal text is replaced after the part is serialized. A fresh state is
    created for every part.
    """

    counters: Dict[str, int] = field(default_factory=dict)
    scrubs: List[Tuple[str, str]] = field(default_factory=list)

    def next_occurrence(self, relation_id: str) -> int:
        return self.counters.get(relation_id, 0) + 1

    def commit(self, relation_id: str, occurrence: int, payload: str, used_id: str) -> None:
        """Record a successful use of ``relation_id``."""
        self.counters[relation_id] = occurrence
        self.scrubs.append((payload, used_id))

    @property
    def duplicates(self) -> int:
        """Number of relation entries cloned so far."""
        return sum(count - 1 for count in self.counters.values())
