"""Payor resolution — who gets billed for a participant.

The chain is data, not nested conditionals: an ordered list of mappings
``participant_id -> payor_user_id`` checked first to last. The standard chain is
event override, then participant default payor, then the participant's owner.
A participant that resolves nowhere is billed to its own id.
"""
from typing import Mapping, Optional, Sequence


class PayorResolver:
    """Resolve payors by probing ``sources`` in precedence order."""

    def __init__(self, sources: Sequence[Mapping[str, str]]):
        self._sources = list(sources)

    def lookup(self, participant_id: str) -> Optional[str]:
        """Return the first payor found in the chain, or None."""
        for source in self._sources:
            payor_user_id = source.get(participant_id)
            if payor_user_id:
                return payor_user_id
        return None

    def resolve(self, participant_id: str) -> str:
        return self.lookup(participant_id) or participant_id


def build_payor_resolver(
    overrides: Mapping[str, str],
    default_payors: Mapping[str, str],
    owners: Mapping[str, str],
) -> PayorResolver:
    """Standard chain: event override → default payor → owner."""
    return PayorResolver([overrides, default_payors, owners])
