"""Run-scoped identifiers for normalized records."""
import itertools
from typing import Iterable


def rolling_hash(text: str) -> int:
    """32-bit multiplicative rolling hash: h = h * 31 + ord(c), masked."""
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    return h


class IdentifierGenerator:
    """
    Builds identifiers of the form ``<prefix>_<hash>_<seq>``.

    The hash fingerprints the item's content and the sequence number comes
    from a per-generator monotonic counter, so identifiers are unique within a
    run and identical input in identical order yields identical identifiers.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self, prefix: str, fingerprint_parts: Iterable[str]) -> str:
        fingerprint = "|".join(str(part) for part in fingerprint_parts)
        return f"{prefix}_{rolling_hash(fingerprint):08x}_{next(self._counter)}"
