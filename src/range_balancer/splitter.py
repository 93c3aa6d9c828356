"""
Range splitting and destination assignment.

When the hot range cannot land whole on the least-loaded server it is
bisected into two adjacent halves:

- lower half spans [start_key, midpoint)
- upper half spans [midpoint, end_key]

Each of the four usage metrics is halved between them, regardless of how
keys are actually distributed inside the range.

Midpoint strategies:
- FIRST_CHARACTER: average the code points of the first character of each
  boundary key and map back to a single character. Coarse, and only
  meaningful for keyspaces discriminated by their first character: for
  "a000"-"a999" it yields "a", which sorts before "a000".
- LEXICOGRAPHIC: treat both keys as code point sequences (right-padded
  with NUL to equal length) and take their numeric midpoint, so the result
  always sorts within [start_key, end_key]. Keys with nothing strictly
  between them ("a"-"b") yield start_key, so the lower half [a, a) is
  empty yet still carries half of every metric.
"""

from dataclasses import replace

from range_balancer.scoring import server_load
from range_balancer.types import KeyRange, ServerReport, SplitStrategy, Weights

_CODE_POINT_BASE = 0x110000


def _first_code_point(key: str) -> int:
    return ord(key[0]) if key else 0


def first_character_midpoint(start_key: str, end_key: str) -> str:
    """Single-character midpoint of the first characters of both keys."""
    mid = (_first_code_point(start_key) + _first_code_point(end_key)) // 2
    return chr(mid)


def lexicographic_midpoint(start_key: str, end_key: str) -> str:
    """Midpoint over the full keys, ordered between start_key and end_key."""
    width = max(len(start_key), len(end_key))
    if width == 0:
        return ""

    def to_int(key: str) -> int:
        value = 0
        for ch in key.ljust(width, "\x00"):
            value = value * _CODE_POINT_BASE + ord(ch)
        return value

    mid = (to_int(start_key) + to_int(end_key)) // 2
    chars = []
    for _ in range(width):
        mid, code_point = divmod(mid, _CODE_POINT_BASE)
        chars.append(chr(code_point))

    # Trailing NULs come from padding; dropping them can undershoot start_key
    key = "".join(reversed(chars)).rstrip("\x00")
    return key if key >= start_key else start_key


def midpoint_key(
    start_key: str,
    end_key: str,
    strategy: SplitStrategy = SplitStrategy.FIRST_CHARACTER,
) -> str:
    """Derive the split key for a range using the given strategy."""
    if strategy is SplitStrategy.LEXICOGRAPHIC:
        return lexicographic_midpoint(start_key, end_key)
    return first_character_midpoint(start_key, end_key)


def split_key_range(key_range: KeyRange, midpoint: str) -> tuple[KeyRange, KeyRange]:
    """
    Bisect a range at midpoint with equally halved metrics.

    Returns:
        Tuple of (lower, upper) ranges. The input range is not modified.
    """
    halved = {
        "access_frequency": key_range.access_frequency / 2,
        "storage_utilization": key_range.storage_utilization / 2,
        "processing_load": key_range.processing_load / 2,
        "memory_usage": key_range.memory_usage / 2,
    }
    lower = replace(key_range, end_key=midpoint, **halved)
    upper = replace(key_range, start_key=midpoint, **halved)
    return lower, upper


def rank_servers_by_load(
    servers: list[ServerReport], weights: Weights
) -> list[ServerReport]:
    """
    Return a new list of servers ordered by ascending combined score.

    The sort is stable, so equal scores keep input order. The caller's list
    is left untouched.
    """
    return sorted(servers, key=lambda server: server_load(server, weights))


def split_destinations(
    servers: list[ServerReport], weights: Weights
) -> tuple[ServerReport, ServerReport]:
    """
    Pick destinations for the lower and upper halves of a split.

    The lower half goes to the least-loaded server in the whole fleet and the
    upper half to the second least-loaded, falling back to the least-loaded
    server for a single-server fleet.
    """
    ranked = rank_servers_by_load(servers, weights)
    first = ranked[0]
    second = ranked[1] if len(ranked) > 1 else first
    return first, second
