"""Hot range selection within the most-loaded server."""

from range_balancer.exceptions import NoKeyRangesError
from range_balancer.scoring import range_load
from range_balancer.types import KeyRange, ServerReport, Weights


def select_hot_range(server: ServerReport, weights: Weights) -> KeyRange:
    """
    Pick the single range with the highest combined score.

    The first range wins ties.

    Raises:
        NoKeyRangesError: If the server owns no ranges
    """
    if not server.key_ranges:
        raise NoKeyRangesError(server.instance_id)

    hottest = server.key_ranges[0]
    hottest_score = range_load(hottest, weights)
    for key_range in server.key_ranges[1:]:
        score = range_load(key_range, weights)
        if score > hottest_score:
            hottest, hottest_score = key_range, score
    return hottest
