"""
Range aggregation for item range restrictions.

Dictionary ranges come as parallel lists of minimums and maximums. A row
whose minimum equals its maximum is a single permitted value; when such a
point sits exactly on the edge of another range it is absorbed into that
range's closed boundary instead of producing a separate union member.
"""

from typing import List, Sequence, Tuple


def _is_point(minimum: str, maximum: str) -> bool:
    return minimum.lower() == maximum.lower()


def _snap(edge: str, boundaries: Sequence[str]) -> str:
    lowered = edge.lower()
    for boundary in boundaries:
        if boundary.lower() == lowered:
            return boundary
    return edge


def aggregate_inclusive_ranges(minimums: Sequence[str],
                               maximums: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Merge point values into the ranges they bound.

    Every point row (minimum equal to maximum, case-insensitively) becomes a
    boundary; the edges of the remaining rows snap to a matching boundary.
    Point rows are dropped from the result. Aggregating an aggregated list
    returns it unchanged.

    :param minimums: Range minimums
    :param maximums: Range maximums, parallel to ``minimums``
    :return: Tuple of aggregated minimums and maximums
    """
    if len(minimums) != len(maximums):
        raise ValueError("Range minimums and maximums differ in length")

    boundaries = [minimum for minimum, maximum in zip(minimums, maximums)
                  if _is_point(minimum, maximum)]

    aggregated_minimums: List[str] = []
    aggregated_maximums: List[str] = []
    for minimum, maximum in zip(minimums, maximums):
        if _is_point(minimum, maximum):
            continue
        aggregated_minimums.append(_snap(minimum, boundaries))
        aggregated_maximums.append(_snap(maximum, boundaries))

    return aggregated_minimums, aggregated_maximums


def has_multiple_sub_ranges(minimums: Sequence[str], maximums: Sequence[str]) -> bool:
    """Check if a range list aggregates to more than one interval."""
    aggregated_minimums, _ = aggregate_inclusive_ranges(minimums, maximums)
    return len(aggregated_minimums) > 1
