"""Deterministic state policy.

This module intentionally contains *no* I/O; the reducer consults it to
decide which events may change the state.
"""

from __future__ import annotations


def should_accept_traffic_result(*, sequence: int, latest_sequence: int) -> bool:
    """Only the most recently issued check may replace the displayed result.

    A response for an older request that arrives after a newer request was
    issued is discarded, whatever the arrival order of the responses.
    """
    return sequence >= latest_sequence


def is_traffic_loading(*, completed_sequence: int, latest_sequence: int) -> bool:
    return completed_sequence < latest_sequence
