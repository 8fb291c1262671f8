"""
Theme Park Wait Watch - Trend Calculator
Derives the direction of a wait time change from two consecutive samples.
"""

from typing import Any, Optional

from models.wait_time import Trend


def calculate_trend(current: Optional[int], previous: Optional[int]) -> Trend:
    """
    Compare the current wait time against the immediately preceding one.

    Logic:
    - no previous sample (previous = NULL) → NEW
    - current = NULL → SAME (nothing to compare)
    - current > previous → UP
    - current < previous → DOWN
    - otherwise → SAME

    Examples:
        >>> calculate_trend(30, 20)
        <Trend.UP: 'up'>
        >>> calculate_trend(10, 20)
        <Trend.DOWN: 'down'>
        >>> calculate_trend(20, 20)
        <Trend.SAME: 'same'>
        >>> calculate_trend(20, None)
        <Trend.NEW: 'new'>
        >>> calculate_trend(None, 20)
        <Trend.SAME: 'same'>
    """
    if previous is None:
        return Trend.NEW
    if current is None:
        return Trend.SAME
    if current > previous:
        return Trend.UP
    if current < previous:
        return Trend.DOWN
    return Trend.SAME


def validate_wait_time(wait_time: Any) -> Optional[int]:
    """
    Validate and sanitize a wait time value from the API.

    Returns:
        Wait time in whole minutes, or None if missing or invalid

    Examples:
        >>> validate_wait_time(45)
        45
        >>> validate_wait_time(-1)  # Negative values invalid
        >>> validate_wait_time("15")
        15
        >>> validate_wait_time(None)
    """
    if wait_time is None or isinstance(wait_time, bool):
        return None

    try:
        minutes = int(wait_time)
    except (TypeError, ValueError):
        return None

    # Negative wait times are invalid
    if minutes < 0:
        return None

    # Very large wait times are suspicious but possible; don't cap
    return minutes
