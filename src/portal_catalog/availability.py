"""Classification of service response times."""

from .config import AVAILABILITY_GOOD_MS, AVAILABILITY_WARNING_MS

_STATUS_BY_COLOR = {
    "green": "Good",
    "orange": "Warning",
    "red": "Problem",
}


def availability_color(response_time: float | str | None) -> str:
    """Map a response time in milliseconds to a traffic-light color.

    Args:
        response_time: Milliseconds, as a number or numeric string.

    Returns:
        "green", "orange" or "red"; "black" when the value is not numeric.

    Example:
        >>> availability_color(120)
        'green'
        >>> availability_color("750")
        'orange'
        >>> availability_color(None)
        'black'
    """
    try:
        rt = float(response_time)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return "black"
    if rt != rt:  # NaN
        return "black"
    if rt < AVAILABILITY_GOOD_MS:
        return "green"
    if rt < AVAILABILITY_WARNING_MS:
        return "orange"
    return "red"


def availability_status(response_time: float | str | None) -> str:
    """Map a response time to a status label.

    Returns "Available" when the response time is unknown.
    """
    return _STATUS_BY_COLOR.get(availability_color(response_time), "Available")
