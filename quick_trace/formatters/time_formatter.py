"""
Time formatting utilities for human-readable output.
"""


def format_time(ms: float) -> str:
    """
    Format time in milliseconds to a human-readable string.

    Args:
        ms: Time in milliseconds

    Returns:
        Formatted time string (e.g., "850.00 μs", "123.45 ms", "2.34 s", "1m 30.50s")
    """
    if ms < 1:
        return f"{ms * 1000:.2f} μs"
    elif ms < 1000:
        return f"{ms:.2f} ms"
    elif ms < 60000:
        return f"{ms/1000:.2f} s"
    else:
        minutes = int(ms / 60000)
        seconds = (ms % 60000) / 1000
        return f"{minutes}m {seconds:.2f}s"


def format_threshold(ms: float) -> str:
    """
    Format a filter threshold compactly, dropping trailing zeros.

    Args:
        ms: Threshold in milliseconds

    Returns:
        Compact string such as "10ms", "1.5ms", "500μs" or "2s"
    """
    if 0 < ms < 1:
        return f"{ms * 1000:g}μs"
    if ms >= 1000:
        return f"{ms / 1000:g}s"
    return f"{ms:g}ms"
