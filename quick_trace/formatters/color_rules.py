"""
ANSI color rules for durations and percentages.
"""

from typing import List, NamedTuple

RESET = "\033[0m"
BOLD = "\033[1m"

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
WHITE = "\033[37m"

BRIGHT_BLACK = "\033[90m"
BRIGHT_GREEN = "\033[92m"
BRIGHT_BLUE = "\033[94m"


class ColorRule(NamedTuple):
    threshold: float
    color: str


# Duration rules in milliseconds, checked top-down; first match wins
DURATION_COLOR_RULES: List[ColorRule] = [
    ColorRule(3000, RED + BOLD),  # Very Slow
    ColorRule(1000, RED),  # Slow
    ColorRule(500, YELLOW),  # Medium-Slow
    ColorRule(200, BRIGHT_BLUE),  # Medium
    ColorRule(100, CYAN),  # Normal
    ColorRule(50, GREEN),  # Fast
    ColorRule(10, BRIGHT_GREEN),  # Very Fast
    ColorRule(0, BRIGHT_BLACK),  # Ultra Fast
]

# Percentage-of-total rules for progress bars
PROGRESS_COLOR_RULES: List[ColorRule] = [
    ColorRule(75, RED + BOLD),  # Critical
    ColorRule(50, RED),  # High
    ColorRule(25, MAGENTA),  # Medium
    ColorRule(10, BLUE),  # Low
    ColorRule(5, GREEN),  # Very Low
    ColorRule(0, CYAN),  # Minimal
]


def _match(rules: List[ColorRule], value: float):
    for rule in rules:
        if value >= rule.threshold:
            return rule
    return None


def duration_color(duration_ms: float) -> str:
    rule = _match(DURATION_COLOR_RULES, duration_ms)
    return rule.color if rule else WHITE


def progress_color(percentage: float) -> str:
    rule = _match(PROGRESS_COLOR_RULES, percentage)
    return rule.color if rule else WHITE


def speed_class(duration_ms: float) -> str:
    """
    Coarse speed bucket used by the JSON report.

    Args:
        duration_ms: Span duration in milliseconds

    Returns:
        "slow" (> 1 s), "medium" (> 100 ms), "fast" (> 10 ms) or "very_fast"
    """
    if duration_ms > 1000:
        return "slow"
    elif duration_ms > 100:
        return "medium"
    elif duration_ms > 10:
        return "fast"
    return "very_fast"


class Palette:
    """Applies ANSI codes, or passes text through untouched when disabled."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def paint(self, text: str, *codes: str) -> str:
        if not self.enabled or not codes:
            return text
        return "".join(codes) + text + RESET

    def duration(self, text: str, duration_ms: float) -> str:
        return self.paint(text, duration_color(duration_ms))
