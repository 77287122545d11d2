"""Count warnings and errors and keep recent performance-related lines."""

from __future__ import annotations

from collections import deque

from devprobe.models.logs import LogAnalysis

PERFORMANCE_KEYWORDS = (
    "slow", "latency", "timeout", "delay", "performance",
    "workspace indexing", "indexing", "telemetry",
    "memory", "cpu", "hang", "freeze",
)

MAX_LINES_PER_FILE = 10


def analyze(
    text: str,
    keywords: tuple[str, ...] = PERFORMANCE_KEYWORDS,
    max_lines: int = MAX_LINES_PER_FILE,
) -> LogAnalysis:
    """Scan *text* line by line.

    Lines end at newlines only; a lone carriage return or form feed
    stays inside its line.

    A line containing "warn" or "error" (any case) bumps the matching
    counter; one line can bump both. Lines mentioning any keyword are
    kept once each, trimmed, and only the last *max_lines* survive.
    """
    warnings = 0
    errors = 0
    recent: deque[str] = deque(maxlen=max_lines)

    for line in text.split("\n"):
        lowered = line.lower()
        if "warn" in lowered:
            warnings += 1
        if "error" in lowered:
            errors += 1
        if any(keyword in lowered for keyword in keywords):
            recent.append(line.strip())

    return LogAnalysis(warnings=warnings, errors=errors, performance_lines=tuple(recent))
