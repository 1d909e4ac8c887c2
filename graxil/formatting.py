"""Human readable formatting of hashrates, durations and large numbers."""

from __future__ import annotations


def format_hashrate(hashrate: float) -> str:
    """Format hashes per second with an H/s, KH/s, MH/s or GH/s unit."""
    if hashrate >= 1_000_000_000.0:
        return f"{hashrate / 1_000_000_000.0:.2f} GH/s"
    if hashrate >= 1_000_000.0:
        return f"{hashrate / 1_000_000.0:.2f} MH/s"
    if hashrate >= 1_000.0:
        return f"{hashrate / 1_000.0:.2f} KH/s"
    return f"{hashrate:.2f} H/s"


def format_duration(seconds: float) -> str:
    """Format a duration as whole seconds, whole minutes or tenths of hours."""
    secs = int(seconds)
    if secs < 60:
        return f"{secs}s"
    if secs < 3600:
        return f"{secs // 60}m"
    return f"{secs / 3600.0:.1f}h"


def format_number(num: int) -> str:
    """Format a count with a K, M or B suffix."""
    if num >= 1_000_000_000:
        return f"{num / 1_000_000_000.0:.1f}B"
    if num >= 1_000_000:
        return f"{num / 1_000_000.0:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000.0:.1f}K"
    return str(num)