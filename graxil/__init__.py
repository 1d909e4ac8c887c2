"""Mining statistics, GPU monitoring, dashboards and nonce helpers for SHA3x GPU miners."""

__version__ = "1.0.1"