"""Configuration management for the budget tracker.

This module centralizes configuration values including display defaults,
paths, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in budget_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directory used by the scripts for CSV exports
DATA_DIR = Path(os.getenv("BUDGET_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))

# Currency display
CURRENCY_SYMBOL = os.getenv("BUDGET_TRACKER_CURRENCY_SYMBOL", "₹")
DIGIT_GROUPING = os.getenv("BUDGET_TRACKER_DIGIT_GROUPING", "indian").strip().lower()

DIGIT_GROUPINGS = ("indian", "western")
