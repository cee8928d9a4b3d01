# ruff: noqa: INP001
"""Pytest configuration shared across planboard tests."""

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time; pin deterministic values regardless of shell env.
os.environ["ENVIRONMENT"] = "test"
os.environ["API_BASE_URL"] = "http://planboard.test"
os.environ["API_TOKEN"] = ""
os.environ["LOG_FORMAT"] = "text"
os.environ["NOTIFICATION_TTL_SECONDS"] = "3"
