"""Project metadata shared by the package and its command line."""

from __future__ import annotations

PROJECT_NAME = "hermes"
__version__ = "0.3.0"
