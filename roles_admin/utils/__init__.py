"""Utility helpers for reusable functionality."""

from .datetime import get_app_timezone, localize, now_in_app_timezone

__all__ = ["get_app_timezone", "localize", "now_in_app_timezone"]
