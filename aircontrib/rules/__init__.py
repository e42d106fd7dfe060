"""Threshold rules that decide when a change in a reading calls for a notification."""

__all__ = ["notify"]