"""Threshold check on three-component readings."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

logger = logging.getLogger(__name__)


def _parse_float(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid number: {text!r}")
    return float(text)


def triplet(value: str) -> list[float]:
    """Parse ``"x[,y[,z]]"`` into three floats, missing parts being zero."""
    parts = value.split(",")
    first = _parse_float(parts[0])
    second = _parse_float(parts[1]) if len(parts) >= 2 else 0.0
    third = _parse_float(parts[2]) if len(parts) >= 3 else 0.0
    return [first, second, third]


def norm(vec: list[float]) -> float:
    """Euclidean length of the first three components of ``vec``."""
    return math.sqrt(vec[0] ** 2 + vec[1] ** 2 + vec[2] ** 2)


def evaluate(
    old_data: Mapping[str, Any],
    new_data: Mapping[str, Any],
    thresholds: Iterable[Mapping[str, Any]],
) -> tuple[str, str, str, bool]:
    """Compare two readings against the thresholds configured for the reading's name.

    Returns ``(source, notification, notification_level, fired)``.
    """
    logger.info("(notify.evaluate) old_data : %s", old_data)
    logger.info("(notify.evaluate) new_data : %s", new_data)
    if not old_data:
        return "", "", "", False

    old_reading = old_data["reading"]
    new_reading = new_data["reading"]
    new_triplet = triplet(new_reading["value"])
    old_triplet = triplet(old_reading["value"])

    source = ""
    notification = ""
    notification_level = ""
    limit = [0.0, 0.0, 0.0]
    for threshold in thresholds:
        source = new_reading["name"]
        if threshold.get("name") == source:
            notification = threshold["notification"]
            notification_level = threshold["notificationLevel"]
            values = list(threshold["value"])
            if len(values) > 3:
                raise ValueError(f"threshold for {source} has more than three values")
            for index, component in enumerate(values):
                limit[index] = float(component)

    if abs(norm(new_triplet) - norm(old_triplet)) > norm(limit):
        return source, notification, notification_level, True
    return "", "", "", False