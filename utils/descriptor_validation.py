"""Validation helpers for face descriptors sent by the browser."""

import math
from typing import Any, List


def ensure_descriptor(raw: Any) -> List[float]:
    """Return a descriptor as a list of finite floats or raise ValueError."""
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ValueError("Descriptor must be a non-empty list of numbers.")
    try:
        values = [float(value) for value in raw]
    except (TypeError, ValueError) as exc:
        raise ValueError("Descriptor must contain only numbers.") from exc
    if not all(math.isfinite(value) for value in values):
        raise ValueError("Descriptor values must be finite.")
    return values


def ensure_descriptor_set(raw: Any) -> List[List[float]]:
    """Validate a list of samples that must all share one length."""
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ValueError("At least one descriptor sample is required.")
    samples = [ensure_descriptor(sample) for sample in raw]
    lengths = {len(sample) for sample in samples}
    if len(lengths) != 1:
        raise ValueError("All descriptor samples must have the same length.")
    return samples
