"""Nearest-label face matching over enrolled descriptors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

from models.face_record import EnrolledFace

LOGGER = logging.getLogger(__name__)
DEFAULT_THRESHOLD = 0.6
UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class FaceMatch:
	label: str
	confidence: float
	distance: float


def match(
	descriptor: Sequence[float],
	gallery: Iterable[EnrolledFace],
	threshold: float = DEFAULT_THRESHOLD,
) -> Optional[FaceMatch]:
	"""Return the closest enrolled label under ``threshold`` or None.

	Every stored sample of a label is compared and the label keeps its
	minimum Euclidean distance. Ties go to the label seen first.
	Confidence is ``1 - distance``.
	"""
	query = np.asarray(descriptor, dtype=np.float64)
	best: Optional[FaceMatch] = None
	for face in gallery:
		if not face.descriptors:
			continue
		samples = np.asarray(face.descriptors, dtype=np.float64)
		if samples.ndim != 2 or samples.shape[1] != query.shape[0]:
			LOGGER.debug("Skipping %s: descriptor length mismatch", face.label)
			continue
		distance = float(np.linalg.norm(samples - query, axis=1).min())
		if not np.isfinite(distance) or distance >= threshold:
			continue
		if best is None or distance < best.distance:
			best = FaceMatch(label=face.label, confidence=1.0 - distance, distance=distance)
	return best


def average_descriptors(samples: Sequence[Sequence[float]]) -> list:
	"""Return the element-wise mean of the captured samples."""
	stacked = np.asarray(samples, dtype=np.float64)
	if stacked.ndim != 2 or stacked.shape[0] == 0:
		raise ValueError("At least one descriptor sample is required.")
	return stacked.mean(axis=0).tolist()
