"""Controller for enrolling, listing, and matching known faces."""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from dal.face_dal import FaceDAL
from models.face_record import EnrolledFace
from services.realtime.face_matcher import DEFAULT_THRESHOLD, UNKNOWN_LABEL, average_descriptors, match
from utils.descriptor_validation import ensure_descriptor, ensure_descriptor_set


def _summary(face: EnrolledFace) -> Dict[str, Any]:
    return {"label": face.label, "sample_count": face.sample_count, "trained_at": face.trained_at}


class FaceController:
    """Coordinate face gallery requests between the API layer and the FACE table."""

    def __init__(self, dal: FaceDAL, threshold: float = DEFAULT_THRESHOLD) -> None:
        """
        Args:
            dal: FaceDAL bound to the shared database initializer.
            threshold: Euclidean distance a match must stay under.
        """
        self.dal = dal
        self.threshold = threshold

    async def enroll(self, label: str, descriptors: Any, keep_samples: bool = False) -> Dict[str, Any]:
        """Validate samples and store them (or their centroid) under `label`.

        Raises:
            ValueError: If the label is blank or the samples are malformed.
        """
        clean_label = (label or "").strip()
        if not clean_label:
            raise ValueError("Label is required.")
        samples = ensure_descriptor_set(descriptors)
        stored = samples if keep_samples else [average_descriptors(samples)]
        face = await self.dal.upsert_face(EnrolledFace(label=clean_label, descriptors=stored))
        return _summary(face)

    async def list_faces(self) -> List[Dict[str, Any]]:
        return [_summary(face) for face in await self.dal.list_faces()]

    async def remove(self, label: str) -> Dict[str, Any]:
        if not await self.dal.delete_face(label):
            raise HTTPException(status_code=404, detail="Face not found")
        return {"label": label, "deleted": True}

    async def clear(self) -> Dict[str, Any]:
        return {"deleted": await self.dal.clear_faces()}

    async def match(self, descriptor: Any, threshold: Optional[float] = None) -> Dict[str, Any]:
        """Return the best enrolled label for `descriptor`, or Unknown."""
        query = ensure_descriptor(descriptor)
        result = match(query, await self.dal.list_faces(), threshold if threshold is not None else self.threshold)
        if result is None:
            return {"label": UNKNOWN_LABEL, "confidence": 0.0}
        return {"label": result.label, "confidence": result.confidence}
