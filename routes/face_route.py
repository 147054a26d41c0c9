"""FastAPI routes for the face enrollment gallery."""

from typing import List

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.face_controller import FaceController
from dal.face_dal import FaceDAL

router = APIRouter(prefix="/api/faces", tags=["faces"])


class EnrollPayload(BaseModel):
    label: str
    descriptors: List[List[float]]
    keep_samples: bool = False


class MatchPayload(BaseModel):
    descriptor: List[float]


def _get_controller(request: Request) -> FaceController:
    """Build a controller over the shared database initializer."""
    db_initializer = getattr(request.app.state, "db_initializer", None)
    if db_initializer is None:
        raise HTTPException(status_code=500, detail="Database not initialized.")
    config = request.app.state.audience_config
    return FaceController(FaceDAL(db_initializer), threshold=config.face_match_threshold)


@router.post("", summary="Enroll or re-enroll a known face")
async def enroll_face(request: Request, payload: EnrollPayload):
    """Store the centroid (or raw samples) captured by the training page."""
    try:
        return await _get_controller(request).enroll(payload.label, payload.descriptors, payload.keep_samples)
    except HTTPException:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=500, detail="Failed to enroll face.") from exc


@router.get("", summary="List enrolled faces")
async def list_faces(request: Request):
    try:
        return await _get_controller(request).list_faces()
    except HTTPException:
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=500, detail="Failed to list faces.") from exc


@router.delete("", summary="Remove every enrolled face")
async def clear_faces(request: Request):
    try:
        return await _get_controller(request).clear()
    except HTTPException:
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=500, detail="Failed to clear faces.") from exc


@router.delete("/{label}", summary="Remove one enrolled face")
async def delete_face(request: Request, label: str):
    try:
        return await _get_controller(request).remove(label)
    except HTTPException:
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=500, detail="Failed to delete face.") from exc


@router.post("/match", summary="Match a descriptor against the gallery")
async def match_face(request: Request, payload: MatchPayload):
    try:
        return await _get_controller(request).match(payload.descriptor)
    except HTTPException:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=500, detail="Failed to match face.") from exc
