"""FastAPI routes for querying active streams."""

from fastapi import APIRouter, HTTPException, Request

from controllers.session_controller import get_stream, list_streams

router = APIRouter(prefix="/api")


@router.get("/streams")
async def list_streams_route(request: Request):
	try:
		return await list_streams(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/stream/{stream_id}")
async def get_stream_route(request: Request, stream_id: str):
	try:
		return await get_stream(request, stream_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
