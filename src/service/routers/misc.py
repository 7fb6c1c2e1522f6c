from fastapi import APIRouter

from schema import StatusResponse

router = APIRouter()


@router.get("/status")
async def get_status() -> StatusResponse:
    """Health check endpoint."""
    return StatusResponse()
