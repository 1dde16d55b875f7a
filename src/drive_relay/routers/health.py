from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def health_check() -> str:
    """Liveness probe for load balancers and uptime checks."""
    return "Drive uploader is running."
