"""Landing route for the API base path."""

from fastapi import APIRouter

from post_api.schemas.post import MessageResponse

router = APIRouter(prefix="/api", tags=["Index"])

WELCOME_MESSAGE = "Post Service API is up and running"


@router.get("/", response_model=MessageResponse, summary="API landing message")
async def index() -> MessageResponse:
    return MessageResponse(message=WELCOME_MESSAGE)
