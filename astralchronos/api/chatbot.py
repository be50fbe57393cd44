"""
Chatbot endpoint.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from astralchronos.api.dependencies import get_chat_service
from astralchronos.api.responses import ChatErrorResponse
from astralchronos.models.schemas import ChatRequest, ChatResponse
from astralchronos.services.chatbot import (
    TECHNICAL_DIFFICULTIES_REPLY,
    ChatbotUnavailableError,
    ChatService,
)

router = APIRouter(prefix="/api", tags=["chatbot"])


@router.post(
    "/chatbot",
    response_model=ChatResponse,
    summary="Ask the space assistant",
    responses={503: {"model": ChatErrorResponse}},
)
async def chat(request: ChatRequest, chat_service: ChatService = Depends(get_chat_service)):
    try:
        return await chat_service.reply(request.message)
    except ChatbotUnavailableError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ChatErrorResponse(
                error="Chatbot service unavailable",
                response=TECHNICAL_DIFFICULTIES_REPLY,
            ).model_dump(),
        )

