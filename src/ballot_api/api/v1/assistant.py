"""Election assistant endpoints.

POST /assistant/summarize: summarize a candidate platform
POST /assistant/chat: answer an election-process question
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends

from ballot_api.core.config import Settings, get_settings
from ballot_api.lib.assistant import BaseTextGenerator
from ballot_api.schemas.assistant import ChatRequest, ChatResponse, SummarizeRequest, SummarizeResponse
from ballot_api.services import assistant_service

assistant_router = APIRouter(prefix="/assistant", tags=["assistant"])


async def get_text_generator(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AsyncGenerator[BaseTextGenerator]:
    """Yield the configured generator for one request, closing it afterwards."""
    generator = assistant_service.create_generator(settings)
    try:
        yield generator
    finally:
        await generator.close()


@assistant_router.post("/summarize", response_model=SummarizeResponse)
async def summarize(
    body: SummarizeRequest,
    generator: Annotated[BaseTextGenerator, Depends(get_text_generator)],
) -> SummarizeResponse:
    """Summarize a candidate platform concisely and objectively."""
    summary = await assistant_service.summarize_platform(generator, body.text)
    return SummarizeResponse(summary=summary)


@assistant_router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    generator: Annotated[BaseTextGenerator, Depends(get_text_generator)],
) -> ChatResponse:
    """Answer a question about election processes or election history."""
    response = await assistant_service.answer_question(generator, body.query, body.history)
    return ChatResponse(response=response)
