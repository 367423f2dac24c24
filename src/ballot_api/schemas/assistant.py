"""Election assistant request/response schemas."""

from pydantic import BaseModel, Field


class SummarizeRequest(BaseModel):
    """Candidate platform text to summarize."""

    text: str = Field(min_length=1, max_length=20000)


class SummarizeResponse(BaseModel):
    summary: str


class ChatTurn(BaseModel):
    """One exchange of an assistant conversation."""

    user: str | None = None
    model: str | None = None


class ChatRequest(BaseModel):
    """A question with the prior conversation."""

    query: str = Field(min_length=1, max_length=4000)
    history: list[ChatTurn] = Field(default_factory=list, max_length=50)


class ChatResponse(BaseModel):
    response: str
