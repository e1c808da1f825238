"""
Wire records exchanged with the model provider.

Every request carries its own sampling parameters; each task (SQL, title,
sample questions) picks them from settings, so providers hold no defaults.
"""

from typing import Literal

from pydantic import BaseModel, Field

FinishReason = Literal["stop", "length", "content_filter"]


class LLMMessage(BaseModel):
    """One chat turn as sent to the provider (system turns included)."""

    role: Literal["system", "user", "assistant"]
    content: str = Field(..., min_length=1)


class LLMRequest(BaseModel):
    """A single completion call."""

    messages: list[LLMMessage] = Field(..., min_length=1)
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_tokens: int = Field(..., gt=0)


class LLMUsage(BaseModel):
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)


class LLMResponse(BaseModel):
    """Raw completion text plus what the provider reported about it."""

    content: str
    model: str = Field(..., description="Model that produced the completion")
    provider: str
    finish_reason: FinishReason = "stop"
    usage: LLMUsage = Field(default_factory=LLMUsage)
