"""
Generation Routes

SQL generation plus the auxiliary title and sample-question endpoints.
"""

import logging

from fastapi import APIRouter

from askdb.models.api import (
    GenerateRequest,
    GenerateResponse,
    SampleQuestionsRequest,
    SampleQuestionsResponse,
    TitleRequest,
    TitleResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_services():
    from askdb.api.main import get_services

    return get_services()


@router.post("/generate", response_model=GenerateResponse)
async def generate(request: GenerateRequest) -> GenerateResponse:
    """
    Translate the latest user request into one SQL statement.

    Returns:
        GenerateResponse with bare SQL text

    Errors (mapped by the app's exception handlers):
        400 no user prompt, 429 quota used up, 500 missing key or upstream failure
    """
    services = _get_services()
    sql = await services.sql_generator.generate(
        request.schema_,
        messages=request.messages,
        prompt=request.prompt,
    )
    return GenerateResponse(sql=sql)


@router.post("/title", response_model=TitleResponse)
async def title(request: TitleRequest) -> TitleResponse:
    """Summarize a conversation into a short title."""
    services = _get_services()
    return TitleResponse(title=await services.title_generator.generate(request.messages))


@router.post("/sample-questions", response_model=SampleQuestionsResponse)
async def sample_questions(request: SampleQuestionsRequest) -> SampleQuestionsResponse:
    """Suggest example questions for a schema; an unparseable reply yields an empty list."""
    services = _get_services()
    suggestions = await services.sample_questions.generate(request.schema_)
    return SampleQuestionsResponse(suggestions=suggestions)
