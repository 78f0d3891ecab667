"""Chat API endpoint.

Routes:
- POST /chat - Stream a corpus-grounded answer as chunked plain text

Dependencies: backend.core.rag.generation_pipeline
System role: Chat HTTP API with streaming support
"""

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Response
from fastapi.responses import StreamingResponse

from backend.api.deps import get_generation_pipeline
from backend.api.error_handlers import error_response
from backend.core.exceptions import CorpusChatException
from backend.core.rag.generation_pipeline import GenerationPipeline
from backend.models.chat import ChatRequest
from backend.models.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post(
    "/chat",
    response_class=StreamingResponse,
    response_model=None,
    responses={
        200: {"content": {"text/plain": {}}, "description": "Answer tokens streamed in order"},
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def chat(
    request: ChatRequest,
    pipeline: GenerationPipeline = Depends(get_generation_pipeline),
) -> Response:
    """Answer the latest message from the corpus, streaming tokens.

    The first token is awaited before the response starts so that failures in
    cache lookup, index readiness, retrieval or the start of generation still
    produce a JSON error with a proper status code. Failures after streaming
    has begun are logged and end the body.

    Args:
        request: Conversation; the last message is the question
        pipeline: Injected GenerationPipeline

    Returns:
        StreamingResponse: Answer text, chunked as produced

    Raises:
        CorpusChatException: Converted to JSON by the registered handler
    """
    question = request.question
    logger.info(
        f"{__name__}:chat - START history_len={len(request.history)}, question_len={len(question)}"
    )

    tokens = pipeline.answer(request.history, question)
    try:
        first_token = await anext(tokens, None)
    except CorpusChatException:
        await tokens.aclose()
        raise
    except Exception as e:
        await tokens.aclose()
        logger.exception(f"{__name__}:chat - Unexpected error before streaming: {type(e).__name__}: {e}")
        return error_response(str(e), getattr(e, "status_code", 500))

    async def body() -> AsyncIterator[str]:
        try:
            if first_token is not None:
                yield first_token
            async for token in tokens:
                yield token
            logger.info(f"{__name__}:chat - Stream completed")
        except CorpusChatException as e:
            # Headers are already sent; the truncated body is all we can signal.
            logger.error(f"{__name__}:chat - Stream aborted: {type(e).__name__}: {e.message}")
        finally:
            await tokens.aclose()

    return StreamingResponse(
        body(),
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
