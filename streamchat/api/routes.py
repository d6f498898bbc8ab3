"""Chat endpoint streaming model output as server-sent events.

Each upstream chunk becomes one `data: {"response": "..."}` frame followed by
a blank line; the stream ends with `data: [DONE]`.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, StreamingResponse

from streamchat.agent.chat_agent import AgentService, get_agent_service
from streamchat.models.schemas import ChatRequest, ChatResponse, ErrorResponse, StreamFrame

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

DONE_FRAME = "data: [DONE]\n\n"


def format_frame(text: str) -> str:
    """Encode one text chunk as an SSE data frame."""
    return f"data: {StreamFrame(response=text).model_dump_json()}\n\n"


def _error_response(e: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Failed to process request", details=str(e)).model_dump(),
    )


async def _event_stream(
    first: str | None,
    rest: AsyncIterator[str],
) -> AsyncGenerator[str]:
    """Yield SSE frames for an upstream stream whose first chunk is already read."""
    if first is not None:
        yield format_frame(first)
    try:
        async for chunk in rest:
            yield format_frame(chunk)
    except Exception as e:
        # Headers are already sent; ending the stream early is all we can do.
        logger.error(f"Upstream stream failed mid-response: {e}")
        return
    yield DONE_FRAME


@router.post(
    "/chat",
    responses={500: {"model": ErrorResponse}},
)
async def chat(
    request: ChatRequest,
    stream: bool = True,
    agent_service: AgentService = Depends(get_agent_service),
):
    """Generate a reply to a conversation.

    Args:
        request: The conversation so far.
        stream: Stream SSE frames (default) or return one JSON object.
        agent_service: Upstream model access.

    Returns:
        `text/event-stream` of response frames, or a ChatResponse.

    Raises:
        422: Invalid request body.
        500: Upstream failure before any output.
    """
    if not stream:
        try:
            text = await agent_service.get_response(request.messages)
        except Exception as e:
            logger.error(f"Error processing chat request: {e}")
            return _error_response(e)
        return ChatResponse(response=text)

    chunks = agent_service.stream_response(request.messages)
    try:
        first = await anext(chunks)
    except StopAsyncIteration:
        first = None
    except Exception as e:
        logger.error(f"Error processing chat request: {e}")
        return _error_response(e)

    return StreamingResponse(
        _event_stream(first, chunks),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
