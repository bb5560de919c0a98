import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Request
from langgraph.graph.state import CompiledStateGraph
from sse_starlette.sse import EventSourceResponse

from agent_api.chat.deps import get_graph, get_thread_locks
from agent_api.chat.events import FinishReason, sse_event_to_message
from agent_api.chat.schemas import ChatApproveRequest, ChatRejectRequest, ChatRequest
from agent_api.chat.stream import ThreadLocks, stream_chat_events
from agent_api.chat.triggers import ApproveTrigger, MessageTrigger, RejectTrigger, StreamTrigger
from agent_api.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


async def _sse_messages(
    trigger: StreamTrigger,
    request: Request,
    graph: CompiledStateGraph,
    locks: ThreadLocks,
) -> AsyncIterator[dict[str, str]]:
    events = stream_chat_events(
        trigger,
        graph,
        locks=locks,
        is_abandoned=request.is_disconnected,
        reject_finish_reason=FinishReason(settings.reject_finish_reason),
    )
    async for event in events:
        yield sse_event_to_message(event)


@router.post("")
async def chat(
    body: ChatRequest,
    request: Request,
    graph: CompiledStateGraph = Depends(get_graph),
    locks: ThreadLocks = Depends(get_thread_locks),
) -> EventSourceResponse:
    """Start or continue a conversation.

    Streams: session, status, text-delta, text-end, tool-call,
    approval-requested, finish, error.
    """
    trigger = MessageTrigger(text=body.text(), thread_id=body.existing_thread_id())
    logger.info("Chat message: thread_id=%s text=%.50s", trigger.thread_id, trigger.text)
    return EventSourceResponse(_sse_messages(trigger, request, graph, locks))


@router.post("/approve")
async def approve(
    body: ChatApproveRequest,
    request: Request,
    graph: CompiledStateGraph = Depends(get_graph),
    locks: ThreadLocks = Depends(get_thread_locks),
) -> EventSourceResponse:
    """Approve the pending action (after approval-requested).

    ``toolCallId`` correlates the tool-result event. Streams: status,
    text-delta, text-end, tool-result, finish, error.
    """
    trigger = ApproveTrigger(
        thread_id=body.thread_id, payload=body.payload, tool_call_id=body.tool_call_id
    )
    logger.info("Chat approve: thread_id=%s", trigger.thread_id)
    return EventSourceResponse(_sse_messages(trigger, request, graph, locks))


@router.post("/reject")
async def reject(
    body: ChatRejectRequest,
    request: Request,
    graph: CompiledStateGraph = Depends(get_graph),
    locks: ThreadLocks = Depends(get_thread_locks),
) -> EventSourceResponse:
    """Cancel the pending action. Same stream shape as approve."""
    trigger = RejectTrigger(thread_id=body.thread_id, tool_call_id=body.tool_call_id)
    logger.info("Chat reject: thread_id=%s", trigger.thread_id)
    return EventSourceResponse(_sse_messages(trigger, request, graph, locks))
