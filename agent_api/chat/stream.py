"""Drive the agent graph for one trigger and emit protocol events.

Event order per invocation:

* message: [session], status, text-delta*, then either tool-call +
  approval-requested (interrupted) or text-end + finish
* approve / reject: status, text-delta*, text-end, tool-result, finish

A fault anywhere ends the stream with a single ``error`` event.
"""

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, Optional

from langgraph.graph.state import CompiledStateGraph
from langgraph.types import StateSnapshot

from agent_api.agent.graph import initial_state, thread_config
from agent_api.agent.state import AgentState, last_assistant_message
from agent_api.chat.events import (
    DEFAULT_TOOL_NAME,
    ApprovalRequestedEvent,
    ErrorEvent,
    FinishEvent,
    FinishReason,
    SessionEvent,
    SSEEvent,
    StatusCode,
    StatusEvent,
    TextDeltaEvent,
    TextEndEvent,
    ToolCallEvent,
    ToolResultEvent,
    normalize_interrupt_to_tool_call,
)
from agent_api.chat.resume import is_interrupted, resume_thread
from agent_api.chat.triggers import ApproveTrigger, MessageTrigger, StreamTrigger

logger = logging.getLogger(__name__)

AbandonCheck = Callable[[], Awaitable[bool]]

# Key LangGraph uses for interrupt chunks in a stream
INTERRUPT_KEY = "__interrupt__"

_NO_INTERRUPT = object()


def new_thread_id() -> str:
    """Generate a new thread id for a new conversation."""
    return str(uuid.uuid4())


class ThreadLocks:
    """One ``asyncio.Lock`` per thread id, dropped when nobody holds or waits on it.

    Requests for the same thread run one after the other; different threads
    never block each other.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, thread_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(thread_id, asyncio.Lock())
        self._waiters[thread_id] = self._waiters.get(thread_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[thread_id] -= 1
            if not self._waiters[thread_id]:
                del self._waiters[thread_id]
                del self._locks[thread_id]

    def __contains__(self, thread_id: str) -> bool:
        return thread_id in self._locks


@asynccontextmanager
async def _no_lock() -> AsyncIterator[None]:
    yield


def _pending_interrupt(snapshot: StateSnapshot) -> Any:
    if not is_interrupted(snapshot):
        return _NO_INTERRUPT
    for task in snapshot.tasks:
        if task.interrupts:
            return task.interrupts[0].value
    return _NO_INTERRUPT


async def stream_chat_events(
    trigger: StreamTrigger,
    graph: CompiledStateGraph,
    *,
    locks: Optional[ThreadLocks] = None,
    is_abandoned: Optional[AbandonCheck] = None,
    reject_finish_reason: FinishReason = FinishReason.ERROR,
) -> AsyncIterator[SSEEvent]:
    """Yield the protocol events for ``trigger``.

    ``is_abandoned`` is awaited before every event; once it returns true the
    stream stops without emitting anything else.
    """
    thread_id = trigger.thread_id or new_thread_id()
    guard = locks.hold(thread_id) if locks is not None else _no_lock()

    async with guard:
        events = _run(trigger, thread_id, graph, reject_finish_reason)
        try:
            async for event in events:
                if is_abandoned is not None and await is_abandoned():
                    logger.info("Client abandoned stream: thread_id=%s", thread_id)
                    return
                yield event
        finally:
            await events.aclose()


async def _run(
    trigger: StreamTrigger,
    thread_id: str,
    graph: CompiledStateGraph,
    reject_finish_reason: FinishReason,
) -> AsyncIterator[SSEEvent]:
    config = thread_config(thread_id)
    try:
        if isinstance(trigger, MessageTrigger):
            if trigger.thread_id is None:
                yield SessionEvent(thread_id=thread_id)
            snapshot = await graph.aget_state(config)
            if is_interrupted(snapshot):
                logger.warning("New message on a thread awaiting approval: thread_id=%s", thread_id)
            graph_input: Any = initial_state(trigger.text, thread_id)
            yield StatusEvent(message="Planning", code=StatusCode.THINKING)
        else:
            approved = isinstance(trigger, ApproveTrigger)
            graph_input, snapshot = await resume_thread(graph, trigger)
            yield StatusEvent(
                message="Applying" if approved else "Cancelling",
                code=StatusCode.EXECUTING,
            )

        # Only messages appended during this run are streamed
        start = len(snapshot.values.get("messages", []))
        last_state: Optional[AgentState] = None
        pending = _NO_INTERRUPT
        current_index = -1
        sent = ""

        chunks = graph.astream(graph_input, config, stream_mode="values")
        try:
            async for chunk in chunks:
                if INTERRUPT_KEY in chunk:
                    interrupts = chunk[INTERRUPT_KEY]
                    if interrupts:
                        pending = interrupts[0].value
                    continue

                last_state = chunk
                message = last_assistant_message(chunk, start)
                if message is None or not isinstance(message.content, str):
                    continue
                index = len(chunk["messages"]) - 1
                if index != current_index:
                    current_index, sent = index, ""
                text = message.content
                if text != sent and text.startswith(sent):
                    content, sent = text[len(sent):], text
                    yield TextDeltaEvent(content=content)
        finally:
            await chunks.aclose()

        if pending is _NO_INTERRUPT:
            pending = _pending_interrupt(await graph.aget_state(config))
        if pending is not _NO_INTERRUPT:
            tool_call_id, tool_name, args = normalize_interrupt_to_tool_call(pending)
            yield ToolCallEvent(tool_call_id=tool_call_id, tool_name=tool_name, args=args)
            yield ApprovalRequestedEvent(tool_call_id=tool_call_id, tool_name=tool_name, args=args)
            return

        yield TextEndEvent()

        if isinstance(trigger, MessageTrigger):
            yield FinishEvent(finish_reason=FinishReason.STOP)
            return

        context = last_state.get("context") if last_state is not None else None
        yield ToolResultEvent(
            tool_call_id=trigger.tool_call_id or DEFAULT_TOOL_NAME,
            result=context if context is not None else {"applied": approved},
        )
        yield FinishEvent(finish_reason=FinishReason.STOP if approved else reject_finish_reason)
    except Exception as exc:
        logger.error("Chat stream failed: thread_id=%s error=%s", thread_id, exc, exc_info=True)
        yield ErrorEvent(message=str(exc) or exc.__class__.__name__)
