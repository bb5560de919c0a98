import logging
from typing import Any

from langgraph.graph.state import CompiledStateGraph
from langgraph.types import Command, StateSnapshot

from agent_api.agent.graph import thread_config
from agent_api.chat.triggers import ApproveTrigger, ResumeTrigger

logger = logging.getLogger(__name__)


class ThreadNotSuspendedError(Exception):
    """Resume was requested for a thread that is not waiting on a decision."""


def resume_value_for(trigger: ResumeTrigger) -> Any:
    """Decision handed to the interrupted node.

    An explicit approve payload is passed through as is; a bare approve means
    ``{"approved": True}`` and a reject always means ``{"approved": False}``.
    """
    if isinstance(trigger, ApproveTrigger):
        return trigger.payload if trigger.payload is not None else {"approved": True}
    return {"approved": False}


def is_interrupted(snapshot: StateSnapshot) -> bool:
    return bool(snapshot.next) and any(task.interrupts for task in snapshot.tasks)


async def suspended_snapshot(graph: CompiledStateGraph, thread_id: str) -> StateSnapshot:
    """Latest checkpoint of ``thread_id``, which must be waiting on an interrupt.

    Raises ``ThreadNotSuspendedError`` when the thread has no checkpoint or
    is not waiting for approval.
    """
    snapshot = await graph.aget_state(thread_config(thread_id))
    if not snapshot.values:
        raise ThreadNotSuspendedError(f"No checkpoint found for thread {thread_id}")
    if not is_interrupted(snapshot):
        raise ThreadNotSuspendedError(f"Thread {thread_id} is not waiting for approval")
    return snapshot


async def resume_thread(
    graph: CompiledStateGraph, trigger: ResumeTrigger
) -> tuple[Command, StateSnapshot]:
    """Resume command for ``trigger`` plus the checkpoint it continues from."""
    snapshot = await suspended_snapshot(graph, trigger.thread_id)
    logger.info(
        "Resuming thread: thread_id=%s decision=%s next=%s",
        trigger.thread_id,
        trigger.type,
        ",".join(snapshot.next),
    )
    return Command(resume=resume_value_for(trigger)), snapshot
