"""Protocol events streamed to the client.

Every event is tagged by ``type`` and goes over the wire as one SSE record
whose ``event`` is the type and whose ``data`` is the JSON of the whole event.
Field names are camelCase on the wire.
"""

import json
import uuid
from enum import Enum
from typing import Annotated, Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

DEFAULT_TOOL_NAME = "approve_action"


class SSEEventType(str, Enum):
    SESSION = "session"
    STATUS = "status"
    TEXT_DELTA = "text-delta"
    TEXT_END = "text-end"
    TOOL_CALL = "tool-call"
    TOOL_RESULT = "tool-result"
    APPROVAL_REQUESTED = "approval-requested"
    ERROR = "error"
    FINISH = "finish"


class StatusCode(str, Enum):
    THINKING = "thinking"
    EXECUTING = "executing"


class FinishReason(str, Enum):
    STOP = "stop"
    ERROR = "error"
    CANCELLED = "cancelled"


class _Event(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# Lifecycle & identity


class SessionEvent(_Event):
    type: Literal["session"] = "session"
    thread_id: str


class StatusEvent(_Event):
    type: Literal["status"] = "status"
    message: str
    code: Optional[StatusCode] = None


# Content streaming


class TextDeltaEvent(_Event):
    type: Literal["text-delta"] = "text-delta"
    content: str


class TextEndEvent(_Event):
    type: Literal["text-end"] = "text-end"
    metadata: Optional[dict[str, Any]] = None


# Tool orchestration & human-in-the-loop


class ToolCallEvent(_Event):
    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str
    tool_name: str
    args: Any


class ApprovalRequestedEvent(_Event):
    type: Literal["approval-requested"] = "approval-requested"
    tool_call_id: str
    tool_name: str
    args: Any


class ToolResultEvent(_Event):
    type: Literal["tool-result"] = "tool-result"
    tool_call_id: str
    result: Any


# Termination


class ErrorEvent(_Event):
    type: Literal["error"] = "error"
    message: str
    code: Optional[str] = None


class FinishEvent(_Event):
    type: Literal["finish"] = "finish"
    finish_reason: FinishReason


SSEEvent = Annotated[
    Union[
        SessionEvent,
        StatusEvent,
        TextDeltaEvent,
        TextEndEvent,
        ToolCallEvent,
        ApprovalRequestedEvent,
        ToolResultEvent,
        ErrorEvent,
        FinishEvent,
    ],
    Field(discriminator="type"),
]

_event_adapter: TypeAdapter[SSEEvent] = TypeAdapter(SSEEvent)


# Optional fields left out of the wire when unset; ``args`` and ``result`` keep null
_OMIT_WHEN_NONE = frozenset({"code", "metadata"})


def event_to_dict(event: SSEEvent) -> dict[str, Any]:
    """Wire shape of ``event``."""
    data = event.model_dump(mode="json", by_alias=True)
    return {
        key: value
        for key, value in data.items()
        if value is not None or key not in _OMIT_WHEN_NONE
    }


def sse_event_to_message(event: SSEEvent) -> dict[str, str]:
    """SSE envelope: ``event`` is the type, ``data`` is the full payload JSON."""
    return {"event": event.type, "data": json.dumps(event_to_dict(event))}


def parse_event(data: Union[str, bytes, dict[str, Any]]) -> SSEEvent:
    """Inverse of :func:`sse_event_to_message` for the ``data`` part."""
    if isinstance(data, dict):
        return _event_adapter.validate_python(data)
    return _event_adapter.validate_json(data)


def normalize_interrupt_to_tool_call(
    value: Any,
    new_id: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> tuple[str, str, Any]:
    """Turn an interrupt value into ``(tool_call_id, tool_name, args)``.

    Mappings that carry ``toolName`` supply their own id, name and
    ``args`` (or ``input``); anything else becomes the ``args`` of an
    ``approve_action`` call with a fresh id.
    """
    if isinstance(value, dict) and "toolName" in value:
        tool_call_id = value.get("toolCallId")
        tool_name = value.get("toolName")
        args = value.get("args")
        if args is None:
            args = value.get("input")
        if args is None:
            args = value
        return (
            tool_call_id if isinstance(tool_call_id, str) else new_id(),
            tool_name if isinstance(tool_name, str) else DEFAULT_TOOL_NAME,
            args,
        )
    return new_id(), DEFAULT_TOOL_NAME, value
