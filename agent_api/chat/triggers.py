from dataclasses import dataclass
from typing import Any, Literal, Optional, Union


@dataclass(frozen=True)
class MessageTrigger:
    text: str
    thread_id: Optional[str] = None   # None starts a new thread
    type: Literal["message"] = "message"


@dataclass(frozen=True)
class ApproveTrigger:
    thread_id: str
    payload: Any = None
    tool_call_id: Optional[str] = None
    type: Literal["approve"] = "approve"


@dataclass(frozen=True)
class RejectTrigger:
    thread_id: str
    tool_call_id: Optional[str] = None
    type: Literal["reject"] = "reject"


StreamTrigger = Union[MessageTrigger, ApproveTrigger, RejectTrigger]
ResumeTrigger = Union[ApproveTrigger, RejectTrigger]
