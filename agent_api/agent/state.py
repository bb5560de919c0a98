import operator
from typing import Annotated, Any
from typing_extensions import NotRequired, TypedDict

from langchain_core.messages import AIMessage, BaseMessage


def merge_context(current: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Fold ``update`` into ``current`` key by key; other keys pass through."""
    return {**(current or {}), **(update or {})}


class AgentState(TypedDict):
    # Conversation
    messages: Annotated[list[BaseMessage], operator.add]   # append-only
    sessionId: str                                         # the thread id

    # Free-form node context, merged key by key
    context: Annotated[dict[str, Any], merge_context]


class StateUpdate(TypedDict):
    """Partial update returned by a node."""

    messages: NotRequired[list[BaseMessage]]  # appended, never replaced
    context: NotRequired[dict[str, Any]]      # merged into the current context


def last_message_text(state: AgentState) -> str:
    messages = state.get("messages") or []
    if not messages:
        return ""
    content = messages[-1].content
    return content if isinstance(content, str) else ""


def last_assistant_message(state: AgentState, start: int = 0) -> AIMessage | None:
    """Latest message if it is an assistant message at index ``start`` or later."""
    messages = state.get("messages") or []
    if len(messages) <= start:
        return None
    last = messages[-1]
    return last if isinstance(last, AIMessage) else None
