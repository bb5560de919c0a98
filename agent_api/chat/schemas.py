from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class UIMessagePart(BaseModel):
    type: str
    text: Optional[str] = None


class UIMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    parts: list[UIMessagePart] = Field(default_factory=list)


class ChatRequest(BaseModel):
    """Body of ``POST /chat``: a plain ``message`` or a UI message history."""

    message: Optional[str] = None
    messages: Optional[list[UIMessage]] = None
    thread_id: Optional[str] = Field(default=None, min_length=1)
    sessionId: Optional[str] = Field(default=None, min_length=1)

    def text(self) -> str:
        """The user's text: ``message``, else the text part of the last user message."""
        if self.message is not None:
            return self.message
        for ui_message in reversed(self.messages or []):
            if ui_message.role != "user":
                continue
            for part in ui_message.parts:
                if part.type == "text" and part.text is not None:
                    return part.text
            break
        return ""

    def existing_thread_id(self) -> Optional[str]:
        return self.thread_id or self.sessionId


class ChatApproveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    thread_id: str = Field(min_length=1)
    payload: Optional[Any] = None
    tool_call_id: Optional[str] = Field(default=None, alias="toolCallId")


class ChatRejectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    thread_id: str = Field(min_length=1)
    tool_call_id: Optional[str] = Field(default=None, alias="toolCallId")
