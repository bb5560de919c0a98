from langchain_core.messages import AIMessage

from agent_api.agent.state import AgentState, StateUpdate, last_message_text

_PLACEHOLDER_REPLY = (
    'I received your message: "{message}". This is a placeholder response. '
    "Please integrate your actual LLM provider here."
)


async def agent_node(state: AgentState) -> StateUpdate:
    """Single-step reply; the slot where a real LLM call goes."""
    reply = _PLACEHOLDER_REPLY.format(message=last_message_text(state))
    return {"messages": [AIMessage(content=reply)]}
