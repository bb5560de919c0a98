from langchain_core.messages import AIMessage

from agent_api.agent.state import AgentState, StateUpdate, last_message_text


async def plan_node(state: AgentState) -> StateUpdate:
    """Announce the intended action and record it in the context."""
    return {
        "messages": [
            AIMessage(content=f'I will edit the file based on: "{last_message_text(state)}"')
        ],
        "context": {"plan": "edit_file"},
    }
