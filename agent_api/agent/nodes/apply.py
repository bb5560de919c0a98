from langchain_core.messages import AIMessage

from agent_api.agent.state import AgentState, StateUpdate


async def apply_node(state: AgentState) -> StateUpdate:
    approved = bool(state["context"].get("approved", False))
    text = "Done. Changes applied." if approved else "No changes made."
    return {"messages": [AIMessage(content=text)]}
