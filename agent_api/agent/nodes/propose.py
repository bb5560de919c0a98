from typing import Any

from langgraph.types import interrupt

from agent_api.agent.state import AgentState, StateUpdate

APPROVAL_QUESTION = "Approve this change?"
PLACEHOLDER_DIFF = "(placeholder diff - replace with real proposal)"


def approved_from(decision: Any) -> bool:
    """``approved`` of a mapping decision, else the truthiness of the decision."""
    if isinstance(decision, dict) and "approved" in decision:
        return bool(decision["approved"])
    return bool(decision)


async def propose_node(state: AgentState) -> StateUpdate:
    """Human-in-the-loop checkpoint: the run is interrupted here.

    The client receives the proposal as an approval request. On resume the
    node runs again, ``interrupt`` returns the user's decision and only the
    outcome is recorded; no message is appended.
    """
    decision = interrupt({"question": APPROVAL_QUESTION, "diff": PLACEHOLDER_DIFF})
    return {"context": {"approved": approved_from(decision)}}
