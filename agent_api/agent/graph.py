import logging
from typing import Any, Optional

from langchain_core.messages import HumanMessage
from langchain_core.runnables import RunnableConfig
from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph

from agent_api.agent.nodes.agent import agent_node
from agent_api.agent.nodes.apply import apply_node
from agent_api.agent.nodes.plan import plan_node
from agent_api.agent.nodes.propose import propose_node
from agent_api.agent.state import AgentState

logger = logging.getLogger(__name__)


def create_agent_graph(checkpointer: BaseCheckpointSaver) -> CompiledStateGraph:
    """Single ``agent`` node, never interrupts."""
    builder = StateGraph(AgentState)

    builder.add_node("agent", agent_node)

    builder.add_edge(START, "agent")
    builder.add_edge("agent", END)

    return builder.compile(checkpointer=checkpointer)


def create_interruptible_graph(checkpointer: BaseCheckpointSaver) -> CompiledStateGraph:
    """Plan -> Propose (interrupts for approval) -> Apply."""
    builder = StateGraph(AgentState)

    builder.add_node("plan", plan_node)
    builder.add_node("propose", propose_node)
    builder.add_node("apply", apply_node)

    builder.add_edge(START, "plan")
    builder.add_edge("plan", "propose")
    builder.add_edge("propose", "apply")
    builder.add_edge("apply", END)

    return builder.compile(checkpointer=checkpointer)


_BUILDERS = {
    "simple": create_agent_graph,
    "interruptible": create_interruptible_graph,
}


def build_graph(
    kind: str, checkpointer: Optional[BaseCheckpointSaver] = None
) -> CompiledStateGraph:
    """Compile the ``kind`` graph; a volatile ``MemorySaver`` unless one is given."""
    try:
        builder = _BUILDERS[kind]
    except KeyError:
        raise ValueError(f"Unknown agent graph: {kind}") from None
    graph = builder(checkpointer if checkpointer is not None else MemorySaver())
    logger.info(
        "Agent graph built: kind=%s nodes=%s",
        kind,
        ",".join(name for name in graph.nodes if name != START),
    )
    return graph


def thread_config(thread_id: str) -> RunnableConfig:
    return {"configurable": {"thread_id": thread_id}}


def initial_state(
    text: str, thread_id: str, context: Optional[dict[str, Any]] = None
) -> AgentState:
    """Input for a new message: the user's text appended to the thread."""
    return {
        "messages": [HumanMessage(content=text)],
        "sessionId": thread_id,
        "context": context or {},
    }
