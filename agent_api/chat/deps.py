from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph.state import CompiledStateGraph

from agent_api.agent.graph import build_graph
from agent_api.chat.stream import ThreadLocks
from agent_api.config import settings

# Process-wide singletons (PoC: in-memory checkpointer)
_graph: CompiledStateGraph | None = None
_locks: ThreadLocks | None = None


def get_graph() -> CompiledStateGraph:
    """Return the singleton compiled graph, built on first use."""
    global _graph
    if _graph is None:
        _graph = build_graph(settings.agent_graph, MemorySaver())
    return _graph


def get_thread_locks() -> ThreadLocks:
    global _locks
    if _locks is None:
        _locks = ThreadLocks()
    return _locks
