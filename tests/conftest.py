"""Shared pytest fixtures and async test configuration."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, START, StateGraph

from agent_api.agent.graph import create_agent_graph, create_interruptible_graph
from agent_api.agent.state import AgentState
from agent_api.chat.stream import ThreadLocks


@pytest.fixture
def checkpointer():
    """Fresh volatile checkpointer per test."""
    return MemorySaver()


@pytest.fixture
def graph(checkpointer):
    """Plan -> Propose -> Apply graph bound to the test checkpointer."""
    return create_interruptible_graph(checkpointer)


@pytest.fixture
def simple_graph(checkpointer):
    return create_agent_graph(checkpointer)


@pytest.fixture
def chain(checkpointer):
    """Compile the given node functions into a straight line, in order."""

    def build(*nodes):
        builder = StateGraph(AgentState)
        previous = START
        for node in nodes:
            builder.add_node(node.__name__, node)
            builder.add_edge(previous, node.__name__)
            previous = node.__name__
        builder.add_edge(previous, END)
        return builder.compile(checkpointer=checkpointer)

    return build


@pytest.fixture
def locks():
    return ThreadLocks()


@pytest.fixture
def sample_agent_state():
    """Minimal valid AgentState for unit tests."""
    return {
        "messages": [
            HumanMessage(content="Please edit the config"),
            AIMessage(content='I will edit the file based on: "Please edit the config"'),
        ],
        "sessionId": "thread-test-001",
        "context": {"plan": "edit_file"},
    }
