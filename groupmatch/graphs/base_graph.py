"""Base class for LangGraph graphs to share common behavior."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from langgraph.graph import StateGraph

from groupmatch.utils.errors import GraphExecutionError
from groupmatch.utils.logging_config import logger


class BaseGraph(ABC):
    """Abstract base class for the engine's LangGraph pipelines.

    Subclasses describe nodes and edges in ``build_graph``; this class owns
    compilation, node logging and turning graph crashes into
    GraphExecutionError.
    """

    name = "graph"

    def __init__(self, timeout: int = 30):
        self.timeout = timeout
        self.logger = logger
        self._compiled = None

    @abstractmethod
    def build_graph(self) -> StateGraph:
        """Build and return the StateGraph instance."""

    @staticmethod
    def _with_state(state: dict, **updates: Any) -> dict:
        """Return a new state dict with updates applied."""

        return {**state, **updates}

    def _log_node_execution(self, node_name: str, state: dict) -> None:
        """Log node entry with the populated state keys only."""

        self.logger.debug(
            "%s: executing node %s keys=%s", self.name, node_name, sorted(state)
        )

    def _log_node_error(self, node_name: str, error: Exception) -> None:
        """Log node execution error without leaking user data."""

        self.logger.error("%s: node %s failed: %s", self.name, node_name, str(error))

    def compile(self):
        """Build and compile the graph, once per instance."""

        if self._compiled is None:
            try:
                self._compiled = self.build_graph().compile()
            except Exception as exc:
                raise GraphExecutionError(
                    f"{self.name} failed to compile: {exc}"
                ) from exc
        return self._compiled

    def run(self, state: dict) -> dict:
        """Invoke the compiled graph on ``state`` and return the final state."""

        compiled = self.compile()
        try:
            return compiled.invoke(state)
        except GraphExecutionError:
            raise
        except Exception as exc:
            self.logger.error("%s execution failed: %s", self.name, str(exc))
            raise GraphExecutionError(f"{self.name} failed: {exc}") from exc
