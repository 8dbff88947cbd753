"""Base class shared by every element of the constraint graph."""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .graph import Graph


class GraphComponent:
    """Named element of a constraint graph.

    Components refer to their graph through a weak reference; the graph keeps
    an id-indexed registry of weak references to its components. Ownership
    flows only downwards: Graph -> StateSelector -> State -> Edge.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._id = -1
        self._graph_ref: Optional["weakref.ReferenceType[Graph]"] = None

    @property
    def id(self) -> int:
        return self._id

    @property
    def graph(self) -> "Graph":
        graph = self._graph_ref() if self._graph_ref is not None else None
        if graph is None:
            raise RuntimeError(f"{type(self).__name__} {self.name} is not attached to a live graph")
        return graph

    def _attach(self, graph: "Graph") -> None:
        self._graph_ref = weakref.ref(graph)
        self._id = graph._register(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, id={self._id})"


__all__ = ["GraphComponent"]
