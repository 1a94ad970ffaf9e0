"""
Microframework - Dependency Resolver.

============================================================
RESPONSIBILITY
============================================================
Orders modules so that every module comes after the modules
it depends on.

- One node per registered module, one edge per declared dependency
- Kahn's algorithm; ties go to the module registered first
- Circular dependencies are reported with the modules involved
- Names that match no registered module are not edges; the
  registry decides whether they are fatal

============================================================
"""

import heapq
import logging
from typing import Dict, List, Optional, Sequence

from .module import Module


logger = logging.getLogger(__name__)


# ============================================================
# DEPENDENCY GRAPH
# ============================================================

class DependencyGraph:
    """
    Dependency graph over module names.

    Insertion order of nodes is the tie-break for the topological
    sort, so identical registrations always produce identical orders.
    """

    def __init__(self):
        self._index: Dict[str, int] = {}
        self._edges: Dict[str, List[str]] = {}  # node -> dependencies

    def add_node(self, name: str, dependencies: Optional[List[str]] = None) -> None:
        """Add a node with its declared dependencies."""
        if name in self._index:
            raise ValueError(f"Module {name} appears more than once")

        self._index[name] = len(self._index)

        deps: List[str] = []
        for dep in dependencies or []:
            if dep not in deps:
                deps.append(dep)
        self._edges[name] = deps

    def get_unknown_dependencies(self) -> Dict[str, List[str]]:
        """Declared dependencies that do not name a node, per node."""
        unknown = {}
        for node, deps in self._edges.items():
            missing = [dep for dep in deps if dep not in self._index]
            if missing:
                unknown[node] = missing
        return unknown

    def get_startup_order(self) -> List[str]:
        """
        Get node names with dependencies first.

        Returns:
            List of node names in startup order

        Raises:
            ValueError: If circular dependency detected
        """
        in_degree: Dict[str, int] = {name: 0 for name in self._index}
        dependents: Dict[str, List[str]] = {name: [] for name in self._index}

        for name, deps in self._edges.items():
            for dep in deps:
                if dep in self._index:
                    in_degree[name] += 1
                    dependents[dep].append(name)

        ready = [
            (self._index[name], name)
            for name, degree in in_degree.items()
            if degree == 0
        ]
        heapq.heapify(ready)
        order: List[str] = []

        while ready:
            _, current = heapq.heappop(ready)
            order.append(current)

            for dependent in dependents[current]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(ready, (self._index[dependent], dependent))

        if len(order) != len(self._index):
            remaining = [name for name in self._index if in_degree[name] > 0]
            cycle = self._find_cycle(remaining)
            raise ValueError(
                f"Circular dependency detected: {' -> '.join(cycle)}"
            )

        return order

    def _find_cycle(self, remaining: List[str]) -> List[str]:
        """Walk unresolved nodes until one repeats."""
        pending = set(remaining)
        path: List[str] = []
        seen: Dict[str, int] = {}
        node = remaining[0]

        while node not in seen:
            seen[node] = len(path)
            path.append(node)
            node = next(dep for dep in self._edges[node] if dep in pending)

        return path[seen[node]:] + [node]


# ============================================================
# MODULE ORDERING
# ============================================================

def sort_modules_by_dependencies(modules: Sequence[Module]) -> List[Module]:
    """
    Return the modules in dependency order.

    The input sequence is left untouched.

    Raises:
        ValueError: If the dependencies contain a cycle
    """
    graph = DependencyGraph()
    by_name: Dict[str, Module] = {}

    for module in modules:
        name = module.get_name()
        graph.add_node(name, module.get_dependent_modules())
        by_name[name] = module

    for name, missing in graph.get_unknown_dependencies().items():
        logger.debug(
            f"Module {name} declares unregistered dependencies: {', '.join(missing)}"
        )

    return [by_name[name] for name in graph.get_startup_order()]


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "DependencyGraph",
    "sort_modules_by_dependencies",
]
