"""
Dependency graph of custom properties for one theme.

Every property becomes a node whose resolved value has each `var()`
reference to another declared property replaced by that property's own
resolved value. Resolution is a depth-first search driven by an explicit
stack; a reference back into the current search path is a circular
dependency and is left unresolved.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Set

from ..models.variables import CircularDependency, GraphNode, PropertyMetadata
from .references import referenced_names, substitute_references

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """A property being resolved on the DFS stack"""
    name: str
    references: Iterator[str]
    depends_on: List[str] = field(default_factory=list)
    pending: Optional[str] = None  # dependency pushed above this frame


class DependencyGraph:
    """
    Resolved custom properties of one theme.

    Nodes live in `nodes`, keyed by property name in declaration order.
    `depends_on` and `dependents` hold names into that map.
    """

    def __init__(self, properties: Sequence[PropertyMetadata]):
        """
        Build and resolve the graph.

        Args:
            properties: Declarations in source order. A name declared more
                than once keeps the last declaration.
        """
        self._declarations: Dict[str, PropertyMetadata] = {}
        for metadata in properties:
            self._declarations[metadata.name] = metadata

        self.nodes: Dict[str, GraphNode] = {}
        self.circular_dependencies: List[CircularDependency] = []

        for name in self._declarations:
            self._resolve(name)

        # Re-key in declaration order; resolution finalizes dependencies first
        self.nodes = {name: self.nodes[name] for name in self._declarations}

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, name: object) -> bool:
        return name in self.nodes

    def get(self, name: str) -> Optional[GraphNode]:
        return self.nodes.get(name)

    def names_with_prefix(self, prefix: str) -> List[str]:
        """Property names starting with `prefix`, in declaration order"""
        return [name for name in self.nodes if name.startswith(prefix)]

    def _resolve(self, root: str) -> None:
        """Resolve `root` and every not yet resolved property it reaches"""
        if root in self.nodes:
            return

        stack = [self._open_frame(root)]
        in_progress: Set[str] = {root}

        while stack:
            frame = stack[-1]

            if frame.pending is not None:
                # The dependency pushed last time has been finalized
                frame.depends_on.append(frame.pending)
                frame.pending = None

            descended = False
            for reference in frame.references:
                if reference not in self._declarations:
                    # Undeclared in this theme: stays literal
                    continue

                if reference in in_progress:
                    self._report_cycle(frame.name, reference)
                    continue

                if reference in self.nodes:
                    if reference not in frame.depends_on:
                        frame.depends_on.append(reference)
                    continue

                frame.pending = reference
                stack.append(self._open_frame(reference))
                in_progress.add(reference)
                descended = True
                break

            if descended:
                continue

            self._finalize(frame)
            stack.pop()
            in_progress.discard(frame.name)

    def _open_frame(self, name: str) -> _Frame:
        raw_value = self._declarations[name].raw_value
        return _Frame(name=name, references=iter(referenced_names(raw_value)))

    def _finalize(self, frame: _Frame) -> None:
        metadata = self._declarations[frame.name]
        replacements = {
            dependency: self.nodes[dependency].resolved_value
            for dependency in frame.depends_on
        }

        self.nodes[frame.name] = GraphNode(
            metadata=metadata,
            resolved_value=substitute_references(metadata.raw_value, replacements),
            depends_on=list(frame.depends_on),
        )

        for dependency in frame.depends_on:
            self.nodes[dependency].dependents.add(frame.name)

    def _report_cycle(self, source: str, target: str) -> None:
        cycle = CircularDependency(source=source, target=target)
        self.circular_dependencies.append(cycle)
        logger.warning(
            f"Circular dependency for \"{target}\" and \"{source}\" is detected; "
            f"var({target}) is left unresolved in {source}"
        )
