"""UI tree snapshot types.

A :class:`UISnapshot` is a point-in-time, read-only copy of the target
application's accessibility tree. Snapshots are disposable: nothing that
outlives a tick may hold on to a :class:`UINode`. Code that needs to come back
to a node later keeps a :class:`NodeRef` and resolves it against the next
snapshot.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from .region import Region


class UINode(BaseModel):
    """One node of the observed UI tree."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    identifier: str | None = Field(
        None, alias="resourceId", description="Stable view identifier, e.g. 'pkg:id/name'"
    )
    text: str | None = Field(None, description="Visible text")
    description: str | None = Field(
        None, alias="contentDescription", description="Accessible description"
    )
    class_name: str | None = Field(None, alias="className", description="Widget class")
    bounds: Region = Field(default_factory=Region, description="On-screen bounds")
    clickable: bool = Field(False, description="Whether the node accepts a click action")
    enabled: bool = Field(True, description="Whether the node is enabled")
    visible: bool = Field(True, description="Whether the node is visible to the user")
    children: tuple[UINode, ...] = Field(default_factory=tuple)

    @property
    def is_actionable(self) -> bool:
        """A node that can be activated on its own."""
        return self.clickable and self.enabled

    def texts(self) -> list[str]:
        """Text and description of this node alone, skipping blanks."""
        return [value for value in (self.text, self.description) if value and value.strip()]

    def label(self) -> str:
        """Short description for logs."""
        parts = [self.class_name or "node"]
        if self.identifier:
            parts.append(f"id={self.identifier}")
        if self.text:
            parts.append(f"text={self.text!r}")
        parts.append(str(self.bounds))
        return " ".join(parts)


@dataclass(frozen=True)
class NodeRef:
    """Stable handle to a node that can be re-resolved in a later snapshot.

    Holds the child-index path from the root together with the identifier and
    bounds seen when the reference was taken. Resolution succeeds only if the
    node found at the path still has the same identifier and bounds.
    """

    path: tuple[int, ...]
    identifier: str | None
    bounds: Region


class UISnapshot:
    """Immutable UI tree plus the indexes needed to search it.

    Example:
        snapshot = UISnapshot(root, package_name="com.kakao.taxi.driver")
        button = snapshot.find_by_identifier("com.kakao.taxi.driver:id/action_refresh")
    """

    def __init__(
        self,
        root: UINode,
        package_name: str | None = None,
        captured_at: float | None = None,
    ) -> None:
        self.root = root
        self.package_name = package_name
        self.captured_at = time.monotonic() if captured_at is None else captured_at
        self._parents: dict[int, UINode] = {}
        self._paths: dict[int, tuple[int, ...]] = {id(root): ()}
        self._index(root)

    def _index(self, node: UINode) -> None:
        stack = [node]
        while stack:
            current = stack.pop()
            base = self._paths[id(current)]
            for position, child in enumerate(current.children):
                self._parents[id(child)] = current
                self._paths[id(child)] = (*base, position)
                stack.append(child)

    def iter_nodes(self, start: UINode | None = None) -> Iterator[UINode]:
        """Depth-first, pre-order traversal."""
        stack = [start if start is not None else self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def parent_of(self, node: UINode) -> UINode | None:
        return self._parents.get(id(node))

    def ancestors(self, node: UINode) -> Iterator[UINode]:
        """Yield the node itself, then each ancestor up to the root."""
        current: UINode | None = node
        while current is not None:
            yield current
            current = self._parents.get(id(current))

    def path_of(self, node: UINode) -> tuple[int, ...] | None:
        return self._paths.get(id(node))

    def find_by_identifier(self, identifier: str, start: UINode | None = None) -> UINode | None:
        for node in self.iter_nodes(start):
            if node.identifier == identifier:
                return node
        return None

    def find_all_by_text(self, text: str, start: UINode | None = None) -> list[UINode]:
        """Find nodes whose text or description contains ``text`` (case-insensitive)."""
        needle = text.lower()
        return [
            node
            for node in self.iter_nodes(start)
            if any(needle in value.lower() for value in node.texts())
        ]

    def has_text(self, text: str) -> bool:
        return bool(self.find_all_by_text(text))

    def find_by_class(self, class_names: list[str]) -> UINode | None:
        for node in self.iter_nodes():
            if node.class_name in class_names:
                return node
        return None

    def actionable_ancestor(self, node: UINode) -> UINode | None:
        """Nearest self-or-ancestor that can be activated on its own."""
        for candidate in self.ancestors(node):
            if candidate.is_actionable:
                return candidate
        return None

    def node_at_point(self, x: int, y: int) -> UINode | None:
        """Deepest actionable node whose bounds contain the point."""
        found: UINode | None = None
        for node in self.iter_nodes():
            if node.is_actionable and node.bounds.contains_point(x, y):
                found = node
        return found

    def ref(self, node: UINode) -> NodeRef:
        """Take a re-resolvable reference to a node of this snapshot."""
        path = self.path_of(node)
        if path is None:
            raise ValueError(f"Node is not part of this snapshot: {node.label()}")
        return NodeRef(path=path, identifier=node.identifier, bounds=node.bounds)

    def resolve(self, ref: NodeRef) -> UINode | None:
        """Find the node a reference points to, or None if it moved or vanished."""
        node = self.root
        for position in ref.path:
            if position >= len(node.children):
                return None
            node = node.children[position]
        if node.identifier != ref.identifier or node.bounds != ref.bounds:
            return None
        return node

    def __repr__(self) -> str:
        return f"UISnapshot(package={self.package_name!r}, captured_at={self.captured_at:.3f})"
