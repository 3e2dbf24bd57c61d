"""Content tree visitor for Marklet.

Provides a base visitor class with match-based dispatch over the four node
kinds, and plain_text() for extracting the visible text of a tree.

Example: collect link targets:

    class LinkCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.urls: list[str] = []

        def visit_link(self, node: Link) -> None:
            self.urls.append(node.url)

    collector = LinkCollector()
    collector.visit_all(nodes)

Thread Safety:
    Visitors may accumulate mutable state. Create a new visitor per thread.

"""

from collections.abc import Iterable

from marklet.nodes import ContentNode, Embedded, Group, Link, Run


class BaseVisitor[T]:
    """Base content tree visitor with match-based dispatch.

    Subclass and override ``visit_*`` methods for node types you care about.
    Unhandled node types fall through to ``visit_default``. Children of
    Group, Link and script Embedded nodes are walked automatically after the
    ``visit_*`` call; placeholder payloads are never entered.

    """

    def visit(self, node: ContentNode) -> T:
        """Dispatch to the appropriate ``visit_*`` method, then walk children."""
        result = self._dispatch(node)
        self._walk_children(node)
        return result

    def visit_all(self, nodes: Iterable[ContentNode]) -> None:
        for node in nodes:
            self.visit(node)

    def visit_default(self, node: ContentNode) -> T:
        """Called for node types without a specific ``visit_*`` method."""
        return None  # type: ignore[return-value]

    def visit_run(self, node: Run) -> T:
        return self.visit_default(node)

    def visit_group(self, node: Group) -> T:
        return self.visit_default(node)

    def visit_embedded(self, node: Embedded) -> T:
        return self.visit_default(node)

    def visit_link(self, node: Link) -> T:
        return self.visit_default(node)

    def _dispatch(self, node: ContentNode) -> T:
        """Match-based dispatch to visit_* methods."""
        match node:
            case Run():
                return self.visit_run(node)
            case Group():
                return self.visit_group(node)
            case Embedded():
                return self.visit_embedded(node)
            case Link():
                return self.visit_link(node)
            case _:
                return self.visit_default(node)

    def _walk_children(self, node: ContentNode) -> None:
        """Recursively visit child nodes."""
        match node:
            case Group(children=children) | Link(children=children):
                for child in children:
                    self.visit(child)
            case Embedded(payload=children) if node.is_script:
                for child in children:
                    self.visit(child)
            case _:
                pass  # Leaf nodes: no children


class _TextCollector(BaseVisitor[None]):
    def __init__(self) -> None:
        self.parts: list[str] = []

    def visit_run(self, node: Run) -> None:
        self.parts.append(node.text)


def plain_text(nodes: Iterable[ContentNode]) -> str:
    """Return the visible text of a tree.

    Placeholders contribute nothing; script runs contribute their text.

    Example:
        >>> plain_text(parse("**Hello** [world](example.com)"))
        'Hello world'

    """
    collector = _TextCollector()
    collector.visit_all(nodes)
    return "".join(collector.parts)


__all__ = ["BaseVisitor", "plain_text"]
