"""Tests for the content tree visitor and plain_text()."""

from marklet import (
    EMPTY_STYLE,
    BaseVisitor,
    EmbedMetadata,
    EmbedRole,
    Embedded,
    Group,
    Link,
    Run,
    parse,
    plain_text,
)

ICON = object()


def _tree():  # type: ignore[no-untyped-def]
    return parse("**Hello** [world](example.com) x^2^ {icon}", EMPTY_STYLE, {"icon": ICON})


class TestPlainText:
    def test_visible_text(self) -> None:
        assert plain_text(_tree()) == "Hello world x2 "

    def test_empty(self) -> None:
        assert plain_text(()) == ""

    def test_placeholder_contributes_nothing(self) -> None:
        nodes = parse("a{icon}b", EMPTY_STYLE, {"icon": "payload text"})
        assert plain_text(nodes) == "ab"


class TestBaseVisitor:
    def test_dispatch_counts_node_kinds(self) -> None:
        class Counter(BaseVisitor[None]):
            def __init__(self) -> None:
                self.counts: dict[str, int] = {}

            def visit_default(self, node) -> None:  # type: ignore[no-untyped-def]
                name = type(node).__name__
                self.counts[name] = self.counts.get(name, 0) + 1

        counter = Counter()
        counter.visit_all(_tree())
        # Runs: Hello, " ", world, " x", 2, " "
        assert counter.counts == {"Run": 6, "Link": 1, "Embedded": 2, "Group": 1}

    def test_collect_links(self) -> None:
        class LinkCollector(BaseVisitor[None]):
            def __init__(self) -> None:
                self.urls: list[str] = []

            def visit_link(self, node: Link) -> None:
                self.urls.append(node.url)

        collector = LinkCollector()
        collector.visit_all(parse("[a](a.io) **[b](/b)**"))
        assert collector.urls == ["https://a.io", "/b"]

    def test_visit_returns_dispatch_result(self) -> None:
        class TextOf(BaseVisitor[str]):
            def visit_run(self, node: Run) -> str:
                return node.text

        assert TextOf().visit(Run("x", EMPTY_STYLE)) == "x"

    def test_placeholder_payload_not_entered(self) -> None:
        payload = (Run("hidden", EMPTY_STYLE),)
        node = Group((Embedded(payload, EmbedMetadata(EmbedRole.PLACEHOLDER)),), EMPTY_STYLE)
        assert plain_text([node]) == ""
