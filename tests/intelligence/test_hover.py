"""Tests for hover cards."""
from view_tree_mcp.indexing import ComponentEntry
from view_tree_mcp.intelligence import HoverProvider, TextDocument
from view_tree_mcp.syntax import Position, Range

INDEX = {
    "$a": ComponentEntry("$a", frozenset({"count"}), "$b", "/w/a/a.view.tree"),
    "$b": ComponentEntry("$b", frozenset({"title"}), None, "/w/b/b.view.tree"),
}
TEXT = "$a $b\n\ttitle foo\n\tsub /\n\t\t<= Button $mol_button\n"


def hover(line, character, text=TEXT):
    provider = HoverProvider(lambda: INDEX)
    return provider.provide_hover_info(TextDocument.from_text("/w/a/a.view.tree", text), Position(line, character))


def test_project_component():
    info = hover(0, 1)

    assert info.title == "$a"
    assert info.properties == ["count", "title"]
    assert info.description == "Declared in a.view.tree; extends $b"
    assert info.range == Range.on_line(0, 0, 2)


def test_framework_component():
    info = hover(3, 15)

    assert info.title == "$mol_button"
    assert info.description == "Built-in $mol component: Interactive button component"
    assert "click" in info.properties


def test_inherited_property():
    info = hover(1, 3)

    assert info.title == "title"
    assert info.description.startswith("Property of $a\nType: string")
    assert "Display title or label text" in info.description


def test_common_property_outside_the_chain():
    info = hover(1, 2, "$x $y\n\thint \\Tip\n")

    assert info.title == "hint"
    assert "Common property" in info.description


def test_unknown_word():
    assert hover(1, 8) is None


def test_to_dict():
    data = hover(0, 1).to_dict()

    assert set(data) == {"title", "properties", "description", "range"}
