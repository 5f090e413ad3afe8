"""Tests for base-class chain walking."""
from view_tree_mcp.indexing import ComponentEntry
from view_tree_mcp.indexing.inheritance import effective_properties, inheritance_chain


def index_of(*entries):
    return {e.name: e for e in entries}


def entry(name, base, *properties):
    return ComponentEntry(name, frozenset(properties), base, f"/w/{name}.view.tree")


def test_inherits_from_project_base():
    index = index_of(entry("$a", "$b"), entry("$b", None, "title"))

    assert effective_properties("$a", index) == {"title"}


def test_falls_back_to_framework_components():
    index = index_of(entry("$a", "$mol_button", "label"))

    properties = effective_properties("$a", index)

    assert {"label", "click", "dom_name"} <= properties


def test_cycle_terminates():
    index = index_of(entry("$a", "$b", "x"), entry("$b", "$a", "y"))

    assert effective_properties("$a", index) == {"x", "y"}
    assert inheritance_chain("$a", index) == ["$a", "$b"]


def test_self_reference_terminates():
    index = index_of(entry("$a", "$a", "x"))

    assert effective_properties("$a", index) == {"x"}


def test_unknown_component_has_no_properties():
    assert effective_properties("$missing", {}) == set()


def test_chain_reaches_framework_root():
    index = index_of(entry("$a", "$b"), entry("$b", "$mol_page"))

    assert inheritance_chain("$a", index) == ["$a", "$b", "$mol_page", "$mol_view"]
