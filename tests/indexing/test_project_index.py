"""Tests for per-file patching of the project index."""
from view_tree_mcp.indexing import ComponentEntry, ProjectIndex


def entry(name, path, *properties, base=None):
    return ComponentEntry(name, frozenset(properties), base, path)


def test_update_then_remove_restores_previous_state():
    index = ProjectIndex.from_contributions([
        ("/w/a.view.tree", [entry("$a", "/w/a.view.tree", "title", base="$b")]),
    ])
    before = dict(index.view())

    index.apply_file("/w/c.view.tree", [entry("$c", "/w/c.view.tree", "sub")])
    index.discard_file("/w/c.view.tree")

    assert dict(index.view()) == before


def test_update_deletes_previous_contribution_before_insert():
    index = ProjectIndex()
    index.apply_file("/w/a.view.tree", [entry("$a", "/w/a.view.tree", "title")])

    patch = index.apply_file("/w/a.view.tree", [entry("$renamed", "/w/a.view.tree", "title")])

    assert patch.removed == ["$a"]
    assert patch.added == ["$renamed"]
    assert "$a" not in index
    assert index.get("$renamed").properties == frozenset({"title"})


def test_remove_uses_last_known_contribution():
    index = ProjectIndex()
    index.apply_file("/w/a.view.tree", [entry("$a", "/w/a.view.tree")])

    patch = index.discard_file("/w/a.view.tree")

    assert patch.removed == ["$a"]
    assert len(index) == 0
    assert index.files() == []


def test_remove_unknown_file_is_empty_patch():
    assert ProjectIndex().discard_file("/w/none.view.tree").is_empty


def test_last_write_wins_and_removal_restores_earlier_declarer():
    index = ProjectIndex()
    index.apply_file("/w/one.view.tree", [entry("$dup", "/w/one.view.tree", "first")])
    index.apply_file("/w/two.view.tree", [entry("$dup", "/w/two.view.tree", "second")])

    assert index.get("$dup").declaring_file == "/w/two.view.tree"

    index.discard_file("/w/two.view.tree")

    assert index.get("$dup").properties == frozenset({"first"})


def test_removing_a_shadowed_declarer_keeps_the_winner():
    index = ProjectIndex()
    index.apply_file("/w/one.view.tree", [entry("$dup", "/w/one.view.tree")])
    index.apply_file("/w/two.view.tree", [entry("$dup", "/w/two.view.tree")])

    patch = index.discard_file("/w/one.view.tree")

    assert patch.removed == []
    assert index.get("$dup").declaring_file == "/w/two.view.tree"


def test_snapshots_are_not_affected_by_later_writes():
    index = ProjectIndex()
    index.apply_file("/w/a.view.tree", [entry("$a", "/w/a.view.tree")])
    snapshot = index.view()

    index.apply_file("/w/b.view.tree", [entry("$b", "/w/b.view.tree")])

    assert set(snapshot) == {"$a"}
    assert set(index.view()) == {"$a", "$b"}


def test_refinement_merges_over_generated_entry_in_any_order():
    tree = entry("$a", "/w/a/a.view.tree", "title", base="$b")
    refinement = ComponentEntry("$a", frozenset({"count"}), None, "/w/a/a.view.ts", refines_generated=True)
    index = ProjectIndex.from_contributions([
        ("/w/a/a.view.tree", [tree]),
        ("/w/a/a.view.ts", [refinement]),
    ])

    merged = index.get("$a")
    assert merged.properties == frozenset({"title", "count"})
    assert merged.base_class == "$b"
    assert merged.declaring_file == "/w/a/a.view.ts"

    # editing the tree file after the refinement does not hide the refinement
    index.apply_file("/w/a/a.view.tree", [entry("$a", "/w/a/a.view.tree", "title", "sub", base="$b")])
    assert index.get("$a").properties == frozenset({"title", "sub", "count"})

    patch = index.discard_file("/w/a/a.view.ts")
    assert patch.removed == ["$a"]
    assert index.get("$a").properties == frozenset({"title", "sub"})
    assert index.get("$a").declaring_file == "/w/a/a.view.tree"


def test_refinement_without_generated_entry_stands_alone():
    refinement = ComponentEntry("$a", frozenset({"count"}), None, "/w/a/a.view.ts", refines_generated=True)
    index = ProjectIndex()
    index.apply_file("/w/a/a.view.ts", [refinement])

    assert index.get("$a") == refinement
