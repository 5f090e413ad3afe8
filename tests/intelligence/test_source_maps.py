"""Tests for source map lookups next to view.tree files."""
import json
import os

from view_tree_mcp.intelligence import SourceMapLookup, generated_paths
from view_tree_mcp.syntax import Position

# Generated line 0: (0,0) <- x.view.tree (0,0)
# Generated line 1: (1,0) <- (1,1) and (1,4) <- (1,3)
MAP = {
    "version": 3,
    "file": "x.view.tree.d.ts",
    "sources": ["x.view.tree"],
    "names": [],
    "mappings": "AAAA;AACC,IAAE",
}


def write_map(tmp_path, payload):
    path = tmp_path / "x.view.tree.d.ts.map"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding='utf-8')
    return str(path)


def test_generated_paths():
    declaration, map_path = generated_paths(os.path.join("/w", "my", "app", "app.view.tree"))

    assert declaration == os.path.join("/w", "my", "app", "-view.tree", "app.view.tree.d.ts")
    assert map_path == declaration + ".map"


def test_greatest_mapping_at_or_before_needle(tmp_path):
    lookup = SourceMapLookup.load(write_map(tmp_path, MAP))

    assert lookup.first_source == "x.view.tree"
    assert lookup.generated_position_for("x.view.tree", 1, 2) == Position(1, 0)
    assert lookup.generated_position_for("x.view.tree", 1, 5) == Position(1, 4)
    assert lookup.generated_position_for("x.view.tree", 0, 7) == Position(0, 0)


def test_other_sources_are_ignored(tmp_path):
    lookup = SourceMapLookup.load(write_map(tmp_path, MAP))

    assert lookup.generated_position_for("other.view.tree", 1, 2) is None


def test_missing_map(tmp_path):
    assert SourceMapLookup.load(str(tmp_path / "absent.map")) is None


def test_malformed_map(tmp_path):
    assert SourceMapLookup.load(write_map(tmp_path, "{not json")) is None
