"""Tests for reference resolution from view.tree documents."""
import json
import os

import pytest

from view_tree_mcp.intelligence import (
    LocationLink, ReferenceResolver, TextDocument, TreeSitterTypedSourceService, TypedSourceService,
    companion_path,
)
from view_tree_mcp.syntax import Location, Position, Range

from conftest import write

APP_VIEW_TS = ("namespace $.$$ {\n"
               "\texport class $my_app extends $.$my_app {\n"
               "\t\tcount() {\n"
               "\t\t\treturn 1\n"
               "\t\t}\n"
               "\t}\n"
               "}\n")


class FakeTypedSource(TypedSourceService):
    """Records lookups and answers with canned links."""

    def __init__(self, links=None, symbols=None):
        self.links = links or []
        self.symbols = symbols or []
        self.calls = []

    def document_symbols(self, path):
        return []

    def workspace_symbols(self, query):
        self.calls.append(("workspace", query))
        return self.symbols

    def definition_at(self, path, position):
        self.calls.append(("definition", path, position))
        return self.links

    def implementation_at(self, path, position):
        self.calls.append(("implementation", path, position))
        return self.links


def document(path, text):
    return TextDocument.from_text(str(path), text)


@pytest.fixture
def resolver(index_manager, mol_project):
    typed = TreeSitterTypedSourceService(index_manager.accessor())
    return ReferenceResolver(typed, str(mol_project))


def test_companion_path():
    assert companion_path("/w/a/a.view.tree", ".ts") == "/w/a/a.view.ts"
    assert companion_path("/w/a/a.view.tree", ".css.ts") == "/w/a/a.view.css.ts"


def test_root_class_without_companion_returns_create_here_sentinel(tmp_path):
    tree = tmp_path / "widget" / "widget.view.tree"
    resolver = ReferenceResolver(FakeTypedSource(), str(tmp_path))

    locations = resolver.resolve(document(tree, "$widget\n"), Position(0, 3))

    assert locations == [Location(str(tmp_path / "widget" / "widget.view.ts"), Range.at(0, 0))]


def test_root_class_found_in_companion(resolver, mol_project):
    view_ts = write(mol_project / 'my' / 'app' / 'app.view.ts', APP_VIEW_TS)
    tree = mol_project / 'my' / 'app' / 'app.view.tree'

    locations = resolver.resolve(TextDocument.from_path(str(tree)), Position(0, 2))

    assert len(locations) == 1
    assert locations[0].path == str(view_ts)
    assert locations[0].range.start == Position(1, 8)


def test_class_reference_probes_conventional_paths(resolver, mol_project):
    tree = mol_project / 'my' / 'app' / 'app.view.tree'

    locations = resolver.resolve(TextDocument.from_path(str(tree)), Position(0, 12))

    assert locations == [Location(str(mol_project / 'my' / 'base' / 'base.view.tree'), Range.at(0, 0))]


def test_class_reference_falls_back_to_first_probe(tmp_path):
    typed = FakeTypedSource()
    resolver = ReferenceResolver(typed, str(tmp_path))

    locations = resolver.resolve(document(tmp_path / "a.view.tree", "$a $mol_view\n"), Position(0, 6))

    assert ("workspace", "$mol_view") in typed.calls
    assert locations == [Location(str(tmp_path / "mol" / "view" / "view.view.tree"), Range.at(0, 0))]


def test_property_resolves_to_typed_member(resolver, mol_project):
    view_ts = write(mol_project / 'my' / 'app' / 'app.view.ts', APP_VIEW_TS)
    tree = mol_project / 'my' / 'app' / 'app.view.tree'

    locations = resolver.resolve(TextDocument.from_path(str(tree)), Position(3, 2))

    assert len(locations) == 1
    assert locations[0].path == str(view_ts)
    assert locations[0].range.start == Position(2, 2)


def test_property_falls_back_to_style_rule(resolver, mol_project):
    tree = mol_project / 'my' / 'app' / 'app.view.tree'

    locations = resolver.resolve(TextDocument.from_path(str(tree)), Position(2, 6))

    assert len(locations) == 1
    assert locations[0].path == str(mol_project / 'my' / 'app' / 'app.view.css.ts')
    assert locations[0].range.start.line == 2


def test_unknown_property_resolves_to_nothing(resolver, mol_project):
    tree = mol_project / 'my' / 'app' / 'app.view.tree'

    assert resolver.resolve(TextDocument.from_path(str(tree)), Position(1, 2)) == []


def test_sub_property_goes_through_source_map(tmp_path):
    tree = tmp_path / "x" / "x.view.tree"
    text = "$x $mol_view\n\tsub /\n\t\t<= Head $mol_view\n\t\t\ttitle \\Hi\n"
    declaration = write(tmp_path / "x" / "-view.tree" / "x.view.tree.d.ts",
                        "declare namespace $ {\n"
                        "\n"
                        "\texport class $x extends $mol_view {\n"
                        "\t\ttitle(): string\n"
                        "\t}\n"
                        "}\n")
    write(tmp_path / "x" / "-view.tree" / "x.view.tree.d.ts.map", json.dumps({
        "version": 3,
        "sources": ["../x.view.tree"],
        "names": [],
        "mappings": "AAGG",
    }))
    target = Range(Position(10, 2), Position(10, 30))
    selection = Range(Position(10, 2), Position(10, 7))
    typed = FakeTypedSource(links=[LocationLink("/w/mol/view.d.ts", target, selection)])
    resolver = ReferenceResolver(typed, str(tmp_path))

    locations = resolver.resolve(document(tree, text), Position(3, 5))

    assert typed.calls == [("definition", str(declaration), Position(3, 12))]
    assert locations == [Location("/w/mol/view.d.ts", Range(Position(10, 7), Position(10, 7)))]


def test_sub_property_without_map_is_empty(tmp_path):
    tree = tmp_path / "x" / "x.view.tree"
    text = "$x $mol_view\n\tsub /\n\t\t<= Head $mol_view\n\t\t\ttitle \\Hi\n"

    assert ReferenceResolver(FakeTypedSource(), str(tmp_path)).resolve(document(tree, text), Position(3, 5)) == []


def test_implementation_uses_implementation_lookup(tmp_path):
    tree = tmp_path / "a" / "a.view.tree"
    write(tmp_path / "a" / "a.view.css.ts", "namespace $.$$ {\n\t$mol_style_define( $a, {\n\t\tHead: {},\n\t})\n}\n")
    link = LocationLink("/w/impl.ts", Range.at(4, 0), Range.at(4, 0))
    symbols_typed = TreeSitterTypedSourceService(lambda: {})
    typed = FakeTypedSource(links=[link])
    typed.document_symbols = symbols_typed.document_symbols
    resolver = ReferenceResolver(typed, str(tmp_path))

    locations = resolver.resolve_implementation(document(tree, "$a\n\tHead $mol_view\n"), Position(1, 2))

    assert locations == [link.to_location()]
    assert typed.calls[0][0] == "implementation"
    assert typed.calls[0][1] == os.path.join(str(tmp_path), "a", "a.view.css.ts")


def test_whitespace_resolves_to_nothing(tmp_path):
    resolver = ReferenceResolver(FakeTypedSource(), str(tmp_path))

    assert resolver.resolve(document(tmp_path / "a.view.tree", "$a\n\t\n"), Position(1, 1)) == []
