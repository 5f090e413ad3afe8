"""Tests for the tree-sitter backed typed-source service."""
import pytest

from view_tree_mcp.indexing import ProjectIndexManager
from view_tree_mcp.indexing.strategies.typescript_strategy import iter_symbols
from view_tree_mcp.intelligence import LocationLink, TreeSitterTypedSourceService
from view_tree_mcp.syntax import Position, Range

from conftest import write

APP_VIEW_TS = ("namespace $.$$ {\n"
               "\texport class $my_app extends $.$my_app {\n"
               "\t\tcount() {\n"
               "\t\t\treturn 1\n"
               "\t\t}\n"
               "\t\tsub() {\n"
               "\t\t\treturn [ this.count() ]\n"
               "\t\t}\n"
               "\t}\n"
               "}\n")

APP_TEST_TS = ("namespace $ {\n"
               "\tconst probe = $my_app['count']\n"
               "}\n")

COUNT_LINK_RANGE = Range(Position(2, 2), Position(4, 3))
COUNT_SELECTION = Range.on_line(2, 2, 7)


@pytest.fixture
def typed_project(mol_project):
    write(mol_project / 'my' / 'app' / 'app.view.ts', APP_VIEW_TS)
    write(mol_project / 'my' / 'app' / 'app.test.ts', APP_TEST_TS)
    write(mol_project / 'my' / 'app' / 'head' / 'head.view.tree', "$my_app_head $mol_view\n")
    return mol_project


@pytest.fixture
def service(typed_project):
    manager = ProjectIndexManager()
    assert manager.set_project_path(str(typed_project))
    manager.build_index()
    yield TreeSitterTypedSourceService(manager.accessor())
    manager.cleanup()


def test_document_symbols_nest_namespace_class_and_members(service, typed_project):
    symbols = service.document_symbols(str(typed_project / 'my' / 'app' / 'app.view.ts'))

    outline = [(symbol.name, symbol.kind) for symbol in iter_symbols(symbols)]
    assert outline == [('$.$$', 'namespace'), ('$my_app', 'class'),
                       ('count', 'method'), ('sub', 'method')]
    assert symbols[0].children[0].detail == '$.$my_app'


def test_document_symbols_are_cached_until_the_file_changes(service, typed_project):
    path = str(typed_project / 'my' / 'app' / 'app.view.ts')

    assert service.document_symbols(path) is service.document_symbols(path)


def test_document_symbols_of_missing_file_are_empty(service, typed_project):
    assert service.document_symbols(str(typed_project / 'missing.ts')) == []


def test_workspace_symbols_match_substrings(service, typed_project):
    symbols = service.workspace_symbols('$my_app')

    assert [symbol.name for symbol in symbols] == ['$my_app', '$my_app_head']
    app = symbols[0]
    assert app.location.path == str(typed_project / 'my' / 'app' / 'app.view.ts')
    assert app.location.range == Range.on_line(1, 14, 21)


def test_workspace_symbols_put_exact_match_first(service):
    names = [symbol.name for symbol in service.workspace_symbols('my_')]
    assert names == ['$my_app', '$my_app_head', '$my_base']

    assert service.workspace_symbols('$my_app_head')[0].name == '$my_app_head'


def test_workspace_symbol_of_tree_component_points_at_declaration(service, typed_project):
    symbol = service.workspace_symbols('$my_base')[0]

    assert symbol.location.path == str(typed_project / 'my' / 'base' / 'base.view.tree')
    assert symbol.location.range == Range.on_line(0, 0, 8)


def test_definition_of_this_member_access(service, typed_project):
    path = str(typed_project / 'my' / 'app' / 'app.view.ts')

    links = service.definition_at(path, Position(6, 18))

    assert links == [LocationLink(path, COUNT_LINK_RANGE, COUNT_SELECTION)]


def test_definition_of_string_lookup_follows_the_declaring_file(service, typed_project):
    probe = str(typed_project / 'my' / 'app' / 'app.test.ts')
    declaring = str(typed_project / 'my' / 'app' / 'app.view.ts')

    links = service.definition_at(probe, Position(1, 25))

    assert links == [LocationLink(declaring, COUNT_LINK_RANGE, COUNT_SELECTION)]


def test_definition_on_whitespace_is_empty(service, typed_project):
    path = str(typed_project / 'my' / 'app' / 'app.view.ts')

    assert service.definition_at(path, Position(3, 0)) == []


def test_implementation_of_member_name(service, typed_project):
    path = str(typed_project / 'my' / 'app' / 'app.view.ts')

    links = service.implementation_at(path, Position(2, 3))

    assert links == [LocationLink(path, COUNT_LINK_RANGE, COUNT_SELECTION)]


def test_implementation_of_component_name_finds_its_class(service, typed_project):
    probe = str(typed_project / 'my' / 'app' / 'app.test.ts')
    declaring = str(typed_project / 'my' / 'app' / 'app.view.ts')

    links = service.implementation_at(probe, Position(1, 17))

    assert len(links) == 1
    assert links[0].target_path == declaring
    assert links[0].target_selection_range == Range.on_line(1, 14, 21)
