"""Tests for the view.tree and TypeScript extraction strategies."""
from view_tree_mcp.indexing.strategies import (
    StrategyFactory, TypeScriptExtractionStrategy, ViewTreeExtractionStrategy,
)
from view_tree_mcp.indexing.strategies.typescript_strategy import base_class_name


def test_view_tree_component_with_base_and_property():
    entry = ViewTreeExtractionStrategy().extract("/w/a/a.view.tree", "$a $b\n\ttitle foo\n")

    assert entry.name == "$a"
    assert entry.properties == frozenset({"title"})
    assert entry.base_class == "$b"
    assert entry.declaring_file == "/w/a/a.view.tree"


def test_view_tree_bound_properties_are_collected():
    content = ("$my_app $mol_page\n"
               "\tbody /\n"
               "\t\t<= Greeting $mol_text\n"
               "\t\t\ttext <= greeting \\Hello\n"
               "\tvalue? <=> current? 0\n"
               "\tattr *\n"
               "\t\tdata-id \\main\n")
    entry = ViewTreeExtractionStrategy().extract("/w/app.view.tree", content)

    assert entry.properties == frozenset({"body", "Greeting", "greeting", "value?", "current?", "attr"})


def test_view_tree_override_rows_of_bound_sub_component_are_not_collected():
    content = ("$my_list $mol_list\n"
               "\trows /\n"
               "\t\t<= Row $mol_row\n"
               "\t\t\ttitle <= row_title\n"
               "\t\t\tenabled? false\n")
    entry = ViewTreeExtractionStrategy().extract("/w/list.view.tree", content)

    assert entry.properties == frozenset({"rows", "Row", "row_title"})


def test_view_tree_raw_text_is_not_scanned():
    content = "$a\n\ttext \\\n\t\t<= not_a_property\n"
    entry = ViewTreeExtractionStrategy().extract("/w/a.view.tree", content)

    assert entry.properties == frozenset({"text"})


def test_view_tree_without_component():
    assert ViewTreeExtractionStrategy().extract("/w/empty.view.tree", "\n\ttitle x\n") is None


def test_typescript_first_sigil_class_and_members():
    content = ("namespace $.$$ {\n"
               "\texport class $my_app extends $.$my_base {\n"
               "\t\tconstructor() { super() }\n"
               "\t\ttitle() { return 'x' }\n"
               "\t\t_cache = 1\n"
               "\t\tcount = 0\n"
               "\t}\n"
               "\texport class $my_other extends $mol_view {}\n"
               "}\n")
    entry = TypeScriptExtractionStrategy().extract("/w/app.view.ts", content)

    assert entry.name == "$my_app"
    assert entry.properties == frozenset({"title", "count"})
    assert entry.base_class == "$my_base"
    assert not entry.refines_generated


def test_typescript_refinement_of_generated_class_is_marked():
    content = "namespace $.$$ {\n\texport class $my_app extends $.$my_app {\n\t\tsub() { return [] }\n\t}\n}\n"
    entry = TypeScriptExtractionStrategy().extract("/w/app.view.ts", content)

    assert entry.base_class is None
    assert entry.refines_generated
    assert entry.properties == frozenset({"sub"})


def test_typescript_without_component_class():
    assert TypeScriptExtractionStrategy().extract("/w/util.ts", "export class Helper {}\n") is None


def test_base_class_name():
    assert base_class_name("$.$mol_view") == "$mol_view"
    assert base_class_name("$mol_view") == "$mol_view"
    assert base_class_name("Base") is None
    assert base_class_name(None) is None


def test_factory_routes_by_suffix():
    factory = StrategyFactory()

    assert factory.get_strategy("/w/a.view.tree") is factory.tree_strategy
    assert factory.get_strategy("/w/a.view.ts") is factory.typed_strategy
    assert factory.get_strategy("/w/-view.tree/a.view.tree.d.ts") is None
    assert factory.get_strategy("/w/readme.md") is None
