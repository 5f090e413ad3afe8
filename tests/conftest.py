"""Shared fixtures for the view.tree server tests."""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT / 'src'
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from view_tree_mcp.indexing import ProjectIndexManager  # noqa: E402


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


@pytest.fixture
def mol_project(tmp_path):
    """A small MAM workspace: $my_app extends $my_base extends $mol_view."""
    write(tmp_path / 'my' / 'base' / 'base.view.tree',
          "$my_base $mol_view\n"
          "\ttitle \\Base\n"
          "\tenabled? true\n")
    write(tmp_path / 'my' / 'app' / 'app.view.tree',
          "$my_app $my_base\n"
          "\tsub /\n"
          "\t\t<= Head $mol_view\n"
          "\tcount 0\n")
    write(tmp_path / 'my' / 'app' / 'app.view.css.ts',
          "namespace $.$$ {\n"
          "\t$mol_style_define( $my_app, {\n"
          "\t\tHead: {\n"
          "\t\t\tpadding: 0,\n"
          "\t\t},\n"
          "\t})\n"
          "}\n")
    # Generated output and dependencies are never indexed
    write(tmp_path / 'my' / 'app' / '-view.tree' / 'app.view.tree.d.ts',
          "declare namespace $ {\n\texport class $my_app extends $my_base {}\n}\n")
    write(tmp_path / 'node_modules' / 'pkg' / 'pkg.view.tree', "$pkg $mol_view\n")
    return tmp_path


@pytest.fixture
def index_manager(mol_project):
    manager = ProjectIndexManager()
    assert manager.set_project_path(str(mol_project))
    manager.build_index()
    yield manager
    manager.cleanup()
