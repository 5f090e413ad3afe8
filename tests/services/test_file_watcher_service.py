"""Tests for the debounced file watcher."""
import logging
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from watchdog.events import (
    DirModifiedEvent, FileCreatedEvent, FileDeletedEvent, FileModifiedEvent, FileMovedEvent,
)

from view_tree_mcp.project_settings import ProjectSettings
from view_tree_mcp.services import FileWatcherService
from view_tree_mcp.services.file_watcher_service import DebounceEventHandler


@pytest.fixture
def handler(tmp_path):
    update, remove = Mock(), Mock()
    handler = DebounceEventHandler(
        debounce_seconds=60,
        update_callback=update,
        remove_callback=remove,
        base_path=tmp_path,
        logger=logging.getLogger("test_file_watcher"),
    )
    yield handler
    handler.cancel()


def path_in(base: Path, *parts: str) -> str:
    return str(base.joinpath(*parts))


def test_modified_and_created_files_are_updated(handler, tmp_path):
    handler.on_any_event(FileModifiedEvent(path_in(tmp_path, 'my', 'app', 'app.view.tree')))
    handler.on_any_event(FileCreatedEvent(path_in(tmp_path, 'my', 'app', 'app.view.ts')))

    handler.flush()

    assert [c.args[0] for c in handler.update_callback.call_args_list] == [
        path_in(tmp_path, 'my', 'app', 'app.view.tree'),
        path_in(tmp_path, 'my', 'app', 'app.view.ts'),
    ]
    handler.remove_callback.assert_not_called()


def test_move_removes_source_and_updates_destination(handler, tmp_path):
    src = path_in(tmp_path, 'my', 'a', 'a.view.tree')
    dest = path_in(tmp_path, 'my', 'b', 'b.view.tree')

    handler.on_any_event(FileMovedEvent(src, dest))
    handler.flush()

    handler.remove_callback.assert_called_once_with(src)
    handler.update_callback.assert_called_once_with(dest)


def test_deleted_file_is_removed(handler, tmp_path):
    path = path_in(tmp_path, 'my', 'a', 'a.view.tree')

    handler.on_any_event(FileDeletedEvent(path))
    handler.flush()

    handler.remove_callback.assert_called_once_with(path)
    handler.update_callback.assert_not_called()


def test_events_for_one_path_coalesce_to_the_latest_action(handler, tmp_path):
    path = path_in(tmp_path, 'my', 'a', 'a.view.tree')

    handler.on_any_event(FileModifiedEvent(path))
    handler.on_any_event(FileModifiedEvent(path))
    handler.on_any_event(FileDeletedEvent(path))
    assert handler.pending_count() == 1

    handler.flush()

    handler.update_callback.assert_not_called()
    handler.remove_callback.assert_called_once_with(path)
    assert handler.pending_count() == 0


def test_irrelevant_paths_are_filtered(handler, tmp_path):
    handler.on_any_event(FileModifiedEvent(path_in(tmp_path, 'README.md')))
    handler.on_any_event(FileModifiedEvent(path_in(tmp_path, 'my', '-view.tree', 'app.view.tree.d.ts')))
    handler.on_any_event(FileModifiedEvent(path_in(tmp_path, 'node_modules', 'x', 'x.view.tree')))
    handler.on_any_event(FileModifiedEvent(path_in(tmp_path, 'my', 'app.view.tree.swp')))
    handler.on_any_event(FileModifiedEvent('/elsewhere/other.view.tree'))
    handler.on_any_event(DirModifiedEvent(path_in(tmp_path, 'my')))

    assert handler.pending_count() == 0


def test_failing_callback_does_not_stop_the_batch(handler, tmp_path, caplog):
    first = path_in(tmp_path, 'a.view.tree')
    second = path_in(tmp_path, 'b.view.tree')
    handler.update_callback.side_effect = [OSError("disk gone"), None]

    handler.on_any_event(FileModifiedEvent(first))
    handler.on_any_event(FileModifiedEvent(second))
    with caplog.at_level(logging.ERROR):
        handler.flush()

    assert handler.update_callback.call_count == 2
    assert "Index update failed" in caplog.text


def test_cancel_drops_pending_events(handler, tmp_path):
    handler.on_any_event(FileModifiedEvent(path_in(tmp_path, 'a.view.tree')))

    handler.cancel()
    handler.flush()

    handler.update_callback.assert_not_called()
    assert handler.debounce_timer is None


def watcher_ctx(base_path: str, settings):
    lifespan = SimpleNamespace(base_path=base_path, settings=settings,
                               index_manager=None, file_watcher_service=None)
    return SimpleNamespace(request_context=SimpleNamespace(lifespan_context=lifespan))


def test_service_refuses_to_start_without_project():
    service = FileWatcherService(watcher_ctx("", None))

    assert service.start_monitoring(Mock(), Mock()) is False
    assert service.is_active() is False


def test_service_start_and_stop(tmp_path):
    settings = ProjectSettings(str(tmp_path), skip_load=True)
    service = FileWatcherService(watcher_ctx(str(tmp_path), settings))

    assert service.start_monitoring(Mock(), Mock()) is True
    try:
        status = service.get_status()
        assert status["active"] is True
        assert status["pending_events"] == 0
        assert status["base_path"] == str(tmp_path)
    finally:
        service.stop_monitoring()

    assert service.is_active() is False
    assert service.get_status()["observer_alive"] is False
