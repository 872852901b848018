# /tests/test_tabs.py

from __future__ import annotations

import time

import pytest

from controller.config import Config
from engine.commands import CenterOn, CommandBus, Notify, Target
from engine.models import Dataset, Point
from ui.main_window import LOCAL_ENTITY_ID, MainWindow
from ui.maps.tabs import MapTabs


@pytest.fixture
def tabs(qapp):
    t = MapTabs(CommandBus())
    yield t
    t.shutdown()


def _wait_loaded(view, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while len(view.engine.store) == 0 and time.monotonic() < deadline:
        view.grab()
        time.sleep(0.01)


def test_publish_reaches_every_pane(tabs):
    region = tabs.add_region_pane(10000001, "Alpha")
    tabs.universe.engine.load(Dataset(points=(Point(7, (0.0, 0.0)), Point(8, (100.0, 50.0)))))
    region.engine.load(Dataset(points=(Point(8, (3.0, 4.0)), Point(9, (-3.0, -4.0)))))

    assert tabs.publish(CenterOn(8)) == 2
    tabs.universe.grab()
    region.grab()
    assert tabs.universe.engine.viewport.center == (100.0, 50.0)
    assert region.engine.viewport.center == (3.0, 4.0)


def test_region_pane_is_created_once(tabs):
    a = tabs.add_region_pane(10000001)
    b = tabs.add_region_pane(10000001)
    assert a is b
    assert tabs.tabs.count() == 2


def test_background_loads_fill_panes(tabs, sde_db):
    tabs.load_all([10000001])
    region = tabs.region_views[10000001]
    _wait_loaded(tabs.universe)
    _wait_loaded(region)
    assert len(tabs.universe.engine.store) == 3
    assert {p.id for p in region.engine.store.points.values()} == {30000001, 30000002}
    assert tabs.tabs.tabText(tabs.tabs.indexOf(region)) == "Alpha"


def test_region_center_command(tabs, sde_db):
    tabs.load_universe()
    _wait_loaded(tabs.universe)
    tabs.publish(CenterOn(10000002, Target.REGION))
    tabs.universe.grab()
    assert tabs.universe.engine.viewport.center == pytest.approx((2.0, 6.0))


def test_main_window_broadcasts_search_choice(qapp, sde_db):
    bus = CommandBus()
    spy = bus.subscribe()
    win = MainWindow(Config(notify_on_search=True), bus)
    try:
        win.search.search.setText("aug")
        win.search.refresh()
        assert [r["name"] for r in win.search.results] == ["Auga"]
        assert win.search.tree.topLevelItemCount() == 1

        win.on_system_chosen(30000002)
        kinds = [type(c).__name__ for c in spy.drain()]
        assert kinds == ["CenterOn", "Select", "Notify"]
        assert win.lbl_selected.text() == "Selected: Auga"

        win.on_location_marked(30000001)
        (moved,) = spy.drain()
        assert (moved.entity_id, moved.point_id) == (LOCAL_ENTITY_ID, 30000001)

        win.refresh_status_counts()
        assert win.lbl_systems.text() == "Systems: 3"
    finally:
        win.close()
        win.maps.shutdown()


def test_hidden_pane_does_not_keep_a_frame_clock(qapp, tabs):
    region = tabs.add_region_pane(10000001, "Alpha")
    tabs.universe.engine.load(Dataset(points=(Point(7, (0.0, 0.0)),)))
    region.engine.load(Dataset(points=(Point(7, (1.0, 1.0)),)))
    tabs.resize(300, 200)
    tabs.show()
    tabs.show_universe()
    qapp.processEvents()
    assert tabs.universe.isVisible() and not region.isVisible()

    tabs.publish(Notify(7, time.monotonic()))
    assert tabs.universe.animating
    assert not region.animating

    tabs.setCurrentIndex(tabs.tabs.indexOf(region))
    qapp.processEvents()
    assert region.animating
    assert not tabs.universe.animating
    tabs.close()


def test_remove_region_pane_leaves_the_bus(tabs):
    tabs.add_region_pane(10000001, "Alpha")
    assert len(tabs.bus) == 2
    assert tabs.remove_region_pane(10000001) is True
    assert 10000001 not in tabs.region_views
    assert tabs.tabs.count() == 1
    assert tabs.views == [tabs.universe]
    assert len(tabs.bus) == 1
    assert tabs.publish(CenterOn(7)) == 1
    assert tabs.remove_region_pane(10000001) is False


def test_tabs_locate_across_panes(tabs):
    region = tabs.add_region_pane(10000001, "Alpha")
    region.engine.load(Dataset(points=(Point(9, (0.0, 0.0)),), region_id=10000001))
    assert tabs.locates(CenterOn(9))
    assert tabs.locates(CenterOn(10000001, Target.REGION))
    assert not tabs.locates(CenterOn(8))


@pytest.fixture
def window(qapp, sde_db):
    bus = CommandBus()
    spy = bus.subscribe()
    win = MainWindow(Config(notify_on_search=False), bus)
    win.spy = spy
    yield win
    win.close()
    win.maps.shutdown()


def test_regions_menu_opens_and_closes_panes(window):
    window.populate_regions_menu()
    assert set(window.region_actions) == {10000001, 10000002}
    assert [a.text() for a in window.regions_menu.actions()] == ["Alpha", "Beta"]
    assert not window.region_actions[10000002].isChecked()

    window.region_actions[10000002].setChecked(True)
    region = window.maps.region_views[10000002]
    assert window.maps.tabs.count() == 2
    assert window.maps.current_view() is region
    assert len(window.bus) == 3
    _wait_loaded(region)
    assert {p.id for p in region.engine.store.points.values()} == {30000003}

    window.region_actions[10000002].setChecked(False)
    assert 10000002 not in window.maps.region_views
    assert window.maps.tabs.count() == 1
    assert len(window.bus) == 2


def test_open_region_panes_are_checked_in_the_menu(window):
    window.maps.load_region(10000001, "Alpha")
    window.populate_regions_menu()
    assert window.region_actions[10000001].isChecked()
    assert not window.region_actions[10000002].isChecked()


def test_region_choice_centres_the_universe(window):
    window.maps.load_universe()
    _wait_loaded(window.maps.universe)
    window.maps.universe.grab()
    window.spy.drain()

    window.search.regionChosen.emit(10000002)
    (cmd,) = window.spy.drain()
    assert (cmd.target_id, cmd.target) == (10000002, Target.REGION)
    window.maps.universe.grab()
    assert window.maps.universe.engine.viewport.center == pytest.approx((2.0, 6.0))
    assert window.statusBar().currentMessage() == ""


def test_unlocated_choice_is_reported(window):
    window.on_system_chosen(30000099)
    assert [type(c).__name__ for c in window.spy.drain()] == ["CenterOn", "Select"]
    assert window.statusBar().currentMessage() == "System with Id 30000099 could not be located"

    window.on_region_chosen(10000077)
    assert window.statusBar().currentMessage() == "Region with Id 10000077 could not be located"


def test_located_choice_selects_on_every_pane(window):
    window.maps.load_universe()
    _wait_loaded(window.maps.universe)
    window.on_system_chosen(30000002)
    assert window.statusBar().currentMessage() == ""
    window.maps.universe.grab()
    assert window.maps.universe.last_frame.selected[0] == 30000002

    window.on_point_clicked(30000001)
    window.maps.universe.grab()
    assert window.maps.universe.last_frame.selected[0] == 30000001
    assert window.lbl_selected.text() == "Selected: Amamake"
