"""
Tests for lcu_capture.orchestration.controller: state and operator commands.
"""

import json

import pytest

from lcu_capture import (
    CaptureConfig,
    CaptureController,
    DecodeError,
    FilterCriteria,
    InProcessEventBus,
    SortSpec,
    dumps,
)

from conftest import StepClock, make_event


def _push(ctrl, n, prefix="/e", event_type="Update"):
    for i in range(n):
        ctrl.on_event({"uri": f"{prefix}/{i}", "eventType": event_type, "data": {"i": i}})


class RecordingClipboard:
    def __init__(self):
        self.texts = []

    def write_text(self, text):
        self.texts.append(text)


class BrokenClipboard:
    def write_text(self, text):
        raise OSError("clipboard unavailable")


class TestDefaults:
    def test_initial_state(self, controller):
        st = controller.state
        assert st.paused is False
        assert st.filter == FilterCriteria()
        assert st.sort == SortSpec("timestamp", "desc")
        assert st.breakpoint.position is None
        assert controller.view == ()

    def test_status_labels(self, controller):
        assert controller.status()["label"] == "Live"
        controller.toggle_pause()
        assert controller.status()["label"] == "Paused"


class TestCapture:
    def test_view_tracks_pushes_newest_first(self, controller):
        _push(controller, 3)
        assert [e.uri for e in controller.view] == ["/e/2", "/e/1", "/e/0"]
        assert controller.state.last_event_time == controller.view[0].timestamp

    def test_incoming_timestamp_is_ignored(self, clock):
        ctrl = CaptureController(clock=clock)
        start = clock.value
        ctrl.on_event({"uri": "/a", "eventType": "Update", "data": None, "timestamp": 1})
        assert ctrl.view[0].timestamp == start

    def test_paused_drops_events(self, controller):
        _push(controller, 2)
        before = controller.state.buffer.snapshot()
        controller.toggle_pause()
        assert controller.on_event({"uri": "/late", "eventType": "Update"}) is None
        _push(controller, 5, prefix="/late")
        assert controller.state.buffer.snapshot() == before

    def test_resume_captures_again_without_backlog(self, controller):
        controller.toggle_pause()
        _push(controller, 3, prefix="/dropped")
        controller.toggle_pause()
        _push(controller, 1, prefix="/kept")
        assert [e.uri for e in controller.view] == ["/kept/0"]

    def test_capacity_from_config(self):
        ctrl = CaptureController(CaptureConfig(capacity=5), clock=StepClock())
        _push(ctrl, 12)
        assert len(ctrl.view) == 5
        assert ctrl.view[0].uri == "/e/11"

    def test_malformed_message_rejected(self, controller):
        with pytest.raises(ValueError):
            controller.on_event({"eventType": "Update"})
        assert controller.view == ()


class TestClear:
    def test_clear_drops_events_and_breakpoint(self, controller):
        _push(controller, 3)
        controller.set_search("e")
        controller.set_breakpoint()
        controller.clear()
        assert controller.view == ()
        assert controller.state.breakpoint.position is None
        assert controller.state.filter.search == "e"


class TestBreakpoint:
    def test_set_uses_view_length(self, controller):
        _push(controller, 4)
        assert controller.set_breakpoint() == 3

    def test_empty_view_sets_nothing(self, controller):
        assert controller.set_breakpoint() is None

    def test_survives_filter_and_sort_changes(self, controller):
        _push(controller, 4)
        controller.set_breakpoint()
        controller.set_search("/e/1")
        controller.select_sort_column("uri")
        assert controller.state.breakpoint.position == 3

    def test_stale_position_after_reset_does_not_raise(self, controller):
        _push(controller, 3, prefix="/a", event_type="Update")
        _push(controller, 3, prefix="/b", event_type="Create")
        controller.set_event_type_filter("Create")
        controller.set_breakpoint()
        assert controller.state.breakpoint.position == 2
        controller.reset_filters()
        rows = controller.rows()
        assert len(rows) == 6
        controller.set_search("/b/0")
        rows = controller.rows()
        assert len(rows) == 1
        assert not rows[0].divider_before

    def test_new_events_fall_below_divider_when_ascending(self, controller):
        controller.set_sort(SortSpec("timestamp", "asc"))
        _push(controller, 2, prefix="/old")
        controller.set_breakpoint()
        _push(controller, 2, prefix="/new")
        rows = controller.rows()
        assert [r.event.uri for r in rows if r.after_breakpoint] == ["/new/0", "/new/1"]
        assert rows[2].divider_before


class TestFilterSort:
    def test_sort_toggle_semantics(self, controller):
        assert controller.select_sort_column("uri") == SortSpec("uri", "asc")
        assert controller.select_sort_column("uri") == SortSpec("uri", "desc")
        assert controller.select_sort_column("eventType") == SortSpec("eventType", "asc")
        assert controller.select_sort_column("timestamp") == SortSpec("timestamp", "asc")

    def test_reset_filters_leaves_sort(self, controller):
        controller.set_search("abc")
        controller.set_event_type_filter("Update")
        controller.select_sort_column("uri")
        controller.reset_filters()
        assert controller.state.filter == FilterCriteria()
        assert controller.state.sort == SortSpec("uri", "asc")

    def test_search_and_type_combine(self, controller):
        _push(controller, 2, prefix="/a", event_type="Update")
        _push(controller, 2, prefix="/b", event_type="Create")
        controller.set_search("/a")
        controller.set_event_type_filter("Create")
        assert controller.view == ()
        controller.set_event_type_filter("Update")
        assert {e.uri for e in controller.view} == {"/a/0", "/a/1"}

    def test_event_types_cover_whole_buffer(self, controller):
        _push(controller, 1, event_type="Update")
        _push(controller, 1, event_type="Create")
        controller.set_event_type_filter("Update")
        assert controller.event_types() == ["Create", "Update"]


class TestExportImport:
    def test_export_uses_view_not_buffer(self, controller):
        _push(controller, 3, prefix="/a")
        _push(controller, 2, prefix="/b")
        controller.set_search("/b")
        doc = controller.export(now=99)
        assert [e.uri for e in doc.events] == ["/b/1", "/b/0"]
        assert doc.export_timestamp == 99
        assert doc.filter.search == "/b"

    def test_import_replaces_state_and_keeps_breakpoint(self, controller):
        _push(controller, 5)
        controller.set_breakpoint()
        text = json.dumps({
            "events": [
                {"uri": f"/imp/{i}", "eventType": "Update", "data": {}, "timestamp": 1000 + i}
                for i in range(150)
            ],
            "metadata": {
                "exportTimestamp": 1,
                "filter": {"search": "imp", "eventType": "Update"},
                "sort": {"by": "uri", "order": "asc"},
            },
        })
        controller.import_document(text)
        assert len(controller.state.buffer) == 150
        assert len(controller.view) == 150
        assert controller.state.filter == FilterCriteria("imp", "Update")
        assert controller.state.sort == SortSpec("uri", "asc")
        assert controller.state.breakpoint.position == 4

    def test_failed_import_changes_nothing(self, controller):
        _push(controller, 3)
        controller.set_search("e")
        controller.select_sort_column("uri")
        controller.set_breakpoint()
        before = (
            controller.state.buffer.snapshot(),
            controller.state.filter,
            controller.state.sort,
            controller.state.breakpoint.position,
            controller.view,
        )
        with pytest.raises(DecodeError):
            controller.import_document("{ this is not json")
        after = (
            controller.state.buffer.snapshot(),
            controller.state.filter,
            controller.state.sort,
            controller.state.breakpoint.position,
            controller.view,
        )
        assert before == after

    def test_round_trip_through_controller(self, clock):
        src = CaptureController(clock=clock)
        _push(src, 4)
        src.set_search("/e/")
        src.select_sort_column("eventType")
        doc = src.export()

        dst = CaptureController(clock=StepClock())
        dst.import_document(dumps(doc))
        assert dst.view == src.view
        assert dst.state.filter == src.state.filter
        assert dst.state.sort == src.state.sort

    def test_export_filename(self, controller):
        assert controller.export_filename(now=0) == "lcu-events-1970-01-01T00-00-00.json"


class TestInspection:
    def test_select_and_copy(self, controller):
        _push(controller, 2)
        event = controller.select_event(1)
        assert event.uri == "/e/0"
        clip = RecordingClipboard()
        assert controller.copy_selected(clip) is True
        assert clip.texts == [json.dumps({"i": 0}, indent=2)]

    def test_select_out_of_range(self, controller):
        with pytest.raises(IndexError):
            controller.select_event(0)

    def test_copy_without_selection(self, controller):
        assert controller.copy_selected(RecordingClipboard()) is False

    def test_clipboard_failure_is_not_fatal(self, controller):
        _push(controller, 2)
        controller.select_event(0)
        before = (controller.view, controller.state.selected)
        assert controller.copy_selected(BrokenClipboard()) is False
        assert (controller.view, controller.state.selected) == before

    def test_close_inspection(self, controller):
        _push(controller, 1)
        controller.select_event(0)
        controller.close_inspection()
        assert controller.selected_data_text() is None


class TestSubscription:
    def test_scoped_subscription(self, controller):
        bus = InProcessEventBus()
        with controller.subscribed(bus):
            assert bus.is_subscribed("event")
            assert bus.publish("event", {"uri": "/a", "eventType": "Update", "data": 1})
        assert not bus.is_subscribed("event")
        assert not bus.publish("event", {"uri": "/b", "eventType": "Update"})
        assert [e.uri for e in controller.view] == ["/a"]

    def test_unsubscribes_on_error(self, controller):
        bus = InProcessEventBus()
        with pytest.raises(RuntimeError):
            with controller.subscribed(bus):
                raise RuntimeError("boom")
        assert not bus.is_subscribed("event")

    def test_one_subscriber_per_topic(self):
        bus = InProcessEventBus()
        bus.subscribe("event", lambda m: None)
        with pytest.raises(ValueError):
            bus.subscribe("event", lambda m: None)
