"""Shared fixtures: deterministic clocks, event factories, and a Flask test app."""

from __future__ import annotations

import pytest

from lcu_capture import CaptureConfig, CaptureController, Event, RawEvent
from lcuapp import create_app
from lcuapp.config import TestingConfig


class StepClock:
    """Returns start, start+step, start+2*step, ... on successive calls."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 10) -> None:
        self.value = start
        self.step = step

    def __call__(self) -> int:
        current = self.value
        self.value += self.step
        return current


def make_event(uri: str = "/lol-summoner/v1/current-summoner", event_type: str = "Update",
               data=None, timestamp: int = 0) -> Event:
    return Event(uri=uri, event_type=event_type, data=data, timestamp=timestamp)


def make_raw(uri: str = "/lol-summoner/v1/current-summoner", event_type: str = "Update",
             data=None) -> RawEvent:
    return RawEvent(uri=uri, event_type=event_type, data=data)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def controller(clock) -> CaptureController:
    return CaptureController(CaptureConfig(), clock=clock)


@pytest.fixture
def app(tmp_path):
    class _Config(TestingConfig):
        LOG_FOLDER = str(tmp_path / "logs")
        LOG_FILE = str(tmp_path / "logs" / "app.log")

    application = create_app(_Config)
    mgr = application.extensions["capture_mgr"]
    mgr.controller = CaptureController(mgr.config, clock=StepClock())
    yield application
    application.extensions["capture_mgr"].stop()


@pytest.fixture
def client(app):
    return app.test_client()
