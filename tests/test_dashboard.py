"""Tests for the Streamlit helpers that wrap client calls."""
from __future__ import annotations

import pytest

from client import ApiError
from dashboard import streamlit_app


class _Recorder:
    def __init__(self):
        self.errors = []
        self.session_state = {}

    def error(self, message):
        self.errors.append(message)

    def caption(self, message):
        pass

    def info(self, message):
        pass


@pytest.fixture
def fake_st(monkeypatch):
    recorder = _Recorder()
    monkeypatch.setattr(streamlit_app, "st", recorder)
    return recorder


def _forbidden(*args):
    raise ApiError(403, "FORBIDDEN", "Access denied")


class TestAttempt:
    def test_bodiless_success(self, fake_st):
        assert streamlit_app.attempt(lambda lead_id: None, "lead-1") is True
        assert fake_st.errors == []

    def test_error_is_not_success(self, fake_st):
        assert streamlit_app.attempt(_forbidden, "lead-1") is False
        assert fake_st.errors == ["FORBIDDEN: Access denied"]

    def test_call_returns_none_on_error(self, fake_st):
        assert streamlit_app.call(_forbidden) is None
        assert streamlit_app.call(lambda: {"id": "x"}) == {"id": "x"}
