"""
Tests for diary export.
"""

import pytest
from datetime import datetime

from socrate.core.diary import DiaryExporter
from socrate.core.models import Turn, SocraticTurn
from socrate.shared.config import DiaryConfig
from socrate.shared.exceptions import ClipboardError


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class RecordingClipboard:
    def __init__(self, fail=False):
        self.fail = fail
        self.texts = []

    def write(self, text):
        if self.fail:
            raise ClipboardError("no clipboard")
        self.texts.append(text)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def exporter(clock):
    return DiaryExporter(DiaryConfig(copied_flash_seconds=2.0), clock=clock)


def _populate(state):
    problem = state.add_problem("Fear of failure")
    problem.created_at = datetime(2024, 3, 5, 9, 30, 0)
    state.conversation.append(Turn(role="user", text="I keep procrastinating"))
    state.conversation.append(Turn(
        role="assistant", text="Let's look closer.", identified_problems=["Fear of failure"]
    ))
    state.selected_problem_id = problem.id
    state.socratic.append(SocraticTurn(role="socrate", text="Why is this a problem?"))
    state.socratic.append(SocraticTurn(
        role="socrate", text="Well done.", final_reflection="A new awareness."
    ))
    insight = state.add_insight("I am enough", problem)
    return problem, insight


def test_empty_session_renders_placeholder(exporter, state):
    text = exporter.render(state, now=datetime(2024, 3, 5, 10, 0, 0))

    assert "SELF-REFLECTION DIARY" in text
    assert "Date: 05/03/2024 - Time: 10:00:00" in text
    assert "IDENTIFIED PROBLEMS (0)" in text
    assert "No problems identified yet." in text
    assert "CONVERSATION" not in text
    assert "INSIGHTS" not in text


def test_sections_in_fixed_order(exporter, state):
    _populate(state)

    text = exporter.render(state)

    positions = [
        text.index("IDENTIFIED PROBLEMS (1)"),
        text.index("CONVERSATION - FIND THE PROBLEM"),
        text.index("DIALOGUE WITH SOCRATES"),
        text.index("INSIGHTS REACHED (1)"),
    ]
    assert positions == sorted(positions)
    assert "1. Fear of failure" in text
    assert "Created: 05/03/2024, 09:30:00" in text
    assert "[YOU]: I keep procrastinating" in text
    assert "→ Problems identified: Fear of failure" in text
    assert 'Problem discussed: "Fear of failure"' in text
    assert "FINAL REFLECTION: A new awareness." in text
    assert '1. "I am enough"' in text


def test_render_does_not_mutate(exporter, state):
    _populate(state)
    before = (list(state.conversation), list(state.problems), list(state.socratic), list(state.insights))

    exporter.render(state)

    assert (state.conversation, state.problems, state.socratic, state.insights) == before


def test_copy_sets_transient_flag(exporter, state, clock):
    clipboard = RecordingClipboard()

    assert exporter.copy_to_clipboard(state, clipboard) is True
    assert len(clipboard.texts) == 1
    assert exporter.is_copied(state) is True

    clock.now += 2.5
    assert exporter.is_copied(state) is False


def test_copy_failure_logged_not_raised(exporter, state, caplog):
    result = exporter.copy_to_clipboard(state, RecordingClipboard(fail=True))

    assert result is False
    assert exporter.is_copied(state) is False
    assert "Diary copy failed" in caplog.text
