from datetime import datetime

import pytest

from services.base import MemoryPreferenceStore
from services.countdown import (
    Ended,
    NoSession,
    Running,
    WidgetTexts,
    format_end_time,
    render,
    render_texts,
    widget_texts,
)

NOW = 1_760_000_000_000


@pytest.mark.parametrize("exit_time", [0, -1, -5_000_000])
@pytest.mark.parametrize("now", [0, NOW, NOW * 2])
def test_non_positive_exit_time_is_no_session(exit_time, now) -> None:
    assert render(True, exit_time, now) == NoSession()


@pytest.mark.parametrize("exit_time", [NOW - 1000, NOW, NOW + 1, NOW + 500_000])
def test_not_running_is_no_session_regardless_of_exit_time(exit_time) -> None:
    assert render(False, exit_time, NOW) == NoSession()


@pytest.mark.parametrize("delta", [0, -1, -1000, -86_400_000])
def test_exit_time_at_or_before_now_is_ended(delta) -> None:
    assert render(True, NOW + delta, NOW) == Ended()


@pytest.mark.parametrize(
    "remaining",
    [1, 999, 1000, 59_999, 60_000, 3_599_999, 3_600_000, 3_661_000,
     86_399_999, 86_400_000, 129_902_000, 360_000_000_123],
)
def test_running_decomposition(remaining) -> None:
    state = render(True, NOW + remaining, NOW)

    assert isinstance(state, Running)
    assert state.hours * 3600 + state.minutes * 60 + state.seconds == remaining // 1000
    assert 0 <= state.minutes < 60
    assert 0 <= state.seconds < 60
    assert state.exit_time_millis == NOW + remaining


def test_render_is_idempotent() -> None:
    args = (True, NOW + 12_345_678, NOW)
    assert render(*args) == render(*args)
    assert widget_texts(render(*args)) == widget_texts(render(*args))


def test_one_hour_one_minute_one_second() -> None:
    texts = widget_texts(render(True, NOW + 3_661_000, NOW))

    assert texts.time_remaining == "01:01:01"
    assert texts.status == "Session running"
    assert texts.end_time.startswith("Ends at ")


def test_sub_second_remaining_renders_zero_but_running() -> None:
    texts = widget_texts(render(True, NOW + 500, NOW))

    assert texts.time_remaining == "00:00:00"
    assert texts.status == "Session running"


def test_ended_texts() -> None:
    texts = widget_texts(render(True, NOW - 1000, NOW))

    assert texts == WidgetTexts("00:00:00", "Session ended", "Not running")


def test_no_session_texts() -> None:
    texts = widget_texts(render(False, NOW + 500_000, NOW))

    assert texts == WidgetTexts("--:--:--", "No active session", "Not running")


def test_hours_are_not_wrapped_at_24() -> None:
    remaining = (36 * 3600 + 5 * 60 + 2) * 1000
    assert widget_texts(render(True, NOW + remaining, NOW)).time_remaining == "36:05:02"

    remaining = 100 * 3600 * 1000
    assert widget_texts(render(True, NOW + remaining, NOW)).time_remaining == "100:00:00"


def test_format_end_time_uses_twelve_hour_local_clock() -> None:
    afternoon = int(datetime(2026, 3, 1, 15, 5).timestamp() * 1000)
    morning = int(datetime(2026, 3, 1, 9, 30).timestamp() * 1000)

    assert format_end_time(afternoon) == "03:05 PM"
    assert format_end_time(morning) == "09:30 AM"


def test_running_end_time_text() -> None:
    exit_time = int(datetime(2026, 3, 1, 23, 45).timestamp() * 1000)
    texts = widget_texts(render(True, exit_time, exit_time - 60_000))

    assert texts.end_time == "Ends at 11:45 PM"


def test_render_texts_missing_keys_is_no_session() -> None:
    texts = render_texts(MemoryPreferenceStore(), NOW)

    assert texts.time_remaining == "--:--:--"
    assert texts.status == "Not running"


def test_render_texts_reads_store(running_store) -> None:
    texts = render_texts(running_store(NOW + 3_661_000), NOW)

    assert texts.time_remaining == "01:01:01"


def test_render_texts_defaults_to_wall_clock(running_store) -> None:
    # Far-future exit: remaining is large no matter when the test runs
    texts = render_texts(running_store(NOW * 10))

    assert texts.status == "Session running"


def test_as_dict_uses_view_ids() -> None:
    texts = WidgetTexts("01:00:00", "Ends at 03:00 PM", "Session running")

    assert texts.as_dict() == {
        "time_remaining": "01:00:00",
        "end_time": "Ends at 03:00 PM",
        "status": "Session running",
    }


@pytest.mark.parametrize("exit_time", [2**63 - 1, 253_402_300_800_000])
def test_end_time_beyond_datetime_range_renders_placeholder(exit_time) -> None:
    texts = render_texts(MemoryPreferenceStore({
        "flutter.is_running": True,
        "flutter.exit_time": exit_time,
    }), NOW)

    assert texts.status == "Session running"
    assert texts.end_time == "Ends at --:-- --"
    assert texts.time_remaining.endswith(f":{(exit_time - NOW) // 1000 % 60:02d}")


def test_format_end_time_out_of_range() -> None:
    assert format_end_time(2**63 - 1) == "--:-- --"
