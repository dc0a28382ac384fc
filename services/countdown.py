"""
倒數計算與文字輸出

render() 為純函式：(is_running, exit_time_millis, now_millis) → DisplayState
widget_texts() 將 DisplayState 對應為三段顯示文字。
"""
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from services.base import PreferenceStore
from services.shared_prefs import read_timer_state

PLACEHOLDER_REMAINING = "--:--:--"
ZERO_REMAINING = "00:00:00"
PLACEHOLDER_END_TIME = "--:-- --"

TEXT_NO_SESSION = "No active session"
TEXT_SESSION_ENDED = "Session ended"
TEXT_RUNNING = "Session running"
TEXT_NOT_RUNNING = "Not running"


@dataclass(frozen=True)
class NoSession:
    pass


@dataclass(frozen=True)
class Ended:
    pass


@dataclass(frozen=True)
class Running:
    hours: int
    minutes: int
    seconds: int
    exit_time_millis: int


DisplayState = Union[NoSession, Running, Ended]


@dataclass(frozen=True)
class WidgetTexts:
    time_remaining: str
    end_time: str
    status: str

    def as_dict(self) -> dict:
        return {
            "time_remaining": self.time_remaining,
            "end_time": self.end_time,
            "status": self.status,
        }


def now_millis() -> int:
    return int(time.time() * 1000)


def render(is_running: bool, exit_time_millis: int, now: int) -> DisplayState:
    if not is_running or exit_time_millis <= 0:
        return NoSession()

    remaining = exit_time_millis - now
    if remaining <= 0:
        return Ended()

    total = remaining // 1000
    return Running(
        hours=total // 3600,
        minutes=(total % 3600) // 60,
        seconds=total % 60,
        exit_time_millis=exit_time_millis,
    )


def format_end_time(exit_time_millis: int) -> str:
    """12 小時制本地時間，例如 03:05 PM；超出 datetime 可表示的範圍時回傳佔位文字。"""
    try:
        return datetime.fromtimestamp(exit_time_millis / 1000).strftime("%I:%M %p")
    except (OverflowError, OSError, ValueError):
        return PLACEHOLDER_END_TIME


def widget_texts(state: DisplayState) -> WidgetTexts:
    if isinstance(state, Running):
        # 小時不做 24 小時折返，可超過兩位數
        remaining = f"{state.hours:02d}:{state.minutes:02d}:{state.seconds:02d}"
        return WidgetTexts(
            time_remaining=remaining,
            end_time=f"Ends at {format_end_time(state.exit_time_millis)}",
            status=TEXT_RUNNING,
        )
    if isinstance(state, Ended):
        return WidgetTexts(ZERO_REMAINING, TEXT_SESSION_ENDED, TEXT_NOT_RUNNING)
    return WidgetTexts(PLACEHOLDER_REMAINING, TEXT_NO_SESSION, TEXT_NOT_RUNNING)


def render_texts(store: PreferenceStore, now: Optional[int] = None) -> WidgetTexts:
    state = read_timer_state(store)
    if now is None:
        now = now_millis()
    return widget_texts(render(state.is_running, state.exit_time_millis, now))
