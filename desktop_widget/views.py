"""
WidgetViews — 單次更新要推送到顯示面的內容
三個固定 ID 的文字元素，各自綁定點擊動作。
"""
from typing import Callable, Optional

from services.countdown import WidgetTexts

VIEW_TIME_REMAINING = "time_remaining"
VIEW_END_TIME = "end_time"
VIEW_STATUS = "status"

VIEW_IDS = (VIEW_TIME_REMAINING, VIEW_END_TIME, VIEW_STATUS)


class WidgetViews:
    def __init__(self):
        self._texts: dict[str, str] = {}
        self._clicks: dict[str, Callable[[], None]] = {}

    @staticmethod
    def _check(view_id: str):
        if view_id not in VIEW_IDS:
            raise KeyError(view_id)

    def set_text(self, view_id: str, text: str):
        self._check(view_id)
        self._texts[view_id] = text

    def set_on_click(self, view_id: str, action: Callable[[], None]):
        self._check(view_id)
        self._clicks[view_id] = action

    def text(self, view_id: str) -> Optional[str]:
        self._check(view_id)
        return self._texts.get(view_id)

    def on_click(self, view_id: str) -> Optional[Callable[[], None]]:
        self._check(view_id)
        return self._clicks.get(view_id)


def build_views(texts: WidgetTexts, open_app: Callable[[], None]) -> WidgetViews:
    views = WidgetViews()
    views.set_text(VIEW_TIME_REMAINING, texts.time_remaining)
    views.set_text(VIEW_END_TIME, texts.end_time)
    views.set_text(VIEW_STATUS, texts.status)

    # 點擊任一文字都開啟主程式
    for view_id in VIEW_IDS:
        views.set_on_click(view_id, open_app)
    return views
