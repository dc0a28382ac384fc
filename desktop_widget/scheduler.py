"""
MinuteUpdater — 每分鐘觸發一次重新整理的重複計時器。

建立在 Tk 的 after / after_cancel 之上；第一次觸發在一個間隔之後，
之後每次觸發完才排下一次（不對齊整分，允許漂移）。
計時機制不可用時（無 Tk 根視窗、直譯器已關閉）直接略過。
"""
import tkinter as tk
from typing import Callable, Optional

DEFAULT_INTERVAL_MS = 60_000


class MinuteUpdater:
    def __init__(self, host, callback: Callable[[], None],
                 interval_ms: int = DEFAULT_INTERVAL_MS):
        self._host = host
        self._callback = callback
        self.interval_ms = interval_ms
        self._after_id: Optional[str] = None

    @property
    def armed(self) -> bool:
        return self._after_id is not None

    def schedule(self):
        if self._host is None or self._after_id is not None:
            return
        try:
            self._after_id = self._host.after(self.interval_ms, self._fire)
        except tk.TclError:
            self._after_id = None

    def cancel(self):
        if self._host is None or self._after_id is None:
            return
        after_id, self._after_id = self._after_id, None
        try:
            self._host.after_cancel(after_id)
        except tk.TclError:
            pass

    def _fire(self):
        self._after_id = None
        self.schedule()
        self._callback()
