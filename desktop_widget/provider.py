"""
ShiftTimerProvider — 平台事件 → 倒數顯示 的轉接層

事件：
- on_enabled   第一個小工具實例加入 → 啟動每分鐘計時器
- on_disabled  最後一個實例移除     → 取消計時器
- on_update    針對指定實例重新讀取、計算並推送顯示內容
- on_receive   收到 ACTION_UPDATE（計時器或外部要求）→ 更新所有實例

核心計算（services.countdown）不依賴任何視窗 API。
"""
from typing import Callable, Iterable, Optional

from services.base import PreferenceStore
from services.countdown import now_millis, render_texts
from desktop_widget.views import WidgetViews, build_views

ACTION_UPDATE = "shift_timer.action.UPDATE"


class WidgetManager:
    """記錄所有存活中的小工具實例，並在第一個加入 / 最後一個移除時通知 provider。"""

    def __init__(self):
        self._instances: dict[int, object] = {}
        self._next_id = 1
        self._provider: Optional["ShiftTimerProvider"] = None

    def bind(self, provider: "ShiftTimerProvider"):
        self._provider = provider

    def add_instance(self, surface) -> int:
        instance_id = self._next_id
        self._next_id += 1
        first = not self._instances
        self._instances[instance_id] = surface
        if self._provider is not None:
            if first:
                self._provider.on_enabled()
            self._provider.on_update([instance_id])
        return instance_id

    def remove_instance(self, instance_id: int):
        if self._instances.pop(instance_id, None) is None:
            return
        if not self._instances and self._provider is not None:
            self._provider.on_disabled()

    def instance_ids(self) -> list:
        return list(self._instances)

    def update_widget(self, instance_id: int, views: WidgetViews):
        surface = self._instances.get(instance_id)
        if surface is not None:
            surface.apply(views)


class ShiftTimerProvider:
    def __init__(self, manager: WidgetManager, store: PreferenceStore,
                 scheduler=None, open_app: Callable[[], None] = None,
                 clock: Callable[[], int] = now_millis):
        self.manager = manager
        self.store = store
        self.scheduler = scheduler
        self.open_app = open_app or (lambda: None)
        self.clock = clock
        manager.bind(self)

    # ── 生命週期 ──────────────────────────────────────────────────────────

    def on_enabled(self):
        if self.scheduler is not None:
            self.scheduler.schedule()

    def on_disabled(self):
        if self.scheduler is not None:
            self.scheduler.cancel()

    def on_update(self, instance_ids: Iterable[int]):
        for instance_id in instance_ids:
            self._update_instance(instance_id)

    def on_receive(self, action: str):
        if action == ACTION_UPDATE:
            self.on_update(self.manager.instance_ids())

    # ── 單一實例更新 ──────────────────────────────────────────────────────

    def _update_instance(self, instance_id: int):
        texts = render_texts(self.store, self.clock())
        self.manager.update_widget(instance_id, build_views(texts, self.open_app))

    def current_texts(self) -> dict:
        return render_texts(self.store, self.clock()).as_dict()
