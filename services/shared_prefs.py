"""
Flutter shared_preferences 讀取器

主程式（Flutter）以 `flutter.` 前綴寫入：
- flutter.is_running  → bool
- flutter.exit_time   → int（epoch 毫秒）

桌面平台的實際存放位置：
- Linux   : $XDG_DATA_HOME/<app_id>/shared_preferences.json
- Windows : %APPDATA%/<company>/<app_id>/shared_preferences.json
- macOS   : ~/Library/Preferences/<app_id>.plist (NSUserDefaults)

每次讀取都重新開檔，小工具本身不持有任何計時狀態。
"""
import json
import os
import plistlib
import sys
from pathlib import Path
from typing import Optional
from xml.parsers.expat import ExpatError

from services.base import MemoryPreferenceStore, PreferenceStore, TimerState

KEY_IS_RUNNING = "flutter.is_running"
KEY_EXIT_TIME = "flutter.exit_time"

PREFS_FILENAME = "shared_preferences.json"


def default_preferences_path(app_id: str, company: Optional[str] = None,
                             platform: Optional[str] = None) -> Path:
    platform = platform or sys.platform
    if platform.startswith("win"):
        base = Path(os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming")
        if company:
            base = base / company
        return base / app_id / PREFS_FILENAME
    if platform == "darwin":
        return Path.home() / "Library" / "Preferences" / f"{app_id}.plist"
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / app_id / PREFS_FILENAME


class FlutterPreferencesStore(PreferenceStore):
    """Reads the preference file fresh on every lookup."""

    def __init__(self, path):
        self.path = Path(path)

    def _load(self) -> dict:
        try:
            if self.path.suffix == ".plist":
                with open(self.path, "rb") as f:
                    data = plistlib.load(f)
            else:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
        except (OSError, ValueError, ExpatError):
            return {}
        return data if isinstance(data, dict) else {}

    def snapshot(self) -> MemoryPreferenceStore:
        return MemoryPreferenceStore(self._load())

    def contains(self, key: str) -> bool:
        return self.snapshot().contains(key)

    def get_bool(self, key: str, default: bool = False) -> bool:
        return self.snapshot().get_bool(key, default)

    def get_int(self, key: str, default: int = 0) -> int:
        return self.snapshot().get_int(key, default)


def read_timer_state(store: PreferenceStore) -> TimerState:
    """讀取計時狀態；任何錯誤或缺少的鍵都回到預設值 (False, 0)。"""
    if isinstance(store, FlutterPreferencesStore):
        # 單次開檔，避免兩個鍵分別讀到主程式寫入前後的不同版本
        store = store.snapshot()
    try:
        is_running = (store.get_bool(KEY_IS_RUNNING, False)
                      if store.contains(KEY_IS_RUNNING) else False)
        exit_time = (store.get_int(KEY_EXIT_TIME, 0)
                     if store.contains(KEY_EXIT_TIME) else 0)
    except Exception:
        return TimerState()
    return TimerState(is_running=is_running, exit_time_millis=exit_time)

