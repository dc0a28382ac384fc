import json
from pathlib import Path

from services.shared_prefs import default_preferences_path


CONFIG_DIR = Path.home() / ".config" / "shift-timer-widget"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_CONFIG = {
    "refresh_interval_ms": 60_000,
    "server_port": 7891,
    "preferences": {
        "app_id": "com.example.time_remaining",
        "company": "",
        "path": ""
    },
    "app_command": [],
    "widget": {
        "opacity": 0.95,
        "desktop_level": False
    }
}


def _defaults() -> dict:
    return json.loads(json.dumps(DEFAULT_CONFIG))


def _positive_int(value, default: int, upper: int = None) -> int:
    # 0 會讓計時器無間隔重排；非正整數一律退回預設值
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    if upper is not None and value > upper:
        return default
    return value


class ConfigManager:
    def __init__(self, config_file: Path = CONFIG_FILE):
        self.config_file = Path(config_file)
        self._config = None
        self._ensure_dir()

    def _ensure_dir(self):
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> dict:
        if not self.config_file.exists():
            self._config = _defaults()
            self.save()
            return self._config

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"[Shift Timer] 設定檔無法讀取，使用預設值: {e}")
            data = {}
        if not isinstance(data, dict):
            data = {}

        # Merge with defaults to handle new keys
        config = _defaults()
        config["refresh_interval_ms"] = _positive_int(
            data.get("refresh_interval_ms"), DEFAULT_CONFIG["refresh_interval_ms"])
        config["server_port"] = _positive_int(
            data.get("server_port"), DEFAULT_CONFIG["server_port"], upper=65535)
        config["app_command"] = list(data.get("app_command") or [])
        for section in ("preferences", "widget"):
            if isinstance(data.get(section), dict):
                config[section].update(data[section])

        self._config = config
        return self._config

    def save(self):
        if self._config is None:
            return

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._config, f, ensure_ascii=False, indent=2)

    def get(self) -> dict:
        if self._config is None:
            self.load()
        return self._config

    def preferences_path(self) -> Path:
        prefs = self.get()["preferences"]
        if prefs.get("path"):
            return Path(prefs["path"]).expanduser()
        return default_preferences_path(prefs["app_id"], prefs.get("company") or None)

    def set_refresh_interval(self, millis: int):
        self.get()["refresh_interval_ms"] = millis

    def set_server_port(self, port: int):
        self.get()["server_port"] = port

    def set_app_command(self, command: list):
        self.get()["app_command"] = list(command)

    def set_preferences_path(self, path: str):
        self.get()["preferences"]["path"] = str(path)
