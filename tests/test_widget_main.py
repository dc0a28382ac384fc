import json

import pytest

import widget_main
from config.manager import ConfigManager


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    manager = ConfigManager(tmp_path / "config.json")
    manager.set_preferences_path(str(tmp_path / "shared_preferences.json"))
    manager.save()
    monkeypatch.setattr(widget_main, "ConfigManager", lambda: manager)
    return manager


def test_print_without_preferences_file(config_manager, capsys) -> None:
    assert widget_main.main(["--print"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["--:--:--", "No active session", "Not running"]


def test_print_with_ended_session(config_manager, capsys) -> None:
    config_manager.preferences_path().write_text(json.dumps({
        "flutter.is_running": True,
        "flutter.exit_time": 1000,
    }), encoding="utf-8")

    assert widget_main.main(["--print"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["00:00:00", "Session ended", "Not running"]


def test_refresh_without_running_widget(config_manager, monkeypatch, capsys) -> None:
    sent = []

    def fake_send(port, source="cli"):
        sent.append(port)
        return False

    monkeypatch.setattr(widget_main.local_server, "send_refresh", fake_send)

    assert widget_main.main(["--refresh"]) == 1
    assert sent == [config_manager.get()["server_port"]]
    assert "[Shift Timer]" in capsys.readouterr().out


def test_refresh_reaches_running_widget(config_manager, monkeypatch) -> None:
    monkeypatch.setattr(widget_main.local_server, "send_refresh",
                        lambda port, source="cli": True)

    assert widget_main.main(["--refresh"]) == 0


def test_refresh_and_print_are_exclusive(config_manager) -> None:
    with pytest.raises(SystemExit):
        widget_main.main(["--refresh", "--print"])
