"""
排班倒數桌面小工具入口點

執行方式：
    python widget_main.py             啟動小工具
    python widget_main.py --refresh   要求執行中的小工具立即重新整理
    python widget_main.py --print     讀取一次狀態並輸出三段文字
"""
import argparse
import os
import sys

# ── PyInstaller 路徑修正 ──────────────────────────────────────────────────
if hasattr(sys, "_MEIPASS"):
    base_dir = sys._MEIPASS
else:
    base_dir = os.path.dirname(os.path.abspath(__file__))

if base_dir not in sys.path:
    sys.path.insert(0, base_dir)

from config.manager import ConfigManager
from services import local_server
from services.countdown import render_texts
from services.shared_prefs import FlutterPreferencesStore


def _parse_args(argv):
    parser = argparse.ArgumentParser(description="Shift timer desktop widget")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--refresh", action="store_true",
                       help="ask a running widget to refresh now")
    group.add_argument("--print", dest="print_texts", action="store_true",
                       help="render the countdown once and print it")
    return parser.parse_args(argv)


def run_widget(config_manager: ConfigManager):
    from desktop_widget.app import DesktopWidget
    from desktop_widget.tray import SystemTray, is_available as tray_available

    app = DesktopWidget(config_manager)

    # 系統匣圖示（若 pystray + Pillow 已安裝）
    tray = SystemTray(app)
    if tray_available() and tray.start():
        app.keep_alive = True
    else:
        print("[Shift Timer] pystray 未安裝，系統匣圖示不可用。\n"
              "可執行: pip install pystray Pillow")

    try:
        app.mainloop()
    finally:
        tray.stop()


def main(argv=None) -> int:
    args = _parse_args(argv)
    config_manager = ConfigManager()
    config = config_manager.get()

    if args.refresh:
        port = config.get("server_port", local_server.DEFAULT_PORT)
        if local_server.send_refresh(port):
            return 0
        print(f"[Shift Timer] 沒有執行中的小工具 (port {port})")
        return 1

    if args.print_texts:
        store = FlutterPreferencesStore(config_manager.preferences_path())
        texts = render_texts(store)
        print(texts.time_remaining)
        print(texts.end_time)
        print(texts.status)
        return 0

    run_widget(config_manager)
    return 0


if __name__ == "__main__":
    sys.exit(main())
