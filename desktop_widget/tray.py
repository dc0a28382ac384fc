"""
系統匣圖示 (SystemTray)
使用 pystray 建立系統匣圖示與右鍵選單。
若 pystray 或 Pillow 未安裝則靜默略過（小工具仍可正常使用）。
"""
import threading

_TRAY_AVAILABLE = False
try:
    import pystray
    from PIL import Image, ImageDraw
    _TRAY_AVAILABLE = True
except ImportError:
    pass


def _make_icon() -> "Image.Image | None":
    """動態產生 64×64 系統匣圖示（沙漏造型）。"""
    if not _TRAY_AVAILABLE:
        return None
    img = Image.new("RGB", (64, 64), color="#1e1e2e")
    draw = ImageDraw.Draw(img)
    draw.rounded_rectangle([2, 2, 61, 61], radius=10, outline="#89dceb", width=2)
    draw.polygon([(18, 12), (46, 12), (32, 32)], fill="#a6e3a1")
    draw.polygon([(32, 32), (18, 52), (46, 52)], outline="#a6e3a1")
    draw.line([(16, 12), (48, 12)], fill="#cad3f5", width=2)
    draw.line([(16, 52), (48, 52)], fill="#cad3f5", width=2)
    return img


class SystemTray:
    """
    系統匣圖示管理。
    在背景執行緒運行 pystray；選單動作一律透過 after() 交回 Tk 執行緒。
    """

    def __init__(self, widget_app):
        self._app = widget_app
        self._icon = None
        self._thread = None

    def start(self) -> bool:
        if not _TRAY_AVAILABLE:
            return False
        img = _make_icon()
        if img is None:
            return False

        menu = pystray.Menu(
            pystray.MenuItem("Show / Hide", self._on_toggle, default=True),
            pystray.MenuItem("⟳ Refresh", self._on_refresh),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Open Shift Timer", self._on_open_main),
            pystray.MenuItem("New widget", self._on_new_widget),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("✕ Quit", self._on_quit),
        )
        self._icon = pystray.Icon(
            "shift-timer-widget",
            img,
            "Shift Timer",
            menu,
        )
        self._thread = threading.Thread(target=self._icon.run, daemon=True)
        self._thread.start()
        return True

    def stop(self):
        if self._icon:
            try:
                self._icon.stop()
            except Exception:
                pass

    # ── 選單回呼 ──────────────────────────────────────────────────────────

    def _on_toggle(self, icon, item):
        self._app.after(0, self._app.toggle_visibility)

    def _on_refresh(self, icon, item):
        self._app.after(0, self._app.refresh_all)

    def _on_open_main(self, icon, item):
        self._app.after(0, self._app.open_main_app)

    def _on_new_widget(self, icon, item):
        self._app.after(0, self._app.add_window)

    def _on_quit(self, icon, item):
        self._app.after(0, self._app.quit_app)


def is_available() -> bool:
    return _TRAY_AVAILABLE
