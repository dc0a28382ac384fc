"""
DesktopWidget — 排班倒數桌面小工具

功能：
- 隱藏的 Tk 根視窗負責設定、計時器與本地伺服器
- 每個小工具實例是一個無邊框浮動視窗 (ShiftTimerWindow)
- 翻頁磁貼顯示剩餘時間，下方顯示結束時間與狀態
- 點擊任一文字開啟主程式
- 滑鼠左鍵拖拉移動，右鍵顯示選單
- 位置與透明度記憶（讀寫 config widget.*）
"""
import ctypes
import sys

import tkinter as tk

from config.manager import ConfigManager
from services import local_server
from services.shared_prefs import FlutterPreferencesStore

from desktop_widget.clock import CountdownTiles
from desktop_widget.launcher import open_main_app
from desktop_widget.provider import ACTION_UPDATE, ShiftTimerProvider, WidgetManager
from desktop_widget.scheduler import MinuteUpdater
from desktop_widget.styles import (
    COLORS, STATUS_COLORS, WIDGET_MIN_WIDTH, WIDGET_LABEL, WIDGET_TEXT,
)
from desktop_widget.views import (
    VIEW_END_TIME, VIEW_STATUS, VIEW_TIME_REMAINING, WidgetViews,
)

_WIDGET_VERSION = "v1.0.0"
_NEW_WINDOW_OFFSET = 30
_QUEUE_POLL_MS = 200


class DesktopWidget(tk.Tk):
    """隱藏的根視窗：持有設定、provider 與所有小工具實例。"""

    def __init__(self, config_manager: ConfigManager = None):
        super().__init__()
        self.withdraw()
        self.title("Shift Timer")

        self.config_manager = config_manager or ConfigManager()
        self.config_data = self.config_manager.load()
        self._visible = True
        self.keep_alive = False
        self.windows: dict[int, "ShiftTimerWindow"] = {}

        store = FlutterPreferencesStore(self.config_manager.preferences_path())
        self.manager = WidgetManager()
        self.scheduler = MinuteUpdater(
            self,
            lambda: self.provider.on_receive(ACTION_UPDATE),
            self.config_data.get("refresh_interval_ms", 60_000),
        )
        self.provider = ShiftTimerProvider(
            self.manager, store, self.scheduler, open_app=self.open_main_app,
        )

        # 啟動本地 HTTP 伺服器（接收外部重新整理要求）
        local_server.set_state_provider(self.provider.current_texts)
        local_server.start(self.config_data.get("server_port", local_server.DEFAULT_PORT))

        self.add_window()
        self.after(_QUEUE_POLL_MS, self._poll_refresh_requests)

    # ── 實例管理 ──────────────────────────────────────────────────────────

    def add_window(self):
        wc = self.config_data.get("widget", {})
        offset = _NEW_WINDOW_OFFSET * len(self.windows)
        window = ShiftTimerWindow(self, wc.get("x"), wc.get("y"), offset)
        instance_id = self.manager.add_instance(window)
        window.instance_id = instance_id
        self.windows[instance_id] = window
        return window

    def close_window(self, window: "ShiftTimerWindow"):
        self.windows.pop(window.instance_id, None)
        self.manager.remove_instance(window.instance_id)
        window.destroy()
        # 沒有系統匣時，關閉最後一個小工具即結束程式
        if not self.windows and not self.keep_alive:
            self.quit_app()

    # ── 資料更新 ──────────────────────────────────────────────────────────

    def refresh_all(self):
        self.provider.on_receive(ACTION_UPDATE)

    def _poll_refresh_requests(self):
        if local_server.drain_refresh_requests():
            self.refresh_all()
        self.after(_QUEUE_POLL_MS, self._poll_refresh_requests)

    def open_main_app(self):
        open_main_app(self.config_data.get("app_command"))

    # ── 設定儲存 ──────────────────────────────────────────────────────────

    def save_widget_setting(self, key: str, value):
        wc = self.config_data.setdefault("widget", {})
        wc[key] = value
        self.config_manager.save()

    # ── 顯示控制 ──────────────────────────────────────────────────────────

    def toggle_visibility(self):
        self._visible = not self._visible
        for window in self.windows.values():
            if self._visible:
                window.deiconify()
                window.apply_level()
            else:
                window.withdraw()

    def quit_app(self):
        for window in list(self.windows.values()):
            window.save_position()
        self.scheduler.cancel()
        local_server.set_state_provider(None)
        local_server.stop()
        self.destroy()


class ShiftTimerWindow(tk.Toplevel):
    """單一小工具實例：剩餘時間磁貼 + 結束時間 + 狀態。"""

    def __init__(self, app: DesktopWidget, x=None, y=None, offset: int = 0):
        super().__init__(app)
        self.app = app
        self.instance_id = 0
        self._drag_x = 0
        self._drag_y = 0
        self._click_actions: dict = {}
        self._desktop_level: bool = app.config_data.get("widget", {}).get(
            "desktop_level", False
        )

        self._setup_window()
        self._build_ui()
        self._position_window(x, y, offset)
        self.protocol("WM_DELETE_WINDOW", lambda: app.close_window(self))

        if self._desktop_level:
            self.after(500, self._sink_to_bottom)

    # ── 視窗設定 ──────────────────────────────────────────────────────────

    def _setup_window(self):
        self.title("Shift Timer")
        self.configure(bg=COLORS["bg"])
        self.resizable(False, False)

        # 無邊框
        self.wm_overrideredirect(True)

        # 不出現在工作列（僅 Windows 支援）
        try:
            self.wm_attributes("-toolwindow", True)
        except tk.TclError:
            pass

        opacity = self.app.config_data.get("widget", {}).get("opacity", 0.95)
        self.wm_attributes("-alpha", opacity)

    def _position_window(self, x, y, offset: int):
        self.update_idletasks()
        w = max(WIDGET_MIN_WIDTH, self.winfo_reqwidth())
        h = self.winfo_reqheight()
        sw = self.winfo_screenwidth()
        sh = self.winfo_screenheight()

        in_bounds = (
            isinstance(x, int) and isinstance(y, int) and
            0 <= x <= sw - 20 and 0 <= y <= sh - 20
        )
        if not in_bounds:
            # 初次啟動或超出螢幕 → 右下角
            x = sw - w - 20
            y = sh - h - 60
        self.geometry(f"{w}x{h}+{x + offset}+{y + offset}")

    # ── UI 建構 ───────────────────────────────────────────────────────────

    def _build_ui(self):
        self.tiles = CountdownTiles(self)
        self.tiles.pack(fill="x", padx=12)

        self.end_time_label = tk.Label(
            self, text="",
            fg=WIDGET_TEXT, bg=COLORS["bg"],
            font=("Segoe UI", 11),
        )
        self.end_time_label.pack(pady=(2, 2))

        tk.Frame(self, bg=COLORS["card_border"], height=1).pack(fill="x")

        status_bar = tk.Frame(self, bg=COLORS["title_bg"], pady=4)
        status_bar.pack(fill="x")

        self.status_dot = tk.Label(
            status_bar, text="●",
            fg=WIDGET_LABEL, bg=COLORS["title_bg"],
            font=("Segoe UI", 8), padx=8,
        )
        self.status_dot.pack(side="left")

        self.status_label = tk.Label(
            status_bar, text="",
            fg=WIDGET_LABEL, bg=COLORS["title_bg"],
            font=("Segoe UI", 8),
        )
        self.status_label.pack(side="left")

        tk.Label(
            status_bar, text=_WIDGET_VERSION,
            fg=COLORS["card_border"], bg=COLORS["title_bg"],
            font=("Segoe UI", 7),
        ).pack(side="right", padx=(0, 4))

        refresh_btn = tk.Label(
            status_bar, text="⟳",
            fg=COLORS["accent"], bg=COLORS["title_bg"],
            font=("Segoe UI", 10), padx=8,
            cursor="hand2",
        )
        refresh_btn.pack(side="right")
        refresh_btn.bind("<Button-1>", lambda e: self.app.refresh_all())

        self.tiles.bind_click(lambda: self._click(VIEW_TIME_REMAINING))
        self.end_time_label.bind("<Button-1>", lambda e: self._click(VIEW_END_TIME))
        self.status_label.bind("<Button-1>", lambda e: self._click(VIEW_STATUS))

        for widget in (self, status_bar):
            self._setup_drag(widget)
        self.bind("<Button-3>", self._show_context_menu)

    # ── 顯示面 ────────────────────────────────────────────────────────────

    def apply(self, views: WidgetViews):
        self.tiles.set_text(views.text(VIEW_TIME_REMAINING) or "")
        self.end_time_label.config(text=views.text(VIEW_END_TIME) or "")
        status = views.text(VIEW_STATUS) or ""
        color = STATUS_COLORS.get(status, WIDGET_LABEL)
        self.status_label.config(text=status)
        self.status_dot.config(fg=color)
        self._click_actions = {
            view_id: views.on_click(view_id)
            for view_id in (VIEW_TIME_REMAINING, VIEW_END_TIME, VIEW_STATUS)
        }
        self.after(30, self._auto_resize)

    def _auto_resize(self):
        """依內容（小時位數可能變動）調整視窗大小，並確保不超出螢幕底部。"""
        self.update_idletasks()
        w = max(WIDGET_MIN_WIDTH, self.winfo_reqwidth())
        h = self.winfo_reqheight()
        x = self.winfo_x()
        y = self.winfo_y()
        sh = self.winfo_screenheight()
        if y + h > sh - 48:
            y = max(0, sh - h - 48)
        self.geometry(f"{w}x{h}+{x}+{y}")

    def _click(self, view_id: str):
        action = self._click_actions.get(view_id)
        if action is not None:
            action()

    # ── 拖拉移動 ──────────────────────────────────────────────────────────

    def _setup_drag(self, widget: tk.Widget):
        widget.bind("<ButtonPress-1>", self._drag_start, add="+")
        widget.bind("<B1-Motion>", self._drag_motion, add="+")
        widget.bind("<ButtonRelease-1>", self._drag_end, add="+")

    def _drag_start(self, event):
        self._drag_x = event.x_root - self.winfo_x()
        self._drag_y = event.y_root - self.winfo_y()

    def _drag_motion(self, event):
        x = event.x_root - self._drag_x
        y = event.y_root - self._drag_y
        self.geometry(f"+{x}+{y}")

    def _drag_end(self, event):
        self.save_position()
        if self._desktop_level:
            self.after(100, self._sink_to_bottom)

    def save_position(self):
        wc = self.app.config_data.setdefault("widget", {})
        wc["x"] = self.winfo_x()
        wc["y"] = self.winfo_y()
        self.app.config_manager.save()

    # ── Win32 桌面層 ──────────────────────────────────────────────────────

    def _sink_to_bottom(self):
        """將視窗置於所有視窗底層（僅 Windows）。"""
        if not sys.platform.startswith("win"):
            return
        try:
            hwnd = self.winfo_id()
            HWND_BOTTOM = 1
            SWP_NOSIZE   = 0x0001
            SWP_NOMOVE   = 0x0002
            SWP_NOACTIVATE = 0x0010
            ctypes.windll.user32.SetWindowPos(
                hwnd, HWND_BOTTOM, 0, 0, 0, 0,
                SWP_NOSIZE | SWP_NOMOVE | SWP_NOACTIVATE,
            )
        except Exception:
            pass

    def _float_to_top(self):
        try:
            self.lift()
        except tk.TclError:
            pass

    def apply_level(self):
        if self._desktop_level:
            self.after(100, self._sink_to_bottom)

    def _toggle_desktop_level(self):
        self._desktop_level = not self._desktop_level
        self.app.save_widget_setting("desktop_level", self._desktop_level)
        if self._desktop_level:
            self._sink_to_bottom()
        else:
            self._float_to_top()

    # ── 右鍵選單 ──────────────────────────────────────────────────────────

    def _show_context_menu(self, event):
        menu = tk.Menu(
            self, tearoff=0,
            bg=COLORS["card_bg"], fg=COLORS["text"],
            activebackground=COLORS["info"], activeforeground=COLORS["bg"],
            font=("Segoe UI", 9), relief="flat", bd=0,
        )
        menu.add_command(label="⟳  Refresh", command=self.app.refresh_all)
        menu.add_command(label="  Open Shift Timer", command=self.app.open_main_app)
        menu.add_separator()
        menu.add_command(label="  New widget", command=self.app.add_window)

        level_label = (
            "✓ Pin to desktop" if self._desktop_level
            else "  Pin to desktop"
        )
        menu.add_command(label=level_label, command=self._toggle_desktop_level)
        menu.add_command(label="  Opacity...", command=self._opacity_dialog)
        menu.add_separator()
        menu.add_command(label="  Close widget",
                         command=lambda: self.app.close_window(self))
        menu.add_command(label="  ✕ Quit", command=self.app.quit_app)

        try:
            menu.tk_popup(event.x_root, event.y_root)
        finally:
            menu.grab_release()

    def _opacity_dialog(self):
        OpacityDialog(self)


# ── 透明度設定對話框 ────────────────────────────────────────────────────────

class OpacityDialog(tk.Toplevel):
    def __init__(self, parent: ShiftTimerWindow):
        super().__init__(parent)
        self._parent = parent
        self._app = parent.app

        self.title("Opacity")
        self.configure(bg=COLORS["bg"])
        self.resizable(False, False)
        self.wm_attributes("-topmost", True)
        self.grab_set()

        self.update_idletasks()
        px, py = parent.winfo_x(), parent.winfo_y()
        self.geometry(f"280x120+{px + 40}+{py + 40}")

        self._build()

    def _build(self):
        tk.Label(
            self, text="Window opacity",
            fg=COLORS["text"], bg=COLORS["bg"],
            font=("Segoe UI", 9, "bold"), pady=8,
        ).pack()

        cur = self._app.config_data.get("widget", {}).get("opacity", 0.95)
        self._var = tk.DoubleVar(value=cur)

        tk.Scale(
            self, from_=0.3, to=1.0,
            resolution=0.05, orient="horizontal",
            variable=self._var,
            command=self._preview,
            bg=COLORS["bg"], fg=COLORS["text"],
            troughcolor=COLORS["card_border"],
            highlightthickness=0, length=220,
        ).pack(pady=4)

        btn_row = tk.Frame(self, bg=COLORS["bg"])
        btn_row.pack(pady=4)
        tk.Button(
            btn_row, text="OK", command=self._apply,
            bg=COLORS["success"], fg=COLORS["bg"],
            relief="flat", padx=16, pady=4,
        ).pack(side="left", padx=4)
        tk.Button(
            btn_row, text="Cancel", command=self._cancel,
            bg=COLORS["card_border"], fg=COLORS["text"],
            relief="flat", padx=16, pady=4,
        ).pack(side="left", padx=4)

    def _preview(self, val):
        for window in self._app.windows.values():
            window.wm_attributes("-alpha", float(val))

    def _apply(self):
        self._app.save_widget_setting("opacity", self._var.get())
        self.destroy()

    def _cancel(self):
        self._preview(self._app.config_data.get("widget", {}).get("opacity", 0.95))
        self.destroy()
