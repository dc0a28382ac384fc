"""
本地 HTTP 伺服器 — 接收主程式（或命令列）送來的重新整理要求。

- 監聽 http://127.0.0.1:7891
- POST /refresh → 排入一次重新整理，由 UI 執行緒取出處理
- GET  /state   → 回傳目前顯示文字
- GET  /health  → {"ok": true}
- 在背景執行緒中運行，不阻擋主程式
"""
import json
import queue
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Optional

import requests

DEFAULT_PORT = 7891
REFRESH_TIMEOUT = 2.0

# ─────────────────────────────────────────────────────────────────
#  Refresh requests — server thread puts, UI thread drains
# ─────────────────────────────────────────────────────────────────
_refresh_queue: "queue.Queue[str]" = queue.Queue()

# Returns the current texts as a dict; set by the widget on start
_state_provider: Optional[Callable[[], dict]] = None

_server_instance: Optional[ThreadingHTTPServer] = None
_server_thread: Optional[threading.Thread] = None


def request_refresh(source: str = "local"):
    _refresh_queue.put(source)


def drain_refresh_requests() -> list:
    """Return (and clear) every pending refresh request source."""
    items = []
    while True:
        try:
            items.append(_refresh_queue.get_nowait())
        except queue.Empty:
            return items


def set_state_provider(provider: Optional[Callable[[], dict]]):
    global _state_provider
    _state_provider = provider


def server_port() -> Optional[int]:
    if _server_instance is None:
        return None
    return _server_instance.server_address[1]


# ─────────────────────────────────────────────────────────────────
#  HTTP Handler
# ─────────────────────────────────────────────────────────────────
class _Handler(BaseHTTPRequestHandler):

    def _send(self, status: int, body: bytes, content_type: str = "application/json"):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        if self.path == "/health":
            self._send(200, b'{"ok":true}')
        elif self.path == "/state":
            provider = _state_provider
            if provider is None:
                self._send(503, b'{"error":"widget not ready"}')
                return
            payload = json.dumps(provider(), ensure_ascii=False).encode()
            self._send(200, payload)
        else:
            self._send(404, b'{"error":"not found"}')

    def do_POST(self):
        if self.path != "/refresh":
            self._send(404, b'{"error":"not found"}')
            return

        length = int(self.headers.get("Content-Length", 0) or 0)
        source = "http"
        if length:
            raw = self.rfile.read(length)
            try:
                data = json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                self._send(400, json.dumps({"error": str(e)}).encode())
                return
            if isinstance(data, dict) and data.get("source"):
                source = str(data["source"])

        request_refresh(source)
        self._send(200, json.dumps({"ok": True, "source": source}).encode())

    def log_message(self, fmt, *args):
        # Suppress default console output to keep the app clean
        pass


# ─────────────────────────────────────────────────────────────────
#  Server lifecycle
# ─────────────────────────────────────────────────────────────────
def start(port: int = DEFAULT_PORT) -> bool:
    """Start the local HTTP server in a background daemon thread."""
    global _server_instance, _server_thread

    if _server_instance is not None:
        return True  # Already running

    try:
        server = ThreadingHTTPServer(("127.0.0.1", port), _Handler)
    except OSError as e:
        print(f"[Shift Timer 伺服器] 無法啟動 (port {port}): {e}")
        return False

    _server_instance = server
    t = threading.Thread(target=server.serve_forever, daemon=True,
                         name="shift-timer-server")
    t.start()
    _server_thread = t
    print(f"[Shift Timer 伺服器] 已在 http://127.0.0.1:{server_port()} 啟動")
    return True


def stop():
    """Stop the server gracefully."""
    global _server_instance, _server_thread
    if _server_instance:
        _server_instance.shutdown()
        _server_instance.server_close()
        _server_instance = None
        _server_thread = None
        print("[Shift Timer 伺服器] 已停止")


# ─────────────────────────────────────────────────────────────────
#  Client side
# ─────────────────────────────────────────────────────────────────
def send_refresh(port: int = DEFAULT_PORT, source: str = "cli") -> bool:
    """Ask a running widget to refresh. Returns False when nothing answers."""
    try:
        resp = requests.post(
            f"http://127.0.0.1:{port}/refresh",
            json={"source": source},
            timeout=REFRESH_TIMEOUT,
        )
        data = resp.json()
    except (requests.RequestException, ValueError):
        return False
    return resp.status_code == 200 and isinstance(data, dict) and data.get("ok") is True
