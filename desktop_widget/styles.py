"""
桌面小工具樣式常數
"""

COLORS = {
    "bg": "#1e1e2e",
    "card_bg": "#24273a",
    "card_border": "#363a4f",
    "success": "#a6e3a1",
    "error": "#f38ba8",
    "warning": "#f9e2af",
    "info": "#89b4fa",
    "text": "#cad3f5",
    "subtext": "#6e738d",
    "accent": "#89dceb",
    "title_bg": "#181926",
}

# 狀態文字顏色
STATUS_COLORS = {
    "Session running": COLORS["success"],
    "Not running": COLORS["subtext"],
}

# ── 翻頁磁貼樣式 ──────────────────────────────────────────────────────────
TILE_W = 44           # 單個數字磁貼寬度
TILE_H = 60           # 單個數字磁貼高度
TILE_R = 8            # 圓角半徑
TILE_BG = "#e8e8f0"   # 磁貼背景（淺色）
TILE_TEXT = "#1e1e2e" # 數字顏色（深色）
TILE_DIM = "#b0b0c4"  # 分隔線顏色
TILE_SHADOW = "#a8a8bc"  # 翻頁陰影顏色

LABEL_FONT = ("Segoe UI", 8)

# ── 小工具視窗設定 ────────────────────────────────────────────────────────
WIDGET_MIN_WIDTH = 300

WIDGET_LABEL   = "#a8b0d0"
WIDGET_TEXT    = "#e2e8ff"
