"""
倒數翻頁磁貼 (CountdownTiles)
以翻頁磁貼顯示 HH:MM:SS 剩餘時間；小時欄位不設上限，位數變動時重建磁貼。
也接受 --:--:-- 之類的佔位文字。
"""
import tkinter as tk

from desktop_widget.styles import (
    COLORS, TILE_W, TILE_H, TILE_R,
    TILE_BG, TILE_TEXT, TILE_DIM, TILE_SHADOW,
    LABEL_FONT, WIDGET_LABEL,
)

_WIDGET_BG     = COLORS["bg"]
_DIVIDER_COLOR = "#c4c4d8"
_DIGIT_GAP     = 3
_GROUP_LABELS  = ("H", "M", "S")


class FlipDigit(tk.Canvas):
    """單個翻頁磁貼；字元改變時播放上半部翻下的動畫。"""
    ANIM_STEPS = 8
    ANIM_MS    = 18

    def __init__(self, parent, char: str = "-", w: int = TILE_W, h: int = TILE_H, **kw):
        self._W = w
        self._H = h
        self._R = max(4, int(TILE_R * h / TILE_H))
        self._font = ("Consolas", max(14, int(34 * h / TILE_H)), "bold")

        super().__init__(
            parent,
            width=self._W, height=self._H,
            bg=_WIDGET_BG,
            highlightthickness=0,
            **kw,
        )
        self._char = char
        self._old = char
        self._step = 0
        self._animating = False
        self._draw(char)

    @property
    def char(self) -> str:
        return self._char

    def set_char(self, c: str):
        if c == self._char:
            return
        self._old, self._char = self._char, c
        if self._animating:
            return
        self._step = 0
        self._animating = True
        self._tick()

    def _tick(self):
        if self._step >= self.ANIM_STEPS:
            self._animating = False
            self._draw(self._char)
            return
        half = self.ANIM_STEPS // 2
        shown = self._old if self._step < half else self._char
        self._draw(shown, fold=abs(half - self._step) / half)
        self._step += 1
        self.after(self.ANIM_MS, self._tick)

    def _draw(self, char: str, fold: float = 0.0):
        self.delete("all")
        W, H = self._W, self._H
        mid = H // 2
        self._rrect(0, 0, W, H, self._R, fill=TILE_BG)
        self.create_text(W // 2, mid, text=char,
                         font=self._font, fill=TILE_TEXT, anchor="center")
        # 翻頁中：以陰影遮住下半部的一段
        fold_h = int(mid * fold)
        if fold_h > 2:
            self.create_rectangle(2, mid, W - 2, mid + fold_h,
                                  fill=TILE_SHADOW, outline="")
        self.create_rectangle(0, mid - 1, W, mid,     fill=_DIVIDER_COLOR, outline="")
        self.create_rectangle(0, mid,     W, mid + 2, fill=TILE_DIM,       outline="")

    def _rrect(self, x1, y1, x2, y2, r, **kw):
        r = min(r, (x2 - x1) // 2, (y2 - y1) // 2)
        self.create_arc(x1,       y1,       x1+2*r, y1+2*r, start=90,  extent=90, style="pieslice", outline="", **kw)
        self.create_arc(x2-2*r,   y1,       x2,     y1+2*r, start=0,   extent=90, style="pieslice", outline="", **kw)
        self.create_arc(x1,       y2-2*r,   x1+2*r, y2,     start=180, extent=90, style="pieslice", outline="", **kw)
        self.create_arc(x2-2*r,   y2-2*r,   x2,     y2,     start=270, extent=90, style="pieslice", outline="", **kw)
        self.create_rectangle(x1+r, y1,   x2-r, y2,   outline="", **kw)
        self.create_rectangle(x1,   y1+r, x2,   y2-r, outline="", **kw)


def split_groups(text: str) -> list:
    """'101:02:03' → ['101', '02', '03']"""
    return text.split(":")


class CountdownTiles(tk.Frame):
    """HH:MM:SS 三組磁貼；組內位數改變（例如小時超過兩位數）時重建。"""

    def __init__(self, parent, **kw):
        kw.setdefault("bg", _WIDGET_BG)
        super().__init__(parent, **kw)
        self._groups: list[list[FlipDigit]] = []
        self._layout: tuple = ()
        self._text = ""
        self._click_handler = None
        self._row = tk.Frame(self, bg=_WIDGET_BG)
        self._row.pack(pady=(14, 4))

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, text: str):
        groups = split_groups(text)
        layout = tuple(len(g) for g in groups)
        if layout != self._layout:
            self._rebuild(groups)
        else:
            for tiles, chars in zip(self._groups, groups):
                for tile, c in zip(tiles, chars):
                    tile.set_char(c)
        self._text = text

    def bind_click(self, handler):
        self._click_handler = handler
        self._bind_tree(self)

    def _bind_tree(self, widget):
        if self._click_handler is None:
            return
        widget.bind("<Button-1>", lambda e: self._click_handler(), add="+")
        for child in widget.winfo_children():
            self._bind_tree(child)

    def _rebuild(self, groups: list):
        for child in self._row.winfo_children():
            child.destroy()
        self._groups = []
        for i, chars in enumerate(groups):
            if i:
                tk.Label(self._row, text=":",
                         fg=COLORS["subtext"], bg=_WIDGET_BG,
                         font=("Consolas", 26, "bold"),
                         ).pack(side="left", padx=2, anchor="n", pady=(8, 0))
            frame = tk.Frame(self._row, bg=_WIDGET_BG)
            frame.pack(side="left")
            row = tk.Frame(frame, bg=_WIDGET_BG)
            row.pack()
            tiles = []
            for j, c in enumerate(chars):
                d = FlipDigit(row, char=c)
                d.pack(side="left", padx=(0, _DIGIT_GAP if j < len(chars) - 1 else 0))
                tiles.append(d)
            label = _GROUP_LABELS[i] if i < len(_GROUP_LABELS) else ""
            tk.Label(frame, text=label, fg=WIDGET_LABEL, bg=_WIDGET_BG,
                     font=LABEL_FONT).pack()
            self._groups.append(tiles)
        self._layout = tuple(len(g) for g in groups)
        for child in self._row.winfo_children():
            self._bind_tree(child)
