"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（背景クリア）と描画コールバック登録、RasterSurface の画面転写を提供。
なぜ: レンダラ/タートル層から GUI 依存を切り離し、最小インターフェイスで統一するため。

使用例:
    win = RenderWindow(400, 400, caption="turtle")
    win.add_draw_callback(lambda: blit_surface(surface))
    pyglet.app.run()
"""

from __future__ import annotations

from typing import Callable

import pyglet
from pyglet.gl import Config, glClearColor

from engine.render.surface import RasterSurface


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        *,
        caption: str = "Turtle",
        bg_color: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0),
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（ピクセル）。
            height: ウィンドウ高さ（ピクセル）。
            caption: タイトル。
            bg_color: サーフェス転写前のクリア色 RGBA（0.0〜1.0）。
        """
        config = Config(double_buffer=True, vsync=True)
        super().__init__(width=width, height=height, caption=caption, config=config)
        self._bg_color = bg_color
        self._draw_callbacks: list[Callable[[], None]] = []

    def add_draw_callback(self, func: Callable[[], None]) -> None:
        """
        `on_draw` 中に呼び出す描画関数を登録する。

        - 関数は引数を取らず、副作用で描画を行うこと。
        - 登録順に呼び出される。
        """
        self._draw_callbacks.append(func)

    def on_draw(self):  # Pyglet 既定のイベント名
        """ウィンドウ描画イベントハンドラ。登録された描画コールバックを呼び出す。"""
        r, g, b, a = self._bg_color
        glClearColor(r, g, b, a)
        self.clear()
        for cb in self._draw_callbacks:
            cb()


def blit_surface(surface: RasterSurface, x: int = 0, y: int = 0) -> None:
    """RasterSurface の内容を現在のウィンドウへ転写する（行 0 を画面上端に合わせる）。"""
    w, h = surface.width, surface.height
    img = pyglet.image.ImageData(w, h, "RGBA", surface.to_rgba8().tobytes(), pitch=-w * 4)
    img.blit(x, y)


__all__ = ["RenderWindow", "blit_surface"]
