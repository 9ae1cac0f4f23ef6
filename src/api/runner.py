"""
どこで: `api.runner`（実行ランナー）。
何を: pyglet ウィンドウ上のラスタにタートルを生成し、ユーザの `program(t)` を実行して表示ループを回す。
なぜ: 少ない記述で対話的にタートル描画を確認できるようにするため。

実行フロー（概要）:
1) ロギング/FPS/キャンバス寸法の解決（`api.config`）。
2) 表示サーフェス `RasterSurface` を生成し、識別子 `surface_id` で登録。
3) `TickScheduler` を描画予約先として `make_turtle(surface_id, ...)` でタートルを生成（初回描画込み）。
4) `program(t)` を同期実行。コマンドの再描画予約は次のティックで 1 回にまとまる。
5) `FrameClock([scheduler])` を `pyglet.clock.schedule_interval` で駆動し、`on_draw` でサーフェスを転写。
   `ESC` で終了、`S` で PNG 保存。

`init_only=True` ではウィンドウを作らず 3)〜4) の後にスケジューラを 1 ティック進めて返す
（ヘッドレス環境での検証や PNG 書き出し用）。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from common.logging import setup_default_logging
from engine.core.frame_clock import FrameClock
from engine.core.scheduler import TickScheduler
from engine.core.surface_registry import register_surface, unregister_surface
from engine.render.surface import RasterSurface

from .config import resolve_canvas_size, resolve_fps, resolve_turtle_config
from .turtle import Turtle, make_turtle

logger = logging.getLogger(__name__)


def run_turtle(
    program: Callable[[Turtle], Any],
    *,
    canvas_size: tuple[int, int] | None = None,
    fps: int | None = None,
    background: Any | None = None,
    pen_color: Any | None = None,
    surface_id: str = "main",
    caption: str = "Turtle",
    init_only: bool = False,
) -> Turtle:
    """タートルを生成して `program(t)` を実行し、ウィンドウで表示する。

    Parameters
    ----------
    program : Callable[[Turtle], Any]
        タートルを受け取りコマンドを発行する関数。
    canvas_size : tuple[int, int] | None
        `(width, height)` [px]。None で設定ファイル/既定（400x400）。
    fps : int | None
        表示ループの更新レート。None で設定ファイル/既定（60）。
    background, pen_color : Any | None
        初期の背景色/ペン色。None で設定ファイル/既定。
    surface_id : str
        表示サーフェスの登録識別子。
    init_only : bool
        True でウィンドウを作らずに実行し、1 ティック分の合成を済ませて返す。

    Returns
    -------
    Turtle
        生成したタートル（ウィンドウを閉じた後の状態）。
    """
    setup_default_logging()
    fps = resolve_fps(fps)
    width, height = resolve_canvas_size(canvas_size)

    surface = RasterSurface(width, height)
    register_surface(surface_id, surface, replace=True)
    scheduler = TickScheduler()
    config = resolve_turtle_config(background_color=background, pen_color=pen_color)
    try:
        turtle = make_turtle(surface_id, scheduler=scheduler, config=config)
    finally:
        # 解決はファクトリ内で完了しているため登録は残さない
        unregister_surface(surface_id)

    program(turtle)

    if init_only:
        scheduler.tick(0.0)
        return turtle

    # 遅延インポート（ヘッドレス環境でのウィンドウ生成を避ける）
    import pyglet
    from pyglet.window import key

    from engine.core.render_window import RenderWindow, blit_surface

    window = RenderWindow(width, height, caption=caption)
    window.add_draw_callback(lambda: blit_surface(surface))

    frame_clock = FrameClock([scheduler])
    pyglet.clock.schedule_interval(frame_clock.tick, 1 / fps)

    @window.event
    def on_key_press(symbol: int, modifiers: int) -> None:  # noqa: ANN001
        if symbol == key.ESCAPE:
            window.close()
        elif symbol == key.S:
            try:
                turtle.save_png()
            except RuntimeError:
                logger.exception("PNG 保存に失敗しました")

    @window.event
    def on_close() -> None:
        pyglet.clock.unschedule(frame_clock.tick)

    logger.info("turtle window started: %dx%d @ %d fps", width, height, fps)
    pyglet.app.run()
    return turtle


__all__ = ["run_turtle"]
