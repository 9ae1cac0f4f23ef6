"""
どこで: `engine.render` の合成レンダラ。
何を: 前景レイヤ（線分を蓄積するラスタ）と背景色・タートルグリフを表示サーフェスへ合成する。
      dirty フラグでスケジューラへの描画予約を 1 ティック 1 回に束ねる。
なぜ: 同期的に大量発行されるコマンドごとに全面合成を走らせず、線分だけは即時に前景へ確定させるため。

合成順（`render`）:
1) 表示サーフェス全面を背景色で塗る
2) 前景レイヤを単位変換で転写する（前景の固定変換が表示の画素格子に一致している）
3) 可視なら、上下反転+中心移動 → (x, y) へ平行移動 → orientation 回転 の上でグリフを中心合わせで描く
"""

from __future__ import annotations

import logging
import time
from typing import Any

from engine.core.scheduler import RenderScheduler
from engine.core.turtle_state import TurtleState

from .surface import DrawSurface, RasterSurface

logger = logging.getLogger(__name__)

DEFAULT_LINE_WIDTH = 0.5


class TurtleRenderer:
    """
    表示サーフェス 1 枚と前景レイヤを所有し、状態 → 画素の合成と描画予約を管理する。
    レイヤは生成時のサーフェス寸法で 1 度だけ確保する（以後のリサイズは非対応）。
    """

    def __init__(
        self,
        surface: DrawSurface,
        scheduler: RenderScheduler,
        *,
        line_width: float | None = None,
    ):
        """
        surface: 合成結果を書き込む表示サーフェス
        scheduler: 遅延描画の予約先（次のティックで 1 回実行）
        line_width: 線幅（サーフェス単位）。None で設定 `TRT_LINE_WIDTH`
        """
        from common.settings import get as _get_settings

        settings = _get_settings()
        self._surface = surface
        self._scheduler = scheduler
        self._line_width = float(settings.LINE_WIDTH if line_width is None else line_width)
        self._debug = bool(settings.RENDER_DEBUG)

        self._width = int(surface.width)
        self._height = int(surface.height)

        # 前景レイヤ: 原点を中心へ、y を上向きへ。この変換は生涯固定。
        self._foreground = RasterSurface(self._width, self._height)
        self._foreground.translate(self._width / 2.0, self._height / 2.0)
        self._foreground.scale(1.0, -1.0)

        self._dirty = False
        self._render_count = 0

    # --------------------------------------------------------------------- #
    # Accessors                                                              #
    # --------------------------------------------------------------------- #
    @property
    def surface(self) -> DrawSurface:
        return self._surface

    @property
    def foreground(self) -> RasterSurface:
        return self._foreground

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def line_width(self) -> float:
        return self._line_width

    @property
    def is_dirty(self) -> bool:
        """描画予約が未消化なら True。"""
        return self._dirty

    @property
    def render_count(self) -> int:
        return self._render_count

    # --------------------------------------------------------------------- #
    # Layer operations                                                       #
    # --------------------------------------------------------------------- #
    def stroke_segment(self, x0: float, y0: float, x1: float, y1: float, color: Any) -> None:
        """タートル座標の線分を前景レイヤへ即時に描く（再描画は予約しない）。"""
        self._foreground.stroke_line(x0, y0, x1, y1, color, self._line_width)

    def clear_foreground(self) -> None:
        """前景レイヤ全面を透明に戻す。"""
        w, h = float(self._width), float(self._height)
        self._foreground.clear_rect(-w / 2.0, -h / 2.0, w, h)

    # --------------------------------------------------------------------- #
    # Rendering                                                              #
    # --------------------------------------------------------------------- #
    def render(self, state: TurtleState) -> None:
        """現在の状態とレイヤを表示サーフェスへ合成する。"""
        t0 = time.perf_counter() if self._debug else 0.0
        surface = self._surface
        w, h = float(self._width), float(self._height)

        surface.fill_rect(0.0, 0.0, w, h, state.background_color)
        surface.draw_image(self._foreground, 0.0, 0.0)

        image = state.turtle_image
        if state.visible and image is not None:
            gw, gh = _image_size(image)
            surface.save()
            try:
                surface.translate(w / 2.0, h / 2.0)
                surface.scale(1.0, -1.0)
                surface.translate(state.x, state.y)
                surface.rotate(state.orientation)
                surface.draw_image(image, -gw / 2.0, -gh / 2.0)
            finally:
                surface.restore()

        self._render_count += 1
        if self._debug:
            logger.debug(
                "render #%d: %.2f ms (pos=(%.3f, %.3f), visible=%s)",
                self._render_count,
                (time.perf_counter() - t0) * 1000.0,
                state.x,
                state.y,
                state.visible,
            )

    def request_render(self, state: TurtleState) -> None:
        """描画を予約する。予約済み（pending）なら何もしない。

        予約したコールバックは `state` を参照で保持し、実行時点の最終状態を合成する。
        """
        if self._dirty:
            logger.debug("render already pending; request coalesced")
            return
        self._dirty = True

        def _run() -> None:
            try:
                self.render(state)
            finally:
                self._dirty = False

        self._scheduler.call_next_tick(_run)
        logger.debug("render scheduled")


# ---------- utility -------------------------------------------------------- #
def _image_size(image: Any) -> tuple[float, float]:
    """グリフの (幅, 高さ)。RasterSurface 互換（width/height 属性）か `(h, w, ...)` 配列。"""
    if hasattr(image, "width") and hasattr(image, "height"):
        return float(image.width), float(image.height)
    shape = getattr(image, "shape", None)
    if shape is not None and len(shape) >= 2:
        return float(shape[1]), float(shape[0])
    raise TypeError(f"unsupported turtle image: {type(image)!r}")


__all__ = ["TurtleRenderer", "DEFAULT_LINE_WIDTH"]
