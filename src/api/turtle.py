"""
どこで: `api.turtle`（タートルのコマンド面）。
何を: 状態 `TurtleState` を変更するコマンド群（移動/回転/ペン/外観/消去/反復）と生成ファクトリ `make_turtle`。
なぜ: 状態変更を名前付きの操作に限定し、線分の即時確定と再描画予約の順序を一箇所で保証するため。

移動の基本操作（forward/back/goto/home 共通）:
1) ペンが下りていれば、旧位置 → 新位置の線分を前景へ描く（確定前）
2) 新位置を状態へ確定する
3) 再描画を予約する（同一ティック内の予約は 1 回にまとまる）

数値引数は検証しない。非有限値はそのまま状態へ伝播する（線分は描かれないが例外にもならない）。

例:
    from api import make_turtle
    from engine.render.surface import RasterSurface
    from engine.core.scheduler import TickScheduler

    sched = TickScheduler()
    t = make_turtle(RasterSurface(200, 200), scheduler=sched)
    t.repeat(4, lambda: (t.forward(50), t.left(90)))
    sched.tick()  # 1 回だけ合成される
"""

from __future__ import annotations

import logging
import dataclasses
import math
from pathlib import Path
from typing import Any, Callable

from engine.core.scheduler import RenderScheduler
from engine.core.surface_registry import resolve_surface
from engine.core.turtle_state import ExactFloat, TurtleState
from engine.render.renderer import TurtleRenderer
from engine.render.surface import is_draw_surface

from .config import TurtleConfig, resolve_turtle_config
from .errors import NotADrawSurfaceError, SurfaceNotFoundError

logger = logging.getLogger(__name__)


class Turtle:
    """向きを持つペン。コマンドは同期的に呼び出し順どおり実行される。"""

    def __init__(
        self,
        renderer: TurtleRenderer,
        state: TurtleState | None = None,
        *,
        default_image: Any = None,
    ):
        self._renderer = renderer
        self._state = state if state is not None else TurtleState(turtle_image=default_image)
        self._default_image = default_image
        # 位置/向きの厳密累積値（状態の float はこの丸め値）
        self._ex = ExactFloat.of(self._state.x)
        self._ey = ExactFloat.of(self._state.y)
        self._eo = ExactFloat.of(self._state.orientation)

    # ------------------------------------------------------------------ #
    # 読み取り専用アクセサ                                                 #
    # ------------------------------------------------------------------ #
    @property
    def renderer(self) -> TurtleRenderer:
        return self._renderer

    @property
    def state(self) -> TurtleState:
        """現在の状態のスナップショット（複製。書き換えてもタートルには反映されない）。"""
        return dataclasses.replace(self._state)

    @property
    def x(self) -> float:
        return self._state.x

    @property
    def y(self) -> float:
        return self._state.y

    def position(self) -> tuple[float, float]:
        return (self._state.x, self._state.y)

    @property
    def orientation(self) -> float:
        """現在の向き（度。ラジアンモードではラジアン）。"""
        return self._from_radians(self._state.orientation)

    def heading(self) -> float:
        return self.orientation

    @property
    def is_pen_down(self) -> bool:
        return self._state.is_pen_down

    @property
    def visible(self) -> bool:
        return self._state.visible

    @property
    def pen_color(self) -> Any:
        return self._state.pen_color

    @property
    def background_color(self) -> Any:
        return self._state.background_color

    @property
    def radians_mode(self) -> bool:
        return self._state.radians_mode

    # ------------------------------------------------------------------ #
    # 移動                                                                 #
    # ------------------------------------------------------------------ #
    def forward(self, distance: float) -> None:
        c, s = _cos_sin(self._state.orientation)
        dx = distance * c
        dy = distance * s
        self._move(self._ex.plus(dx), self._ey.plus(dy))

    def back(self, distance: float) -> None:
        c, s = _cos_sin(self._state.orientation)
        dx = distance * c
        dy = distance * s
        self._move(self._ex.minus(dx), self._ey.minus(dy))

    def goto(self, x: float, y: float) -> None:
        """絶対位置 `(x, y)` へ移動する（ペンが下りていれば線を引く）。"""
        self._move(ExactFloat.of(x), ExactFloat.of(y))

    def home(self) -> None:
        """向きを 0 に戻し、原点へ移動する。"""
        self._set_orientation_exact(ExactFloat.of(0.0))
        self._move(ExactFloat.of(0.0), ExactFloat.of(0.0))

    # ------------------------------------------------------------------ #
    # 回転                                                                 #
    # ------------------------------------------------------------------ #
    def left(self, angle: float) -> None:
        self._set_orientation_exact(self._eo.plus(self._to_radians(angle)))
        self._renderer.request_render(self._state)

    def right(self, angle: float) -> None:
        self._set_orientation_exact(self._eo.minus(self._to_radians(angle)))
        self._renderer.request_render(self._state)

    def set_orientation(self, angle: float) -> None:
        """向きを絶対値で設定する（度。ラジアンモードではラジアン）。"""
        self._set_orientation_exact(ExactFloat.of(self._to_radians(angle)))
        self._renderer.request_render(self._state)

    def radians(self) -> None:
        """角度の入出力をラジアンにする（保持している向きは変わらない）。"""
        self._state.radians_mode = True

    def degrees(self) -> None:
        """角度の入出力を度にする（保持している向きは変わらない）。"""
        self._state.radians_mode = False

    # ------------------------------------------------------------------ #
    # ペン/外観                                                            #
    # ------------------------------------------------------------------ #
    def pen_up(self) -> None:
        self._state.is_pen_down = False

    def pen_down(self) -> None:
        self._state.is_pen_down = True

    def color(self, color: Any) -> None:
        """以降の線の色。既に描いた線と表示には影響しない。"""
        self._state.pen_color = color

    def background(self, color: Any) -> None:
        self._state.background_color = color
        self._renderer.request_render(self._state)

    def show(self) -> None:
        self._state.visible = True
        self._renderer.request_render(self._state)

    def hide(self) -> None:
        self._state.visible = False
        self._renderer.request_render(self._state)

    def set_turtle_image(self, image: Any) -> None:
        """このタートルのグリフを差し替える。None で構成の既定グリフへ戻す。"""
        self._state.turtle_image = self._default_image if image is None else image
        self._renderer.request_render(self._state)

    # ------------------------------------------------------------------ #
    # 消去/反復/保存                                                       #
    # ------------------------------------------------------------------ #
    def clear(self) -> None:
        """描いた線をすべて消す（位置/向き/色は変えない）。"""
        self._renderer.clear_foreground()
        self._renderer.request_render(self._state)

    def repeat(self, n: float, action: Callable[[], Any]) -> None:
        """`action` を `n` 回、同期的に順に呼ぶ。

        `n` は整数へ切り捨てる（`2.5` なら 2 回）。`n < 1` や NaN なら呼ばない。
        """
        if not n >= 1:
            return
        for _ in range(int(n)):
            action()

    def save_png(self, path: Path | str | None = None) -> Path:
        """表示サーフェスを PNG 保存する（未消化の描画予約があれば先に合成する）。"""
        from engine.export.image import save_png as _save_png

        if self._renderer.is_dirty:
            self._renderer.render(self._state)
        return _save_png(self._renderer.surface, path)  # type: ignore[arg-type]

    # ------------------------------------------------------------------ #
    # 別名                                                                 #
    # ------------------------------------------------------------------ #
    fd = forward
    bk = back
    backward = back
    lt = left
    rt = right
    bg = background
    st = show
    ht = hide
    pu = pen_up
    pd = pen_down
    setheading = set_orientation

    # ------------------------------------------------------------------ #
    # 内部ヘルパ                                                           #
    # ------------------------------------------------------------------ #
    def _move(self, nx: ExactFloat, ny: ExactFloat) -> None:
        state = self._state
        if state.is_pen_down:
            self._renderer.stroke_segment(state.x, state.y, nx.value, ny.value, state.pen_color)
        self._ex, self._ey = nx, ny
        state.x, state.y = nx.value, ny.value
        self._renderer.request_render(state)

    def _set_orientation_exact(self, o: ExactFloat) -> None:
        self._eo = o
        self._state.orientation = o.value

    def _to_radians(self, angle: float) -> float:
        return angle if self._state.radians_mode else math.radians(angle)

    def _from_radians(self, angle: float) -> float:
        return angle if self._state.radians_mode else math.degrees(angle)


def _cos_sin(angle: float) -> tuple[float, float]:
    # math.cos(inf) は ValueError になるため、非有限の向きは NaN として伝播させる
    if not math.isfinite(angle):
        return math.nan, math.nan
    return math.cos(angle), math.sin(angle)


def make_turtle(
    target: Any,
    *,
    scheduler: RenderScheduler | None = None,
    config: TurtleConfig | None = None,
) -> Turtle:
    """描画サーフェス（または登録済み識別子）にタートルを生成し、初回描画を同期的に行う。

    Parameters
    ----------
    target : DrawSurface | str
        描画先サーフェス、または `register_surface` で登録した識別子。
    scheduler : RenderScheduler | None
        遅延描画の予約先。None で pyglet クロック（`PygletScheduler`）。
    config : TurtleConfig | None
        ペン色/背景色/線幅/既定グリフ。None で `resolve_turtle_config()`。

    Raises
    ------
    SurfaceNotFoundError
        識別子に対応する対象が無い。
    NotADrawSurfaceError
        対象が描画サーフェスではない。
    """
    surface = _resolve_target(target)
    cfg = config if config is not None else resolve_turtle_config()
    if scheduler is None:
        from engine.core.scheduler import PygletScheduler

        scheduler = PygletScheduler()

    renderer = TurtleRenderer(surface, scheduler, line_width=cfg.line_width)
    state = TurtleState(
        pen_color=cfg.pen_color,
        background_color=cfg.background_color,
        turtle_image=cfg.glyph,
    )
    turtle = Turtle(renderer, state, default_image=cfg.glyph)
    renderer.render(state)
    logger.debug("turtle created on %dx%d surface", renderer.width, renderer.height)
    return turtle


def _resolve_target(target: Any) -> Any:
    if isinstance(target, str):
        surface = resolve_surface(target)
        if surface is None:
            raise SurfaceNotFoundError(f"No surface #{target}")
        name = f"#{target}"
    else:
        surface = target
        name = repr(target)
    if not is_draw_surface(surface):
        raise NotADrawSurfaceError(f"{name} is not a draw surface")
    return surface


__all__ = ["Turtle", "make_turtle"]
