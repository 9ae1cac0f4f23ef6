"""レンダラの合成順・前景レイヤ・描画予約の束ね（dirty フラグ）。"""

from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from api.turtle import Turtle, make_turtle
from common import settings as settings_mod
from engine.core.scheduler import TickScheduler
from engine.core.turtle_state import TurtleState
from engine.render.renderer import TurtleRenderer
from engine.render.surface import RasterSurface

SHELL_RGBA8 = (0x2E, 0x7D, 0x32, 255)
WHITE_RGBA8 = (255, 255, 255, 255)


def _px(surface: RasterSurface, row: int, col: int) -> tuple[int, ...]:
    return tuple(int(v) for v in surface.to_rgba8()[row, col])


def test_foreground_transform_is_center_origin_y_up() -> None:
    r = TurtleRenderer(RasterSurface(200, 100), TickScheduler())
    # タートル座標の原点は中央、+y は画面上方向
    r.stroke_segment(0.0, 0.0, 0.0, 10.0, "black")
    a = r.foreground.to_rgba8()[..., 3]
    assert a[45, 100] == 255 and a[41, 100] == 255
    assert not a[51:].any() and not a[:40].any()
    assert (r.width, r.height) == (200, 100)


def test_initial_render_is_synchronous(turtle: Turtle, scheduler: TickScheduler) -> None:
    r = turtle.renderer
    assert r.render_count == 1
    assert not r.is_dirty
    assert scheduler.pending_count == 0
    assert _px(r.surface, 0, 0) == WHITE_RGBA8


def test_visible_glyph_is_drawn_at_turtle_position(turtle: Turtle, scheduler: TickScheduler) -> None:
    surface = turtle.renderer.surface
    assert _px(surface, 100, 100) == SHELL_RGBA8

    turtle.hide()
    scheduler.tick()
    assert _px(surface, 100, 100) == WHITE_RGBA8

    turtle.show()
    scheduler.tick()
    assert _px(surface, 100, 100) == SHELL_RGBA8


def test_strokes_reach_display_after_tick(turtle: Turtle, scheduler: TickScheduler) -> None:
    surface = turtle.renderer.surface
    turtle.forward(50)
    # 線分は前景へ即時に描かれるが、表示は次のティックまで変わらない
    assert turtle.renderer.foreground.to_rgba8()[100, 120, 3] == 255
    assert _px(surface, 100, 120) == WHITE_RGBA8
    scheduler.tick()
    assert _px(surface, 100, 120) == (0, 0, 0, 255)


def test_background_change_fills_display(turtle: Turtle, scheduler: TickScheduler) -> None:
    turtle.forward(50)
    turtle.background("red")
    scheduler.tick()
    surface = turtle.renderer.surface
    assert _px(surface, 0, 0) == (255, 0, 0, 255)
    # 線は背景の上に残る
    assert _px(surface, 100, 120) == (0, 0, 0, 255)


def test_many_requests_coalesce_into_one_render(turtle: Turtle, scheduler: TickScheduler) -> None:
    r = turtle.renderer
    for _ in range(5):
        turtle.forward(10)
        turtle.left(15)
    assert r.is_dirty
    assert scheduler.pending_count == 1

    scheduler.tick()
    assert r.render_count == 2
    assert not r.is_dirty

    scheduler.tick()
    assert r.render_count == 2

    turtle.forward(1)
    assert scheduler.pending_count == 1
    scheduler.tick()
    assert r.render_count == 3


def test_deferred_render_reads_final_state(
    turtle: Turtle, scheduler: TickScheduler, monkeypatch: pytest.MonkeyPatch
) -> None:
    r = turtle.renderer
    seen: list[tuple[float, float, float, bool]] = []
    original = r.render

    def _spy(state: TurtleState) -> None:
        seen.append((state.x, state.y, state.orientation, state.visible))
        original(state)

    monkeypatch.setattr(r, "render", _spy)
    turtle.forward(10)
    turtle.left(90)
    turtle.forward(10)
    turtle.hide()
    scheduler.tick()

    assert len(seen) == 1
    x, y, o, visible = seen[0]
    assert (x, y) == (turtle.x, turtle.y)
    assert o == turtle.state.orientation
    assert visible is False


def test_failed_render_releases_pending_flag(
    turtle: Turtle, scheduler: TickScheduler, monkeypatch: pytest.MonkeyPatch
) -> None:
    r = turtle.renderer

    def _boom(state: TurtleState) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(r, "render", _boom)
    turtle.forward(5)
    with pytest.raises(RuntimeError):
        scheduler.tick()
    assert not r.is_dirty
    turtle.forward(5)
    assert scheduler.pending_count == 1


def test_clear_is_indistinguishable_from_fresh_layer(
    turtle: Turtle, scheduler: TickScheduler, config
) -> None:
    turtle.forward(30)
    turtle.left(45)
    turtle.color("red")
    turtle.forward(20)
    turtle.clear()
    scheduler.tick()

    fresh_sched = TickScheduler()
    fresh = make_turtle(RasterSurface(200, 200), scheduler=fresh_sched, config=config)
    fresh.pen_up()
    fresh.left(45)
    fresh.goto(turtle.x, turtle.y)
    fresh_sched.tick()

    np.testing.assert_array_equal(turtle.renderer.foreground.to_rgba8(), fresh.renderer.foreground.to_rgba8())
    np.testing.assert_array_equal(turtle.renderer.surface.to_rgba8(), fresh.renderer.surface.to_rgba8())
    # 消去は位置/向き/色を変えない
    assert turtle.pen_color == "red"
    assert turtle.orientation == pytest.approx(45.0)


def test_non_finite_state_renders_without_error(turtle: Turtle, scheduler: TickScheduler) -> None:
    turtle.left(math.inf)
    turtle.forward(10)
    scheduler.tick()
    assert math.isnan(turtle.x)
    # グリフは配置できないので背景のみ
    assert _px(turtle.renderer.surface, 100, 100) == WHITE_RGBA8


def test_render_debug_logs_timing(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(settings_mod.get(), "RENDER_DEBUG", True)
    r = TurtleRenderer(RasterSurface(10, 10), TickScheduler())
    with caplog.at_level(logging.DEBUG, logger="engine.render.renderer"):
        r.render(TurtleState())
    assert any("render #1" in rec.getMessage() for rec in caplog.records)


def test_line_width_defaults_to_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings_mod.get(), "LINE_WIDTH", 2.5)
    assert TurtleRenderer(RasterSurface(4, 4), TickScheduler()).line_width == 2.5
    assert TurtleRenderer(RasterSurface(4, 4), TickScheduler(), line_width=1.0).line_width == 1.0
