from __future__ import annotations

import pytest

from api import ConstructionError, NotADrawSurfaceError, SurfaceNotFoundError
from api.config import TurtleConfig
from api.turtle import make_turtle
from engine.core.scheduler import TickScheduler
from engine.core.surface_registry import register_surface
from engine.render.glyph import make_default_glyph
from engine.render.surface import RasterSurface


def test_make_turtle_from_identifier(scheduler: TickScheduler, config: TurtleConfig) -> None:
    s = RasterSurface(50, 40)
    register_surface("main", s)
    t = make_turtle("main", scheduler=scheduler, config=config)
    assert t.renderer.surface is s
    assert (t.renderer.width, t.renderer.height) == (50, 40)
    assert t.position() == (0.0, 0.0)
    assert t.orientation == 0.0
    assert t.is_pen_down and t.visible


def test_missing_identifier_raises_not_found(scheduler: TickScheduler, config: TurtleConfig) -> None:
    with pytest.raises(SurfaceNotFoundError, match="No surface #missing"):
        make_turtle("missing", scheduler=scheduler, config=config)


def test_empty_identifier_raises_not_found(scheduler: TickScheduler, config: TurtleConfig) -> None:
    with pytest.raises(SurfaceNotFoundError, match="No surface #$"):
        make_turtle("", scheduler=scheduler, config=config)


def test_identifier_lookup_is_exact(scheduler: TickScheduler, config: TurtleConfig) -> None:
    register_surface("mainCanvas", RasterSurface(10, 10))
    with pytest.raises(SurfaceNotFoundError):
        make_turtle("main_canvas", scheduler=scheduler, config=config)
    with pytest.raises(SurfaceNotFoundError):
        make_turtle("MainCanvas", scheduler=scheduler, config=config)
    assert make_turtle("mainCanvas", scheduler=scheduler, config=config).renderer.width == 10


def test_not_found_and_wrong_kind_share_base(scheduler: TickScheduler, config: TurtleConfig) -> None:
    register_surface("label", object())
    with pytest.raises(ConstructionError):
        make_turtle("nowhere", scheduler=scheduler, config=config)
    with pytest.raises(ConstructionError):
        make_turtle("label", scheduler=scheduler, config=config)
    assert issubclass(SurfaceNotFoundError, LookupError)
    assert issubclass(NotADrawSurfaceError, TypeError)


@pytest.mark.parametrize("target", [object(), 42, None, [1, 2]])
def test_wrong_kind_target_raises(target, scheduler: TickScheduler, config: TurtleConfig) -> None:
    with pytest.raises(NotADrawSurfaceError):
        make_turtle(target, scheduler=scheduler, config=config)


def test_registered_wrong_kind_mentions_identifier(scheduler: TickScheduler, config: TurtleConfig) -> None:
    register_surface("label", "not a canvas")
    with pytest.raises(NotADrawSurfaceError, match="#label"):
        make_turtle("label", scheduler=scheduler, config=config)


def test_config_is_applied(scheduler: TickScheduler) -> None:
    glyph = make_default_glyph(6)
    cfg = TurtleConfig(pen_color="red", background_color="blue", line_width=3.0, glyph=glyph)
    t = make_turtle(RasterSurface(20, 20), scheduler=scheduler, config=cfg)
    assert t.pen_color == "red"
    assert t.background_color == "blue"
    assert t.renderer.line_width == 3.0
    assert t.state.turtle_image is glyph
    assert tuple(int(v) for v in t.renderer.surface.to_rgba8()[0, 0]) == (0, 0, 255, 255)


def test_turtles_share_the_configured_glyph(scheduler: TickScheduler, config: TurtleConfig) -> None:
    a = make_turtle(RasterSurface(10, 10), scheduler=scheduler, config=config)
    b = make_turtle(RasterSurface(10, 10), scheduler=scheduler, config=config)
    assert a.state.turtle_image is b.state.turtle_image is config.glyph


def test_turtles_on_separate_surfaces_are_independent(scheduler: TickScheduler, config: TurtleConfig) -> None:
    a = make_turtle(RasterSurface(30, 30), scheduler=scheduler, config=config)
    b = make_turtle(RasterSurface(30, 30), scheduler=scheduler, config=config)
    a.forward(10)
    a.color("red")
    assert b.position() == (0.0, 0.0)
    assert b.pen_color == "black"
    assert not b.renderer.foreground.to_rgba8().any()


@pytest.mark.optional
def test_default_scheduler_uses_pyglet_clock(config: TurtleConfig) -> None:
    pytest.importorskip("pyglet")
    from engine.core.scheduler import PygletScheduler

    t = make_turtle(RasterSurface(10, 10), config=config)
    assert isinstance(t.renderer._scheduler, PygletScheduler)  # noqa: SLF001
