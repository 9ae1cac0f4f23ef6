"""共通フィクスチャ。

- 手動ステップのスケジューラと 200x200 の表示サーフェス
- 小さなグリフを持つタートル構成（YAML/環境変数に依存しない）
- 線分の記録（`stroke_segment` を包んで呼び出し列を残す）
"""

from __future__ import annotations

from typing import Any, Iterator

import pytest

from api.config import TurtleConfig
from api.turtle import Turtle, make_turtle
from engine.core.scheduler import TickScheduler
from engine.core.surface_registry import clear_surfaces
from engine.render.glyph import make_default_glyph
from engine.render.surface import RasterSurface


@pytest.fixture(autouse=True)
def _clean_surface_registry() -> Iterator[None]:
    yield
    clear_surfaces()


@pytest.fixture()
def scheduler() -> TickScheduler:
    return TickScheduler()


@pytest.fixture()
def surface() -> RasterSurface:
    return RasterSurface(200, 200)


@pytest.fixture()
def config() -> TurtleConfig:
    return TurtleConfig(glyph=make_default_glyph(8))


@pytest.fixture()
def turtle(surface: RasterSurface, scheduler: TickScheduler, config: TurtleConfig) -> Turtle:
    return make_turtle(surface, scheduler=scheduler, config=config)


@pytest.fixture()
def strokes(turtle: Turtle, monkeypatch: pytest.MonkeyPatch) -> list[tuple[Any, ...]]:
    """`turtle` が前景へ描いた線分 `(x0, y0, x1, y1, color)` の列。"""
    log: list[tuple[Any, ...]] = []
    renderer = turtle.renderer
    original = renderer.stroke_segment

    def _spy(x0: float, y0: float, x1: float, y1: float, color: Any) -> None:
        log.append((x0, y0, x1, y1, color))
        original(x0, y0, x1, y1, color)

    monkeypatch.setattr(renderer, "stroke_segment", _spy)
    return log
