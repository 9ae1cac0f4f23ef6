"""
どこで: `api.config`（純粋関数/小ヘルパ）。
何を: タートル構成 `TurtleConfig`（ペン色/背景色/線幅/既定グリフ）と、ランナーの FPS/キャンバス寸法の解決。
なぜ: 既定グリフをプロセス共有の可変状態ではなく構成値として注入し、設定の優先順位を一箇所に集めるため。

優先順位: 明示引数 > YAML（`turtle:` / `runner:` セクション）> 環境変数設定 > 組込み既定値。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from engine.render.renderer import DEFAULT_LINE_WIDTH

logger = logging.getLogger(__name__)

DEFAULT_PEN_COLOR = "black"
DEFAULT_BACKGROUND_COLOR = "white"
DEFAULT_CANVAS_SIZE = (400, 400)


@dataclass(frozen=True)
class TurtleConfig:
    """`make_turtle` に注入する構成値。`glyph` は全タートルで読み取り専用に共有される。"""

    pen_color: Any = DEFAULT_PEN_COLOR
    background_color: Any = DEFAULT_BACKGROUND_COLOR
    line_width: float = DEFAULT_LINE_WIDTH
    glyph: Any = None


def resolve_turtle_config(
    *,
    pen_color: Any | None = None,
    background_color: Any | None = None,
    line_width: float | None = None,
    glyph: Any | None = None,
    glyph_size: int | None = None,
) -> TurtleConfig:
    """明示引数・YAML・環境変数設定から `TurtleConfig` を組み立てる。

    - `glyph` 未指定時は `make_default_glyph(glyph_size)` を 1 つ生成して構成に含める。
    - 線幅は負値を 0 に丸める。
    """
    from common.settings import get as _get_settings
    from engine.render.glyph import make_default_glyph
    from util.utils import load_section

    settings = _get_settings()
    section = load_section("turtle")

    if pen_color is None:
        pen_color = section.get("pen_color", DEFAULT_PEN_COLOR)
    if background_color is None:
        background_color = section.get("background_color", DEFAULT_BACKGROUND_COLOR)
    if line_width is None:
        line_width = _as_float(section.get("line_width"), settings.LINE_WIDTH)
    if glyph is None:
        if glyph_size is None:
            glyph_size = _as_int(section.get("glyph_size"), settings.GLYPH_SIZE)
        glyph = make_default_glyph(max(1, int(glyph_size)))

    return TurtleConfig(
        pen_color=pen_color,
        background_color=background_color,
        line_width=max(0.0, float(line_width)),
        glyph=glyph,
    )


def resolve_fps(requested_fps: int | None, *, default: int = 60) -> int:
    """FPS を解決して 1 以上の int を返す。

    - 明示指定があればそれを優先（数値化できない/<=0 は既定へ）。
    - それ以外は設定ファイル `runner.fps` から読み取り、失敗時は既定値。
    """
    if requested_fps is not None:
        return max(1, _as_int(requested_fps, default))
    from util.utils import load_section

    return max(1, _as_int(load_section("runner").get("fps"), default))


def resolve_canvas_size(canvas_size: tuple[int, int] | None) -> tuple[int, int]:
    """キャンバス [px] を解決する。

    - タプル: `(width, height)` をそのまま（正であることを検証）
    - None: 設定ファイル `runner.canvas_size`、無ければ既定
    - 不正値は `ValueError`
    """
    if canvas_size is None:
        from util.utils import load_section

        canvas_size = load_section("runner").get("canvas_size", DEFAULT_CANVAS_SIZE)
    try:
        w, h = int(canvas_size[0]), int(canvas_size[1])  # type: ignore[index]
    except (TypeError, ValueError, IndexError, OverflowError) as e:
        raise ValueError(f"invalid canvas_size: {canvas_size!r}") from e
    if w <= 0 or h <= 0:
        raise ValueError(f"canvas_size must be positive, got: {(w, h)}")
    return w, h


def _as_float(value: Any, default: float) -> float:
    if value is None:
        return float(default)
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("invalid float in config: %r (fallback %s)", value, default)
        return float(default)


def _as_int(value: Any, default: int) -> int:
    if value is None:
        return int(default)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("invalid int in config: %r (fallback %s)", value, default)
        return int(default)


__all__ = [
    "TurtleConfig",
    "resolve_turtle_config",
    "resolve_fps",
    "resolve_canvas_size",
    "DEFAULT_PEN_COLOR",
    "DEFAULT_BACKGROUND_COLOR",
    "DEFAULT_CANVAS_SIZE",
]
