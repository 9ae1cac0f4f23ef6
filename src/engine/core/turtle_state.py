"""
どこで: `engine.core` の状態モデル。
何を: タートル 1 体ぶんの位置/向き/ペン/外観の状態 `TurtleState` と、座標用の厳密累積値 `ExactFloat`。
なぜ: コマンド層（`api.turtle`）とレンダラ（`engine.render`）が同じ生きた状態を参照するため。

座標系:
- 原点はサーフェス中心、y は上向き（ラスタの画素座標とは独立）。
- `orientation` は常にラジアン（+x 軸から反時計回り）。度/ラジアンの換算は API 境界でのみ行う。
- 折り返し正規化はしない（cos/sin 経由でのみ消費されるため）。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Any


@dataclass
class TurtleState:
    x: float = 0.0
    y: float = 0.0
    orientation: float = 0.0
    is_pen_down: bool = True
    visible: bool = True
    pen_color: Any = "black"
    background_color: Any = "white"
    turtle_image: Any = None
    radians_mode: bool = False


@dataclass(frozen=True)
class ExactFloat:
    """float 値と、その値が有限な間だけ保持する厳密値（Fraction）の組。

    `a.plus(d).plus(-d)` は元と同じ float を返す（丸め誤差を累積しない）。
    非有限値が混ざった時点で厳密値を捨て、以後は通常の float 演算で伝播させる。
    """

    value: float
    exact: Fraction | None

    @classmethod
    def of(cls, value: float) -> "ExactFloat":
        v = float(value)
        return cls(v, Fraction(v) if math.isfinite(v) else None)

    def plus(self, delta: float) -> "ExactFloat":
        d = float(delta)
        if self.exact is None or not math.isfinite(d):
            return ExactFloat(self.value + d, None)
        total = self.exact + Fraction(d)
        try:
            return ExactFloat(float(total), total)
        except OverflowError:
            return ExactFloat(math.inf if total > 0 else -math.inf, None)

    def minus(self, delta: float) -> "ExactFloat":
        return self.plus(-float(delta))


__all__ = ["TurtleState", "ExactFloat"]
