"""
どこで: `engine.core` の更新インターフェース。
何を: 1 表示フレーム分の処理 `tick(dt)` を持つ `Tickable` Protocol を定義。
なぜ: スケジューラ/ウィンドウなどフレーム駆動のオブジェクトを `FrameClock` から一様に扱うため。
"""

from typing import Protocol


class Tickable(Protocol):
    """1 フレーム分の処理を行うインターフェース。"""

    def tick(self, dt: float) -> None:
        """前回から `dt` 秒経過したフレームを 1 つ処理する。"""
