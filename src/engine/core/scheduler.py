"""
どこで: `engine.core` の描画予約プリミティブ。
何を: 「次のティックで 1 回だけ実行」の `RenderScheduler` Protocol と 2 実装
      （手動ステップの `TickScheduler`、pyglet クロック駆動の `PygletScheduler`）。
なぜ: レンダラの遅延描画を表示タイミングから切り離し、テストでは決定的にステップ実行するため。

備考:
- スケジューラ自体は同一発行元からの多重予約を抑止しない（1 回までの保証はレンダラの dirty フラグ側）。
- 実行順は予約順。実行中に追加された予約は次のティックへ回す。
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Protocol

from .tickable import Tickable

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class RenderScheduler(Protocol):
    def call_next_tick(self, callback: Callback) -> None:
        """`callback` を次のティックで 1 回だけ実行するよう予約する。"""


class TickScheduler(Tickable):
    """`tick()` を呼ぶたびに、それまでに予約されたコールバックを予約順に実行する。

    `FrameClock` に登録して表示ループから駆動するか、テストから直接 `tick()` する。
    """

    def __init__(self) -> None:
        self._pending: deque[Callback] = deque()
        self._ticks = 0

    def call_next_tick(self, callback: Callback) -> None:
        self._pending.append(callback)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def ticks(self) -> int:
        return self._ticks

    def tick(self, dt: float = 0.0) -> None:
        self._ticks += 1
        # このティック開始時点の予約だけを消化する
        for _ in range(len(self._pending)):
            callback = self._pending.popleft()
            callback()


class PygletScheduler:
    """`pyglet.clock.schedule_once(..., 0)` で次のクロックティックへ委譲する。"""

    def __init__(self, clock: Any | None = None) -> None:
        if clock is None:
            # 遅延インポート（pyglet を使わない経路で import しないため）
            import pyglet

            clock = pyglet.clock.get_default()
        self._clock = clock

    def call_next_tick(self, callback: Callback) -> None:
        def _run(dt: float) -> None:
            callback()

        self._clock.schedule_once(_run, 0.0)


__all__ = ["RenderScheduler", "TickScheduler", "PygletScheduler", "Callback"]
