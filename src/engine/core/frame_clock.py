"""
どこで: `engine.core` の簡易フレームドライバ。
何を: `Tickable` の列を固定順序で呼び出す FrameClock（dt 測定とフレーム数の計数）。
なぜ: pyglet のクロック（またはテストの手動ステップ）から 1 回呼ぶだけで描画予約の消化順を統一するため。
"""

from __future__ import annotations

import time
from typing import Sequence

from .tickable import Tickable


class FrameClock:
    """登録された Tickable を固定順序で実行するだけの極小クラス。"""

    def __init__(self, tickables: Sequence[Tickable]):
        self._tickables = tuple(tickables)
        self._last_time = time.perf_counter()
        self._frames = 0

    @property
    def frames(self) -> int:
        """これまでに処理したフレーム数。"""
        return self._frames

    # pyglet.clock.schedule_interval から呼ばせる
    def tick(self, dt: float | None = None) -> None:
        if dt is None:  # pyglet は dt を渡してくれる
            now = time.perf_counter()  # 手動ステップ用
            dt = now - self._last_time
            self._last_time = now

        self._frames += 1
        for t in self._tickables:
            t.tick(dt)
