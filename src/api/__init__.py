"""
どこで: `api` 入口（高レベル公開 API）。
何を: タートル `Turtle`・生成ファクトリ `make_turtle`・ランナー `run_turtle`・構成/例外/サーフェス登録を再輸出。
なぜ: 利用者が単一名前空間からタートル生成→描画→表示まで完結できるようにするため。

Usage:
    from api import run_turtle

    def program(t):
        t.color("red")
        t.repeat(4, lambda: (t.forward(100), t.left(90)))

    run_turtle(program, canvas_size=(400, 400))
"""

from engine.core.scheduler import PygletScheduler, RenderScheduler, TickScheduler
from engine.core.surface_registry import register_surface, unregister_surface
from engine.render.surface import DrawSurface, RasterSurface

from .config import TurtleConfig, resolve_turtle_config
from .errors import ConstructionError, NotADrawSurfaceError, SurfaceNotFoundError
from .runner import run_turtle
from .runner import run_turtle as run
from .turtle import Turtle, make_turtle

__all__ = [
    # メインAPI
    "make_turtle",
    "run_turtle",
    "run",  # 実行（エイリアス、簡易）
    "Turtle",
    # 構成
    "TurtleConfig",
    "resolve_turtle_config",
    # 描画先/スケジューラ（高度な使用）
    "DrawSurface",
    "RasterSurface",
    "register_surface",
    "unregister_surface",
    "RenderScheduler",
    "TickScheduler",
    "PygletScheduler",
    # 例外
    "ConstructionError",
    "SurfaceNotFoundError",
    "NotADrawSurfaceError",
]
