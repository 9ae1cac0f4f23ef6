"""
どこで: `common.settings`
何を: タートル描画エンジンの環境変数（`TRT_*`）を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_int, env_str


@dataclass
class _Settings:
    # Logging
    LOG_LEVEL: str = "INFO"

    # Renderer
    RENDER_DEBUG: bool = False
    LINE_WIDTH: float = 0.5

    # Glyph
    GLYPH_SIZE: int = 24


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - 線幅は負値を 0 に丸める（0 でも最小 1px 相当で描かれる）。
    - グリフサイズは 1 未満を 1 に丸める。
    """
    _settings.LOG_LEVEL = env_str("TRT_LOG_LEVEL", "INFO").upper()

    _settings.RENDER_DEBUG = env_bool("TRT_RENDER_DEBUG", False)
    _settings.LINE_WIDTH = env_float("TRT_LINE_WIDTH", 0.5, min_value=0.0)

    _settings.GLYPH_SIZE = env_int("TRT_GLYPH_SIZE", 24, min_value=1) or 24


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
