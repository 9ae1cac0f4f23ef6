"""
どこで: `engine.core` のサーフェス識別子解決。
何を: 識別子 → 描画対象オブジェクトの対応表（`register_surface` / `resolve_surface`）。
なぜ: `make_turtle("main")` のように識別子からサーフェスを引けるようにするため。

- 登録値の型は検査しない（種別の検査はファクトリ側で行い、wrong-kind として報告する）。
- 識別子は正規化せず完全一致で引く（"mainCanvas" と "main_canvas" は別物）。
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

_surfaces: dict[str, Any] = {}


def register_surface(name: str, surface: Any, *, replace: bool = False) -> Any:
    """`name` で `surface` を登録して返す。別オブジェクトで登録済みなら ValueError。"""
    if not isinstance(name, str):
        raise TypeError("サーフェス識別子は str である必要があります")
    if not name:
        raise ValueError("サーフェス識別子は空であってはなりません")
    if not replace and name in _surfaces and _surfaces[name] is not surface:
        raise ValueError(f"'{name}' は既に登録されています")
    _surfaces[name] = surface
    logger.debug("surface registered: %s -> %r", name, surface)
    return surface


def resolve_surface(name: str) -> Any | None:
    """識別子に対応するオブジェクトを返す（未登録/空文字は None）。"""
    return _surfaces.get(name)


def unregister_surface(name: str) -> None:
    """登録を外す（未登録なら何もしない）。"""
    _surfaces.pop(name, None)


def list_surfaces() -> list[str]:
    return list(_surfaces)


def clear_surfaces() -> None:
    _surfaces.clear()


__all__ = [
    "register_surface",
    "resolve_surface",
    "unregister_surface",
    "list_surfaces",
    "clear_surfaces",
]
