"""
どこで: `api.errors`。
何を: タートル生成（`make_turtle`）で送出する例外の階層。
なぜ: 識別子の未解決（not-found）と描画先でない対象（wrong-kind）を呼び出し側が区別できるようにするため。
"""

from __future__ import annotations


class ConstructionError(Exception):
    """タートル/レンダラを構築できなかった。部分的に構築された状態は残らない。"""


class SurfaceNotFoundError(ConstructionError, LookupError):
    """識別子に対応する描画対象が登録されていない。"""


class NotADrawSurfaceError(ConstructionError, TypeError):
    """解決した対象が描画サーフェスの操作を備えていない。"""


__all__ = ["ConstructionError", "SurfaceNotFoundError", "NotADrawSurfaceError"]
