"""
どこで: `engine.core` の 2D アフィン変換ユーティリティ。
何を: 3x3 同次行列（numpy）での translate/scale/rotate と点の写像・逆写像を小さな純関数で提供。
なぜ: サーフェスの変換スタックとレンダラのグリフ配置で同じ行列規約（列ベクトル, 右から適用）を共有するため。
"""

from __future__ import annotations

import math

import numpy as np


def identity() -> np.ndarray:
    return np.eye(3, dtype=np.float64)


def translation(tx: float, ty: float) -> np.ndarray:
    m = identity()
    m[0, 2] = float(tx)
    m[1, 2] = float(ty)
    return m


def scaling(sx: float, sy: float) -> np.ndarray:
    m = identity()
    m[0, 0] = float(sx)
    m[1, 1] = float(sy)
    return m


def rotation(theta: float) -> np.ndarray:
    """反時計回り `theta` [rad] の回転（y 上向きの数学座標系で）。非有限の角度は NaN 行列。"""
    if not math.isfinite(theta):
        return np.full((3, 3), np.nan)
    c = math.cos(theta)
    s = math.sin(theta)
    m = identity()
    m[0, 0] = c
    m[0, 1] = -s
    m[1, 0] = s
    m[1, 1] = c
    return m


def apply(m: np.ndarray, x: float, y: float) -> tuple[float, float]:
    """1 点を写像する。"""
    px = m[0, 0] * x + m[0, 1] * y + m[0, 2]
    py = m[1, 0] * x + m[1, 1] * y + m[1, 2]
    return float(px), float(py)


def apply_points(m: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """座標配列（同形状の xs, ys）をまとめて写像する。"""
    px = m[0, 0] * xs + m[0, 1] * ys + m[0, 2]
    py = m[1, 0] * xs + m[1, 1] * ys + m[1, 2]
    return px, py


def invert(m: np.ndarray) -> np.ndarray:
    """逆行列。特異行列（スケール 0 など）は `np.linalg.LinAlgError`。"""
    return np.linalg.inv(m)


def linear_scale(m: np.ndarray) -> float:
    """線形部の面積倍率の平方根（線幅の換算に使う等方スケール近似）。"""
    det = m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]
    return math.sqrt(abs(float(det)))


def is_axis_aligned(m: np.ndarray) -> bool:
    """線形部に回転/せん断を含まないか（矩形が矩形のまま写る）。"""
    return bool(m[0, 1] == 0.0 and m[1, 0] == 0.0)


def integer_offset(m: np.ndarray) -> tuple[int, int] | None:
    """線形部が単位行列で平行移動が整数なら `(tx, ty)`、それ以外は None。"""
    if not (m[0, 0] == 1.0 and m[1, 1] == 1.0 and is_axis_aligned(m)):
        return None
    tx, ty = float(m[0, 2]), float(m[1, 2])
    if not (tx.is_integer() and ty.is_integer()):
        return None
    return int(tx), int(ty)


__all__ = [
    "identity",
    "translation",
    "scaling",
    "rotation",
    "apply",
    "apply_points",
    "invert",
    "linear_scale",
    "is_axis_aligned",
    "integer_offset",
]
