"""
どこで: `engine.render` の描画先サーフェス。
何を: 描画先の最小インターフェース `DrawSurface`（Protocol）と、Pillow 実装の `RasterSurface`。
なぜ: レンダラが GUI/GL に依存せず、矩形塗り・線・画像転写・変換スタックだけで合成できるようにするため。

RasterSurface の規約:
- 画素は Pillow の "RGBA" 画像（ストレートアルファ、0–255）。行 0 が上端。
- 画素 (col, row) はデバイス空間 `[col, col+1) × [row, row+1)` を占める。
- 変換は 3x3 行列（`engine.core.affine`）。`translate/scale/rotate` は現在行列の右から掛け、
  Pillow へ渡す直前にだけデバイス座標へ写す。
- 合成はすべて source-over（`Image.alpha_composite`）。`clear_rect` のみ透明で上書きする。
"""

from __future__ import annotations

import logging
import math
from typing import Any, Protocol, runtime_checkable

import numpy as np
from PIL import Image, ImageDraw

from engine.core import affine
from util.color import to_u8_rgba

logger = logging.getLogger(__name__)

# 線の最小幅（デバイス px）。細線でも 1px は描かれる。
MIN_LINE_WIDTH_PX = 1

_TRANSPARENT = (0, 0, 0, 0)


@runtime_checkable
class DrawSurface(Protocol):
    """レンダラが要求する描画先の操作集合。"""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def translate(self, tx: float, ty: float) -> None: ...

    def scale(self, sx: float, sy: float) -> None: ...

    def rotate(self, theta: float) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Any) -> None: ...

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def stroke_line(
        self, x0: float, y0: float, x1: float, y1: float, color: Any, width: float
    ) -> None: ...

    def draw_image(self, image: Any, dx: float, dy: float) -> None: ...


class RasterSurface:
    """Pillow の RGBA 画像を画素バッファとする `DrawSurface` 実装。"""

    def __init__(self, width: int, height: int):
        w, h = int(width), int(height)
        if w <= 0 or h <= 0:
            raise ValueError(f"surface size must be positive, got: {(width, height)}")
        self._image = Image.new("RGBA", (w, h), _TRANSPARENT)
        self._matrix = affine.identity()
        self._stack: list[np.ndarray] = []

    @classmethod
    def from_image(cls, image: Image.Image) -> "RasterSurface":
        """Pillow 画像（任意モード）の RGBA 複製を持つサーフェスを作る。"""
        surf = cls(image.width, image.height)
        surf._image = image.convert("RGBA")
        return surf

    # ---- 寸法/画素 ----
    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def image(self) -> Image.Image:
        """画素バッファ（参照）。"""
        return self._image

    def to_rgba8(self) -> np.ndarray:
        """ストレートアルファの uint8 RGBA 配列 `(h, w, 4)`（複製）を返す。"""
        return np.array(self._image)

    # ---- 変換スタック ----
    def save(self) -> None:
        self._stack.append(self._matrix.copy())

    def restore(self) -> None:
        # 対応する save が無い restore は無視する
        if self._stack:
            self._matrix = self._stack.pop()

    def translate(self, tx: float, ty: float) -> None:
        self._matrix = self._matrix @ affine.translation(tx, ty)

    def scale(self, sx: float, sy: float) -> None:
        self._matrix = self._matrix @ affine.scaling(sx, sy)

    def rotate(self, theta: float) -> None:
        self._matrix = self._matrix @ affine.rotation(theta)

    # ---- 描画 ----
    def fill_rect(self, x: float, y: float, w: float, h: float, color: Any) -> None:
        target = self._rect_target(x, y, w, h)
        if target is None:
            return
        box, polygon = target
        c0, r0, c1, r1 = box
        ink = to_u8_rgba(color)
        if polygon is None:
            layer = Image.new("RGBA", (c1 - c0, r1 - r0), ink)
        else:
            layer = Image.new("RGBA", (c1 - c0, r1 - r0), _TRANSPARENT)
            ImageDraw.Draw(layer).polygon([(px - c0, py - r0) for px, py in polygon], fill=ink)
        self._image.alpha_composite(layer, dest=(c0, r0))

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        target = self._rect_target(x, y, w, h)
        if target is None:
            return
        box, polygon = target
        # RGBA 画像への ImageDraw は合成せず値を上書きする
        draw = ImageDraw.Draw(self._image)
        if polygon is None:
            c0, r0, c1, r1 = box
            draw.rectangle((c0, r0, c1 - 1, r1 - 1), fill=_TRANSPARENT)
        else:
            draw.polygon(polygon, fill=_TRANSPARENT)

    def stroke_line(
        self, x0: float, y0: float, x1: float, y1: float, color: Any, width: float
    ) -> None:
        if not all(math.isfinite(v) for v in (x0, y0, x1, y1, width)):
            logger.debug("non-finite stroke skipped: (%r, %r) -> (%r, %r)", x0, y0, x1, y1)
            return
        m = self._matrix
        ax, ay = affine.apply(m, x0, y0)
        bx, by = affine.apply(m, x1, y1)
        if not all(math.isfinite(v) for v in (ax, ay, bx, by)):
            return
        if ax == bx and ay == by:
            # 長さ 0 の線分は描かない
            return
        scaled = float(width) * affine.linear_scale(m)
        px_width = int(round(scaled)) if math.isfinite(scaled) else MIN_LINE_WIDTH_PX
        px_width = max(MIN_LINE_WIDTH_PX, px_width)

        pad = px_width / 2.0 + 1.0
        clipped = _clip_segment(
            ax, ay, bx, by, -pad, -pad, self.width + pad, self.height + pad
        )
        if clipped is None:
            return
        # 端点はその点を含む画素へ丸める
        ca, ra, cb, rb = (int(math.floor(v)) for v in clipped)
        reach = px_width // 2 + 1
        c0 = max(0, min(ca, cb) - reach)
        c1 = min(self.width, max(ca, cb) + reach + 1)
        r0 = max(0, min(ra, rb) - reach)
        r1 = min(self.height, max(ra, rb) + reach + 1)
        if c0 >= c1 or r0 >= r1:
            return

        layer = Image.new("RGBA", (c1 - c0, r1 - r0), _TRANSPARENT)
        ImageDraw.Draw(layer).line(
            [(ca - c0, ra - r0), (cb - c0, rb - r0)], fill=to_u8_rgba(color), width=px_width
        )
        self._image.alpha_composite(layer, dest=(c0, r0))

    def draw_image(self, image: Any, dx: float, dy: float) -> None:
        """`image`（RasterSurface / Pillow 画像 / uint8 RGBA 配列）を現在の変換で `(dx, dy)` に転写する。"""
        src = _as_image(image)
        iw, ih = src.size
        if iw == 0 or ih == 0:
            return
        if not (math.isfinite(dx) and math.isfinite(dy)):
            logger.debug("non-finite image placement skipped")
            return
        full = self._matrix @ affine.translation(dx, dy)
        if not np.all(np.isfinite(full)):
            logger.debug("non-finite image transform skipped")
            return

        offset = affine.integer_offset(full)
        if offset is not None:
            self._blit(src, *offset)
            return

        try:
            inv = affine.invert(full)
        except np.linalg.LinAlgError:
            return
        qx, qy = affine.apply_points(
            full,
            np.array([0.0, iw, 0.0, iw], dtype=np.float64),
            np.array([0.0, 0.0, ih, ih], dtype=np.float64),
        )
        c0 = max(0, int(math.floor(qx.min())))
        c1 = min(self.width, int(math.ceil(qx.max())))
        r0 = max(0, int(math.floor(qy.min())))
        r1 = min(self.height, int(math.ceil(qy.max())))
        if c0 >= c1 or r0 >= r1:
            return
        # Pillow の AFFINE は出力画素中心をこの行列で入力座標へ写す（最近傍）
        data = tuple(float(v) for v in (inv @ affine.translation(c0, r0))[:2].ravel())
        layer = src.transform(
            (c1 - c0, r1 - r0),
            Image.Transform.AFFINE,
            data,
            resample=Image.Resampling.NEAREST,
        )
        self._image.alpha_composite(layer, dest=(c0, r0))

    # ---- 内部ヘルパ ----
    def _blit(self, src: Image.Image, tx: int, ty: int) -> None:
        """整数オフセットへの等倍転写（画面外は切り落とす）。"""
        sx0, sy0 = max(0, -tx), max(0, -ty)
        sx1 = min(src.width, self.width - tx)
        sy1 = min(src.height, self.height - ty)
        if sx0 >= sx1 or sy0 >= sy1:
            return
        self._image.alpha_composite(src, dest=(tx + sx0, ty + sy0), source=(sx0, sy0, sx1, sy1))

    def _rect_target(
        self, x: float, y: float, w: float, h: float
    ) -> tuple[tuple[int, int, int, int], list[tuple[float, float]] | None] | None:
        """矩形（ユーザー空間）の描画先 `(画素 box, 多角形 or None)`。

        軸平行な変換では画素中心が矩形に入る範囲の box のみ、回転/せん断を含む場合は
        Pillow 座標の多角形と、その外接 box を返す。
        """
        if not all(math.isfinite(v) for v in (x, y, w, h)) or w == 0 or h == 0:
            return None
        m = self._matrix
        if not np.all(np.isfinite(m)):
            return None
        qx, qy = affine.apply_points(
            m,
            np.array([x, x + w, x + w, x], dtype=np.float64),
            np.array([y, y, y + h, y + h], dtype=np.float64),
        )
        if affine.is_axis_aligned(m):
            c0, c1 = _pixel_span(float(qx.min()), float(qx.max()), self.width)
            r0, r1 = _pixel_span(float(qy.min()), float(qy.max()), self.height)
            if c0 >= c1 or r0 >= r1:
                return None
            return (c0, r0, c1, r1), None
        c0 = max(0, int(math.floor(qx.min())))
        c1 = min(self.width, int(math.ceil(qx.max())))
        r0 = max(0, int(math.floor(qy.min())))
        r1 = min(self.height, int(math.ceil(qy.max())))
        if c0 >= c1 or r0 >= r1:
            return None
        # Pillow の整数座標は画素中心なので 0.5 ずらす
        polygon = [(float(px) - 0.5, float(py) - 0.5) for px, py in zip(qx, qy)]
        return (c0, r0, c1, r1), polygon


def _as_image(image: Any) -> Image.Image:
    if isinstance(image, RasterSurface):
        return image.image
    if isinstance(image, Image.Image):
        return image if image.mode == "RGBA" else image.convert("RGBA")
    arr = np.asarray(image)
    if arr.dtype != np.uint8 or arr.ndim != 3 or arr.shape[2] != 4:
        raise TypeError(f"expected RasterSurface, PIL image or (h, w, 4) uint8 array, got: {type(image)!r}")
    return Image.fromarray(arr)


def _pixel_span(lo: float, hi: float, limit: int) -> tuple[int, int]:
    """中心 `i + 0.5` が `[lo, hi)` に入る画素 i の半開区間（`[0, limit]` に収める）。"""
    start = max(0, min(limit, int(math.ceil(lo - 0.5))))
    stop = max(0, min(limit, int(math.ceil(hi - 0.5))))
    return start, stop


def _clip_segment(
    ax: float, ay: float, bx: float, by: float, lo_x: float, lo_y: float, hi_x: float, hi_y: float
) -> tuple[float, float, float, float] | None:
    """線分を矩形へ切り詰める（Liang–Barsky）。交わらなければ None。"""
    dx, dy = bx - ax, by - ay
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, ax - lo_x), (dx, hi_x - ax), (-dy, ay - lo_y), (dy, hi_y - ay)):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        r = q / p
        if p < 0.0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    out = (ax + t0 * dx, ay + t0 * dy, ax + t1 * dx, ay + t1 * dy)
    if not all(math.isfinite(v) for v in out):
        return None
    return out


def is_draw_surface(obj: Any) -> bool:
    """`obj` が `DrawSurface` の操作をすべて備えるか。"""
    return isinstance(obj, DrawSurface)


__all__ = ["DrawSurface", "RasterSurface", "is_draw_surface", "MIN_LINE_WIDTH_PX"]
