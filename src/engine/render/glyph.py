"""
どこで: `engine.render` の既定グリフ。
何を: +x 方向を向いたタートル形状のグリフ（RasterSurface）を Pillow の ImageDraw で生成する。
なぜ: 画像ファイルの読込/デコードに依存せず、構成値として注入できる既定グリフを用意するため。

グリフは水平軸に対して対称に描く（レンダラの上下反転変換で見た目が変わらないように）。
"""

from __future__ import annotations

from PIL import Image, ImageDraw

from util.color import to_u8_rgba

from .surface import RasterSurface

DEFAULT_SHELL_COLOR = "#2e7d32"
DEFAULT_SKIN_COLOR = "#81c784"

# 縁の階段を抑えるための描画倍率（BOX 縮小で平均する）
_SUPERSAMPLE = 4


def make_default_glyph(
    size: int | None = None,
    *,
    shell_color: object = DEFAULT_SHELL_COLOR,
    skin_color: object = DEFAULT_SKIN_COLOR,
) -> RasterSurface:
    """`size`×`size` px のタートルグリフを返す（None で設定 `TRT_GLYPH_SIZE`）。"""
    if size is None:
        from common.settings import get as _get_settings

        size = _get_settings().GLYPH_SIZE
    n = max(1, int(size))
    big = n * _SUPERSAMPLE

    def box(cu: float, cv: float, ru: float, rv: float) -> tuple[float, float, float, float]:
        # 正規化座標 [-1, 1]（中心 (cu, cv)、半径 (ru, rv)）→ 画素座標の外接矩形
        def px(t: float) -> float:
            return (t + 1.0) / 2.0 * big - 0.5

        return (px(cu - ru), px(cv - rv), px(cu + ru), px(cv + rv))

    skin = to_u8_rgba(skin_color)
    shell = to_u8_rgba(shell_color)
    canvas = Image.new("RGBA", (big, big), (0, 0, 0, 0))
    draw = ImageDraw.Draw(canvas)
    draw.ellipse(box(0.62, 0.0, 0.2, 0.2), fill=skin)
    for cu, cv in ((0.25, 0.5), (0.25, -0.5), (-0.45, 0.45), (-0.45, -0.45)):
        draw.ellipse(box(cu, cv, 0.16, 0.16), fill=skin)
    draw.rectangle(box(-0.725, 0.0, 0.125, 0.06), fill=skin)
    # 甲羅は最後（手足の付け根を覆う）
    draw.ellipse(box(-0.1, 0.0, 0.55, 0.45), fill=shell)

    if big != n:
        canvas = canvas.resize((n, n), Image.Resampling.BOX)
    return RasterSurface.from_image(canvas)


__all__ = ["make_default_glyph", "DEFAULT_SHELL_COLOR", "DEFAULT_SKIN_COLOR"]
