"""
どこで: `engine.export.image`。
何を: RasterSurface の内容を PNG として保存するラッパ（Pillow の PNG エンコーダ）。
なぜ: ウィンドウ/GL に依存せず、合成済みの表示サーフェスをワンアクションで保存できるようにするため。
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from engine.render.surface import RasterSurface
from util.paths import ensure_screenshots_dir

logger = logging.getLogger(__name__)


def save_png(surface: RasterSurface, path: Path | str | None = None) -> Path:
    """サーフェスの画素（ストレートアルファ RGBA）を PNG として保存する。

    Parameters
    ----------
    surface : RasterSurface
        保存対象。
    path : Path | str | None
        出力先パス。None の場合は既定の `data/screenshot/` にタイムスタンプ名で保存。

    Returns
    -------
    Path
        保存先のファイルパス。
    """
    width, height = surface.width, surface.height
    if path is None:
        out_dir = ensure_screenshots_dir()
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = _unique_path(out_dir / f"{ts}_{width}x{height}.png")
    path = Path(path)

    try:
        surface.image.save(path, format="PNG")
    except (OSError, ValueError) as e:
        raise RuntimeError(f"PNG 書き出しに失敗: {e}") from e
    logger.info("Saved PNG: %s", path)
    return path


def _unique_path(path: Path) -> Path:
    if not path.exists():
        return path
    stem = path.stem
    suffix = path.suffix
    parent = path.parent
    i = 1
    while True:
        cand = parent / f"{stem}-{i}{suffix}"
        if not cand.exists():
            return cand
        i += 1


__all__ = ["save_png"]
