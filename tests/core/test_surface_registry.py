from __future__ import annotations

import pytest

from engine.core.surface_registry import (
    list_surfaces,
    register_surface,
    resolve_surface,
    unregister_surface,
)
from engine.render.surface import RasterSurface


def test_register_and_resolve_with_exact_keys() -> None:
    s = RasterSurface(4, 4)
    assert register_surface("mainCanvas", s) is s
    assert resolve_surface("mainCanvas") is s
    assert resolve_surface("main_canvas") is None
    assert resolve_surface("maincanvas") is None
    assert list_surfaces() == ["mainCanvas"]


def test_resolve_missing_or_empty_returns_none() -> None:
    assert resolve_surface("nope") is None
    assert resolve_surface("") is None


def test_register_rejects_empty_and_non_str_names() -> None:
    with pytest.raises(ValueError):
        register_surface("", RasterSurface(2, 2))
    with pytest.raises(TypeError):
        register_surface(1, RasterSurface(2, 2))  # type: ignore[arg-type]


def test_duplicate_requires_replace() -> None:
    a, b = RasterSurface(2, 2), RasterSurface(2, 2)
    register_surface("main", a)
    register_surface("main", a)  # 同一オブジェクトの再登録は許容
    with pytest.raises(ValueError):
        register_surface("main", b)
    register_surface("main", b, replace=True)
    assert resolve_surface("main") is b


def test_unregister_is_noop_for_unknown() -> None:
    register_surface("x", RasterSurface(2, 2))
    unregister_surface("x")
    unregister_surface("x")
    assert resolve_surface("x") is None
