from __future__ import annotations

import pytest

import api


@pytest.mark.smoke
def test_public_names_are_exported() -> None:
    for name in api.__all__:
        assert hasattr(api, name), name


@pytest.mark.smoke
def test_quickstart_flow(scheduler) -> None:
    t = api.make_turtle(api.RasterSurface(40, 40), scheduler=scheduler, config=api.TurtleConfig())
    t.repeat(4, lambda: (t.fd(10), t.lt(90)))
    scheduler.tick()
    assert t.renderer.render_count == 2
    assert t.renderer.foreground.to_rgba8()[..., 3].any()
