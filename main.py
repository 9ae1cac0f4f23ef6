from __future__ import annotations

from api import run

CANVAS_SIZE = 400


def draw(t) -> None:
    """デモ描画関数（36 枚の花びら。ESC で終了、S で PNG 保存）。"""
    t.background("#fafafa")

    def petal() -> None:
        t.repeat(2, lambda: (t.repeat(9, lambda: (t.forward(12), t.left(10))), t.left(90)))
        t.left(10)

    t.color("#1565c0")
    t.repeat(36, petal)

    t.pen_up()
    t.goto(0, -150)
    t.pen_down()
    t.color("#c62828")
    t.repeat(4, lambda: (t.forward(60), t.left(90)))
    t.home()


if __name__ == "__main__":
    run(draw, canvas_size=(CANVAS_SIZE, CANVAS_SIZE))
