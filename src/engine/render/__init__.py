"""
どこで: `engine.render` サブパッケージ。
何を: 描画先サーフェス（DrawSurface/RasterSurface）・既定グリフ・合成レンダラ（TurtleRenderer）を提供。
なぜ: 状態管理（core/api）と画素合成の責務を分離し、描画先の差し替えを局所化するため。
"""
