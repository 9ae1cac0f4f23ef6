"""
どこで: `engine.core` サブパッケージ。
何を: タートル状態・2D アフィン変換・フレーム駆動（Tickable/FrameClock/スケジューラ）・描画ウィンドウを提供。
なぜ: 状態と時間駆動の基盤を構成し、上位層（render/api）から再利用可能にするため。
"""
