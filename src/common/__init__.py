"""
どこで: `common` パッケージ。
何を: 設定・環境変数・ロギングなどの軽量共通基盤。
なぜ: engine/api の双方から再利用する基盤を分離し、依存の向きを単純化するため。
"""

__all__: list[str] = []
