from __future__ import annotations


class StaticWalletContext:
    """Implements application.ports.market.WalletContext with a fixed currency."""

    def __init__(self, currency_id: int) -> None:
        self._currency_id = currency_id

    def currency_id(self) -> int:
        return self._currency_id
