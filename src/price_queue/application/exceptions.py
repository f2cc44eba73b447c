from __future__ import annotations

from price_queue.domain.value_objects.enums import FailureReason


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ValidationError(AppError):
    pass


class PriceFeedError(AppError):
    pass


class PriceSourceError(AppError):
    """A marketplace lookup failed; ``reason`` classifies why."""

    def __init__(
        self,
        reason: FailureReason,
        *,
        status: int | None = None,
        status_text: str | None = None,
    ) -> None:
        self.reason = reason
        self.status = status
        self.status_text = status_text
        detail = reason.value
        if status is not None:
            detail = f"{detail} ({status} {status_text})" if status_text else f"{detail} ({status})"
        super().__init__(detail)
