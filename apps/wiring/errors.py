from __future__ import annotations

from collections.abc import Iterable


class WiringError(Exception):
    status_code = 500

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail


class ConfigurationNotFound(WiringError):
    status_code = 404


class MarketPairNotFoundError(ConfigurationNotFound):
    def __init__(self, key: str, available_keys: Iterable[str]) -> None:
        self.key = key
        self.available_keys = list(available_keys)
        super().__init__(
            f"Market pair '{key}' not found in config. "
            f"Available market pairs: {', '.join(self.available_keys) or '<none>'}"
        )


class UnknownStageError(ConfigurationNotFound):
    def __init__(self, stage: str, available_stages: Iterable[str]) -> None:
        self.stage = stage
        self.available_stages = list(available_stages)
        super().__init__(
            f"Unknown stage '{stage}'. Available stages: {', '.join(self.available_stages)}"
        )


class InvariantViolation(WiringError):
    status_code = 422

    def __init__(self, violations: Iterable[str], market_pair: str | None = None) -> None:
        self.violations = list(violations)
        self.market_pair = market_pair
        prefix = f'{market_pair}: ' if market_pair else ''
        super().__init__(
            f'{prefix}Hub networks found in expansion networks. This is not allowed. '
            + '; '.join(self.violations)
        )


class MissingAddressError(WiringError):
    status_code = 409


class UnreachableStateError(WiringError):
    """Raised when topology enumeration produces a self pathway."""


class RegistryFormatError(WiringError):
    pass
