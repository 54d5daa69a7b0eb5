from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .errors import UnknownStageError
from .models import DvnSet
from .networks import BLOCK_CONFIRMATIONS


class Stage(str, Enum):
    MAINNET = 'mainnet'
    TESTNET = 'testnet'


DVN_CONFIGS: Mapping[Stage, DvnSet] = MappingProxyType(
    {
        Stage.TESTNET: DvnSet(required=('LayerZero Labs',)),
        Stage.MAINNET: DvnSet(
            required=('LayerZero Labs', 'Canary'),
            optional=('Deutsche Telekom', 'Horizen'),
            optional_threshold=1
        )
    }
)


def parse_stage(value: str | Stage) -> Stage:
    if isinstance(value, Stage):
        return value
    try:
        return Stage(str(value).strip().lower())
    except ValueError:
        raise UnknownStageError(str(value), [stage.value for stage in Stage]) from None


def confirmations_for(eid: int, overrides: Mapping[int, int] | None = None) -> int:
    """Required block confirmations for messages leaving ``eid``; 0 when unspecified."""
    if overrides and eid in overrides:
        return int(overrides[eid])
    return BLOCK_CONFIRMATIONS.get(eid, 0)


def dvn_set_for(stage: str | Stage, override: DvnSet | None = None) -> DvnSet:
    if override is not None:
        return override
    return DVN_CONFIGS[parse_stage(stage)]
