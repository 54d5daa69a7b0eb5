from __future__ import annotations

import logging

from .errors import InvariantViolation
from .market_registry import MarketRegistry
from .models import MarketPairConfig, TokenRole

logger = logging.getLogger(__name__)


def collect_violations(market_pair: MarketPairConfig) -> list[str]:
    """Return every hub/expansion overlap in the pair, checking both roles against both hubs.

    Repeated expansion networks are reported too.
    """
    violations: list[str] = []
    for expansion_role in (TokenRole.GLV, TokenRole.GM):
        expansion = market_pair.role(expansion_role).expansion_networks
        for eid in dict.fromkeys(eid for eid in expansion if expansion.count(eid) > 1):
            violations.append(f'{expansion_role.value} expansion networks list EID {eid} more than once')
        for hub_role in (TokenRole.GLV, TokenRole.GM):
            hub_eid = market_pair.role(hub_role).hub_network.eid
            if hub_eid in expansion:
                violations.append(
                    f'{hub_role.value} hub network (EID: {hub_eid}) should not be in '
                    f'{expansion_role.value} expansion networks'
                )
    return violations


def validate(market_pair: MarketPairConfig, market_pair_key: str | None = None) -> None:
    violations = collect_violations(market_pair)
    if violations:
        logger.error(
            'configuration validation failed market_pair=%s violations=%s',
            market_pair_key or '<unnamed>',
            violations
        )
        raise InvariantViolation(violations, market_pair=market_pair_key)


def validate_registry(registry: MarketRegistry) -> dict[str, list[str]]:
    return {key: collect_violations(pair) for key, pair in registry.items()}
