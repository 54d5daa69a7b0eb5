from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from .config import get_settings
from .emitter import combine
from .errors import MissingAddressError
from .market_registry import MarketRegistry, load_market_registry
from .models import ConnectionGraph, MarketPairConfig, TokenRole
from .networks import stage_for
from .security import Stage, parse_stage
from .topology import build_role_topology
from .validation import validate

logger = logging.getLogger(__name__)


@dataclass
class RoleFailure:
    market_pair: str
    role: TokenRole
    detail: str

    def to_payload(self) -> dict[str, Any]:
        return {'market_pair': self.market_pair, 'token_type': self.role.value, 'error': self.detail}


@dataclass
class WirePlan:
    stage: Stage
    market_pairs: list[str] = field(default_factory=list)
    graph: ConnectionGraph = field(default_factory=ConnectionGraph)
    failures: list[RoleFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_payload(self) -> dict[str, Any]:
        payload = self.graph.to_payload()
        payload['stage'] = self.stage.value
        payload['market_pairs'] = list(self.market_pairs)
        payload['failures'] = [failure.to_payload() for failure in self.failures]
        return payload


def _resolve_roles(roles: Iterable[TokenRole | str] | None) -> list[TokenRole]:
    if roles is None:
        return [TokenRole.GM, TokenRole.GLV]
    return [role if isinstance(role, TokenRole) else TokenRole.parse(role) for role in roles]


def build_pair_roles(
    key: str,
    market_pair: MarketPairConfig,
    roles: Iterable[TokenRole],
    stage: str | Stage,
    skip_delegate: bool = False
) -> tuple[dict[TokenRole, ConnectionGraph], list[RoleFailure]]:
    """Build each role's graph; a role missing its hub address is reported and skipped."""
    graphs: dict[TokenRole, ConnectionGraph] = {}
    failures: list[RoleFailure] = []
    for role in roles:
        try:
            graphs[role] = build_role_topology(key, market_pair, role, stage, skip_delegate=skip_delegate)
        except MissingAddressError as exc:
            logger.error('skipping role market_pair=%s role=%s: %s', key, role.value, exc.detail)
            failures.append(RoleFailure(market_pair=key, role=role, detail=exc.detail))
    return graphs, failures


def _plan_pair_roles(
    plan: WirePlan,
    key: str,
    market_pair: MarketPairConfig,
    roles: list[TokenRole],
    skip_delegate: bool
) -> list[ConnectionGraph]:
    graphs, failures = build_pair_roles(key, market_pair, roles, plan.stage, skip_delegate)
    plan.failures.extend(failures)
    return list(graphs.values())


def plan_market_pair(
    key: str,
    stage: str | Stage,
    roles: Iterable[TokenRole | str] | None = None,
    registry: MarketRegistry | None = None,
    skip_delegate: bool | None = None
) -> WirePlan:
    if registry is None:
        registry = load_market_registry()
    if skip_delegate is None:
        skip_delegate = get_settings().skip_delegate

    market_pair = registry.lookup(key)
    validate(market_pair, key)

    plan = WirePlan(stage=parse_stage(stage), market_pairs=[key])
    plan.graph = combine(_plan_pair_roles(plan, key, market_pair, _resolve_roles(roles), skip_delegate))
    return plan


def pairs_for_stage(registry: MarketRegistry, stage: str | Stage) -> list[str]:
    stage_value = parse_stage(stage).value
    return [
        key
        for key, pair in registry.items()
        if stage_for(pair.gm.hub_network.eid) == stage_value or stage_for(pair.glv.hub_network.eid) == stage_value
    ]


def plan_all(
    stage: str | Stage,
    roles: Iterable[TokenRole | str] | None = None,
    registry: MarketRegistry | None = None,
    skip_delegate: bool | None = None
) -> WirePlan:
    if registry is None:
        registry = load_market_registry()
    if skip_delegate is None:
        skip_delegate = get_settings().skip_delegate

    plan = WirePlan(stage=parse_stage(stage))
    resolved_roles = _resolve_roles(roles)
    keys = pairs_for_stage(registry, plan.stage)

    # Every pair must pass validation before anything is built.
    for key in keys:
        validate(registry.lookup(key), key)

    graphs: list[ConnectionGraph] = []
    for key in keys:
        plan.market_pairs.append(key)
        graphs.extend(_plan_pair_roles(plan, key, registry.lookup(key), resolved_roles, skip_delegate))

    plan.graph = combine(graphs)
    logger.info(
        'planned stage=%s market_pairs=%d pathways=%d failures=%d',
        plan.stage.value,
        len(plan.market_pairs),
        len(plan.graph.connections),
        len(plan.failures)
    )
    return plan
