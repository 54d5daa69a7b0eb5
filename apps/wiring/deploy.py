from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from .models import MarketPairConfig, TokenRole
from .networks import network_name_for
from .roles import (
    adapter_contract_name,
    hub_contract_address,
    is_hub_network,
    oft_contract_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeployResult:
    address: str


class DeployExecutor(Protocol):
    def deploy(
        self,
        contract_name: str,
        *,
        from_account: str,
        constructor_args: list[Any],
        skip_if_exists: bool
    ) -> DeployResult:
        ...


@dataclass
class DeploymentPlan:
    market_pair: str
    role: TokenRole
    eid: int
    network: str
    contract_name: str
    from_account: str
    constructor_args: list[Any] = field(default_factory=list)
    is_adapter: bool = False


def plan_deployment(
    market_pair_key: str,
    market_pair: MarketPairConfig,
    role: TokenRole,
    eid: int,
    endpoint_address: str,
    owner: str
) -> DeploymentPlan | None:
    """Work out which contract a role needs on ``eid`` and its constructor arguments.

    Returns None when the network is neither the role's hub nor one of its
    expansion networks.
    """
    role_config = market_pair.role(role)
    network = network_name_for(eid)

    if is_hub_network(market_pair, role, eid):
        token_address = hub_contract_address(market_pair, role, eid)
        return DeploymentPlan(
            market_pair=market_pair_key,
            role=role,
            eid=eid,
            network=network,
            contract_name=adapter_contract_name(role, market_pair_key),
            from_account=owner,
            constructor_args=[token_address, endpoint_address, owner],
            is_adapter=True
        )

    if eid in role_config.expansion_networks:
        return DeploymentPlan(
            market_pair=market_pair_key,
            role=role,
            eid=eid,
            network=network,
            contract_name=oft_contract_name(role, market_pair_key),
            from_account=owner,
            constructor_args=[role_config.token_name, role_config.token_symbol, endpoint_address, owner]
        )

    logger.info(
        'network not configured for role market_pair=%s role=%s eid=%s',
        market_pair_key,
        role.value,
        eid
    )
    return None


def log_network_info(
    network: str,
    eid: int,
    named_accounts: Mapping[str, str],
    logged_networks: set[str]
) -> bool:
    if network in logged_networks:
        return False
    logger.info('network=%s eid=%s', network, eid)
    for name, address in named_accounts.items():
        logger.info('named account %s=%s', name, address)
    logged_networks.add(network)
    return True


def deploy_role(
    executor: DeployExecutor,
    plan: DeploymentPlan,
    logged_networks: set[str],
    named_accounts: Mapping[str, str] | None = None,
    skip_if_exists: bool = True
) -> DeployResult:
    log_network_info(plan.network, plan.eid, named_accounts or {plan.role.deployer_account: plan.from_account}, logged_networks)
    logger.info(
        'deploying contract=%s network=%s adapter=%s',
        plan.contract_name,
        plan.network,
        plan.is_adapter
    )
    result = executor.deploy(
        plan.contract_name,
        from_account=plan.from_account,
        constructor_args=list(plan.constructor_args),
        skip_if_exists=skip_if_exists
    )
    logger.info(
        'deployed contract=%s network=%s address=%s',
        plan.contract_name,
        plan.network,
        result.address
    )
    return result
