from __future__ import annotations

from .errors import MissingAddressError
from .models import ContractEndpoint, MarketPairConfig, TokenRole, TokenRoleConfig


def adapter_contract_name(role: TokenRole, market_pair_key: str) -> str:
    return f'{role.contract_base_name}_Adapter_{market_pair_key}'


def oft_contract_name(role: TokenRole, market_pair_key: str) -> str:
    return f'{role.contract_base_name}_OFT_{market_pair_key}'


def participants_for(role_config: TokenRoleConfig) -> list[int]:
    """Hub first, then expansion networks in declared order."""
    return [role_config.hub_network.eid, *role_config.expansion_networks]


def contract_name_for(role_config: TokenRoleConfig, eid: int, role: TokenRole, market_pair_key: str) -> str:
    if eid == role_config.hub_network.eid:
        return adapter_contract_name(role, market_pair_key)
    return oft_contract_name(role, market_pair_key)


def endpoints_for(role_config: TokenRoleConfig, role: TokenRole, market_pair_key: str) -> list[ContractEndpoint]:
    return [
        ContractEndpoint(eid=eid, contract_name=contract_name_for(role_config, eid, role, market_pair_key))
        for eid in participants_for(role_config)
    ]


def is_hub_network(market_pair: MarketPairConfig, role: TokenRole, eid: int) -> bool:
    return market_pair.role(role).hub_network.eid == eid


def is_hub_in_networks(market_pair: MarketPairConfig, role: TokenRole, network_eids: list[int]) -> bool:
    return market_pair.role(role).hub_network.eid in network_eids


def should_deploy_to_network(market_pair: MarketPairConfig, eid: int) -> bool:
    for role in TokenRole:
        role_config = market_pair.role(role)
        if role_config.hub_network.eid == eid or eid in role_config.expansion_networks:
            return True
    return False


def hub_contract_address(market_pair: MarketPairConfig, role: TokenRole, eid: int) -> str:
    role_config = market_pair.role(role)
    hub = role_config.hub_network
    if hub.eid != eid:
        raise MissingAddressError(
            f'No contract address configured for {role.value} token on network EID {eid}. '
            f'Hub network is EID {hub.eid}'
        )
    address = hub.contract_address.strip()
    if not address:
        raise MissingAddressError(
            f'Hub contract address for {role.value} token on network EID {eid} is not configured'
        )
    return address
