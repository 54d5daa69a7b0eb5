from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from web3 import Web3

from .config import get_settings
from .errors import MarketPairNotFoundError, RegistryFormatError
from .models import HubNetwork, MarketPairConfig, TokenRoleConfig
from .networks import ARBITRUM_V2_MAINNET, ARBSEP_V2_TESTNET, EXPANSION_NETWORKS

logger = logging.getLogger(__name__)

WETH_USDC = MarketPairConfig(
    gm=TokenRoleConfig(
        token_name='GM WETH-USDC',
        token_symbol='GM WETH-USDC',
        hub_network=HubNetwork(
            eid=ARBITRUM_V2_MAINNET,
            contract_address='0x70d95587d40a2caf56bd97485ab3eec10bee6336'
        ),
        expansion_networks=EXPANSION_NETWORKS['mainnet']
    ),
    glv=TokenRoleConfig(
        token_name='GMX Liquidity Vault [WETH-USDC]',
        token_symbol='GLV [WETH-USDC]',
        hub_network=HubNetwork(
            eid=ARBITRUM_V2_MAINNET,
            contract_address='0x528A5bac7E746C9A509A1f4F6dF58A03d44279F9'
        ),
        expansion_networks=EXPANSION_NETWORKS['mainnet']
    )
)

WBTC_USDC = MarketPairConfig(
    gm=TokenRoleConfig(
        token_name='GM WBTC-USDC',
        token_symbol='GM WBTC-USDC',
        hub_network=HubNetwork(
            eid=ARBITRUM_V2_MAINNET,
            contract_address='0x47c031236e19d024b42f8ae6780e44a573170703'
        ),
        expansion_networks=EXPANSION_NETWORKS['mainnet']
    ),
    glv=TokenRoleConfig(
        token_name='GMX Liquidity Vault [WBTC-USDC]',
        token_symbol='GLV [WBTC-USDC]',
        hub_network=HubNetwork(
            eid=ARBITRUM_V2_MAINNET,
            contract_address='0xdF03EEd325b82bC1d4Db8b49c30ecc9E05104b96'
        ),
        expansion_networks=EXPANSION_NETWORKS['mainnet']
    )
)

WETH_USDC_SG = MarketPairConfig(
    gm=TokenRoleConfig(
        token_name='GM WETH-USDC.SG',
        token_symbol='GM WETH-USDC.SG',
        hub_network=HubNetwork(
            eid=ARBSEP_V2_TESTNET,
            contract_address='0xb6fC4C9eB02C35A134044526C62bb15014Ac0Bcc'
        ),
        expansion_networks=EXPANSION_NETWORKS['testnet']
    ),
    glv=TokenRoleConfig(
        token_name='GMX Liquidity Vault [WETH-USDC.SG]',
        token_symbol='GLV [WETH-USDC.SG]',
        hub_network=HubNetwork(
            eid=ARBSEP_V2_TESTNET,
            contract_address='0xAb3567e55c205c62B141967145F37b7695a9F854'
        ),
        expansion_networks=EXPANSION_NETWORKS['testnet']
    )
)

BUILTIN_MARKET_PAIRS: Mapping[str, MarketPairConfig] = MappingProxyType(
    {
        'WETH_USDC': WETH_USDC,
        'WBTC_USDC': WBTC_USDC,
        'WETH_USDC_SG': WETH_USDC_SG
    }
)


class MarketRegistry:
    """Immutable lookup from market-pair key to its GM/GLV token configuration."""

    def __init__(self, market_pairs: Mapping[str, MarketPairConfig]) -> None:
        self._pairs: Mapping[str, MarketPairConfig] = MappingProxyType(dict(market_pairs))

    def lookup(self, key: str) -> MarketPairConfig:
        pair = self._pairs.get(key)
        if pair is None:
            raise MarketPairNotFoundError(key, self.keys())
        return pair

    def keys(self) -> list[str]:
        return list(self._pairs.keys())

    def items(self) -> list[tuple[str, MarketPairConfig]]:
        return list(self._pairs.items())

    def __contains__(self, key: object) -> bool:
        return key in self._pairs

    def __iter__(self) -> Iterator[str]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_registry_path(path_value: str) -> Path:
    path = Path(path_value)
    if path.is_absolute():
        return path
    return _repo_root() / path


def _normalize_address(value: Any) -> str:
    address = str(value or '').strip()
    if address and Web3.is_address(address):
        return Web3.to_checksum_address(address)
    return address


def _parse_eid(key: str, role_name: str, value: Any) -> int:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise RegistryFormatError(f'{key}.{role_name}: invalid endpoint id {value!r}')
    return value


def _parse_role(key: str, role_name: str, raw: Any) -> TokenRoleConfig:
    if not isinstance(raw, dict):
        raise RegistryFormatError(f'{key}.{role_name}: expected an object')
    hub = raw.get('hub_network')
    if not isinstance(hub, dict):
        raise RegistryFormatError(f'{key}.{role_name}: missing hub_network')
    expansion = raw.get('expansion_networks', [])
    if not isinstance(expansion, list):
        raise RegistryFormatError(f'{key}.{role_name}: expansion_networks must be a list')

    hub_eid = _parse_eid(key, role_name, hub.get('eid'))
    expansion_eids = tuple(_parse_eid(key, role_name, eid) for eid in expansion)
    if len(set(expansion_eids)) != len(expansion_eids):
        raise RegistryFormatError(f'{key}.{role_name}: expansion_networks contains duplicate endpoint ids')

    symbol = str(raw.get('token_symbol', '')).strip()
    return TokenRoleConfig(
        token_name=str(raw.get('token_name', '')).strip() or symbol,
        token_symbol=symbol,
        hub_network=HubNetwork(eid=hub_eid, contract_address=_normalize_address(hub.get('contract_address'))),
        expansion_networks=expansion_eids
    )


def parse_market_pairs(payload: Any) -> dict[str, MarketPairConfig]:
    if not isinstance(payload, dict) or not isinstance(payload.get('market_pairs'), dict):
        raise RegistryFormatError("registry payload must contain a 'market_pairs' object")

    pairs: dict[str, MarketPairConfig] = {}
    for key, raw_pair in payload['market_pairs'].items():
        if not isinstance(raw_pair, dict):
            raise RegistryFormatError(f'{key}: expected an object with GM and GLV entries')
        pairs[str(key)] = MarketPairConfig(
            gm=_parse_role(key, 'GM', raw_pair.get('GM')),
            glv=_parse_role(key, 'GLV', raw_pair.get('GLV'))
        )
    return pairs


@lru_cache(maxsize=1)
def load_market_registry() -> MarketRegistry:
    settings = get_settings()
    if not settings.market_registry_path:
        return MarketRegistry(BUILTIN_MARKET_PAIRS)

    path = _resolve_registry_path(settings.market_registry_path)
    if not path.exists():
        logger.warning('market registry file not found path=%s, using built-in pairs', path)
        return MarketRegistry(BUILTIN_MARKET_PAIRS)

    try:
        payload = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as exc:
        raise RegistryFormatError(f'{path}: {exc}') from exc

    registry = MarketRegistry(parse_market_pairs(payload))
    logger.info('loaded market registry path=%s pairs=%d', path, len(registry))
    return registry
