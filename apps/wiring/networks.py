from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

# LayerZero V2 endpoint ids
ETHEREUM_V2_MAINNET = 30101
BSC_V2_MAINNET = 30102
ARBITRUM_V2_MAINNET = 30110
BASE_V2_MAINNET = 30184
BERA_V2_MAINNET = 30362
BOTANIX_V2_MAINNET = 30376
SEPOLIA_V2_TESTNET = 40161
ARBSEP_V2_TESTNET = 40231

NETWORK_SPECS: tuple[Mapping[str, Any], ...] = tuple(
    MappingProxyType(spec)
    for spec in [
        {
            'network': 'arbitrum-mainnet',
            'eid': ARBITRUM_V2_MAINNET,
            'stage': 'mainnet',
            'rpc_env_key': 'RPC_URL_ARBITRUM_MAINNET',
            'default_rpc_url': 'https://arbitrum.gateway.tenderly.co'
        },
        {
            'network': 'base-mainnet',
            'eid': BASE_V2_MAINNET,
            'stage': 'mainnet',
            'rpc_env_key': 'RPC_URL_BASE_MAINNET',
            'default_rpc_url': 'https://base.gateway.tenderly.co'
        },
        {
            'network': 'bera-mainnet',
            'eid': BERA_V2_MAINNET,
            'stage': 'mainnet',
            'rpc_env_key': 'RPC_URL_BERA_MAINNET',
            'default_rpc_url': 'https://rpc.berachain.com'
        },
        {
            'network': 'botanix-mainnet',
            'eid': BOTANIX_V2_MAINNET,
            'stage': 'mainnet',
            'rpc_env_key': 'RPC_URL_BOTANIX_MAINNET',
            'default_rpc_url': 'https://rpc.botanixlabs.com'
        },
        {
            'network': 'bsc-mainnet',
            'eid': BSC_V2_MAINNET,
            'stage': 'mainnet',
            'rpc_env_key': 'RPC_URL_BSC_MAINNET',
            'default_rpc_url': 'https://bsc.drpc.org'
        },
        {
            'network': 'ethereum-mainnet',
            'eid': ETHEREUM_V2_MAINNET,
            'stage': 'mainnet',
            'rpc_env_key': 'RPC_URL_ETHEREUM_MAINNET',
            'default_rpc_url': 'https://mainnet.gateway.tenderly.co'
        },
        {
            'network': 'sepolia-testnet',
            'eid': SEPOLIA_V2_TESTNET,
            'stage': 'testnet',
            'rpc_env_key': 'RPC_URL_ETHEREUM_TESTNET',
            'default_rpc_url': 'https://rpc.sepolia.org/'
        },
        {
            'network': 'arbitrum-testnet',
            'eid': ARBSEP_V2_TESTNET,
            'stage': 'testnet',
            'rpc_env_key': 'RPC_URL_ARBITRUM_TESTNET',
            'default_rpc_url': 'https://sepolia-rollup.arbitrum.io/rpc'
        }
    ]
)

BLOCK_CONFIRMATIONS: Mapping[int, int] = MappingProxyType(
    {
        ARBITRUM_V2_MAINNET: 20,
        BASE_V2_MAINNET: 10,
        BERA_V2_MAINNET: 20,
        BOTANIX_V2_MAINNET: 2,
        BSC_V2_MAINNET: 20,
        ETHEREUM_V2_MAINNET: 15,
        ARBSEP_V2_TESTNET: 1,
        SEPOLIA_V2_TESTNET: 1
    }
)

_MAINNET_OWNER = '0x8D1d2e24eC641eDC6a1ebe0F3aE7af0EBC573e0D'
_TESTNET_OWNER = '0xCD9706B6B71fdC4351091B5b1D910cEe7Fde28D0'

OWNERSHIP_TRANSFER: Mapping[int, str] = MappingProxyType(
    {
        ARBITRUM_V2_MAINNET: _MAINNET_OWNER,
        BASE_V2_MAINNET: _MAINNET_OWNER,
        BERA_V2_MAINNET: _MAINNET_OWNER,
        BOTANIX_V2_MAINNET: '0x656fa39BdB5984b477FA6aB443195D72D1Accc1c',
        BSC_V2_MAINNET: _MAINNET_OWNER,
        ETHEREUM_V2_MAINNET: _MAINNET_OWNER,
        ARBSEP_V2_TESTNET: _TESTNET_OWNER,
        SEPOLIA_V2_TESTNET: _TESTNET_OWNER
    }
)

EXPANSION_NETWORKS: Mapping[str, tuple[int, ...]] = MappingProxyType(
    {
        'testnet': (SEPOLIA_V2_TESTNET,),
        'mainnet': (
            BASE_V2_MAINNET,
            BERA_V2_MAINNET,
            BSC_V2_MAINNET,
            BOTANIX_V2_MAINNET,
            ETHEREUM_V2_MAINNET
        )
    }
)


def network_name_for(eid: int) -> str:
    for spec in NETWORK_SPECS:
        if spec['eid'] == eid:
            return str(spec['network'])
    return 'unknown'


def eid_for_network(network: str) -> int | None:
    for spec in NETWORK_SPECS:
        if spec['network'] == network:
            return int(spec['eid'])
    return None


def stage_for(eid: int) -> str | None:
    for spec in NETWORK_SPECS:
        if spec['eid'] == eid:
            return str(spec['stage'])
    return None
