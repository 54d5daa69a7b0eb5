from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TokenRole(str, Enum):
    GM = 'GM'
    GLV = 'GLV'

    @property
    def contract_base_name(self) -> str:
        return 'MarketToken' if self is TokenRole.GM else 'GlvToken'

    @property
    def deployer_account(self) -> str:
        return 'deployerGM' if self is TokenRole.GM else 'deployerGLV'

    @classmethod
    def parse(cls, value: str) -> 'TokenRole':
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f'Invalid token type: {value}. Must be GM or GLV') from None


@dataclass(frozen=True)
class HubNetwork:
    eid: int
    contract_address: str


@dataclass(frozen=True)
class TokenRoleConfig:
    token_name: str
    token_symbol: str
    hub_network: HubNetwork
    expansion_networks: tuple[int, ...] = ()


@dataclass(frozen=True)
class MarketPairConfig:
    gm: TokenRoleConfig
    glv: TokenRoleConfig

    def role(self, role: TokenRole) -> TokenRoleConfig:
        return self.gm if role is TokenRole.GM else self.glv


@dataclass(frozen=True)
class ContractEndpoint:
    eid: int
    contract_name: str

    def to_payload(self) -> dict[str, Any]:
        return {'eid': self.eid, 'contractName': self.contract_name}


@dataclass(frozen=True)
class EnforcedOption:
    msg_type: int
    option_type: int
    gas: int
    value: int = 0
    index: int | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            'msgType': self.msg_type,
            'optionType': self.option_type,
            'gas': self.gas,
            'value': self.value
        }
        if self.index is not None:
            payload['index'] = self.index
        return payload


EnforcedOptionSet = tuple[EnforcedOption, ...]


@dataclass(frozen=True)
class DvnSet:
    required: tuple[str, ...]
    optional: tuple[str, ...] = ()
    optional_threshold: int = 0

    def uln_config(self, confirmations: int) -> dict[str, Any]:
        return {
            'confirmations': confirmations,
            'requiredDVNs': list(self.required),
            'optionalDVNs': list(self.optional),
            'optionalDVNThreshold': self.optional_threshold
        }


@dataclass(frozen=True)
class Pathway:
    endpoint_a: ContractEndpoint
    endpoint_b: ContractEndpoint
    security: DvnSet
    confirmations_a_to_b: int
    confirmations_b_to_a: int
    enforced_options_a_to_b: EnforcedOptionSet
    enforced_options_b_to_a: EnforcedOptionSet

    @property
    def endpoints(self) -> frozenset[ContractEndpoint]:
        return frozenset((self.endpoint_a, self.endpoint_b))

    def directional_payloads(self) -> list[dict[str, Any]]:
        # A->B is configured on A: send with A's depth, enforce B's receive budget.
        return [
            {
                'from': self.endpoint_a.to_payload(),
                'to': self.endpoint_b.to_payload(),
                'config': {
                    'sendConfig': {'ulnConfig': self.security.uln_config(self.confirmations_a_to_b)},
                    'receiveConfig': {'ulnConfig': self.security.uln_config(self.confirmations_b_to_a)},
                    'enforcedOptions': [option.to_payload() for option in self.enforced_options_a_to_b]
                }
            },
            {
                'from': self.endpoint_b.to_payload(),
                'to': self.endpoint_a.to_payload(),
                'config': {
                    'sendConfig': {'ulnConfig': self.security.uln_config(self.confirmations_b_to_a)},
                    'receiveConfig': {'ulnConfig': self.security.uln_config(self.confirmations_a_to_b)},
                    'enforcedOptions': [option.to_payload() for option in self.enforced_options_b_to_a]
                }
            }
        ]


@dataclass(frozen=True)
class ContractConfig:
    endpoint: ContractEndpoint
    owner: str | None = None
    delegate: str | None = None

    def to_payload(self) -> dict[str, Any]:
        config: dict[str, Any] = {}
        if self.owner:
            config['owner'] = self.owner
        if self.delegate:
            config['delegate'] = self.delegate
        return {'contract': self.endpoint.to_payload(), 'config': config}


@dataclass
class ConnectionGraph:
    contracts: list[ContractConfig] = field(default_factory=list)
    connections: list[Pathway] = field(default_factory=list)

    @classmethod
    def combine(cls, graphs: list['ConnectionGraph']) -> 'ConnectionGraph':
        combined = cls()
        for graph in graphs:
            combined.contracts.extend(graph.contracts)
            combined.connections.extend(graph.connections)
        return combined

    def to_payload(self) -> dict[str, Any]:
        connections: list[dict[str, Any]] = []
        for pathway in self.connections:
            connections.extend(pathway.directional_payloads())
        return {
            'contracts': [contract.to_payload() for contract in self.contracts],
            'connections': connections
        }
