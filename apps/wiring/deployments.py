from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .models import TokenRole
from .networks import eid_for_network

logger = logging.getLogger(__name__)

DEPLOYMENT_FILE_RE = re.compile(r'^(GlvToken|MarketToken)_(Adapter|OFT)_(.+)\.json$')


@dataclass(frozen=True)
class DeploymentInfo:
    network: str
    address: str
    contract_type: str
    eid: int | None

    def to_payload(self) -> dict[str, Any]:
        return {
            'network': self.network,
            'address': self.address,
            'contract_type': self.contract_type,
            'eid': self.eid
        }


def _network_matches(network: str, stage: str | None, network_filter: set[str] | None) -> bool:
    if network_filter:
        return network in network_filter
    if stage == 'mainnet':
        return 'mainnet' in network and 'testnet' not in network
    if stage == 'testnet':
        return 'testnet' in network
    return True


def scan_deployments(
    directory: str | Path,
    stage: str | None = None,
    network_filter: list[str] | None = None,
    market_pair: str | None = None,
    role: TokenRole | None = None
) -> dict[str, dict[str, list[DeploymentInfo]]]:
    """Group ``<directory>/<network>/*.json`` deployment artifacts by market pair and token role."""
    root = Path(directory)
    grouped: dict[str, dict[str, list[DeploymentInfo]]] = {}
    if not root.is_dir():
        logger.warning('no deployments directory found path=%s', root)
        return grouped

    allowed = set(network_filter) if network_filter else None
    for network_dir in sorted(path for path in root.iterdir() if path.is_dir()):
        network = network_dir.name
        if not _network_matches(network, stage, allowed):
            continue

        for path in sorted(network_dir.glob('*.json')):
            if 'solcInputs' in path.name:
                continue
            match = DEPLOYMENT_FILE_RE.match(path.name)
            if not match:
                continue
            base_name, contract_type, pair_key = match.groups()
            token_role = TokenRole.GLV if base_name == 'GlvToken' else TokenRole.GM
            if market_pair and pair_key != market_pair:
                continue
            if role and token_role is not role:
                continue

            try:
                payload = json.loads(path.read_text(encoding='utf-8'))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning('failed to parse deployment file=%s: %s', path, exc)
                continue
            if not isinstance(payload, dict):
                logger.warning('unexpected deployment payload file=%s', path)
                continue

            roles = grouped.setdefault(pair_key, {TokenRole.GM.value: [], TokenRole.GLV.value: []})
            roles[token_role.value].append(
                DeploymentInfo(
                    network=network,
                    address=str(payload.get('address', '')).strip(),
                    contract_type=contract_type,
                    eid=eid_for_network(network)
                )
            )

    return grouped


def validation_matrix(deployments: list[DeploymentInfo]) -> list[tuple[DeploymentInfo, DeploymentInfo]]:
    """Ordered (source, destination) pairs across distinct networks."""
    return [
        (source, destination)
        for source in deployments
        for destination in deployments
        if source.network != destination.network
    ]
