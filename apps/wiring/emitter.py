from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .models import ConnectionGraph, ContractConfig, ContractEndpoint, Pathway
from .networks import OWNERSHIP_TRANSFER

logger = logging.getLogger(__name__)


def _distinct_endpoints(
    pathways: Iterable[Pathway],
    endpoints: Iterable[ContractEndpoint] = ()
) -> list[ContractEndpoint]:
    seen: dict[ContractEndpoint, None] = {}
    for endpoint in endpoints:
        seen.setdefault(endpoint, None)
    for pathway in pathways:
        seen.setdefault(pathway.endpoint_a, None)
        seen.setdefault(pathway.endpoint_b, None)
    return list(seen)


def ownership_from_table(
    endpoints: Iterable[ContractEndpoint],
    owners: Mapping[int, str] = OWNERSHIP_TRANSFER,
    skip_delegate: bool = False
) -> list[ContractConfig]:
    contracts: list[ContractConfig] = []
    for endpoint in endpoints:
        owner = owners.get(endpoint.eid)
        if owner is None:
            logger.warning('no owner configured eid=%s contract=%s', endpoint.eid, endpoint.contract_name)
        contracts.append(
            ContractConfig(
                endpoint=endpoint,
                owner=owner,
                delegate=None if skip_delegate else owner
            )
        )
    return contracts


def emit(
    pathways: Iterable[Pathway],
    owners: Mapping[int, str] = OWNERSHIP_TRANSFER,
    skip_delegate: bool = False,
    endpoints: Iterable[ContractEndpoint] = ()
) -> ConnectionGraph:
    """Flatten pathways into a graph with one ownership record per distinct endpoint.

    ``endpoints`` seeds the contract list so a hub-only role still gets its
    ownership record even though it has no pathways.
    """
    connections = list(pathways)
    contracts = ownership_from_table(
        _distinct_endpoints(connections, endpoints),
        owners=owners,
        skip_delegate=skip_delegate
    )
    return ConnectionGraph(contracts=contracts, connections=connections)


def combine(graphs: Iterable[ConnectionGraph]) -> ConnectionGraph:
    # Contract names are scoped by market pair, so graphs are concatenated as-is.
    return ConnectionGraph.combine(list(graphs))
