from __future__ import annotations

import logging
from typing import Mapping, Sequence

from .emitter import emit
from .enforced_options import options_for
from .errors import UnreachableStateError
from .models import ConnectionGraph, ContractEndpoint, DvnSet, MarketPairConfig, Pathway, TokenRole
from .networks import OWNERSHIP_TRANSFER
from .roles import endpoints_for, hub_contract_address
from .security import Stage, confirmations_for, dvn_set_for

logger = logging.getLogger(__name__)


def build_pathways(
    participants: Sequence[ContractEndpoint],
    hub_eid: int,
    security: DvnSet,
    confirmation_overrides: Mapping[int, int] | None = None
) -> list[Pathway]:
    """Full mesh over ``participants``: one pathway per unordered pair, enumerated i < j.

    Each side's confirmation depth belongs to its own network, so A->B uses A's
    depth and B->A uses B's depth.
    """
    pathways: list[Pathway] = []
    for i, endpoint_a in enumerate(participants):
        for endpoint_b in participants[i + 1:]:
            if endpoint_a == endpoint_b:
                raise UnreachableStateError(
                    f'duplicate participant {endpoint_a.contract_name} (EID: {endpoint_a.eid}) '
                    'would produce a self pathway'
                )
            to_b, to_a = options_for(endpoint_a, endpoint_b, hub_eid)
            pathways.append(
                Pathway(
                    endpoint_a=endpoint_a,
                    endpoint_b=endpoint_b,
                    security=security,
                    confirmations_a_to_b=confirmations_for(endpoint_a.eid, confirmation_overrides),
                    confirmations_b_to_a=confirmations_for(endpoint_b.eid, confirmation_overrides),
                    enforced_options_a_to_b=to_b,
                    enforced_options_b_to_a=to_a
                )
            )
    return pathways


def build_role_topology(
    market_pair_key: str,
    market_pair: MarketPairConfig,
    role: TokenRole,
    stage: str | Stage,
    owners: Mapping[int, str] = OWNERSHIP_TRANSFER,
    skip_delegate: bool = False,
    dvn_override: DvnSet | None = None,
    confirmation_overrides: Mapping[int, int] | None = None
) -> ConnectionGraph:
    role_config = market_pair.role(role)
    hub_eid = role_config.hub_network.eid
    # Spokes peer with the hub adapter, which wraps the configured hub token.
    hub_address = hub_contract_address(market_pair, role, hub_eid)

    participants = endpoints_for(role_config, role, market_pair_key)
    pathways = build_pathways(
        participants,
        hub_eid,
        dvn_set_for(stage, dvn_override),
        confirmation_overrides
    )
    logger.info(
        'built topology market_pair=%s role=%s hub_token=%s participants=%d pathways=%d',
        market_pair_key,
        role.value,
        hub_address,
        len(participants),
        len(pathways)
    )
    return emit(pathways, owners=owners, skip_delegate=skip_delegate, endpoints=participants)
