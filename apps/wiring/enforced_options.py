from __future__ import annotations

from .errors import UnreachableStateError
from .models import ContractEndpoint, EnforcedOption, EnforcedOptionSet

# Executor option types
LZ_RECEIVE = 1
NATIVE_DROP = 2
COMPOSE = 3
ORDERED = 4

MSG_TYPE_SEND = 1
MSG_TYPE_SEND_AND_CALL = 2

LZ_RECEIVE_GAS = 80_000
COMPOSE_GAS = 8_000_000

ENFORCED_OPTIONS_LZ_RECEIVE: EnforcedOptionSet = (
    EnforcedOption(msg_type=MSG_TYPE_SEND, option_type=LZ_RECEIVE, gas=LZ_RECEIVE_GAS, value=0),
)

ENFORCED_OPTIONS_LZ_COMPOSE: EnforcedOptionSet = (
    EnforcedOption(msg_type=MSG_TYPE_SEND_AND_CALL, option_type=LZ_RECEIVE, gas=LZ_RECEIVE_GAS, value=0),
    EnforcedOption(msg_type=MSG_TYPE_SEND_AND_CALL, option_type=COMPOSE, gas=COMPOSE_GAS, value=0, index=0)
)

# Spokes only finalize a plain receive; the hub also runs compose logic.
ENFORCED_OPTIONS_TO_SPOKE: EnforcedOptionSet = ENFORCED_OPTIONS_LZ_RECEIVE
ENFORCED_OPTIONS_TO_HUB: EnforcedOptionSet = ENFORCED_OPTIONS_LZ_RECEIVE + ENFORCED_OPTIONS_LZ_COMPOSE


def options_for(
    endpoint_a: ContractEndpoint,
    endpoint_b: ContractEndpoint,
    hub_eid: int
) -> tuple[EnforcedOptionSet, EnforcedOptionSet]:
    """Return (options enforced at B for A->B, options enforced at A for B->A)."""
    a_is_hub = endpoint_a.eid == hub_eid
    b_is_hub = endpoint_b.eid == hub_eid

    if a_is_hub and b_is_hub:
        raise UnreachableStateError(
            f'pathway between {endpoint_a.contract_name} and {endpoint_b.contract_name} '
            f'has the hub (EID: {hub_eid}) on both sides'
        )
    if a_is_hub:
        return ENFORCED_OPTIONS_TO_SPOKE, ENFORCED_OPTIONS_TO_HUB
    if b_is_hub:
        return ENFORCED_OPTIONS_TO_HUB, ENFORCED_OPTIONS_TO_SPOKE
    return ENFORCED_OPTIONS_TO_SPOKE, ENFORCED_OPTIONS_TO_SPOKE
