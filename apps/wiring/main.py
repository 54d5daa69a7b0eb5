from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from prometheus_client import Counter, make_asgi_app
from pydantic import BaseModel, Field

from .config import get_settings
from .errors import InvariantViolation, MarketPairNotFoundError, WiringError
from .market_registry import load_market_registry
from .models import HubNetwork, MarketPairConfig, TokenRole, TokenRoleConfig
from .planner import build_pair_roles, plan_all, plan_market_pair
from .security import parse_stage
from .validation import collect_violations, validate

settings = get_settings()
logger = logging.getLogger(__name__)

WIRE_CONFIGS_GENERATED_TOTAL = Counter(
    'mcx_wiring_configs_generated_total',
    'Wire configurations generated by the planner API',
    ['stage', 'scope']
)
PLANNER_ERRORS_TOTAL = Counter(
    'mcx_wiring_planner_errors_total',
    'Planner requests rejected with a configuration error',
    ['kind']
)

app = FastAPI(title=settings.app_name, default_response_class=ORJSONResponse)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[x.strip() for x in settings.cors_origins.split(',') if x.strip()],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*']
)
app.mount('/metrics', make_asgi_app())


class HubNetworkRequest(BaseModel):
    eid: int = Field(gt=0)
    contract_address: str = ''


class TokenRoleRequest(BaseModel):
    token_name: str = ''
    token_symbol: str
    hub_network: HubNetworkRequest
    expansion_networks: list[int] = Field(default_factory=list)

    def to_config(self) -> TokenRoleConfig:
        return TokenRoleConfig(
            token_name=self.token_name or self.token_symbol,
            token_symbol=self.token_symbol,
            hub_network=HubNetwork(eid=self.hub_network.eid, contract_address=self.hub_network.contract_address),
            expansion_networks=tuple(self.expansion_networks)
        )


class PreviewRequest(BaseModel):
    market_pair: str = Field(default='PREVIEW', min_length=1)
    stage: str = 'testnet'
    gm: TokenRoleRequest
    glv: TokenRoleRequest
    skip_delegate: bool = False


def _raise_http(exc: WiringError) -> NoReturn:
    PLANNER_ERRORS_TOTAL.labels(kind=type(exc).__name__).inc()
    if isinstance(exc, MarketPairNotFoundError):
        raise HTTPException(
            status_code=exc.status_code,
            detail={'message': exc.detail, 'available_market_pairs': exc.available_keys}
        ) from exc
    if isinstance(exc, InvariantViolation):
        raise HTTPException(
            status_code=exc.status_code,
            detail={'message': exc.detail, 'violations': exc.violations}
        ) from exc
    raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@app.get('/health')
async def health() -> dict[str, str]:
    return {'status': 'ok'}


@app.get('/v1/market-pairs')
async def market_pairs() -> dict:
    registry = load_market_registry()
    items = []
    for key, pair in registry.items():
        items.append(
            {
                'key': key,
                'gm': {
                    'token_name': pair.gm.token_name,
                    'token_symbol': pair.gm.token_symbol,
                    'hub_eid': pair.gm.hub_network.eid,
                    'expansion_networks': list(pair.gm.expansion_networks)
                },
                'glv': {
                    'token_name': pair.glv.token_name,
                    'token_symbol': pair.glv.token_symbol,
                    'hub_eid': pair.glv.hub_network.eid,
                    'expansion_networks': list(pair.glv.expansion_networks)
                },
                'violations': collect_violations(pair)
            }
        )
    return {'market_pairs': items}


@app.get('/v1/market-pairs/{market_pair}/validation')
async def market_pair_validation(market_pair: str) -> dict:
    try:
        pair = load_market_registry().lookup(market_pair)
    except WiringError as exc:
        _raise_http(exc)
    violations = collect_violations(pair)
    return {'market_pair': market_pair, 'valid': not violations, 'violations': violations}


@app.get('/v1/market-pairs/{market_pair}/wire-config')
async def market_pair_wire_config(
    market_pair: str,
    stage: str = Query(default=settings.stage),
    token_type: str | None = Query(default=None),
    skip_delegate: bool = Query(default=settings.skip_delegate)
) -> dict:
    try:
        roles = [TokenRole.parse(token_type)] if token_type else None
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        plan = plan_market_pair(market_pair, stage, roles=roles, skip_delegate=skip_delegate)
    except WiringError as exc:
        _raise_http(exc)

    WIRE_CONFIGS_GENERATED_TOTAL.labels(stage=plan.stage.value, scope='market_pair').inc()
    return plan.to_payload()


@app.get('/v1/wire-config')
async def wire_config_all(
    stage: str = Query(default=settings.stage),
    skip_delegate: bool = Query(default=settings.skip_delegate)
) -> dict:
    try:
        plan = plan_all(stage, skip_delegate=skip_delegate)
    except WiringError as exc:
        _raise_http(exc)

    WIRE_CONFIGS_GENERATED_TOTAL.labels(stage=plan.stage.value, scope='all').inc()
    return plan.to_payload()


@app.post('/v1/preview')
async def preview(request: PreviewRequest) -> dict:
    pair = MarketPairConfig(gm=request.gm.to_config(), glv=request.glv.to_config())
    try:
        stage = parse_stage(request.stage)
        validate(pair, request.market_pair)
        graphs, failures = build_pair_roles(
            request.market_pair,
            pair,
            TokenRole,
            stage,
            skip_delegate=request.skip_delegate
        )
    except WiringError as exc:
        _raise_http(exc)

    WIRE_CONFIGS_GENERATED_TOTAL.labels(stage=stage.value, scope='preview').inc()
    return {
        'market_pair': request.market_pair,
        'stage': stage.value,
        'roles': {role.value: graph.to_payload() for role, graph in graphs.items()},
        'failures': [failure.to_payload() for failure in failures]
    }


@app.get('/')
async def root() -> dict:
    return {'service': settings.app_name, 'status': 'ok'}
