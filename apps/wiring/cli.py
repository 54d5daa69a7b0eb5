from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import get_settings
from .deployments import scan_deployments, validation_matrix
from .errors import InvariantViolation, MarketPairNotFoundError, WiringError
from .market_registry import MarketRegistry, load_market_registry
from .models import TokenRole
from .planner import WirePlan, plan_all, plan_market_pair
from .validation import validate_registry

logger = logging.getLogger('mcx.wiring.cli')


def format_available_pairs(registry: MarketRegistry) -> str:
    keys = registry.keys()
    if not keys:
        return 'No market pairs configured.'
    width = max(len(key) for key in keys)
    lines = ['Available market pairs:']
    for key in keys:
        lines.append(f'   MARKET_PAIR={key.ljust(width)}  # {registry.lookup(key).glv.token_name}')
    lines.append('')
    lines.append('Usage examples:')
    lines.append(f"   MARKET_PAIR={'WETH_USDC'.ljust(width)} wiring-planner wire --stage mainnet")
    lines.append(f'   wiring-planner wire --market-pair {keys[0]} --token-type GLV')
    return '\n'.join(lines)


def _payload_filename(plan: WirePlan, token_type: str | None, skip_delegate: bool) -> str:
    timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H-%M-%S')
    scope = plan.market_pairs[0] if len(plan.market_pairs) == 1 else f'all-{plan.stage.value}'
    role = f'-{token_type.upper()}' if token_type else ''
    delegate = '-no-delegate' if skip_delegate else '-delegated'
    return f'wire-payloads-{scope}{role}{delegate}-{timestamp}.json'


def _write_payload(payload: dict[str, Any], out: str | None) -> None:
    body = json.dumps(payload, indent=2) + '\n'
    if out is None or out == '-':
        sys.stdout.write(body)
        return
    path = Path(out)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding='utf-8')
    print(f'generated {path}')


def _cmd_pairs(args: argparse.Namespace, registry: MarketRegistry) -> int:
    print(format_available_pairs(registry))
    return 0


def _cmd_validate(args: argparse.Namespace, registry: MarketRegistry) -> int:
    results = validate_registry(registry)
    failed = 0
    for key, violations in results.items():
        if violations:
            failed += 1
            print(f'[fail] {key}: configuration structure invalid')
            for violation in violations:
                print(f'   {violation}')
        else:
            print(f'[ok] {key}: configuration structure valid')
    return 1 if failed else 0


def _cmd_wire(args: argparse.Namespace, registry: MarketRegistry) -> int:
    settings = get_settings()
    skip_delegate = args.skip_delegate or settings.skip_delegate
    if args.save_payloads and skip_delegate:
        # Saved payloads always carry the delegate.
        logger.warning('--save-payloads forces delegate assignment, ignoring skip-delegate')
        skip_delegate = False
    roles = [TokenRole.parse(args.token_type)] if args.token_type else None

    if args.all:
        plan = plan_all(args.stage, roles=roles, registry=registry, skip_delegate=skip_delegate)
    else:
        key = args.market_pair or settings.market_pair
        if not key:
            print('No market pair selected. Pass --market-pair or set MARKET_PAIR.', file=sys.stderr)
            print(format_available_pairs(registry), file=sys.stderr)
            return 1
        plan = plan_market_pair(key, args.stage, roles=roles, registry=registry, skip_delegate=skip_delegate)

    out = args.out
    if args.save_payloads:
        out = str(Path(settings.payloads_dir) / _payload_filename(plan, args.token_type, skip_delegate))
    _write_payload(plan.to_payload(), out)

    for failure in plan.failures:
        print(f'[fail] {failure.market_pair} {failure.role.value}: {failure.detail}', file=sys.stderr)
    return 0 if plan.ok else 1


def _cmd_deployments(args: argparse.Namespace, registry: MarketRegistry) -> int:
    settings = get_settings()
    directory = args.directory or settings.deployments_dir
    networks = [n.strip() for n in args.networks.split(',') if n.strip()] if args.networks else None
    role = TokenRole.parse(args.token_type) if args.token_type else None
    grouped = scan_deployments(
        directory,
        stage=args.stage,
        network_filter=networks,
        market_pair=args.market_pair,
        role=role
    )
    if not grouped:
        print('No deployments found')
        return 1

    payload: dict[str, Any] = {}
    for pair_key, roles in sorted(grouped.items()):
        payload[pair_key] = {}
        for role_name, entries in roles.items():
            payload[pair_key][role_name] = {
                'deployments': [entry.to_payload() for entry in entries],
                'paths': [
                    {'from': source.network, 'to': destination.network}
                    for source, destination in validation_matrix(entries)
                ]
            }
    _write_payload(payload, args.out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description='Hub/spoke OFT wiring planner')
    parser.add_argument('--log-level', default=settings.log_level, help='Logging level (DEBUG, INFO, WARNING, ERROR)')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('pairs', help='List configured market pairs')
    sub.add_parser('validate', help='Check hub/expansion invariants for every market pair')

    wire = sub.add_parser('wire', help='Generate the wiring config for a market pair')
    wire.add_argument('--market-pair', default=None, help='Market pair to wire (e.g., WETH_USDC); defaults to MARKET_PAIR')
    wire.add_argument('--stage', default=settings.stage, help='Stage to wire (mainnet or testnet)')
    wire.add_argument('--token-type', default=None, help='Token type to wire (GM or GLV). If not specified, wires both.')
    wire.add_argument('--all', action='store_true', help='Wire every market pair of the stage')
    wire.add_argument('--skip-delegate', action='store_true', help='Skip delegate assignment to predefined addresses (ignored with --save-payloads)')
    wire.add_argument('--out', default=None, help='Output file (defaults to stdout)')
    wire.add_argument('--save-payloads', action='store_true', help='Write a timestamped payload file into PAYLOADS_DIR')

    deployments = sub.add_parser('deployments', help='Display deployed contracts grouped by market pair and token type')
    deployments.add_argument('--directory', default=None, help='Deployments directory (defaults to DEPLOYMENTS_DIR)')
    deployments.add_argument('--stage', default=None, choices=['mainnet', 'testnet'], help='Only show one stage')
    deployments.add_argument('--networks', default=None, help='Comma separated network filter')
    deployments.add_argument('--market-pair', default=None, help='Filter by market pair')
    deployments.add_argument('--token-type', default=None, help='Filter by token type (GM or GLV)')
    deployments.add_argument('--out', default=None, help='Output file (defaults to stdout)')
    return parser


COMMANDS = {
    'pairs': _cmd_pairs,
    'validate': _cmd_validate,
    'wire': _cmd_wire,
    'deployments': _cmd_deployments
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s %(message)s'
    )

    try:
        registry = load_market_registry()
    except WiringError as exc:
        logger.error('failed to load market registry: %s', exc.detail)
        return 1

    try:
        return COMMANDS[args.command](args, registry)
    except MarketPairNotFoundError as exc:
        print(f'Market pair {exc.key!r} not found in config', file=sys.stderr)
        print(format_available_pairs(registry), file=sys.stderr)
        return 1
    except InvariantViolation as exc:
        print('Configuration validation failed:', file=sys.stderr)
        for violation in exc.violations:
            print(f'   {violation}', file=sys.stderr)
        return 1
    except WiringError as exc:
        logger.error('%s: %s', type(exc).__name__, exc.detail)
        return 1
    except ValueError as exc:
        logger.error('%s', exc)
        return 1


if __name__ == '__main__':
    raise SystemExit(main())
