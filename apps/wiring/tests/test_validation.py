import unittest

from apps.wiring.errors import InvariantViolation
from apps.wiring.market_registry import BUILTIN_MARKET_PAIRS, MarketRegistry
from apps.wiring.models import HubNetwork, MarketPairConfig, TokenRoleConfig
from apps.wiring.validation import collect_violations, validate, validate_registry


def _role(hub: int, expansion: tuple[int, ...], symbol: str = 'TKN') -> TokenRoleConfig:
    return TokenRoleConfig(
        token_name=symbol,
        token_symbol=symbol,
        hub_network=HubNetwork(eid=hub, contract_address='0x0000000000000000000000000000000000000001'),
        expansion_networks=expansion
    )


class InvariantValidatorTests(unittest.TestCase):
    def test_builtin_pairs_are_valid(self) -> None:
        results = validate_registry(MarketRegistry(BUILTIN_MARKET_PAIRS))

        self.assertEqual(set(results), {'WETH_USDC', 'WBTC_USDC', 'WETH_USDC_SG'})
        self.assertTrue(all(not violations for violations in results.values()))

    def test_hub_in_own_expansion_is_reported(self) -> None:
        pair = MarketPairConfig(gm=_role(101, (202, 101)), glv=_role(303, (202,)))

        violations = collect_violations(pair)

        self.assertEqual(violations, ['GM hub network (EID: 101) should not be in GM expansion networks'])
        with self.assertRaises(InvariantViolation) as ctx:
            validate(pair, 'X_PAIR')
        self.assertEqual(ctx.exception.violations, violations)
        self.assertEqual(ctx.exception.market_pair, 'X_PAIR')
        self.assertEqual(ctx.exception.status_code, 422)

    def test_cross_role_hub_is_reported(self) -> None:
        pair = MarketPairConfig(gm=_role(101, (202,)), glv=_role(303, (101,)))

        violations = collect_violations(pair)

        self.assertEqual(violations, ['GM hub network (EID: 101) should not be in GLV expansion networks'])

    def test_all_violations_are_accumulated(self) -> None:
        pair = MarketPairConfig(gm=_role(101, (101, 303)), glv=_role(303, (101, 303)))

        with self.assertRaises(InvariantViolation) as ctx:
            validate(pair)

        self.assertEqual(len(ctx.exception.violations), 4)
        self.assertIn('GLV hub network (EID: 303) should not be in GLV expansion networks', ctx.exception.violations)
        self.assertIn('GM hub network (EID: 101) should not be in GLV expansion networks', ctx.exception.violations)
        self.assertIn('GLV hub network (EID: 303) should not be in GM expansion networks', ctx.exception.violations)
        self.assertIn('GM hub network (EID: 101) should not be in GM expansion networks', ctx.exception.violations)

    def test_shared_hub_without_overlap_is_valid(self) -> None:
        pair = MarketPairConfig(gm=_role(101, (202, 303)), glv=_role(101, (202,)))

        self.assertEqual(collect_violations(pair), [])
        validate(pair)

    def test_repeated_expansion_network_is_reported(self) -> None:
        pair = MarketPairConfig(gm=_role(101, (202, 303, 202, 202)), glv=_role(101, (202,)))

        violations = collect_violations(pair)

        self.assertEqual(violations, ['GM expansion networks list EID 202 more than once'])
        with self.assertRaises(InvariantViolation):
            validate(pair, 'DUP')
