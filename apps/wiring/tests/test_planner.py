import unittest

from apps.wiring.errors import InvariantViolation, MarketPairNotFoundError, UnknownStageError
from apps.wiring.market_registry import BUILTIN_MARKET_PAIRS, WETH_USDC, MarketRegistry
from apps.wiring.models import HubNetwork, MarketPairConfig, TokenRole, TokenRoleConfig
from apps.wiring.networks import ARBITRUM_V2_MAINNET, BASE_V2_MAINNET
from apps.wiring.planner import pairs_for_stage, plan_all, plan_market_pair
from apps.wiring.security import Stage


class PlannerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = MarketRegistry(BUILTIN_MARKET_PAIRS)

    def test_plans_both_roles_of_a_pair(self) -> None:
        plan = plan_market_pair('WETH_USDC', 'mainnet', registry=self.registry, skip_delegate=False)

        self.assertTrue(plan.ok)
        self.assertIs(plan.stage, Stage.MAINNET)
        self.assertEqual(len(plan.graph.connections), 30)
        self.assertEqual(len(plan.graph.contracts), 12)
        payload = plan.to_payload()
        self.assertEqual(payload['market_pairs'], ['WETH_USDC'])
        self.assertEqual(len(payload['connections']), 60)
        self.assertEqual(payload['failures'], [])

    def test_plans_single_token_type(self) -> None:
        plan = plan_market_pair('WETH_USDC', 'mainnet', roles=['glv'], registry=self.registry, skip_delegate=False)

        self.assertEqual(len(plan.graph.connections), 15)
        self.assertTrue(all(c.endpoint.contract_name.startswith('GlvToken_') for c in plan.graph.contracts))

    def test_unknown_pair_fails(self) -> None:
        with self.assertRaises(MarketPairNotFoundError):
            plan_market_pair('NOPE', 'mainnet', registry=self.registry, skip_delegate=False)

    def test_unknown_stage_fails(self) -> None:
        with self.assertRaises(UnknownStageError):
            plan_market_pair('WETH_USDC', 'sandbox', registry=self.registry, skip_delegate=False)

    def test_invariant_violation_aborts_before_building(self) -> None:
        broken = MarketPairConfig(
            gm=WETH_USDC.gm,
            glv=TokenRoleConfig(
                token_name='GLV',
                token_symbol='GLV',
                hub_network=WETH_USDC.glv.hub_network,
                expansion_networks=(BASE_V2_MAINNET, ARBITRUM_V2_MAINNET)
            )
        )
        registry = MarketRegistry({'BROKEN': broken})

        with self.assertRaises(InvariantViolation) as ctx:
            plan_market_pair('BROKEN', 'mainnet', registry=registry, skip_delegate=False)

        self.assertEqual(len(ctx.exception.violations), 2)

    def test_missing_address_is_isolated_to_its_role(self) -> None:
        pair = MarketPairConfig(
            gm=TokenRoleConfig(
                token_name='GM',
                token_symbol='GM',
                hub_network=HubNetwork(eid=ARBITRUM_V2_MAINNET, contract_address=''),
                expansion_networks=(BASE_V2_MAINNET,)
            ),
            glv=WETH_USDC.glv
        )
        registry = MarketRegistry({'PARTIAL': pair, 'WETH_USDC': WETH_USDC})

        plan = plan_all('mainnet', registry=registry, skip_delegate=False)

        self.assertFalse(plan.ok)
        self.assertEqual(len(plan.failures), 1)
        self.assertEqual(plan.failures[0].market_pair, 'PARTIAL')
        self.assertIs(plan.failures[0].role, TokenRole.GM)
        # PARTIAL GLV (15) + WETH_USDC GM and GLV (15 each)
        self.assertEqual(len(plan.graph.connections), 45)

    def test_plan_all_is_scoped_to_stage(self) -> None:
        self.assertEqual(pairs_for_stage(self.registry, 'mainnet'), ['WETH_USDC', 'WBTC_USDC'])

        plan = plan_all('testnet', registry=self.registry, skip_delegate=True)

        self.assertEqual(plan.market_pairs, ['WETH_USDC_SG'])
        self.assertEqual(len(plan.graph.connections), 2)
        self.assertEqual(len(plan.graph.contracts), 4)
        self.assertTrue(all(c.delegate is None for c in plan.graph.contracts))

    def test_plan_all_keeps_pairs_separate(self) -> None:
        plan = plan_all('mainnet', registry=self.registry, skip_delegate=False)

        self.assertEqual(len(plan.graph.connections), 60)
        names = {c.endpoint.contract_name for c in plan.graph.contracts}
        self.assertIn('MarketToken_Adapter_WBTC_USDC', names)
        self.assertIn('GlvToken_OFT_WETH_USDC', names)

    def test_repeated_expansion_network_is_a_configuration_error(self) -> None:
        duplicated = MarketPairConfig(
            gm=WETH_USDC.gm,
            glv=TokenRoleConfig(
                token_name='GLV',
                token_symbol='GLV',
                hub_network=WETH_USDC.glv.hub_network,
                expansion_networks=(BASE_V2_MAINNET, BASE_V2_MAINNET)
            )
        )
        registry = MarketRegistry({'DUP': duplicated, 'WETH_USDC': WETH_USDC})

        with self.assertRaises(InvariantViolation) as ctx:
            plan_all('mainnet', registry=registry, skip_delegate=False)

        self.assertEqual(ctx.exception.market_pair, 'DUP')
        self.assertEqual(ctx.exception.violations, [f'GLV expansion networks list EID {BASE_V2_MAINNET} more than once'])
        self.assertEqual(ctx.exception.status_code, 422)
