import unittest

from apps.wiring.errors import UnknownStageError
from apps.wiring.models import DvnSet
from apps.wiring.networks import ARBITRUM_V2_MAINNET, BOTANIX_V2_MAINNET, SEPOLIA_V2_TESTNET
from apps.wiring.security import Stage, confirmations_for, dvn_set_for, parse_stage


class SecurityConfigTests(unittest.TestCase):
    def test_confirmations_table(self) -> None:
        self.assertEqual(confirmations_for(ARBITRUM_V2_MAINNET), 20)
        self.assertEqual(confirmations_for(BOTANIX_V2_MAINNET), 2)
        self.assertEqual(confirmations_for(SEPOLIA_V2_TESTNET), 1)

    def test_unknown_network_has_no_minimum(self) -> None:
        self.assertEqual(confirmations_for(999), 0)

    def test_confirmation_override(self) -> None:
        self.assertEqual(confirmations_for(ARBITRUM_V2_MAINNET, {ARBITRUM_V2_MAINNET: 64}), 64)
        self.assertEqual(confirmations_for(SEPOLIA_V2_TESTNET, {ARBITRUM_V2_MAINNET: 64}), 1)

    def test_dvn_sets_per_stage(self) -> None:
        testnet = dvn_set_for('testnet')
        mainnet = dvn_set_for(Stage.MAINNET)

        self.assertEqual(testnet.required, ('LayerZero Labs',))
        self.assertEqual(testnet.optional, ())
        self.assertEqual(testnet.optional_threshold, 0)
        self.assertEqual(mainnet.required, ('LayerZero Labs', 'Canary'))
        self.assertEqual(mainnet.optional, ('Deutsche Telekom', 'Horizen'))
        self.assertEqual(mainnet.optional_threshold, 1)

    def test_dvn_override(self) -> None:
        override = DvnSet(required=('Nethermind',))

        self.assertIs(dvn_set_for('mainnet', override), override)

    def test_unknown_stage(self) -> None:
        with self.assertRaises(UnknownStageError) as ctx:
            parse_stage('sandbox')

        self.assertEqual(ctx.exception.available_stages, ['mainnet', 'testnet'])
        self.assertIs(parse_stage(' Mainnet '), Stage.MAINNET)
