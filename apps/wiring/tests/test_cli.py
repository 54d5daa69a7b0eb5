import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from apps.wiring.cli import main
from apps.wiring.config import get_settings
from apps.wiring.market_registry import load_market_registry

ENV = {'MARKET_REGISTRY_PATH': '', 'MARKET_PAIR': '', 'SKIP_DELEGATE': '0', 'LOG_LEVEL': 'WARNING'}


class WiringCliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._env = patch.dict('os.environ', ENV, clear=False)
        self._env.start()
        get_settings.cache_clear()
        load_market_registry.cache_clear()

    def tearDown(self) -> None:
        self._env.stop()
        get_settings.cache_clear()
        load_market_registry.cache_clear()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def test_pairs_lists_registry(self) -> None:
        code, out, _ = self._run('pairs')

        self.assertEqual(code, 0)
        self.assertIn('MARKET_PAIR=WETH_USDC', out)
        self.assertIn('GMX Liquidity Vault [WBTC-USDC]', out)

    def test_validate_builtin_registry(self) -> None:
        code, out, _ = self._run('validate')

        self.assertEqual(code, 0)
        self.assertIn('[ok] WETH_USDC_SG', out)

    def test_wire_single_pair_to_stdout(self) -> None:
        code, out, _ = self._run('wire', '--market-pair', 'WETH_USDC_SG', '--stage', 'testnet', '--token-type', 'gm')

        payload = json.loads(out)
        self.assertEqual(code, 0)
        self.assertEqual(payload['stage'], 'testnet')
        self.assertEqual(len(payload['contracts']), 2)
        self.assertEqual(len(payload['connections']), 2)
        self.assertIn('delegate', payload['contracts'][0]['config'])

    def test_wire_without_market_pair_prints_usage(self) -> None:
        code, _, err = self._run('wire')

        self.assertEqual(code, 1)
        self.assertIn('No market pair selected', err)
        self.assertIn('Available market pairs:', err)

    def test_wire_unknown_market_pair(self) -> None:
        code, _, err = self._run('wire', '--market-pair', 'DOGE_USDC')

        self.assertEqual(code, 1)
        self.assertIn("'DOGE_USDC' not found", err)
        self.assertIn('MARKET_PAIR=WETH_USDC', err)

    def test_wire_rejects_bad_token_type(self) -> None:
        code, out, _ = self._run('wire', '--market-pair', 'WETH_USDC', '--token-type', 'LP')

        self.assertEqual(code, 1)
        self.assertEqual(out, '')

    def test_wire_all_to_file_without_delegate(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / 'nested' / 'wire.json'

            code, out, _ = self._run('wire', '--all', '--stage', 'testnet', '--skip-delegate', '--out', str(target))
            payload = json.loads(target.read_text(encoding='utf-8'))

        self.assertEqual(code, 0)
        self.assertIn('generated', out)
        self.assertEqual(payload['market_pairs'], ['WETH_USDC_SG'])
        self.assertTrue(all('delegate' not in c['config'] for c in payload['contracts']))

    def test_wire_fails_on_invalid_registry_pair(self) -> None:
        registry = {
            'market_pairs': {
                'BROKEN': {
                    'GM': {
                        'token_symbol': 'GM',
                        'hub_network': {'eid': 40231, 'contract_address': ''},
                        'expansion_networks': [40231]
                    },
                    'GLV': {
                        'token_symbol': 'GLV',
                        'hub_network': {'eid': 40231, 'contract_address': ''},
                        'expansion_networks': []
                    }
                }
            }
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'registry.json'
            path.write_text(json.dumps(registry), encoding='utf-8')
            with patch.dict('os.environ', {'MARKET_REGISTRY_PATH': str(path)}, clear=False):
                get_settings.cache_clear()
                load_market_registry.cache_clear()
                code, _, err = self._run('wire', '--market-pair', 'BROKEN', '--stage', 'testnet')

        self.assertEqual(code, 1)
        self.assertIn('GM hub network (EID: 40231) should not be in GM expansion networks', err)

    def test_deployments_listing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            network_dir = Path(tmp) / 'arbitrum-testnet'
            network_dir.mkdir()
            (network_dir / 'MarketToken_Adapter_WETH_USDC_SG.json').write_text(
                json.dumps({'address': '0xA1'}),
                encoding='utf-8'
            )

            code, out, _ = self._run('deployments', '--directory', tmp)
            empty_code, empty_out, _ = self._run('deployments', '--directory', tmp, '--stage', 'mainnet')

        payload = json.loads(out)
        self.assertEqual(code, 0)
        self.assertEqual(payload['WETH_USDC_SG']['GM']['deployments'][0]['address'], '0xA1')
        self.assertEqual(payload['WETH_USDC_SG']['GM']['paths'], [])
        self.assertEqual(empty_code, 1)
        self.assertIn('No deployments found', empty_out)

    def test_save_payloads_forces_delegate(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with patch.dict('os.environ', {'PAYLOADS_DIR': tmp}, clear=False):
                get_settings.cache_clear()
                with self.assertLogs('mcx.wiring.cli', level='WARNING') as captured:
                    code, out, _ = self._run(
                        'wire', '--market-pair', 'WETH_USDC_SG', '--stage', 'testnet',
                        '--save-payloads', '--skip-delegate'
                    )
            saved = list(Path(tmp).glob('wire-payloads-*.json'))
            payload = json.loads(saved[0].read_text(encoding='utf-8'))

        self.assertEqual(code, 0)
        self.assertIn('generated', out)
        self.assertEqual(len(saved), 1)
        self.assertIn('-delegated-', saved[0].name)
        self.assertIn('forces delegate assignment', captured.output[0])
        config = payload['contracts'][0]['config']
        self.assertEqual(config['delegate'], config['owner'])
