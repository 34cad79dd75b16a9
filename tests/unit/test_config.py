# PATH: tests/unit/test_config.py
"""
Unit tests for configuration loading.
"""

import tempfile
import unittest
from pathlib import Path

from config import CONFIG_DIR, load_deployment, load_scenario, load_yaml
from core.exceptions import ConfigError
from dex.pool_address import POOL_INIT_CODE_HASH
from execution.config import FlashSwapConfig, config_from_deployment, load_flash_swap_config


class TestConfigLoading(unittest.TestCase):
    """Tests for config loading functions."""

    def test_config_dir_exists(self):
        self.assertTrue(CONFIG_DIR.exists())

    def test_load_deployment(self):
        deployment = load_deployment()
        self.assertEqual(deployment["engine"]["chain_id"], 1)
        self.assertEqual(deployment["pools"]["pool_a"]["fee"], 500)
        self.assertEqual(deployment["pools"]["pool_b"]["fee"], 3000)

    def test_load_deployment_from_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "deployment.yaml"
            path.write_text("engine:\n  chain_id: 5\n", encoding="utf-8")
            self.assertEqual(load_deployment(path)["engine"]["chain_id"], 5)

    def test_load_scenario_default(self):
        scenario = load_scenario()
        self.assertIn("pool_a", scenario["pools"])
        self.assertEqual(scenario["flash"]["borrow"], "WETH")

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_yaml("does_not_exist.yaml")

    def test_non_mapping_root(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.yaml"
            path.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_yaml(path)


class TestFlashSwapConfig(unittest.TestCase):

    def test_load_default_deployment(self):
        config = load_flash_swap_config()
        self.assertEqual(config.factory_address, "0x1F98431c8aD98523631AE4a59f267346ea31F984")
        self.assertEqual(config.pool_init_code_hash, POOL_INIT_CODE_HASH)
        self.assertEqual(config.chain_id, 1)

    def test_addresses_checksummed(self):
        config = FlashSwapConfig(
            engine_address="0x" + "ab" * 20,
            factory_address="0x1f98431c8ad98523631ae4a59f267346ea31f984",
            router_address="0xe592427a0aece92de3edee1f18e0157c05861564",
        )
        self.assertEqual(config.router_address, "0xE592427A0AEce92De3Edee1F18E0157C05861564")

    def test_invalid_address_is_config_error(self):
        with self.assertRaises(ConfigError):
            FlashSwapConfig(
                engine_address="0x1234",
                factory_address="0x1f98431c8ad98523631ae4a59f267346ea31f984",
                router_address="0xe592427a0aece92de3edee1f18e0157c05861564",
            )

    def test_invalid_init_code_hash(self):
        with self.assertRaises(ConfigError):
            FlashSwapConfig.from_dict({
                "engine_address": "0x" + "ab" * 20,
                "factory_address": "0x" + "cd" * 20,
                "router_address": "0x" + "ef" * 20,
                "pool_init_code_hash": "0x1234",
            })

    def test_missing_keys(self):
        with self.assertRaises(ConfigError) as ctx:
            FlashSwapConfig.from_dict({"engine_address": "0x" + "ab" * 20})
        self.assertIn("factory_address", ctx.exception.details["missing"])

    def test_to_dict_from_dict(self):
        config = load_flash_swap_config()
        self.assertEqual(FlashSwapConfig.from_dict(config.to_dict()), config)

    def test_missing_engine_section(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "deployment.yaml"
            path.write_text("tokens: {}\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_flash_swap_config(path)

    def test_config_from_loaded_deployment(self):
        config = config_from_deployment(load_deployment())
        self.assertEqual(config, load_flash_swap_config())

    def test_config_from_deployment_without_engine(self):
        with self.assertRaises(ConfigError) as ctx:
            config_from_deployment({"tokens": {}}, "inline")
        self.assertEqual(ctx.exception.details["path"], "inline")


if __name__ == "__main__":
    unittest.main()
