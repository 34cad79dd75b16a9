# PATH: execution/config.py
"""
execution/config.py - Engine deployment configuration.

The engine never reads module-level addresses: a FlashSwapConfig is
built once (from YAML or code) and passed in at construction.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from config import CONFIG_DIR, load_deployment
from core.exceptions import ConfigError, ValidationError
from core.validators import normalize_address
from dex.pool_address import POOL_INIT_CODE_HASH


def _normalize_hash(value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError("pool_init_code_hash must be a hex string", {"value": repr(value)})
    hex_data = value[2:] if value.startswith("0x") else value
    try:
        raw = bytes.fromhex(hex_data)
    except ValueError as e:
        raise ConfigError("pool_init_code_hash is not hex", {"value": value}) from e
    if len(raw) != 32:
        raise ConfigError("pool_init_code_hash must be 32 bytes", {"length": len(raw)})
    return "0x" + raw.hex()


@dataclass(frozen=True)
class FlashSwapConfig:
    """Addresses and identity scheme the engine is deployed against."""

    engine_address: str
    factory_address: str
    router_address: str
    pool_init_code_hash: str = POOL_INIT_CODE_HASH
    chain_id: int = 1

    def __post_init__(self):
        try:
            for name in ("engine_address", "factory_address", "router_address"):
                object.__setattr__(self, name, normalize_address(getattr(self, name), name))
        except ValidationError as e:
            raise ConfigError(e.message, e.details) from e
        object.__setattr__(self, "pool_init_code_hash", _normalize_hash(self.pool_init_code_hash))
        if not isinstance(self.chain_id, int) or self.chain_id <= 0:
            raise ConfigError("chain_id must be a positive int", {"chain_id": self.chain_id})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FlashSwapConfig":
        missing = [
            k for k in ("engine_address", "factory_address", "router_address")
            if k not in data
        ]
        if missing:
            raise ConfigError(f"Missing config keys: {missing}", {"missing": missing})
        return cls(
            engine_address=data["engine_address"],
            factory_address=data["factory_address"],
            router_address=data["router_address"],
            pool_init_code_hash=data.get("pool_init_code_hash", POOL_INIT_CODE_HASH),
            chain_id=data.get("chain_id", 1),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine_address": self.engine_address,
            "factory_address": self.factory_address,
            "router_address": self.router_address,
            "pool_init_code_hash": self.pool_init_code_hash,
            "chain_id": self.chain_id,
        }


def load_flash_swap_config(config_path: Path | None = None) -> FlashSwapConfig:
    """
    Load engine configuration from the `engine` section of a YAML file.

    Args:
        config_path: Path to YAML (default: config/deployment.yaml)

    Returns:
        FlashSwapConfig
    """
    if config_path is None:
        config_path = CONFIG_DIR / "deployment.yaml"
    return config_from_deployment(load_deployment(config_path), str(config_path))


def config_from_deployment(data: dict[str, Any], source: str = "deployment") -> FlashSwapConfig:
    """Build a FlashSwapConfig from the `engine` section of a loaded deployment."""
    engine = data.get("engine")
    if not isinstance(engine, dict):
        raise ConfigError(
            f"No 'engine' section in {source}",
            {"path": source},
        )
    return FlashSwapConfig.from_dict(engine)
