# PATH: dex/pool_address.py
"""
dex/pool_address.py - Deterministic pool identity (CREATE2).

A V3 pool's address is fully determined by its factory, the pool
init-code hash and its key (token0, token1, fee):

    address = keccak256(0xff ++ factory ++ keccak256(abi.encode(key)) ++ init_code_hash)[12:]

This lets the engine re-derive the expected caller of a callback from
request data alone.
"""

from eth_abi import encode
from eth_utils import keccak, to_checksum_address

from core.models import PoolKey
from core.validators import normalize_address

# Uniswap V3 pool init code hash (Ethereum mainnet factory)
POOL_INIT_CODE_HASH = "0xe34f199b19b2b4f47f68442619d555527d244f78a3297ea89325f843f87b8b54"

UNISWAP_V3_FACTORY = "0x1F98431c8aD98523631AE4a59f267346ea31F984"


def _hash_bytes(init_code_hash: str | bytes) -> bytes:
    if isinstance(init_code_hash, (bytes, bytearray)):
        return bytes(init_code_hash)
    hex_data = init_code_hash[2:] if init_code_hash.startswith("0x") else init_code_hash
    return bytes.fromhex(hex_data)


def pool_salt(key: PoolKey) -> bytes:
    """keccak256(abi.encode(token0, token1, fee))"""
    return keccak(encode(["address", "address", "uint24"], [key.token0, key.token1, key.fee]))


def compute_pool_address(
    factory: str,
    key: PoolKey,
    init_code_hash: str | bytes = POOL_INIT_CODE_HASH,
) -> str:
    """
    Compute the checksummed CREATE2 address of the pool for key.

    Args:
        factory: Factory (deployer) address
        key: Sorted pool key
        init_code_hash: 32-byte pool init code hash

    Returns:
        Checksummed pool address
    """
    factory_bytes = bytes.fromhex(normalize_address(factory, "factory")[2:])
    create2_input = b"\xff" + factory_bytes + pool_salt(key) + _hash_bytes(init_code_hash)
    return to_checksum_address("0x" + keccak(create2_input)[-20:].hex())
