"""
Wallet Identity

Wallets are keyed by their payment key hash (hex). Bech32 addresses are accepted
at the edges and reduced to the payment part.
"""

from typing import Iterable, List

import pycardano as pc

from mint_engine.errors import InvalidWalletError


KEY_HASH_SIZE = 28  # blake2b-224 payment credential


def normalize_wallet(value: str) -> str:
    """
    Normalize a wallet identifier to a lowercase payment key hash

    Args:
        value: Hex payment key hash or bech32 address (addr... / addr_test...)

    Returns:
        str: 56-character lowercase hex key hash

    Raises:
        InvalidWalletError: If the value cannot be interpreted as a wallet
    """
    if not isinstance(value, str) or not value:
        raise InvalidWalletError(f"Invalid wallet: {value!r}")

    value = value.strip()
    if value.startswith("addr"):
        try:
            address = pc.Address.from_primitive(value)
        except Exception as e:
            raise InvalidWalletError(f"Invalid address {value}: {str(e)}") from e
        if address.payment_part is None:
            raise InvalidWalletError(f"Address has no payment part: {value}")
        return bytes(address.payment_part.payload).hex()

    if value.startswith(("0x", "0X")):
        value = value[2:]
    try:
        raw = bytes.fromhex(value)
    except ValueError as e:
        raise InvalidWalletError(f"Invalid key hash: {value}") from e
    if len(raw) != KEY_HASH_SIZE:
        raise InvalidWalletError(
            f"Key hash must be {KEY_HASH_SIZE} bytes, got {len(raw)}"
        )
    return raw.hex()


def normalize_wallets(values: Iterable[str]) -> List[str]:
    return [normalize_wallet(v) for v in values]


def pack_wallet(wallet: str) -> bytes:
    """Packed representation of a wallet, as hashed into Merkle leaves"""
    return bytes.fromhex(normalize_wallet(wallet))
