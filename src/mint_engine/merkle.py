"""
Merkle Membership

Verification of wallet membership against a committed 32-byte root, plus the
deterministic tree builder used to produce roots and proofs for upload.

Commitment rules:
1. Leaf: sha3_256(packed wallet)
2. Parent: sha3_256(min(a, b) + max(a, b))  (sorted pairs)
3. Odd node at a level is promoted unchanged
4. Empty tree: 32 zero bytes
"""

import hashlib
from typing import List, Optional, Sequence, Union

from mint_engine.errors import InvalidWalletError
from mint_engine.wallets import normalize_wallet, pack_wallet


HASH_SIZE = 32
EMPTY_ROOT = b"\x00" * HASH_SIZE

HashLike = Union[bytes, str]


def sha3(data: bytes) -> bytes:
    return hashlib.sha3_256(data).digest()


def leaf_hash(wallet: str) -> bytes:
    return sha3(pack_wallet(wallet))


def hash_pair(a: bytes, b: bytes) -> bytes:
    """Hash two nodes in canonical (sorted) order"""
    if b < a:
        a, b = b, a
    return sha3(a + b)


def to_hash(value: HashLike) -> Optional[bytes]:
    """
    Coerce a node given as bytes or hex into a 32-byte hash

    Returns None if the value is not a well-formed hash.
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            return None
    else:
        return None
    if len(raw) != HASH_SIZE:
        return None
    return raw


def verify(root: Optional[HashLike], proof: Optional[Sequence[HashLike]], leaf: HashLike) -> bool:
    """
    Verify that leaf is committed under root

    Malformed input is treated as a failed proof, never as an error.

    Args:
        root: Committed root
        proof: Sibling hashes from leaf level upwards
        leaf: Leaf hash

    Returns:
        bool: True if folding the proof over the leaf reproduces the root
    """
    expected = to_hash(root) if root is not None else None
    computed = to_hash(leaf)
    if expected is None or computed is None:
        return False

    if proof is None:
        proof = []
    if isinstance(proof, (bytes, str)):
        return False

    for node in proof:
        sibling = to_hash(node)
        if sibling is None:
            return False
        computed = hash_pair(computed, sibling)

    return computed == expected


def verify_wallet(root: Optional[HashLike], proof: Optional[Sequence[HashLike]], wallet: str) -> bool:
    try:
        leaf = leaf_hash(wallet)
    except InvalidWalletError:
        return False
    return verify(root, proof, leaf)


class MerkleTree:
    """Deterministic Merkle tree over an ordered list of wallets"""

    def __init__(self, wallets: Sequence[str]):
        self.wallets = [normalize_wallet(w) for w in wallets]
        self.leaves = [leaf_hash(w) for w in self.wallets]
        self.layers = self._build(self.leaves)

    @staticmethod
    def _build(leaves: List[bytes]) -> List[List[bytes]]:
        layers = [list(leaves)]
        while len(layers[-1]) > 1:
            level = layers[-1]
            parents = []
            for i in range(0, len(level), 2):
                if i + 1 < len(level):
                    parents.append(hash_pair(level[i], level[i + 1]))
                else:
                    parents.append(level[i])
            layers.append(parents)
        return layers

    @property
    def root(self) -> bytes:
        if not self.leaves:
            return EMPTY_ROOT
        return self.layers[-1][0]

    @property
    def hex_root(self) -> str:
        return "0x" + self.root.hex()

    def proof(self, wallet: str) -> List[bytes]:
        """
        Sibling path for wallet, empty if the wallet is not a member

        Args:
            wallet: Wallet identifier

        Returns:
            List of sibling hashes from leaf level to root
        """
        try:
            index = self.wallets.index(normalize_wallet(wallet))
        except (ValueError, InvalidWalletError):
            return []

        path = []
        for level in self.layers[:-1]:
            sibling = index ^ 1
            if sibling < len(level):
                path.append(level[sibling])
            index //= 2
        return path

    def hex_proof(self, wallet: str) -> List[str]:
        return ["0x" + node.hex() for node in self.proof(wallet)]

    def __len__(self) -> int:
        return len(self.leaves)
