"""
Phase Authorizers

Uniform membership check used by the controller for the whitelist and allowlist
phases. Explicit lists and Merkle commitments are interchangeable variants.
"""

from typing import Collection, Optional, Protocol, Sequence

from mint_engine import merkle
from mint_engine.types import AUTH_EXPLICIT, AUTH_MERKLE


class Authorizer(Protocol):
    def authorize(self, wallet: str, proof: Optional[Sequence] = None) -> bool: ...


class ExplicitSetAuthorizer:
    """Authorizes wallets listed in an explicit set"""

    def __init__(self, members: Collection[str]):
        self.members = members

    def authorize(self, wallet: str, proof: Optional[Sequence] = None) -> bool:
        return wallet in self.members


class MerkleRootAuthorizer:
    """Authorizes wallets that present a valid proof against the committed root"""

    def __init__(self, root: Optional[bytes]):
        self.root = root

    def authorize(self, wallet: str, proof: Optional[Sequence] = None) -> bool:
        # A single-member root is the member's leaf, proven by an empty path
        if self.root is None:
            return False
        return merkle.verify_wallet(self.root, proof, wallet)


class AnyOfAuthorizer:
    def __init__(self, *authorizers: Authorizer):
        self.authorizers = authorizers

    def authorize(self, wallet: str, proof: Optional[Sequence] = None) -> bool:
        return any(a.authorize(wallet, proof) for a in self.authorizers)


def build_authorizer(
    modes: Collection[str], members: Collection[str], root: Optional[bytes]
) -> AnyOfAuthorizer:
    """
    Compose the authorizer for one phase from the deployment's enabled modes

    Args:
        modes: Enabled authorization modes ("explicit", "merkle")
        members: Explicit list for the phase
        root: Merkle root for the phase, if set

    Returns:
        AnyOfAuthorizer over the enabled variants
    """
    authorizers = []
    if AUTH_EXPLICIT in modes:
        authorizers.append(ExplicitSetAuthorizer(members))
    if AUTH_MERKLE in modes:
        authorizers.append(MerkleRootAuthorizer(root))
    return AnyOfAuthorizer(*authorizers)
