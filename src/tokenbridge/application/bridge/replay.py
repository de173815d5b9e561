"""Replay protection over the permanent used-signature set."""

from __future__ import annotations

from ...domain.bridge.repositories import UsedSignatureRepository
from ...domain.errors import UsedSignature


class ReplayGuard:
    """Rejects digests that were already redeemed.

    The guard writes through the repository of the current unit of work, so a
    mark only survives if the conversion that made it commits. There is no
    eviction: a digest stays used for the lifetime of the bridge.
    """

    def __init__(self, used_signatures: UsedSignatureRepository):
        self.used_signatures = used_signatures

    async def is_used(self, digest: bytes) -> bool:
        return await self.used_signatures.contains(digest.hex())

    async def ensure_unused(self, digest: bytes) -> None:
        if await self.is_used(digest):
            raise UsedSignature(f"Digest 0x{digest.hex()} was already used")

    async def mark_used(self, digest: bytes) -> None:
        await self.ensure_unused(digest)
        await self.used_signatures.add(digest.hex())
