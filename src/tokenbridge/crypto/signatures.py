from __future__ import annotations

from typing import Optional, Protocol

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from pydantic import BaseModel, field_validator

from ..domain.shared.addresses import Bytes32Hex, is_zero_address, normalize_address
from .messages import personal_message_hash

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


class RecoverableSignature(BaseModel):
    """secp256k1 signature with its recovery id, as (v, r, s)."""

    v: int
    r: Bytes32Hex
    s: Bytes32Hex

    @field_validator("v")
    @classmethod
    def validate_v(cls, v: int) -> int:
        if v not in (0, 1, 27, 28):
            raise ValueError("v must be one of 0, 1, 27, 28")
        return v

    @property
    def recovery_id(self) -> int:
        return self.v - 27 if self.v >= 27 else self.v

    def to_bytes(self) -> bytes:
        """65-byte r || s || v encoding with v in {27, 28}."""
        return (
            bytes.fromhex(self.r[2:])
            + bytes.fromhex(self.s[2:])
            + bytes([self.recovery_id + 27])
        )

    def to_hex(self) -> str:
        return "0x" + self.to_bytes().hex()

    @classmethod
    def from_bytes(cls, data: bytes) -> "RecoverableSignature":
        if len(data) != 65:
            raise ValueError(f"Expected a 65-byte signature, got {len(data)}")
        return cls(v=data[64], r="0x" + data[:32].hex(), s="0x" + data[32:64].hex())

    @classmethod
    def from_hex(cls, value: str) -> "RecoverableSignature":
        raw = value[2:] if value.startswith(("0x", "0X")) else value
        return cls.from_bytes(bytes.fromhex(raw))


class SignatureVerifier(Protocol):
    """Recovers the signer of a digest; the scheme behind it is replaceable."""

    def recover(self, digest: bytes, signature: RecoverableSignature) -> Optional[str]:
        ...

    def verify(
        self, digest: bytes, signature: RecoverableSignature, expected_signer: str
    ) -> bool:
        ...


class EthereumSignatureVerifier:
    """EIP-191 personal-message recovery over secp256k1.

    Malformed and high-s signatures recover to nothing, and the zero address is
    never accepted as a signer.
    """

    def recover(self, digest: bytes, signature: RecoverableSignature) -> Optional[str]:
        r = int(signature.r, 16)
        s = int(signature.s, 16)
        if r == 0 or s == 0 or r >= SECP256K1_N or s > SECP256K1_N // 2:
            return None
        try:
            eth_signature = keys.Signature(vrs=(signature.recovery_id, r, s))
            public_key = eth_signature.recover_public_key_from_msg_hash(
                personal_message_hash(digest)
            )
        except (BadSignature, ValidationError, ValueError):
            return None
        return public_key.to_checksum_address()

    def verify(
        self, digest: bytes, signature: RecoverableSignature, expected_signer: str
    ) -> bool:
        if is_zero_address(expected_signer):
            return False
        recovered = self.recover(digest, signature)
        return recovered is not None and recovered == normalize_address(expected_signer)


class AuthorizerSigner:
    """Holds a secp256k1 key and produces signatures the verifier accepts.

    Used by the off-chain authorizer to approve conversions and by callers to
    sign their HTTP requests.
    """

    def __init__(self, private_key: keys.PrivateKey):
        self._private_key = private_key

    @classmethod
    def generate(cls) -> "AuthorizerSigner":
        return cls.from_cryptography_key(ec.generate_private_key(ec.SECP256K1()))

    @classmethod
    def from_cryptography_key(
        cls, private_key: ec.EllipticCurvePrivateKey
    ) -> "AuthorizerSigner":
        if not isinstance(private_key.curve, ec.SECP256K1):
            raise ValueError(f"Expected a secp256k1 key, got {private_key.curve.name}")
        secret = private_key.private_numbers().private_value
        return cls(keys.PrivateKey(secret.to_bytes(32, "big")))

    @classmethod
    def from_pem(cls, pem_str: str) -> "AuthorizerSigner":
        """Load a secp256k1 private key from a PEM-formatted string."""
        private_key = serialization.load_pem_private_key(pem_str.encode(), password=None)
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise ValueError("PEM does not contain an elliptic-curve private key")
        return cls.from_cryptography_key(private_key)

    def to_pem(self) -> str:
        secret = int.from_bytes(self._private_key.to_bytes(), "big")
        private_key = ec.derive_private_key(secret, ec.SECP256K1())
        pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return pem.decode("utf-8")

    @property
    def address(self) -> str:
        return self._private_key.public_key.to_checksum_address()

    def sign_digest(self, digest: bytes) -> RecoverableSignature:
        """Sign the EIP-191 hash of ``digest``."""
        signature = self._private_key.sign_msg_hash(personal_message_hash(digest))
        return RecoverableSignature(
            v=signature.v + 27,
            r="0x" + signature.r.to_bytes(32, "big").hex(),
            s="0x" + signature.s.to_bytes(32, "big").hex(),
        )
