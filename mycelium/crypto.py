"""Diffie-Hellman key exchange and symmetric encryption of packets."""

from __future__ import annotations

import os
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

#: Default maximum size of a packet payload.
PACKET_SIZE = 1400
#: Size of an AES-GCM tag in bytes.
AES_TAG_SIZE = 16
#: Size of an AES-GCM nonce in bytes.
AES_NONCE_SIZE = 12
#: Size of the user data header, which is part of the encrypted content.
DATA_HEADER_SIZE = 4
#: Total size of a packet buffer, with room for header, tag and nonce.
PACKET_BUFFER_SIZE = PACKET_SIZE + AES_TAG_SIZE + AES_NONCE_SIZE + DATA_HEADER_SIZE

_KEY_SIZE = 32


class DecryptionError(Exception):
    """Decryption failed: the content is invalid or too short for this key."""

    def __init__(self) -> None:
        super().__init__(
            "Decryption failed, invalid or insufficient encrypted content for this key"
        )


def _check_key_bytes(data: bytes, what: str) -> bytes:
    data = bytes(data)
    if len(data) != _KEY_SIZE:
        raise ValueError(f"{what} must be {_KEY_SIZE} bytes, got {len(data)}")
    return data


@dataclass(frozen=True)
class PublicKey:
    """An X25519 public key, derived from a :class:`SecretKey`."""

    raw: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", _check_key_bytes(self.raw, "public key"))

    @classmethod
    def from_hex(cls, text: str) -> PublicKey:
        """Parse a hex encoded public key of 64 characters."""
        if len(text) != 2 * _KEY_SIZE:
            raise ValueError("Public key is 64 characters long")
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raise ValueError("PublicKey is not valid hex") from None
        return cls(raw)

    @classmethod
    def from_secret(cls, secret: SecretKey) -> PublicKey:
        """Derive the public key belonging to ``secret``."""
        return cls(
            secret._private.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        )

    def to_bytes(self) -> bytes:
        """Return the raw 32 key bytes."""
        return self.raw

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return self.raw.hex()


class SecretKey:
    """A static X25519 secret. Its value is never shown in its repr."""

    def __init__(self, raw: bytes) -> None:
        self._raw = _check_key_bytes(raw, "secret key")
        self._private = X25519PrivateKey.from_private_bytes(self._raw)

    @classmethod
    def generate(cls) -> SecretKey:
        """Create a new random secret from the OS entropy source."""
        return cls(os.urandom(_KEY_SIZE))

    def to_bytes(self) -> bytes:
        """Return the raw 32 key bytes."""
        return self._raw

    def shared_secret(self, other: PublicKey) -> SharedSecret:
        """Compute the shared secret between this key and ``other``."""
        peer = X25519PublicKey.from_public_bytes(other.to_bytes())
        return SharedSecret(self._private.exchange(peer))

    def __repr__(self) -> str:
        return "SecretKey(...)"


class SharedSecret:
    """A secret computed from a secret key and a peer's public key."""

    def __init__(self, raw: bytes) -> None:
        self._raw = _check_key_bytes(raw, "shared secret")

    def __bytes__(self) -> bytes:
        return self._raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SharedSecret):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        return "SharedSecret(...)"

    def encrypt(self, packet: PacketBuffer) -> bytes:
        """Encrypt header and data of ``packet``; tag and a random nonce are appended."""
        nonce = os.urandom(AES_NONCE_SIZE)
        plaintext = bytes(packet._buf[: packet._size])
        sealed = AESGCM(self._raw).encrypt(nonce, plaintext, None)
        return sealed + nonce

    def decrypt(self, data: bytes) -> PacketBuffer:
        """Decrypt data produced by :meth:`encrypt` with an equivalent secret."""
        data = bytes(data)
        if len(data) < AES_NONCE_SIZE + AES_TAG_SIZE + DATA_HEADER_SIZE:
            raise DecryptionError()
        sealed, nonce = data[:-AES_NONCE_SIZE], data[-AES_NONCE_SIZE:]
        try:
            plaintext = AESGCM(self._raw).decrypt(nonce, sealed, None)
        except InvalidTag:
            raise DecryptionError() from None
        # Keep scratch space for tag and nonce so the packet can be re-encrypted.
        return PacketBuffer._from_plaintext(plaintext)


class PacketBuffer:
    """A packet with a small data header and room to encrypt it in place."""

    def __init__(self) -> None:
        self._buf = bytearray(PACKET_BUFFER_SIZE)
        # Bytes in use, header included.
        self._size = 0

    @classmethod
    def _from_plaintext(cls, plaintext: bytes) -> PacketBuffer:
        packet = cls.__new__(cls)
        packet._buf = bytearray(plaintext) + bytearray(AES_TAG_SIZE + AES_NONCE_SIZE)
        packet._size = len(plaintext)
        return packet

    def _buffer_end(self) -> int:
        return len(self._buf) - AES_NONCE_SIZE - AES_TAG_SIZE

    def header(self) -> bytes:
        """Return a copy of the data header."""
        return bytes(self._buf[:DATA_HEADER_SIZE])

    def set_header(self, index: int, value: int) -> None:
        """Set one byte of the data header."""
        if not 0 <= index < DATA_HEADER_SIZE:
            raise IndexError(f"header index out of range: {index}")
        if not 0 <= value <= 0xFF:
            raise ValueError(f"header byte out of range: {value}")
        self._buf[index] = value

    def buffer(self) -> memoryview:
        """A writable view of the whole usable data area, excluding the header."""
        return memoryview(self._buf)[DATA_HEADER_SIZE : self._buffer_end()]

    def set_size(self, size: int) -> None:
        """Set how many bytes of the data area are in use."""
        capacity = self._buffer_end() - DATA_HEADER_SIZE
        if not 0 <= size <= capacity:
            raise ValueError(f"size must be in 0..{capacity}, got {size}")
        self._size = size + DATA_HEADER_SIZE

    def data(self) -> bytes:
        """Return the bytes in use, excluding the header."""
        return bytes(self._buf[DATA_HEADER_SIZE : self._size])

    def __len__(self) -> int:
        return max(self._size - DATA_HEADER_SIZE, 0)

    def __repr__(self) -> str:
        return f"PacketBuffer(data=..., len={self._size})"