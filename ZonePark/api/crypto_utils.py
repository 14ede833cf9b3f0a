import os
import base64
from typing import Optional
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

# marks values written by encrypt_str so plain values from before the key was set still read back
PREFIX = "enc:"


def encryption_enabled() -> bool:
    return bool(os.environ.get("ZONEPARK_AES_KEY"))


def _load_key() -> bytes:
    b64 = os.environ.get("ZONEPARK_AES_KEY")
    if not b64:
        raise RuntimeError("ZONEPARK_AES_KEY not set. Provide base64-encoded 32-byte key.")
    try:
        key = base64.b64decode(b64, validate=True)
    except ValueError:
        raise RuntimeError("ZONEPARK_AES_KEY is not valid base64")
    if len(key) not in (16, 24, 32):
        raise RuntimeError("Invalid AES key length. Use 16/24/32 bytes (base64-encoded).")
    return key


def encrypt_str(plaintext: str, associated_data: Optional[bytes] = None) -> str:
    if plaintext is None:
        return None
    aesgcm = AESGCM(_load_key())
    nonce = os.urandom(12)
    ct = aesgcm.encrypt(nonce, plaintext.encode("utf-8"), associated_data)
    return PREFIX + base64.b64encode(nonce + ct).decode("ascii")


def decrypt_str(payload: str, associated_data: Optional[bytes] = None) -> str:
    if payload is None:
        return None
    if not payload.startswith(PREFIX):
        return payload
    try:
        data = base64.b64decode(payload[len(PREFIX):], validate=True)
    except ValueError:
        raise ValueError("Payload is not valid base64-encoded encrypted data")
    if len(data) < 13:
        raise ValueError("Payload is too short to be valid encrypted data")
    aesgcm = AESGCM(_load_key())
    pt = aesgcm.decrypt(data[:12], data[12:], associated_data)
    return pt.decode("utf-8")


def protect(value: str) -> str:
    """Encrypt value when a key is configured, otherwise store it as is."""
    if value is None or not encryption_enabled():
        return value
    return encrypt_str(value)


def mask_value(value: str, keep: int = 1) -> str:
    if value is None:
        return None
    if len(value) <= keep + 1:
        return "*" * len(value)
    return value[:keep] + "*" * (len(value) - keep)
