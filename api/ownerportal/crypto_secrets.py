# ownerportal/crypto_secrets.py
# Per-property Hostkit API keys are stored as base64(nonce || AES-GCM ciphertext).
import os
import base64
import binascii
from secrets import token_bytes
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_SIZE = 12
VALID_KEY_SIZES = (16, 24, 32)


def decode_secrets_key(k: Optional[str]) -> Optional[bytes]:
    """Accept hex, base64, or raw 16/24/32-byte strings. None if nothing fits."""
    if not k:
        return None
    k = k.strip()
    if all(c in "0123456789abcdefABCDEF" for c in k) and len(k) in (32, 48, 64):
        return bytes.fromhex(k)
    try:
        b = base64.b64decode(k, validate=True)
        if len(b) in VALID_KEY_SIZES:
            return b
    except (binascii.Error, ValueError):
        pass
    b = k.encode("utf-8")
    if len(b) in VALID_KEY_SIZES:
        return b
    return None


def _get_key() -> bytes:
    raw = os.getenv("APP_SECRETS_KEY")
    if not raw:
        raise RuntimeError("APP_SECRETS_KEY env var is required to read stored Hostkit API keys.")
    key = decode_secrets_key(raw)
    if key is None:
        raise RuntimeError("APP_SECRETS_KEY must decode to 16/24/32 bytes (AES-128/192/256).")
    return key


def encrypt_api_key(plaintext: str) -> str:
    aes = AESGCM(_get_key())
    nonce = token_bytes(NONCE_SIZE)
    ct = aes.encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.b64encode(nonce + ct).decode("ascii")


def decrypt_api_key(token_b64: str) -> str:
    raw = base64.b64decode(token_b64)
    nonce, ct = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
    try:
        pt = AESGCM(_get_key()).decrypt(nonce, ct, None)
    except InvalidTag:
        raise RuntimeError("Stored Hostkit API key does not match APP_SECRETS_KEY")
    return pt.decode("utf-8")
