"""
Token encryption for broker OAuth credentials

Tokens are stored as base64(IV || ciphertext || tag) using AES-256-GCM with a
fresh 12-byte IV per encryption. Without a key they are stored as plain JSON.
"""

import base64
import json
import logging
import os
from typing import Any, Dict, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from tradejournal.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

IV_LENGTH = 12


def encrypt_tokens(tokens: Dict[str, Any], key_hex: str) -> str:
    """
    Encrypt a token dictionary

    Args:
        tokens: Token payload (access_token, refresh_token)
        key_hex: Hex encoded 256-bit key

    Returns:
        str: base64(IV || ciphertext)
    """
    key = bytes.fromhex(key_hex)
    iv = os.urandom(IV_LENGTH)
    data = json.dumps(tokens).encode("utf-8")
    encrypted = AESGCM(key).encrypt(iv, data, None)
    return base64.b64encode(iv + encrypted).decode("ascii")


def decrypt_tokens(encrypted_b64: str, key_hex: str) -> Dict[str, Any]:
    """
    Decrypt a token blob produced by encrypt_tokens

    Raises:
        ValidationError: If the blob cannot be decrypted with the key
    """
    key = bytes.fromhex(key_hex)
    try:
        raw = base64.b64decode(encrypted_b64)
        iv, data = raw[:IV_LENGTH], raw[IV_LENGTH:]
        decrypted = AESGCM(key).decrypt(iv, data, None)
    except (ValueError, InvalidTag):
        logger.error("Stored broker tokens could not be decrypted")
        raise ValidationError("Stored broker tokens are unreadable. Please reconnect.")
    return json.loads(decrypted.decode("utf-8"))


def seal_tokens(tokens: Dict[str, Any], key_hex: Optional[str]) -> str:
    """Encrypt tokens when a key is configured, otherwise serialize as JSON"""
    if key_hex:
        return encrypt_tokens(tokens, key_hex)
    logger.warning("No token encryption key configured, storing broker tokens unencrypted")
    return json.dumps(tokens)


def open_tokens(stored: str, key_hex: Optional[str]) -> Dict[str, Any]:
    """Reverse seal_tokens"""
    if key_hex:
        return decrypt_tokens(stored, key_hex)
    try:
        return json.loads(stored)
    except ValueError:
        raise ValidationError("Stored broker tokens are unreadable. Please reconnect.")
