"""Auth constants: credential format and session lifetimes."""

from __future__ import annotations

CREDENTIAL_SCHEME = "scrypt"
DEFAULT_SCRYPT_N = 16384
DEFAULT_SCRYPT_R = 8
DEFAULT_SCRYPT_P = 1
GENERATED_SALT_BYTES = 16
GENERATED_HASH_BYTES = 64
MIN_SALT_BYTES = 16
MIN_HASH_BYTES = 32

# Candidates shorter than this are rejected before any hashing.
MIN_PASSPHRASE_LENGTH = 12
# Login bodies are trimmed to this many characters before verification.
MAX_PASSPHRASE_LENGTH = 256

TOKEN_BYTES = 48
MIN_SESSION_TTL_SECONDS = 5 * 60
DEFAULT_SESSION_TTL_SECONDS = 30 * 60
DEFAULT_REAP_INTERVAL_SECONDS = 60.0

# Query gate denial reasons
DENIED_MISSING_TOKEN = "missing_token"
DENIED_INVALID_TOKEN = "invalid_token"

__all__ = [
    "CREDENTIAL_SCHEME",
    "DEFAULT_SCRYPT_N",
    "DEFAULT_SCRYPT_R",
    "DEFAULT_SCRYPT_P",
    "GENERATED_SALT_BYTES",
    "GENERATED_HASH_BYTES",
    "MIN_SALT_BYTES",
    "MIN_HASH_BYTES",
    "MIN_PASSPHRASE_LENGTH",
    "MAX_PASSPHRASE_LENGTH",
    "TOKEN_BYTES",
    "MIN_SESSION_TTL_SECONDS",
    "DEFAULT_SESSION_TTL_SECONDS",
    "DEFAULT_REAP_INTERVAL_SECONDS",
    "DENIED_MISSING_TOKEN",
    "DENIED_INVALID_TOKEN",
]
