"""Operator passphrase verification against a salted scrypt credential."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from typing import Optional

from visitlog.core.auth.constants import (
    CREDENTIAL_SCHEME,
    DEFAULT_SCRYPT_N,
    DEFAULT_SCRYPT_P,
    DEFAULT_SCRYPT_R,
    GENERATED_HASH_BYTES,
    GENERATED_SALT_BYTES,
    MIN_HASH_BYTES,
    MIN_PASSPHRASE_LENGTH,
    MIN_SALT_BYTES,
)


class CredentialConfigError(RuntimeError):
    """Raised at startup when ADMIN_PASSWORD_SECRET is missing or malformed."""


def _scrypt(candidate: str, salt: bytes, n: int, r: int, p: int, dklen: int) -> bytes:
    # OpenSSL needs roughly 128 * r * (n + p) bytes; leave headroom over its 32 MiB default.
    maxmem = max(32 * 1024 * 1024, 256 * r * (n + p))
    return hashlib.scrypt(candidate.encode("utf-8"), salt=salt, n=n, r=r, p=p, maxmem=maxmem, dklen=dklen)


@dataclass(frozen=True)
class Credential:
    n: int
    r: int
    p: int
    salt: bytes
    hash: bytes

    @classmethod
    def parse(cls, secret: Optional[str]) -> "Credential":
        """Parse ``scrypt:N:r:p:saltHex:hashHex``."""
        if not secret:
            raise CredentialConfigError(
                "ADMIN_PASSWORD_SECRET is required. Run `visitlog-generate-secret` and export the value."
            )
        parts = secret.strip().split(":")
        if len(parts) != 6 or parts[0] != CREDENTIAL_SCHEME:
            raise CredentialConfigError("ADMIN_PASSWORD_SECRET must follow: scrypt:N:r:p:saltHex:hashHex")
        _, n_str, r_str, p_str, salt_hex, hash_hex = parts
        try:
            n, r, p = int(n_str), int(r_str), int(p_str)
        except ValueError as exc:
            raise CredentialConfigError("Invalid scrypt parameters in ADMIN_PASSWORD_SECRET") from exc
        if n <= 1 or n & (n - 1) or r <= 0 or p <= 0:
            raise CredentialConfigError("Invalid scrypt parameters in ADMIN_PASSWORD_SECRET")
        try:
            salt = bytes.fromhex(salt_hex)
            stored = bytes.fromhex(hash_hex)
        except ValueError as exc:
            raise CredentialConfigError("Salt or hash in ADMIN_PASSWORD_SECRET is not valid hex") from exc
        if len(salt) < MIN_SALT_BYTES or len(stored) < MIN_HASH_BYTES:
            raise CredentialConfigError("Salt or hash in ADMIN_PASSWORD_SECRET is too short")
        return cls(n=n, r=r, p=p, salt=salt, hash=stored)


class CredentialVerifier:
    """Checks candidate passphrases against one immutable credential."""

    def __init__(self, credential: Credential):
        self.credential = credential

    def verify(self, candidate: object) -> bool:
        if not isinstance(candidate, str) or len(candidate) < MIN_PASSPHRASE_LENGTH:
            return False
        cred = self.credential
        derived = _scrypt(candidate, cred.salt, cred.n, cred.r, cred.p, len(cred.hash))
        return secrets.compare_digest(derived, cred.hash)


def derive_secret(
    passphrase: str,
    *,
    n: int = DEFAULT_SCRYPT_N,
    r: int = DEFAULT_SCRYPT_R,
    p: int = DEFAULT_SCRYPT_P,
    salt: Optional[bytes] = None,
) -> str:
    """Build an ADMIN_PASSWORD_SECRET value for ``passphrase``."""
    salt = salt if salt is not None else secrets.token_bytes(GENERATED_SALT_BYTES)
    derived = _scrypt(passphrase, salt, n, r, p, GENERATED_HASH_BYTES)
    return f"{CREDENTIAL_SCHEME}:{n}:{r}:{p}:{salt.hex()}:{derived.hex()}"


__all__ = ["Credential", "CredentialConfigError", "CredentialVerifier", "derive_secret"]
