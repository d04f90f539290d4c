"""
PancakeSwap Liquidity SDK - Secret Vault

Password-based protection for the deployer's signing key.

Format:
    base64(salt) ":" base64(nonce) ":" base64(ciphertext || tag)

    - salt: 16 random bytes, fresh on every protect()
    - nonce: 12 random bytes, fresh on every protect()
    - key: PBKDF2-HMAC-SHA256(password, salt, 100000 iterations) -> 32 bytes
    - cipher: AES-256-GCM, no associated data

Only the encoded string is ever stored (typically in the PRIVATE_KEY
environment variable). The derived key lives in a bytearray for the duration
of one protect()/reveal() call and is zeroed before the call returns.
"""

import base64
import binascii
import getpass
import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

SALT_LENGTH = 16
NONCE_LENGTH = 12
KEY_LENGTH = 32
TAG_LENGTH = 16
PBKDF2_ITERATIONS = 100000
SEPARATOR = ":"

DEFAULT_PROMPT = "Enter your password: "


class VaultError(Exception):
    """Vault operation failed."""


class AuthenticationError(VaultError):
    """Wrong password, or the encrypted secret was tampered with."""


class VaultFormatError(VaultError):
    """Encoded secret is malformed."""


def mask_secret(secret: str, visible_prefix: int = 6, visible_suffix: int = 4) -> str:
    """Mask a secret for safe logging. NEVER log full secrets/keys."""
    if not secret or len(secret) <= visible_prefix + visible_suffix:
        return "***"
    return f"{secret[:visible_prefix]}...{secret[-visible_suffix:]}"


@dataclass(frozen=True)
class EncryptedSecret:
    """Salt, nonce and AES-GCM ciphertext (tag appended)."""
    salt: bytes
    nonce: bytes
    ciphertext: bytes

    def encode(self) -> str:
        """Serialize to salt:nonce:ciphertext (standard base64 segments)."""
        return SEPARATOR.join(
            base64.b64encode(part).decode("ascii")
            for part in (self.salt, self.nonce, self.ciphertext)
        )

    @classmethod
    def decode(cls, encoded: str) -> "EncryptedSecret":
        """
        Parse salt:nonce:ciphertext.

        Raises:
            VaultFormatError: Wrong segment count, bad base64, bad lengths
        """
        if not isinstance(encoded, str):
            raise VaultFormatError(f"Encrypted secret must be a string, got {type(encoded).__name__}")
        parts = encoded.strip().split(SEPARATOR)
        if len(parts) != 3:
            raise VaultFormatError(
                f"Encrypted secret must have 3 segments (salt:nonce:ciphertext), got {len(parts)}"
            )
        try:
            salt, nonce, ciphertext = (base64.b64decode(p, validate=True) for p in parts)
        except (binascii.Error, ValueError) as e:
            raise VaultFormatError("Encrypted secret contains invalid base64") from e

        if len(salt) != SALT_LENGTH:
            raise VaultFormatError(f"Salt must be {SALT_LENGTH} bytes, got {len(salt)}")
        if len(nonce) != NONCE_LENGTH:
            raise VaultFormatError(f"Nonce must be {NONCE_LENGTH} bytes, got {len(nonce)}")
        if len(ciphertext) < TAG_LENGTH:
            raise VaultFormatError("Ciphertext is shorter than the authentication tag")
        return cls(salt=salt, nonce=nonce, ciphertext=ciphertext)

    def __str__(self) -> str:
        return self.encode()


class UnlockedCredential:
    """
    Revealed signing credential.

    Created once at startup and passed explicitly to whatever signs
    transactions. repr/str never show the value.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str):
        if not value:
            raise VaultError("Credential is empty")
        self._value = value

    @property
    def value(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return "UnlockedCredential(***)"

    __str__ = __repr__


class SecretVault:
    """
    Password-based AES-256-GCM vault for a single credential.

    Usage:
        vault = SecretVault()

        # One-off: protect the signing key, store the string in .env
        encoded = vault.protect("0xabc...", "correct horse").encode()

        # Startup: prompt once, reveal, pass the handle around
        credential = vault.unlock(encoded)
        account = Account.from_key(credential.value)
    """

    def __init__(self, iterations: int = PBKDF2_ITERATIONS,
                 prompt: Optional[Callable[[str], str]] = None):
        """
        Initialize vault.

        Args:
            iterations: PBKDF2 iteration count (changing it breaks existing secrets)
            prompt: Non-echoing input function (default: getpass.getpass)
        """
        self.iterations = iterations
        self._prompt = prompt or getpass.getpass
        self._prompted = False

    # ═══════════════════════════════════════════════════════════════════════
    # KEY DERIVATION
    # ═══════════════════════════════════════════════════════════════════════

    def derive_key(self, password: str, salt: bytes) -> bytes:
        """
        Derive a 32-byte AES key from password and salt.

        Deterministic: the same (password, salt) always gives the same key.
        """
        key = self._derive(password, salt)
        try:
            return bytes(key)
        finally:
            _wipe(key)

    def _derive(self, password: str, salt: bytes) -> bytearray:
        if len(salt) != SALT_LENGTH:
            raise VaultError(f"Salt must be {SALT_LENGTH} bytes, got {len(salt)}")
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=self.iterations,
        )
        return bytearray(kdf.derive(password.encode("utf-8")))

    @contextmanager
    def _scoped_key(self, password: str, salt: bytes) -> Iterator[AESGCM]:
        """Yield an AESGCM cipher; the derived key is zeroed on exit."""
        key = self._derive(password, salt)
        try:
            yield AESGCM(bytes(key))
        finally:
            _wipe(key)

    # ═══════════════════════════════════════════════════════════════════════
    # ENCRYPT / DECRYPT
    # ═══════════════════════════════════════════════════════════════════════

    def protect(self, plaintext: str, password: str) -> EncryptedSecret:
        """
        Encrypt plaintext under password.

        A fresh salt and nonce are drawn from os.urandom on every call, so
        protecting the same secret twice gives two different results.
        """
        salt = os.urandom(SALT_LENGTH)
        nonce = os.urandom(NONCE_LENGTH)
        with self._scoped_key(password, salt) as cipher:
            ciphertext = cipher.encrypt(nonce, plaintext.encode("utf-8"), None)
        return EncryptedSecret(salt=salt, nonce=nonce, ciphertext=ciphertext)

    def reveal(self, secret: Union[EncryptedSecret, str], password: str) -> str:
        """
        Decrypt secret with password.

        Args:
            secret: EncryptedSecret or its encoded string

        Raises:
            AuthenticationError: Wrong password or tampered data (no plaintext
                is returned when the tag check fails)
            VaultFormatError: Malformed encoded string
        """
        if isinstance(secret, str):
            secret = EncryptedSecret.decode(secret)
        with self._scoped_key(password, secret.salt) as cipher:
            try:
                plaintext = cipher.decrypt(secret.nonce, secret.ciphertext, None)
            except InvalidTag as e:
                raise AuthenticationError(
                    "Failed to decrypt the secret. Ensure the password is correct."
                ) from e
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise VaultError("Decrypted secret is not valid UTF-8") from e

    # ═══════════════════════════════════════════════════════════════════════
    # INTERACTIVE
    # ═══════════════════════════════════════════════════════════════════════

    def prompt_password(self, prompt: str = DEFAULT_PROMPT) -> str:
        """
        Read the password without echo. Allowed once per vault.

        Raises:
            VaultError: Already prompted, or empty input
        """
        if self._prompted:
            raise VaultError("Password was already requested for this vault")
        self._prompted = True
        password = self._prompt(prompt)
        if not password:
            raise VaultError("Password must not be empty")
        return password

    def unlock(self, secret: Union[EncryptedSecret, str],
               password: Optional[str] = None) -> UnlockedCredential:
        """
        Reveal secret into an UnlockedCredential, prompting if no password is given.
        """
        if password is None:
            password = self.prompt_password()
        return UnlockedCredential(self.reveal(secret, password))


def _wipe(buf: bytearray) -> None:
    for i in range(len(buf)):
        buf[i] = 0
