"""
PancakeSwap Liquidity SDK - Startup

Unlocks the deployer key once, before anything touches the network.

    credential = unlock_signing_key()        # prompts for the password
    owner = signer_address(credential)
    ... pass credential / owner explicitly to whatever needs them ...

There is no module-level credential; callers keep the returned handle.
"""

import logging
from typing import Optional

from .config import ENCRYPTED_KEY_ENV, load_environment, read_encrypted_key
from .vault import SecretVault, UnlockedCredential, mask_secret

log = logging.getLogger(__name__)


def unlock_signing_key(vault: Optional[SecretVault] = None,
                       environ: Optional[dict] = None,
                       env_var: str = ENCRYPTED_KEY_ENV,
                       password: Optional[str] = None,
                       dotenv_path: Optional[str] = None) -> UnlockedCredential:
    """
    Read the encrypted key from the environment and reveal it.

    Args:
        vault: Vault to use (default: SecretVault() with getpass prompt)
        environ: Mapping to read from instead of os.environ (skips .env loading)
        env_var: Variable holding salt:nonce:ciphertext
        password: Password; prompted for when None
        dotenv_path: Explicit .env file

    Raises:
        ConfigError: Variable missing
        VaultFormatError: Variable is not a valid encrypted secret
        AuthenticationError: Wrong password
    """
    if environ is None:
        load_environment(dotenv_path)
    encoded = read_encrypted_key(environ, env_var)
    log.info(f"Unlocking signing key from ${env_var} ({mask_secret(encoded)})")

    vault = vault or SecretVault()
    credential = vault.unlock(encoded, password)
    log.info("Signing key unlocked")
    return credential
