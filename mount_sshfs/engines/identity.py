"""Private key loading for client authentication."""
import io
import logging
from pathlib import Path
from typing import Optional

import paramiko

from mount_sshfs.shared.errors import IdentityError

logger = logging.getLogger(__name__)

# Formats tried in order; DSA is not supported.
KEY_CLASSES = (paramiko.RSAKey, paramiko.ECDSAKey, paramiko.Ed25519Key)


def default_identity_path() -> Path:
    """Return ~/.ssh/id_rsa for the current user."""
    return Path.home() / ".ssh" / "id_rsa"


def load_identity(path: Optional[Path] = None) -> paramiko.PKey:
    """
    Read and parse a private key.

    Args:
        path: Key file (default ~/.ssh/id_rsa)

    Returns:
        Parsed key

    Raises:
        IdentityError: If the key cannot be read, is encrypted, or is not a
            supported private key
    """
    identity = Path(path).expanduser() if path else default_identity_path()
    logger.info(f"Reading identity from {str(identity)!r}")

    try:
        key_data = identity.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IdentityError(f"unable to read private key: {e}")

    for key_class in KEY_CLASSES:
        try:
            key = key_class.from_private_key(io.StringIO(key_data))
        except paramiko.PasswordRequiredException:
            raise IdentityError(
                f"unable to parse private key: {identity} is passphrase-protected"
            )
        except (paramiko.SSHException, ValueError):
            continue
        logger.debug(f"Loaded {key.get_name()} key {key.get_fingerprint().hex()}")
        return key

    raise IdentityError(
        f"unable to parse private key: {identity} is not an RSA, ECDSA or Ed25519 key"
    )
