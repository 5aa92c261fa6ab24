"""SSH host key verification against a known_hosts file.

Unknown hosts are rejected, never added: a remote whose key is not already
trusted by the local user fails verification.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import paramiko
from paramiko.hostkeys import InvalidHostKey

from mount_sshfs.shared.errors import ErrorCode, HostTrustError
from mount_sshfs.shared.models import DEFAULT_SSH_PORT

logger = logging.getLogger(__name__)


def known_hosts_name(host: str, port: int = DEFAULT_SSH_PORT) -> str:
    """Return the name *host* is recorded under in known_hosts."""
    if port == DEFAULT_SSH_PORT:
        return host
    return f"[{host}]:{port}"


class RejectUnknownHostPolicy(paramiko.MissingHostKeyPolicy):
    """Missing host key policy that refuses every key it is asked about."""

    def __init__(self, known_hosts_path: Path):
        self.known_hosts_path = known_hosts_path

    def missing_host_key(self, client, hostname, key):
        raise HostTrustError(
            f"{key.get_name()} host key for {hostname} is not trusted by "
            f"{self.known_hosts_path}",
            ErrorCode.HOSTKEY_UNKNOWN,
        )


@dataclass
class HostTrust:
    """Trust material for a single host, ready to hand to an SSHClient."""

    hostname: str  # Name as recorded in known_hosts
    known_keys: Dict[str, paramiko.PKey]  # key type -> key
    policy: paramiko.MissingHostKeyPolicy

    def apply(self, client: paramiko.SSHClient) -> None:
        """Install the known keys and the rejecting policy on *client*."""
        host_keys = client.get_host_keys()
        for key_type, key in self.known_keys.items():
            host_keys.add(self.hostname, key_type, key)
        client.set_missing_host_key_policy(self.policy)


class HostTrustResolver:
    """Resolves known_hosts entries for remote hosts."""

    def __init__(self, known_hosts_path: Optional[Path] = None):
        """
        Initialize host trust resolver.

        Args:
            known_hosts_path: Path to known_hosts (default ~/.ssh/known_hosts)
        """
        self.known_hosts_path = Path(
            known_hosts_path or Path.home() / ".ssh" / "known_hosts"
        ).expanduser()

    def load(self) -> paramiko.HostKeys:
        """
        Parse the known_hosts file.

        Raises:
            HostTrustError: If the file is missing, unreadable or malformed
        """
        if not self.known_hosts_path.is_file():
            raise HostTrustError(f"known_hosts not found at {self.known_hosts_path}")
        try:
            return paramiko.HostKeys(str(self.known_hosts_path))
        except (OSError, UnicodeDecodeError) as e:
            raise HostTrustError(f"unable to read {self.known_hosts_path}: {e}")
        except (InvalidHostKey, paramiko.SSHException) as e:
            raise HostTrustError(f"malformed known_hosts {self.known_hosts_path}: {e}")

    def resolve(self, host: str, port: int = DEFAULT_SSH_PORT) -> HostTrust:
        """
        Build the trust material for *host*.

        Args:
            host: Remote host name or address
            port: Remote SSH port

        Returns:
            HostTrust holding the known keys and a rejecting policy

        Raises:
            HostTrustError: If known_hosts cannot be used or lacks the host
        """
        hostname = known_hosts_name(host, port)
        entries = self.load().lookup(hostname)
        if not entries:
            raise HostTrustError(
                f"no host key for {hostname} in {self.known_hosts_path}"
            )

        known_keys = {key_type: entries[key_type] for key_type in entries.keys()}
        logger.debug(
            f"Trusted host keys for {hostname}: {', '.join(sorted(known_keys))}"
        )
        return HostTrust(
            hostname=hostname,
            known_keys=known_keys,
            policy=RejectUnknownHostPolicy(self.known_hosts_path),
        )
