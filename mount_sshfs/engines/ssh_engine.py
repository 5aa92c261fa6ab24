"""SSH engine for one-shot remote probes using Paramiko."""
import logging
import sys
from typing import Optional, TextIO

import paramiko
from paramiko import SSHClient

from mount_sshfs.engines.host_trust import HostTrust
from mount_sshfs.shared.errors import ConnectionError as SSHConnectionError
from mount_sshfs.shared.errors import ErrorCode, HostTrustError
from mount_sshfs.shared.models import RemoteAddress, SshSettings


class SshEngine:
    """
    SSH engine owning a single session to a remote.

    Use as a context manager: the session is closed on every exit path,
    including a failed connect.
    """

    def __init__(
        self,
        address: RemoteAddress,
        trust: HostTrust,
        identity: paramiko.PKey,
        settings: Optional[SshSettings] = None,
        stream: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize SSH engine.

        Args:
            address: Parsed remote address
            trust: Host key trust material for address.host
            identity: Private key used to authenticate
            settings: Verifier settings (port, debug)
            stream: Where probe output is copied (default stderr)
            logger: Optional logger instance
        """
        self.address = address
        self.trust = trust
        self.identity = identity
        self.settings = settings or SshSettings()
        self.stream = stream
        self.logger = logger or logging.getLogger(__name__)
        self.ssh_client: Optional[SSHClient] = None

    @property
    def directory(self) -> str:
        """Remote directory this connection was opened for."""
        return self.address.directory

    @property
    def target(self) -> str:
        return f"{self.address.host}:{self.settings.port}"

    def connect(self) -> None:
        """
        Establish the SSH session.

        Raises:
            HostTrustError: If the server key is unknown or does not match
            ConnectionError: If dialing or authentication fails
        """
        self.ssh_client = paramiko.SSHClient()
        self.trust.apply(self.ssh_client)

        connect_kwargs = {
            'hostname': self.address.host,
            'port': self.settings.port,
            'username': self.address.user,
            'pkey': self.identity,
            'allow_agent': False,
            'look_for_keys': False,
        }
        if self.settings.debug:
            self.logger.debug(
                f"SSH client config: user={self.address.user} target={self.target} "
                f"identity={self.identity.get_name()} "
                f"host_keys={','.join(sorted(self.trust.known_keys))}"
            )

        try:
            self._dial(connect_kwargs)
        except BaseException:
            self.disconnect()
            raise

        self.logger.debug(f"Connected to {self.target}")

    def _dial(self, connect_kwargs: dict) -> None:
        try:
            self.ssh_client.connect(**connect_kwargs)
        except paramiko.BadHostKeyException as e:
            raise HostTrustError(
                f"host key for {self.address.host} does not match known_hosts: {e}",
                ErrorCode.HOSTKEY_CHANGED,
            )
        except paramiko.AuthenticationException as e:
            raise SSHConnectionError(
                ErrorCode.AUTH_FAILED,
                f"unable to connect to {self.target!r}: authentication failed: {e}",
            )
        except paramiko.SSHException as e:
            raise SSHConnectionError(
                ErrorCode.REMOTE_DISCONNECT,
                f"unable to connect to {self.target!r}: {e}",
            )
        except OSError as e:
            raise SSHConnectionError(
                ErrorCode.NETWORK_UNREACHABLE,
                f"unable to connect to {self.target!r}: {e}",
            )

    def disconnect(self) -> None:
        """Close the SSH session."""
        if self.ssh_client:
            self.ssh_client.close()
            self.ssh_client = None
            self.logger.debug(f"Disconnected from {self.target}")

    def is_connected(self) -> bool:
        """Check if connected."""
        if self.ssh_client is None:
            return False
        transport = self.ssh_client.get_transport()
        return transport is not None and transport.is_active()

    def run_probe(self, command: str) -> int:
        """
        Run *command* on a single session channel.

        The command's stdout and stderr are merged and copied to the
        operator's stream.

        Args:
            command: Remote command line

        Returns:
            The command's exit status

        Raises:
            ConnectionError: If not connected or the channel cannot be opened
        """
        if not self.is_connected():
            raise SSHConnectionError(ErrorCode.REMOTE_DISCONNECT, "Not connected")

        self.logger.debug(f"Running probe on {self.target}: {command}")
        try:
            channel = self.ssh_client.get_transport().open_session()
        except paramiko.SSHException as e:
            raise SSHConnectionError(
                ErrorCode.REMOTE_DISCONNECT, f"unable to open session: {e}"
            )

        try:
            # stderr is merged into the stdout stream
            channel.set_combine_stderr(True)
            channel.exec_command(command)
            output = channel.makefile("rb").read()
            status = channel.recv_exit_status()
        except paramiko.SSHException as e:
            raise SSHConnectionError(
                ErrorCode.REMOTE_DISCONNECT, f"probe {command!r} failed: {e}"
            )
        finally:
            channel.close()

        stream = self.stream or sys.stderr
        if output:
            stream.write(output.decode(errors="replace"))
        stream.flush()
        return status

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
