"""Data models for mount-sshfs."""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_SSH_PORT = 22


@dataclass(frozen=True)
class RemoteAddress:
    """A parsed ``user@host:dir`` remote."""

    user: str
    host: str
    directory: str

    def __str__(self) -> str:
        return f"{self.user}@{self.host}:{self.directory}"


@dataclass(frozen=True)
class MountOptions:
    """Options for a single sshfs mount, from flags or a config file."""

    uid: int
    gid: int
    is_root: bool
    is_for_docker: bool
    mount_dir: str
    remote: str  # Full user@host:dir string, passed to sshfs verbatim

    @property
    def maps_root(self) -> bool:
        """True if either uid or gid maps onto root."""
        return self.uid == 0 or self.gid == 0


@dataclass(frozen=True)
class SshSettings:
    """Settings for the connection verifier."""

    identity_path: Optional[Path] = None
    known_hosts_path: Optional[Path] = None
    port: int = DEFAULT_SSH_PORT
    debug: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if self.port <= 0 or self.port > 65535:
            raise ValueError(f"Invalid port: {self.port}")

    def resolved_identity_path(self) -> Path:
        """Return the identity path, defaulting to ~/.ssh/id_rsa."""
        if self.identity_path is not None:
            return Path(self.identity_path).expanduser()
        return Path.home() / ".ssh" / "id_rsa"

    def resolved_known_hosts_path(self) -> Path:
        """Return the known_hosts path, defaulting to ~/.ssh/known_hosts."""
        if self.known_hosts_path is not None:
            return Path(self.known_hosts_path).expanduser()
        return Path.home() / ".ssh" / "known_hosts"
