"""Remote verification: parse, trust, authenticate, then probe the directory."""
import logging
import shlex
from dataclasses import dataclass
from typing import Optional, TextIO

from ..engines.host_trust import HostTrustResolver
from ..engines.identity import load_identity
from ..engines.ssh_engine import SshEngine
from ..shared.errors import ErrorCode, MountSshfsError, RemoteVerificationError
from ..shared.logging_ import log_check_event
from ..shared.models import RemoteAddress, SshSettings
from ..shared.paths import parse_remote


def probe_command(directory: str) -> str:
    """Remote command that succeeds only if *directory* exists and is reachable."""
    return f"stat {shlex.quote(directory)}"


@dataclass
class CheckResult:
    """Result of a single verification step."""

    name: str
    passed: bool
    message: str
    error: Optional[Exception] = None


class ConnectionChecker:
    """
    Verifies that a ``user@host:dir`` remote can be mounted.

    Steps run in a fixed order and stop at the first failure:
    remote address, host key, identity, SSH handshake, remote directory.
    Nothing is retried and the session never outlives verify().
    """

    def __init__(
        self,
        remote: str,
        settings: Optional[SshSettings] = None,
        stream: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize connection checker.

        Args:
            remote: Remote string to verify
            settings: Verifier settings (paths, port, debug)
            stream: Where probe output is copied (default stderr)
            logger: Optional logger instance
        """
        self.remote = remote
        self.settings = settings or SshSettings()
        self.stream = stream
        self.logger = logger or logging.getLogger(__name__)
        self.results: list[CheckResult] = []
        self._address: Optional[RemoteAddress] = None
        self._step = ""

    def verify(self) -> None:
        """
        Run all verification steps.

        Raises:
            InvalidRemoteFormatError: If the remote is malformed
            HostTrustError: If the host key cannot be trusted
            IdentityError: If the private key cannot be loaded
            ConnectionError: If the session cannot be established
            RemoteVerificationError: If the probe exits non-zero
        """
        self.results = []
        self._address = None
        try:
            self._begin("Remote Address")
            address = parse_remote(self.remote)
            self._address = address
            if self.settings.debug:
                self.logger.debug(
                    f"[rhost rdir ruser] {[address.host, address.directory, address.user]}"
                )
            self._passed(f"Parsed {address}")

            self._begin("Host Key")
            trust = HostTrustResolver(self.settings.known_hosts_path).resolve(
                address.host, self.settings.port
            )
            self._passed(f"{len(trust.known_keys)} trusted key(s) for {trust.hostname}")

            self._begin("Identity")
            identity = load_identity(self.settings.identity_path)
            self._passed(f"Loaded {identity.get_name()} key")

            self._begin("SSH Handshake")
            engine = SshEngine(
                address, trust, identity,
                settings=self.settings, stream=self.stream, logger=self.logger,
            )
            with engine:
                self._passed("SSH authentication successful")

                self._begin("Remote Directory")
                command = probe_command(engine.directory)
                status = engine.run_probe(command)
                if status != 0:
                    raise RemoteVerificationError(
                        f"{command!r} on {address.host} exited with status {status}"
                    )
                self._passed(f"{engine.directory} is accessible")
        except MountSshfsError as e:
            self._failed(e)
            raise
        except Exception as e:
            wrapped = MountSshfsError(ErrorCode.UNKNOWN_ERROR, f"{self._step} failed: {e}")
            self._failed(wrapped)
            raise wrapped from e
        finally:
            if self.settings.debug:
                self.logger.debug(f"Verification of {self.remote}:\n{self.get_summary()}")

    def _begin(self, name: str) -> None:
        self._step = name

    def _passed(self, message: str) -> None:
        self.results.append(CheckResult(name=self._step, passed=True, message=message))
        self._log(True, message=message)

    def _failed(self, error: MountSshfsError) -> None:
        self.results.append(
            CheckResult(name=self._step, passed=False, message=error.message, error=error)
        )
        self._log(False, error_code=error.code, message=error.message)

    def _log(self, passed: bool, error_code: Optional[ErrorCode] = None,
             message: Optional[str] = None) -> None:
        address = self._address
        log_check_event(
            self.logger,
            step=self._step,
            passed=passed,
            host=address.host if address else None,
            port=self.settings.port,
            user=address.user if address else None,
            error_code=error_code,
            message=message,
        )

    def all_passed(self) -> bool:
        """Check if all steps passed."""
        return all(result.passed for result in self.results)

    def get_summary(self) -> str:
        """Get a summary of all step results."""
        lines = []
        for result in self.results:
            status = "PASS" if result.passed else "FAIL"
            lines.append(f"{status} {result.name}: {result.message}")
        return "\n".join(lines)
