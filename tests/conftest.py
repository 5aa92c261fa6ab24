"""Shared fixtures: throwaway keys and known_hosts files."""
import logging

import paramiko
import pytest


@pytest.fixture(scope="session")
def host_key() -> paramiko.ECDSAKey:
    return paramiko.ECDSAKey.generate()


@pytest.fixture(scope="session")
def other_host_key() -> paramiko.ECDSAKey:
    return paramiko.ECDSAKey.generate()


@pytest.fixture(scope="session")
def rsa_key() -> paramiko.RSAKey:
    return paramiko.RSAKey.generate(2048)


@pytest.fixture
def known_hosts(tmp_path, host_key):
    """known_hosts trusting example.com, a hashed 10.0.0.5 and port 2222."""
    line = f"{host_key.get_name()} {host_key.get_base64()}"
    hashed = paramiko.HostKeys.hash_host("10.0.0.5")
    path = tmp_path / "known_hosts"
    path.write_text(
        "# comment\n"
        f"example.com {line}\n"
        f"{hashed} {line}\n"
        f"[example.com]:2222 {line}\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Undo setup_logger() so later tests can use caplog."""
    yield
    logger = logging.getLogger("mount_sshfs")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
