"""Command line entry point: validate mount options and print the sshfs command."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from mount_sshfs.services.command_emitter import emit, run_mount
from mount_sshfs.services.config_store import ConfigStore
from mount_sshfs.services.mount_validator import validate_options
from mount_sshfs.shared.errors import MountSshfsError
from mount_sshfs.shared.logging_ import setup_logger
from mount_sshfs.shared.models import MountOptions, SshSettings
from mount_sshfs.shared.paths import join_remote


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mount-sshfs",
        description="Verify an SSH remote and print the sshfs command that mounts it.",
        allow_abbrev=False,
    )
    parser.add_argument("-docker", action="store_true", help="sshfs with docker (adds -o allow_other)")
    parser.add_argument("-mount-to", dest="mount_to", default="", help="mount directory /mnt/{directory}")
    parser.add_argument("-remote-dir", dest="remote_dir", default="", help="path to the directory on the remote")
    parser.add_argument("-remote-host", dest="remote_host", default="", help="remote host [username@]remote")
    parser.add_argument("-uid", type=int, default=0, help="uid for sshfs -o idmap")
    parser.add_argument("-gid", type=int, default=0, help="gid for sshfs -o idmap")
    parser.add_argument("-root", action="store_true", help="enable root idmap")
    parser.add_argument("-config", default="", help="configuration file (overrides the mount flags)")
    parser.add_argument("-identity", default=None, help="private key (default ~/.ssh/id_rsa)")
    parser.add_argument("-known-hosts", dest="known_hosts", default=None,
                        help="known_hosts file (default ~/.ssh/known_hosts)")
    parser.add_argument("-debug", action="store_true", help="log every verification step")
    parser.add_argument("-log-file", dest="log_file", default=None, help="also write the log to this file")
    parser.add_argument("-exec", dest="execute", action="store_true",
                        help="run the mount command instead of printing it")
    return parser


def options_from_args(args: argparse.Namespace) -> MountOptions:
    """Assemble MountOptions from the mount flags."""
    return MountOptions(
        uid=args.uid,
        gid=args.gid,
        is_root=args.root,
        is_for_docker=args.docker,
        mount_dir=args.mount_to,
        remote=join_remote(args.remote_host, args.remote_dir),
    )


def settings_from_args(args: argparse.Namespace) -> SshSettings:
    return SshSettings(
        identity_path=Path(args.identity) if args.identity else None,
        known_hosts_path=Path(args.known_hosts) if args.known_hosts else None,
        debug=args.debug,
    )


def read_options(
    args: argparse.Namespace,
    settings: SshSettings,
    validate: Optional[Callable[..., MountOptions]] = None,
) -> MountOptions:
    """
    Load options from -config when given, otherwise from the flags, and
    validate them.

    Raises:
        MountSshfsError: If loading or validation fails; errors from the
            config file path are prefixed with "Configuration error"
    """
    validate = validate or validate_options
    if args.config:
        try:
            options = ConfigStore(Path(args.config)).load()
            return validate(options, settings)
        except MountSshfsError as e:
            raise e.prefixed("Configuration error")

    return validate(options_from_args(args), settings)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool."""
    args = build_parser().parse_args(argv)
    logger = setup_logger(
        level=logging.DEBUG if args.debug else logging.INFO,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        options = read_options(args, settings_from_args(args))
    except MountSshfsError as e:
        logger.error(f"Invalid flags: {e}")
        return 1

    if args.execute:
        try:
            run_mount(options)
        except MountSshfsError as e:
            logger.error(f"Mount failed: {e}")
            return 1
        logger.info(f"Mounted {options.remote} on {options.mount_dir}")
        return 0

    emit(options, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
