from __future__ import annotations

import argparse
import getpass
import json
import os
import sys
from pathlib import Path

from .config import load_config
from .errors import PassphraseRequiredError, PPKError
from .ppk.key import PuTTYKey
from .ppk.source import is_putty_key_file
from .utils.logging import get_logger

log = get_logger()

EXIT_OK = 0
EXIT_NOT_PPK = 1
EXIT_ERROR = 2


def _passphrase_from_args(args: argparse.Namespace) -> str | None:
    if args.passphrase_env:
        value = os.getenv(args.passphrase_env)
        if value is None:
            raise PPKError(f"environment variable {args.passphrase_env} is not set")
        return value
    if args.passphrase_file:
        return Path(args.passphrase_file).read_text(encoding="utf-8").rstrip("\r\n")
    return None


def _load_key(args: argparse.Namespace) -> PuTTYKey:
    passphrase = _passphrase_from_args(args)
    try:
        return PuTTYKey(args.input, passphrase)
    except PassphraseRequiredError:
        if passphrase is not None or not sys.stdin.isatty():
            raise
    return PuTTYKey(args.input, getpass.getpass(f"Passphrase for {args.input}: "))


def cmd_convert(args: argparse.Namespace) -> int:
    key = _load_key(args)
    if args.output:
        key.write_openssh(args.output)
    else:
        sys.stdout.write(key.to_openssh())
    return EXIT_OK


def cmd_info(args: argparse.Namespace) -> int:
    key = _load_key(args)
    print(json.dumps(key.info().model_dump(), indent=2))
    return EXIT_OK


def cmd_detect(args: argparse.Namespace) -> int:
    rc = EXIT_OK
    for path in args.paths:
        ok = is_putty_key_file(path)
        print(f"{path}: {'yes' if ok else 'no'}")
        if not ok:
            rc = EXIT_NOT_PPK
    return rc


def _add_passphrase_opts(p: argparse.ArgumentParser) -> None:
    g = p.add_mutually_exclusive_group()
    g.add_argument("--passphrase-env", dest="passphrase_env", metavar="VAR",
                   help="read the passphrase from this environment variable")
    g.add_argument("--passphrase-file", dest="passphrase_file", metavar="FILE",
                   help="read the passphrase from the first line of FILE")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser("ppkconv", description="Convert PuTTY .ppk keys to OpenSSH PEM")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_conv = sub.add_parser("convert", help="convert a .ppk file to PEM")
    p_conv.add_argument("input")
    p_conv.add_argument("-o", "--output", help="write here (mode 0600) instead of stdout")
    _add_passphrase_opts(p_conv)
    p_conv.set_defaults(func=cmd_convert)

    p_info = sub.add_parser("info", help="print container metadata as JSON")
    p_info.add_argument("input")
    _add_passphrase_opts(p_info)
    p_info.set_defaults(func=cmd_info)

    p_det = sub.add_parser("detect", help="check whether files are .ppk containers")
    p_det.add_argument("paths", nargs="+")
    p_det.set_defaults(func=cmd_detect)

    args = p.parse_args(argv)
    log.setLevel(load_config().log_level)
    try:
        return args.func(args)
    except (PPKError, OSError) as e:
        log.error("%s: %s", args.cmd, e)
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
