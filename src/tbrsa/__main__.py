"""The Command Line Interface for the utility.

Three subcommands mirror the library: `genkey` prints a fresh key file, `encrypt` turns a message into a decimal
ciphertext with the public part of a key file, and `decrypt` reverses it with the private part. Results go to
stdout, diagnostics to stderr, and the exit code is 0 on success and 1 on any failure.

Typical usage example:

    tbrsa genkey 1024 > key.txt
    tbrsa encrypt key.txt "hi"
    python -m tbrsa decrypt key.txt 1234567890
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import os
import sys
import typing

import tbrsa
from tbrsa import codec
from tbrsa import keystore
from tbrsa import rsa
from tbrsa.errors import GenerationFailedError
from tbrsa.errors import InvalidParameterError
from tbrsa.errors import KeyFormatError
from tbrsa.errors import MessageRangeError

MAX_NUMBITS = 2**32 - 1


class HelpData(typing.NamedTuple):
    description: str
    metavar: str | None = None


help_dict: dict[str, HelpData] = {
    "encrypt": HelpData("Encrypt a message with the public part of a key file."),
    "decrypt": HelpData("Decrypt a decimal ciphertext with the private part of a key file."),
    "genkey": HelpData("Generate a key pair and print it as a key file."),
    "help": HelpData("Show this help message."),
    "keyfile": HelpData("Location of the key file.", "<keyfile>"),
    "message": HelpData("The message to encrypt.", "<message>"),
    "ciphertext": HelpData("The ciphertext, as a decimal integer.", "<ciphertext>"),
    "numbits": HelpData("Bit length of the modulus.", "<numbits>"),
}


class CLIParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with exit code 1."""

    def error(self, message: str) -> typing.NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _add_arg(parser: argparse.ArgumentParser, name: str) -> None:
    parser.add_argument(name, metavar=help_dict[name].metavar, help=help_dict[name].description)


corep = CLIParser(prog="tbrsa", description="Textbook RSA key generation, encryption and decryption.")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {tbrsa.__version__}")
corep.add_argument("--debug", action="store_true", help="Enable debug logging on stderr")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands", parser_class=CLIParser)

encrypt = commands.add_parser("encrypt", help=help_dict["encrypt"].description)
_add_arg(encrypt, "keyfile")
_add_arg(encrypt, "message")
decrypt = commands.add_parser("decrypt", help=help_dict["decrypt"].description)
_add_arg(decrypt, "keyfile")
_add_arg(decrypt, "ciphertext")
genkey = commands.add_parser("genkey", help=help_dict["genkey"].description)
_add_arg(genkey, "numbits")
commands.add_parser("help", help=help_dict["help"].description)


def _err(text: str) -> int:
    print(text, file=sys.stderr)
    return 1


def parse_decimal(text: str) -> int:
    """Parse a base-10 non-negative integer, without signs or separators.

    Raises:
        InvalidParameterError: If `text` is anything else.
    """
    text = text.strip()
    if not text or not text.isascii() or not text.isdigit():
        raise InvalidParameterError(f"{text!r} is not a non-negative decimal integer")
    return int(text, 10)


def encrypt_mode(key_filename: str, message: str) -> int:
    """The "encrypt" subcommand."""
    try:
        key = keystore.load_public(key_filename)
    except (KeyFormatError, OSError) as exc:
        return _err(f"error reading key file {key_filename}: {exc}")
    # Recover the raw argv bytes, non UTF-8 input included.
    m = codec.encode(os.fsencode(message))
    try:
        c = rsa.encrypt(m, key)
    except MessageRangeError:
        return _err("message is too long for the key")
    try:
        print(c, flush=True)
    except OSError:
        return _err("error writing ciphertext")
    return 0


def decrypt_mode(key_filename: str, c_str: str) -> int:
    """The "decrypt" subcommand."""
    try:
        c = parse_decimal(c_str)
    except InvalidParameterError:
        return _err("could not parse ciphertext")
    try:
        key = keystore.load_private(key_filename)
    except (KeyFormatError, OSError) as exc:
        return _err(f"error reading key file {key_filename}: {exc}")
    try:
        message = key.decrypt_bytes(c)
    except MessageRangeError:
        return _err("ciphertext is out of range for the key")
    try:
        sys.stdout.buffer.write(message)
        sys.stdout.buffer.flush()
    except OSError:
        return _err("error writing plaintext")
    return 0


def genkey_mode(numbits_str: str) -> int:
    """The "genkey" subcommand."""
    try:
        numbits = parse_decimal(numbits_str)
    except InvalidParameterError:
        return _err("could not parse integer")
    if numbits > MAX_NUMBITS:
        return _err("integer is too large")
    try:
        key = rsa.RSAPrivKey.generate(numbits)
    except (InvalidParameterError, GenerationFailedError) as exc:
        return _err(f"key generation failed: {exc}")
    payload = keystore.dump_key(key)
    try:
        sys.stdout.write(payload)
        sys.stdout.flush()
    except OSError:
        return _err("error writing key")
    return 0


def _positional_after_command(argv: list[str]) -> list[str]:
    """Marks everything after the subcommand as positional, so messages like `-x` are not read as options."""
    for i, token in enumerate(argv):
        if not token.startswith("-"):
            if token in ("encrypt", "decrypt", "genkey"):
                return [*argv[:i + 1], "--", *argv[i + 1:]]
            break
    return argv


def main(argv: list[str] | None = None) -> int:
    """Entry point, returns the process exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)
    args = corep.parse_args(_positional_after_command(argv))
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)
    match args.subcommand:
        case "help":
            corep.print_help(sys.stdout)
            return 0
        case "encrypt":
            return encrypt_mode(args.keyfile, args.message)
        case "decrypt":
            return decrypt_mode(args.keyfile, args.ciphertext)
        case "genkey":
            return genkey_mode(args.numbits)
    corep.print_usage(sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
