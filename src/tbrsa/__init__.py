"""Textbook RSA in an Academic Sense.

Provides unpadded RSA key generation, encryption and decryption over Python integers, a plain decimal key file
format plus PKCS#1 PEM interchange, and the prime-generation utilities underneath. Textbook RSA is deterministic and
malleable: use it to learn the mathematics, never to protect data.

Typical usage example:

    pk = RSAPrivKey.generate(1024)
    c = encrypt(encode("Hi there!"), pk.pub)
    text, _ = decode(decrypt(c, pk))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from tbrsa.codec import decode
from tbrsa.codec import encode
from tbrsa.errors import GenerationFailedError
from tbrsa.errors import InvalidParameterError
from tbrsa.errors import KeyFormatError
from tbrsa.errors import MessageRangeError
from tbrsa.errors import TBRSAError
from tbrsa.keygen import check_prime
from tbrsa.keygen import generate_key_pair
from tbrsa.keygen import generate_primes
from tbrsa.keystore import dump_key
from tbrsa.keystore import export_pem
from tbrsa.keystore import import_pem
from tbrsa.keystore import load_private
from tbrsa.keystore import load_public
from tbrsa.keystore import write_key
from tbrsa.rsa import decrypt
from tbrsa.rsa import encrypt
from tbrsa.rsa import RSAPrivKey
from tbrsa.rsa import RSAPubKey

__version__ = "0.1.0"
__all__ = [
    "RSAPrivKey",
    "RSAPubKey",
    "encrypt",
    "decrypt",
    "encode",
    "decode",
    "dump_key",
    "write_key",
    "load_public",
    "load_private",
    "export_pem",
    "import_pem",
    "check_prime",
    "generate_primes",
    "generate_key_pair",
    "TBRSAError",
    "InvalidParameterError",
    "KeyFormatError",
    "GenerationFailedError",
    "MessageRangeError",
]
