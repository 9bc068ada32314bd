"""Provides the textbook RSA keys and the encrypt/decrypt transform.

Keys are immutable value objects. The transform is plain modular exponentiation with no padding, accelerated with
the Chinese Remainder Theorem whenever a private key knows its primes. Message representatives outside [0, n-1] are
rejected with `MessageRangeError` instead of being reduced modulo n.

Typical usage example:

    pk = RSAPrivKey.generate(1024)
    c = encrypt(encode("Hi there!"), pk.pub)
    r = decrypt(c, pk)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import warnings

from tbrsa import codec
from tbrsa import keygen
from tbrsa.errors import MessageRangeError


class RSAKey:
    """The overall RSA key class implementation.

    Acts mostly as a template for the "core" components of a RSA Key that are strictly mandatory in both a public
    and a private key. Instances reject attribute assignment once built.

    Attributes:
        mod: The modulus of the keypair.
        expo: The exponent of the key, whether private or public.
        bsize: Length of the modulus in bytes.
    """
    __slots__ = ("mod", "expo", "bsize")

    def __init__(self, mod: int, expo: int) -> None:
        if mod <= 0:
            raise ValueError("Modulus must be positive")
        if expo <= 0:
            raise ValueError("Exponent must be positive")
        self._set("mod", mod)
        self._set("expo", expo)
        self._set("bsize", (mod.bit_length() + 7) // 8)

    def _set(self, name: str, value) -> None:
        object.__setattr__(self, name, value)

    def __setattr__(self, name: str, value) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _fields(self) -> tuple:
        return self.mod, self.expo

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._fields())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.mod.bit_length()} bits>"

    def c_rsa(self, message: int) -> int:
        """Performs core RSA operation. (Encrypt/Decrypt)

        Args:
            message: The int-marshalled message to transform.

        Returns:
            `message ** expo mod mod`

        Raises:
            MessageRangeError: If the message is out of range for the current key.
        """
        if not 0 <= message < self.mod:
            raise MessageRangeError("Message representative must be in range [0, mod-1]")
        return pow(message, self.expo, self.mod)


class RSAPubKey(RSAKey):
    """A rather straightforward subclass of RSAKey, for Public Keys.

    The init is not overwritten as a Public Key consists solely of a modulus and exponent.
    """
    __slots__ = ()

    def encrypt_bytes(self, message: bytes | str, encoding: str = "utf-8") -> int:
        """Encrypts a byte message with textbook RSA.

        Args:
            message: The message to encrypt. Strings are encoded with `encoding` first.
            encoding: Text encoding for `str` messages.

        Returns:
            The ciphertext integer.
        """
        warnings.warn("Textbook RSA encryption is unsecure! Please use with care.", RuntimeWarning, stacklevel=2)
        return self.c_rsa(codec.encode(message, encoding))


class RSAPrivKey(RSAKey):
    """RSA Private Key class implementation.

    Only the modulus and the private exponent are mandatory. The public exponent exposes the matching public key,
    the primes enable CRT decryption.

    Attributes:
        mod: The modulus of the keypair.
        expo: The private exponent of the key.
        pub: The public key of the key, None if the public exponent is unknown.
        p: Private Prime 1.
        q: Private Prime 2.
        exp1: CRT component d mod (p - 1).
        exp2: CRT component d mod (q - 1).
        coeff: CRT component q^-1 mod p.
    """
    __slots__ = ("pub", "p", "q", "exp1", "exp2", "coeff")

    def __init__(self,
                 mod: int,
                 pub_exp: int | None,
                 priv_exp: int,
                 p: int | None = None,
                 q: int | None = None,
                 exp1: int | None = None,
                 exp2: int | None = None,
                 coeff: int | None = None) -> None:
        """Initialize the RSA Private Key.

        Args:
            mod: The modulus of the keypair.
            pub_exp: The public exponent of the key, may be None.
            priv_exp: The private exponent of the key.
            p: The private prime 1.
            q: The private prime 2.
            exp1: CRT Component dmp1. Derived when omitted.
            exp2: CRT Component dmq1. Derived when omitted.
            coeff: CRT Component iqmp. Derived when omitted.
        """
        super().__init__(mod, priv_exp)
        self._set("pub", RSAPubKey(mod, pub_exp) if pub_exp is not None else None)
        if p and q:
            self._set("p", p)
            self._set("q", q)
            self._set("exp1", exp1 if exp1 is not None else priv_exp % (p - 1))
            self._set("exp2", exp2 if exp2 is not None else priv_exp % (q - 1))
            self._set("coeff", coeff if coeff is not None else keygen.modinv(q, p))
        else:
            for name in ("p", "q", "exp1", "exp2", "coeff"):
                self._set(name, None)

    @property
    def pub_expo(self) -> int | None:
        return self.pub.expo if self.pub is not None else None

    def _fields(self) -> tuple:
        return self.mod, self.pub_expo, self.expo, self.p, self.q

    def c_rsa(self, message: int) -> int:
        """Performs core RSA operation accelerated with CRT. (Decrypt)

        Falls back to the plain exponentiation when the primes are unknown. Both paths give the same result.

        Args:
            message: The int-marshalled ciphertext.

        Returns:
            The decrypted message representative.

        Raises:
            MessageRangeError: If the message is out of range for the current key.
        """
        if not self.p or not self.q:
            return super().c_rsa(message)
        if not 0 <= message < self.mod:
            raise MessageRangeError("Message representative must be in range [0, mod-1]")
        m_1 = pow(message, self.exp1, self.p)
        m_2 = pow(message, self.exp2, self.q)
        h = ((m_1 - m_2) * self.coeff) % self.p
        return m_2 + self.q * h

    def decrypt_bytes(self, ciphertext: int) -> bytes:
        """Decrypts a ciphertext integer back to the minimal byte string.

        Leading NUL bytes of the original message are not recoverable.
        """
        return codec.decode(self.c_rsa(ciphertext))[0]

    @classmethod
    def generate(cls, size: int, pub_exp: int = keygen.DEFAULT_PUB_EXP) -> "RSAPrivKey":
        """Generates an RSA Private Key, and its respective Public Key.

        Args:
            size: Bit length of the modulus.
            pub_exp: The public exponent of the key.

        Returns:
            A new generated RSA Private Key, primes included.
        """
        (n, pub), (_, d, p, q) = keygen.generate_key_pair(size, pub_exp, True)
        return cls(n, pub, d, p, q)


def encrypt(message: int, key: RSAKey) -> int:
    """Computes `message ** e mod n`.

    Args:
        message: Message representative in [0, n-1].
        key: Public key, or a private key knowing its public exponent.

    Returns:
        The ciphertext integer.

    Raises:
        MessageRangeError: If the message is out of range.
        ValueError: If a private key without public exponent is supplied.
    """
    if isinstance(key, RSAPrivKey):
        if key.pub is None:
            raise ValueError("Private key does not carry a public exponent")
        key = key.pub
    return key.c_rsa(message)


def decrypt(ciphertext: int, key: RSAPrivKey) -> int:
    """Computes `ciphertext ** d mod n`, with CRT when available.

    Raises:
        MessageRangeError: If the ciphertext is out of range.
        TypeError: If `key` is not a private key.
    """
    if not isinstance(key, RSAPrivKey):
        raise TypeError("Decryption requires a private key")
    return key.c_rsa(ciphertext)
