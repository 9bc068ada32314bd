"""Key generation, mainly focusing on the search for random probable primes.

Primes come from random candidates with their two top bits set, filtered by trial division against a cached sieve
of small primes and then a Miller-Rabin test with the round counts of FIPS 186-5 Appendix C.1. The private exponent
is the inverse of the public one modulo (p - 1)(q - 1), obtained with the extended Euclidean algorithm.

Typical usage example:

    p, q = generate_primes(1024)
    (n, e), (n, d) = generate_key_pair(1024)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import secrets
import threading
from typing import Literal, overload

from tbrsa.errors import GenerationFailedError
from tbrsa.errors import InvalidParameterError

logger = logging.getLogger(__name__)

DEFAULT_PUB_EXP: int = 65537
MINIMUM_KEY_SIZE: int = 16

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_SMALL_PRIMES_LOCK = threading.Lock()
_MINIMUM_PRIME_SEPARATION: int = 100


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = 10000) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    The cache is shared between threads, regeneration happens under a lock. Regeneration occurs if the requested
    range is greater or the cache is empty.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        List of primes in ascending order. All primes at least up to `n`.

    Raises:
        ValueError: If `n` is negative.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    with _SMALL_PRIMES_LOCK:
        if n > _SMALL_PRIMES_CAP or not _SMALL_PRIMES:
            _SMALL_PRIMES = _sieve(n)
            _SMALL_PRIMES_CAP = n
        return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check the provided `no` against the known small primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Defaults to 10000.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int) -> bool:
    """Perform Miller-Rabin primality test.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w in (2, 3)
    if w % 2 == 0:
        return False
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = secrets.randbelow(w - 3) + 2
        z = pow(b, m, w)
        if z in (1, w - 1):
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def check_prime(candidate: int, iters: None | int = None, n: int = 10000) -> bool:
    """Performs a composite primality test, trial division first, then Miller-Rabin.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        n: The number up to which to trial divide. Defaults to 10000.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if candidate <= n:
        # Trial division is exhaustive in this range.
        return True
    if iters is None:
        if candidate.bit_length() <= 512:
            iters = 40
        elif candidate.bit_length() <= 1024:
            iters = 56
        elif candidate.bit_length() <= 1536:
            iters = 64
        elif candidate.bit_length() <= 2048:
            iters = 70
        else:
            iters = 74
    return _miller_rabin(candidate, iters)


def _generate_probable_prime(size: int, pub: int = DEFAULT_PUB_EXP, prm_p: int | None = None) -> int:
    """Generate a probable prime number of the specified bit size.

    Args:
        size: The size of the prime to generate in bits. Must be >= 2.
        pub: The public exponent the prime has to be suitable for.
        prm_p: The other prime in the pair if this is the second generation. Candidates too close to it are skipped.

    Returns:
        A probable prime `w` with exactly `size` bits and `gcd(w - 1, pub) == 1`.

    Raises:
        GenerationFailedError: If no prime turned up within the attempt budget.
    """
    ml = 1 if prm_p is None else 2
    rep_cap = max(size, 64) * 5 * ml
    # Top two bits make the product of two such primes exactly as long as their combined size.
    msk = (1 << size - 1) | (1 << size - 2) | 1
    separation = 1 << max(size - _MINIMUM_PRIME_SEPARATION, 0)
    for attempt in range(rep_cap):
        cand = secrets.randbits(size) | msk
        if prm_p is not None and abs(prm_p - cand) <= separation:
            continue
        if math.gcd(cand - 1, pub) == 1 and check_prime(cand):
            logger.debug("Found %d-bit prime after %d attempts", size, attempt + 1)
            return cand
    raise GenerationFailedError(
        f"Ran an improbable {rep_cap} loops with no {size}-bit prime found. Check system random number generator.")


def _validate(size: int, pub: int) -> None:
    if not isinstance(size, int) or isinstance(size, bool):
        raise InvalidParameterError("Size must be an integer.")
    if size < MINIMUM_KEY_SIZE:
        raise InvalidParameterError(f"Size must be at least {MINIMUM_KEY_SIZE}.")
    if pub < 3 or pub % 2 == 0:
        raise InvalidParameterError("Public exponent must be odd and at least 3.")


def generate_primes(size: int, pub: int = DEFAULT_PUB_EXP) -> tuple[int, int]:
    """Generates an IFC-suitable pair of prime numbers.

    For odd sizes `p` receives the extra bit.

    Args:
        size: The key size to generate the prime pair for.
        pub: The public exponent the primes have to be suitable for. Defaults to 65537.

    Returns:
        A pair of distinct primes whose product has exactly `size` bits.

    Raises:
        InvalidParameterError: If `size` is too small or `pub` is not an odd integer >= 3.
        GenerationFailedError: If the prime search is exhausted.
    """
    _validate(size, pub)
    p = _generate_probable_prime(size - size // 2, pub)
    q = _generate_probable_prime(size // 2, pub, p)
    while p == q:  # (Un)Likely story.
        q = _generate_probable_prime(size // 2, pub, p)
    return p, q


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*s0 + b*t0 = r0 = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of two integers.
        As well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def modinv(a: int, m: int) -> int:
    """Modular inverse of `a` modulo `m`.

    Raises:
        ValueError: If `a` and `m` are not coprime.
    """
    g, s, _ = eea(a % m, m)
    if g != 1:
        raise ValueError(f"{a} has no inverse modulo {m}")
    return s % m


@overload
def generate_key_pair(size: int,
                      pub: int = DEFAULT_PUB_EXP,
                      expose_primes: Literal[False] = False) -> tuple[tuple[int, int], tuple[int, int]]:
    ...


@overload
def generate_key_pair(size: int,
                      pub: int = DEFAULT_PUB_EXP,
                      expose_primes: Literal[True] = False) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    ...


def generate_key_pair(
    size: int,
    pub: int = DEFAULT_PUB_EXP,
    expose_primes: bool = False
) -> tuple[tuple[int, int], tuple[int, int]] | tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Generates an RSA key pair.

    Args:
        size: Bit length of the modulus.
        pub: The public exponent. Defaults to 65537. Has to be odd and at least 3.
        expose_primes: Whether to return the prime numbers as well or not. Defaults to False.
            Allows CRT acceleration for decryption.

    Returns:
        A tuple of (public, private) sub-tuples (modulus, exponent) or if exposed for the private
        (modulus, exponent, p, q)
    """
    p, q = generate_primes(size, pub)
    n = p * q
    totient = (p - 1) * (q - 1)
    d = modinv(pub, totient)
    logger.debug("Generated %d-bit key pair with public exponent %d", n.bit_length(), pub)
    if not expose_primes:
        del p, q
        return (n, pub), (n, d)
    return (n, pub), (n, d, p, q)
