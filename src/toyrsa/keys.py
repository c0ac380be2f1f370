"""Key material for the toy cryptosystem: modulus, totient and the two exponents derived from them.

Exponents are found the textbook way, by scanning upward for the smallest candidate. Both scans are capped by
`search_limit` so that a pair of primes far too large for a brute-force search fails loudly instead of spinning.

Typical usage example:

    km = KeyMaterial(53, 59)
    km.n, km.public_exponent, km.private_exponent
    (3127, 3, 2011)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import functools
import logging
import math

from toyrsa.errors import DegenerateModulusError
from toyrsa.errors import ExponentSearchExhaustedError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT: int = 2**24
STRATEGIES = ("scan", "euclid")


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such a that a*s0 + b*t0 = r0 = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common denominator of two integers.
        As well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        quo = r0 // r1
        r0, r1 = r1, r0 - quo * r1
        s0, s1 = s1, s0 - quo * s1
        t0, t1 = t1, t0 - quo * t1
    return r0, s0, t0


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes, odd numbers only, sieving until root.

    Args:
        n: The number up to which to generate primes. Must be >= 0.

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


def looks_prime(no: int) -> bool:
    """Trial division against every prime up to the square root of `no`.

    Meant for the toy-sized primes this package works with; the core itself never calls it, callers use it to warn
    about obviously bad input.
    """
    if no < 2:
        return False
    for prime in _sieve(math.isqrt(no)):
        if no % prime == 0:
            return False
    return True


class KeyMaterial:
    """Two primes, their product and totient, plus the exponents derived from them.

    All attributes are read-only. The exponents are computed on first access and cached, which is safe as they are
    pure functions of `p` and `q`.

    Attributes:
        p: The first prime.
        q: The second prime.
        n: The modulus, `p * q`.
        search_limit: Maximum number of candidates either exponent search may try.
        strategy: "scan" for the brute-force inverse search, "euclid" for the extended Euclidean algorithm.
    """

    def __init__(self,
                 p: int,
                 q: int,
                 search_limit: int = DEFAULT_SEARCH_LIMIT,
                 strategy: str = "scan") -> None:
        """Initialize the key material.

        Primality is not checked, that is the caller's contract.

        Args:
            p: The first prime, a positive integer.
            q: The second prime, a positive integer.
            search_limit: Maximum number of candidates either exponent search may try. Must be >= 1.
            strategy: How the private exponent is found. One of `STRATEGIES`.

        Raises:
            ValueError: If `p` or `q` is not a positive integer, or the search settings are invalid.
        """
        for name, val in (("p", p), ("q", q)):
            if not isinstance(val, int) or isinstance(val, bool) or val < 1:
                raise ValueError(f"{name} must be a positive integer")
        if search_limit < 1:
            raise ValueError("search_limit must be >= 1")
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy {strategy!r}, expected one of {STRATEGIES}")
        self._p = p
        self._q = q
        self._n = p * q
        self._t = (p - 1) * (q - 1)
        self._search_limit = search_limit
        self._strategy = strategy

    @property
    def p(self) -> int:
        return self._p

    @property
    def q(self) -> int:
        return self._q

    @property
    def n(self) -> int:
        return self._n

    @property
    def search_limit(self) -> int:
        return self._search_limit

    @property
    def strategy(self) -> str:
        return self._strategy

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self._n})"

    def _check_totient(self) -> None:
        if self._t <= 2:
            raise DegenerateModulusError(f"Totient {self._t} is too small to derive exponents (p={self._p}, "
                                         f"q={self._q})")

    @functools.cached_property
    def public_exponent(self) -> int:
        """The smallest `e` in `[2, t)` coprime to the totient.

        Raises:
            DegenerateModulusError: If the totient is 2 or less.
            ExponentSearchExhaustedError: If no candidate is found within `search_limit` tries.
        """
        self._check_totient()
        upper = min(self._t, 2 + self._search_limit)
        for e in range(2, upper):
            if math.gcd(e, self._t) == 1:
                logger.debug("Public exponent %d found for n=%d", e, self._n)
                return e
        raise ExponentSearchExhaustedError(f"No public exponent below {upper} for totient {self._t}")

    @functools.cached_property
    def private_exponent(self) -> int:
        """The smallest non-negative `d` with `(d * e) % t == 1`.

        Raises:
            DegenerateModulusError: If the totient is 2 or less.
            ExponentSearchExhaustedError: If no inverse is found within `search_limit` tries.
        """
        e = self.public_exponent
        if self._strategy == "euclid":
            g, s, _ = eea(e, self._t)
            if g != 1:
                raise ExponentSearchExhaustedError(f"{e} has no inverse modulo {self._t}")
            d = s % self._t
        else:
            d = self._scan_inverse(e)
        logger.debug("Private exponent derived for n=%d using %s", self._n, self._strategy)
        return d

    def _scan_inverse(self, e: int) -> int:
        upper = min(self._t, self._search_limit)
        for d in range(upper):
            if (d * e) % self._t == 1:
                return d
        raise ExponentSearchExhaustedError(f"No private exponent below {upper} for totient {self._t}")

    def key_relation_holds(self) -> bool:
        """Check `(d * e) mod t == 1` without exposing the totient."""
        return (self.private_exponent * self.public_exponent) % self._t == 1
