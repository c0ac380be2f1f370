"""Maps text and hash digests onto the integer domain of the cryptosystem, one character at a time.

Each character becomes its ordinal and is encrypted (or signed) on its own, so the output is a list of integers as
long as the input. Digests are handled as their lowercase hexadecimal text, every hex character signed independently.
This is not how real signatures work, it mirrors the classroom version of the algorithm.

The resulting sequences can be wrapped in small DER containers for transport.

Typical usage example:

    codec = MessageCodec(Cryptosystem.from_primes(53, 59))
    c = codec.encode_message("Hi there!")
    codec.decode_message(c)
    sig = codec.sign_message("Hi there!")
    codec.check_signature("Hi there!", sig)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import hashlib
import logging
import random
import string
import sys
from typing import Iterable

from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.type import namedtype
from pyasn1.type import univ
from pyasn1_modules import rfc8017

from toyrsa.errors import CharacterOverflowError
from toyrsa.errors import OperandOutOfRangeError
from toyrsa.rsa import Cryptosystem
from toyrsa.rsa import PublicKey

logger = logging.getLogger(__name__)

HASH_TLL = {
    "sha256": (hashlib.sha256, rfc8017.id_sha256),
    "sha384": (hashlib.sha384, rfc8017.id_sha384),
    "sha512": (hashlib.sha512, rfc8017.id_sha512),
}

HASH_OID = {
    rfc8017.id_sha256: "sha256",
    rfc8017.id_sha384: "sha384",
    rfc8017.id_sha512: "sha512",
}

# Per-character textbook RSA has no registered OID, so we hang it off rsaEncryption at branch 1.
id_RSAES_per_char = rfc8017.rsaEncryption + (1,)


class IntegerSequence(univ.SequenceOf):
    componentType = univ.Integer()


class CipherMessage(univ.Sequence):
    """Wrapper for a per-character ciphertext."""
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("encryptionAlgorithm", rfc8017.AlgorithmIdentifier()),
        namedtype.NamedType("encryptedData", IntegerSequence()),
    )


class SignedDigest(univ.Sequence):
    """Wrapper for a per-character digest signature, naming the hash that produced the digest."""
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("digestAlgorithm", rfc8017.AlgorithmIdentifier()),
        namedtype.NamedType("signature", IntegerSequence()),
    )


def digest_hex(message: str | bytes, hashf: str = "sha256", encoding: str = "utf-8") -> str:
    """Hash a message and render the digest as lowercase hexadecimal.

    Args:
        message: The message to hash. Strings are encoded with `encoding` first.
        hashf: Hash function (Implemented for sha256, sha384, sha512)
        encoding: Text encoding used for string messages.

    Returns:
        The hex digest.
    """
    if isinstance(message, str):
        message = message.encode(encoding)
    return HASH_TLL[hashf][0](message).hexdigest()


def _to_char(val: int) -> str:
    if val > sys.maxunicode:
        raise OperandOutOfRangeError(f"Recovered value {val} is beyond the last code point {sys.maxunicode}")
    return chr(val)


def append_random_letter(message: str, rng: random.Random) -> str:
    """Append one uppercase ASCII letter chosen by `rng` to the message."""
    return message + string.ascii_uppercase[rng.randrange(26)]


class MessageCodec:
    """Element-wise bridge between text and the cryptosystem.

    `encode_message` and `decode_digest` only need the public exponent, so a bare PublicKey also works for those two
    (and for `check_signature`).

    Attributes:
        system: The Cryptosystem (or PublicKey) applied to each element.
    """

    def __init__(self, system: Cryptosystem | PublicKey) -> None:
        self.system = system

    def _ordinals(self, text: str) -> list[int]:
        ordinals = [ord(ch) for ch in text]
        for pos, val in enumerate(ordinals):
            if val >= self.system.mod:
                raise CharacterOverflowError(
                    f"Character {text[pos]!r} at position {pos} has ordinal {val}, not below modulus {self.system.mod}")
        return ordinals

    def encode_message(self, text: str) -> list[int]:
        """Encrypt every character of `text`, in order.

        Raises:
            CharacterOverflowError: If any character's ordinal is not below the modulus. Checked before encrypting.
        """
        return [self.system.encrypt(val) for val in self._ordinals(text)]

    def decode_message(self, ciphertext: Iterable[int]) -> str:
        """Decrypt every integer and join the resulting characters.

        Raises:
            OperandOutOfRangeError: If an integer is outside `[0, n)` or decrypts to a value with no code point.
        """
        return "".join(_to_char(self.system.decrypt(val)) for val in ciphertext)

    def encode_digest(self, digest: str | bytes) -> list[int]:
        """Sign every hexadecimal character of a digest independently.

        Args:
            digest: The digest as hex text. Raw digest bytes are rendered to lowercase hex first.

        Returns:
            One signature integer per hex character.

        Raises:
            CharacterOverflowError: If any character's ordinal is not below the modulus.
        """
        if isinstance(digest, bytes):
            digest = digest.hex()
        return [self.system.sign(val) for val in self._ordinals(digest)]

    def decode_digest(self, signature: Iterable[int]) -> str:
        """Verify every integer and join the recovered characters into the digest text.

        Raises:
            OperandOutOfRangeError: If an integer is outside `[0, n)` or verifies to a value with no code point.
        """
        return "".join(_to_char(self.system.verify(val)) for val in signature)

    def sign_message(self, text: str, hashf: str = "sha256") -> list[int]:
        """Hash `text` and sign its hex digest."""
        return self.encode_digest(digest_hex(text, hashf))

    def check_signature(self, text: str, signature: Iterable[int], hashf: str = "sha256") -> bool:
        """Check a per-character digest signature against `text`.

        Returns:
            True if the recovered digest equals the digest of `text`, False otherwise, including when a signature
            integer is out of range.
        """
        try:
            recovered = self.decode_digest(signature)
        except ValueError as exc:
            logger.debug("Signature rejected: %s", exc)
            return False
        return recovered == digest_hex(text, hashf)


def _algorithm(oid: univ.ObjectIdentifier) -> rfc8017.AlgorithmIdentifier:
    algid = rfc8017.AlgorithmIdentifier()
    algid["algorithm"] = oid
    return algid


def _integers(values: Iterable[int]) -> IntegerSequence:
    seq = IntegerSequence().clear()
    for pos, val in enumerate(values):
        seq[pos] = val
    return seq


def pack_ciphertext(ciphertext: Iterable[int]) -> str:
    """Wrap a per-character ciphertext into a base64 DER container."""
    pld = CipherMessage()
    pld["encryptionAlgorithm"] = _algorithm(id_RSAES_per_char)
    pld["encryptedData"] = _integers(ciphertext)
    return base64.b64encode(encoder.encode(pld)).decode("ascii")


def unpack_ciphertext(blob: str) -> list[int]:
    """Unwrap a container made by `pack_ciphertext`.

    Raises:
        RuntimeError: If the container names an unknown encryption algorithm.
    """
    pld, _ = decoder.decode(base64.b64decode(blob.encode("ascii")), asn1Spec=CipherMessage())
    if pld["encryptionAlgorithm"]["algorithm"] != id_RSAES_per_char:
        raise RuntimeError("Unknown encryption algorithm.")
    return [int(val) for val in pld["encryptedData"]]


def pack_signature(signature: Iterable[int], hashf: str = "sha256") -> str:
    """Wrap a per-character digest signature, and the hash it was made with, into a base64 DER container."""
    pld = SignedDigest()
    pld["digestAlgorithm"] = _algorithm(HASH_TLL[hashf][1])
    pld["signature"] = _integers(signature)
    return base64.b64encode(encoder.encode(pld)).decode("ascii")


def unpack_signature(blob: str) -> tuple[str, list[int]]:
    """Unwrap a container made by `pack_signature`.

    Returns:
        Tuple of (hash function name, signature integers).

    Raises:
        RuntimeError: If the container names an unknown hash algorithm.
    """
    pld, _ = decoder.decode(base64.b64decode(blob.encode("ascii")), asn1Spec=SignedDigest())
    try:
        hashf = HASH_OID[pld["digestAlgorithm"]["algorithm"]]
    except KeyError as exc:
        raise RuntimeError("Unknown digest algorithm.") from exc
    return hashf, [int(val) for val in pld["signature"]]
