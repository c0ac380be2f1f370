"""A from-scratch toy RSA cryptosystem, built for teaching.

Provides key derivation from two small primes, integer encryption, decryption, signing and verification, and a
per-character codec for text messages and hash digests. It uses no padding and no secure prime generation: do not
protect anything real with it.

Typical usage example:

    cs = Cryptosystem(KeyMaterial(53, 59))
    codec = MessageCodec(cs)
    c = codec.encode_message("Hi there!")
    r = codec.decode_message(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from toyrsa.codec import append_random_letter
from toyrsa.codec import digest_hex
from toyrsa.codec import MessageCodec
from toyrsa.errors import CharacterOverflowError
from toyrsa.errors import DegenerateModulusError
from toyrsa.errors import ExponentSearchExhaustedError
from toyrsa.errors import OperandOutOfRangeError
from toyrsa.errors import ToyRSAError
from toyrsa.keys import KeyMaterial
from toyrsa.rsa import Cryptosystem
from toyrsa.rsa import PublicKey

__version__ = "0.1.0"
__all__ = [
    "KeyMaterial",
    "Cryptosystem",
    "PublicKey",
    "MessageCodec",
    "digest_hex",
    "append_random_letter",
    "ToyRSAError",
    "DegenerateModulusError",
    "ExponentSearchExhaustedError",
    "OperandOutOfRangeError",
    "CharacterOverflowError",
]
