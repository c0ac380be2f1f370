# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import random
import string

from cryptography.hazmat.primitives import hashes
from pyasn1.codec.der import encoder
import pytest

import toyrsa
from toyrsa import codec
from toyrsa.errors import CharacterOverflowError

standard_payload = "The quick brown fox jumps over the lazy dog1234567890!@#$%^&*()-_=+[{}];:\\|<>,./?~`'\""
HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
HELLO_A_SHA256 = "105d6b297d17fb03d5ce7489cc466b9e2340f7fe6f28f8fc724c90b0967ffd30"


@pytest.fixture(scope="module")
def system() -> toyrsa.Cryptosystem:
    return toyrsa.Cryptosystem.from_primes(53, 59)


@pytest.fixture(scope="module")
def mc(system) -> codec.MessageCodec:
    return codec.MessageCodec(system)


@pytest.fixture(scope="module", params=codec.HASH_TLL.keys())
def hashf(request) -> str:
    return request.param


@pytest.mark.parametrize("text", ["", "Y", "Hi there!", standard_payload, string.printable, "héllo wörld"])
def test_message_round_trip(mc, text):
    assert mc.decode_message(mc.encode_message(text)) == text


def test_encode_message_elementwise(mc, system):
    assert mc.encode_message("Y") == [1394]
    assert mc.encode_message(standard_payload) == [system.encrypt(ord(ch)) for ch in standard_payload]


def test_encode_message_keeps_order(mc):
    forward = mc.encode_message("abc")
    assert mc.encode_message("cba") == forward[::-1]


def test_encode_message_overflow():
    small = codec.MessageCodec(toyrsa.Cryptosystem.from_primes(3, 5))
    with pytest.raises(CharacterOverflowError, match="position 2"):
        small.encode_message("\x01\x02A")


def test_encode_message_overflow_before_encrypting(mocker, system):
    mc = codec.MessageCodec(system)
    spy = mocker.spy(system, "encrypt")
    with pytest.raises(CharacterOverflowError):
        mc.encode_message("ok ✓")
    spy.assert_not_called()


def test_encode_message_public_only(system, mc):
    pub_codec = codec.MessageCodec(system.pub)
    assert pub_codec.encode_message("Hi there!") == mc.encode_message("Hi there!")


def test_decode_message_rejects_out_of_range(mc):
    with pytest.raises(toyrsa.OperandOutOfRangeError):
        mc.decode_message([1394, 3127])


def test_digest_round_trip(mc, hashf):
    digest = codec.digest_hex(standard_payload, hashf)
    assert mc.decode_digest(mc.encode_digest(digest)) == digest


def test_encode_digest_bytes(mc):
    raw = bytes.fromhex(HELLO_SHA256)
    assert mc.encode_digest(raw) == mc.encode_digest(HELLO_SHA256)
    assert len(mc.encode_digest(raw)) == 64


def test_encode_digest_elementwise(mc, system):
    assert mc.encode_digest("0a") == [system.sign(ord("0")), system.sign(ord("a"))]


def test_encode_digest_overflow():
    small = codec.MessageCodec(toyrsa.Cryptosystem.from_primes(3, 5))
    with pytest.raises(CharacterOverflowError):
        small.encode_digest("ff")


def test_digest_hex_known():
    assert codec.digest_hex("hello") == HELLO_SHA256
    assert codec.digest_hex(b"helloA") == HELLO_A_SHA256


def test_digest_hex_matches_cryptography(hashf):
    hasher = hashes.Hash(getattr(hashes, hashf.upper())())
    hasher.update(standard_payload.encode("utf-8"))
    assert codec.digest_hex(standard_payload, hashf) == hasher.finalize().hex()


def test_signature_sensitivity(mc):
    sig = mc.sign_message("hello")
    sig_a = mc.sign_message("helloA")
    assert len(sig) == len(sig_a) == 64
    assert sig[0] != sig_a[0]
    shared = [pos for pos, (a, b) in enumerate(zip(sig, sig_a)) if a == b]
    # Equal signature integers appear only where the hex digits happen to agree, at roughly chance rate.
    assert shared == [pos for pos, (a, b) in enumerate(zip(HELLO_SHA256, HELLO_A_SHA256)) if a == b]
    assert len(shared) < 16


def test_check_signature(mc, hashf):
    sig = mc.sign_message(standard_payload, hashf)
    assert mc.check_signature(standard_payload, sig, hashf)
    assert not mc.check_signature(standard_payload + "!", sig, hashf)


def test_check_signature_public_only(system, mc):
    sig = mc.sign_message("hello")
    assert codec.MessageCodec(system.pub).check_signature("hello", sig)


def test_check_signature_out_of_range(mc):
    sig = mc.sign_message("hello")
    sig[3] = 99999
    assert not mc.check_signature("hello", sig)


def test_check_signature_wrong_hash(mc):
    sig = mc.sign_message("hello", "sha256")
    assert not mc.check_signature("hello", sig, "sha384")


def test_append_random_letter():
    rng = random.Random(1234)
    res = codec.append_random_letter("hello", rng)
    assert res[:-1] == "hello"
    assert res[-1] in string.ascii_uppercase
    assert codec.append_random_letter("hello", random.Random(1234)) == res


@pytest.mark.parametrize("roll,letter", [(0, "A"), (25, "Z"), (12, "M")])
def test_append_random_letter_uses_rng(mocker, roll, letter):
    rng = mocker.Mock(spec=random.Random)
    rng.randrange.return_value = roll
    assert codec.append_random_letter("hello", rng) == "hello" + letter
    rng.randrange.assert_called_once_with(26)


@pytest.mark.parametrize("seq", [[], [0], [1394, 12, 3126]])
def test_pack_ciphertext(seq):
    blob = codec.pack_ciphertext(seq)
    base64.b64decode(blob, validate=True)
    assert codec.unpack_ciphertext(blob) == seq


def test_unpack_ciphertext_unknown_algorithm():
    pld = codec.CipherMessage()
    pld["encryptionAlgorithm"] = codec._algorithm(codec.rfc8017.id_sha256)  # pylint: disable=protected-access
    pld["encryptedData"] = codec._integers([1, 2])  # pylint: disable=protected-access
    blob = base64.b64encode(encoder.encode(pld)).decode("ascii")
    with pytest.raises(RuntimeError, match="Unknown encryption algorithm."):
        codec.unpack_ciphertext(blob)


def test_pack_signature(mc, hashf):
    sig = mc.sign_message(standard_payload, hashf)
    assert codec.unpack_signature(codec.pack_signature(sig, hashf)) == (hashf, sig)


def test_unpack_signature_unknown_algorithm():
    pld = codec.SignedDigest()
    pld["digestAlgorithm"] = codec._algorithm(codec.id_RSAES_per_char)  # pylint: disable=protected-access
    pld["signature"] = codec._integers([1, 2])  # pylint: disable=protected-access
    blob = base64.b64encode(encoder.encode(pld)).decode("ascii")
    with pytest.raises(RuntimeError, match="Unknown digest algorithm."):
        codec.unpack_signature(blob)


def test_ciphertext_container_end_to_end(mc):
    blob = codec.pack_ciphertext(mc.encode_message(standard_payload))
    assert mc.decode_message(codec.unpack_ciphertext(blob)) == standard_payload


def test_decode_beyond_code_points():
    # n = 1456813 exceeds the last Unicode code point.
    large = toyrsa.Cryptosystem.from_primes(1201, 1213, strategy="euclid")
    mc = codec.MessageCodec(large)
    with pytest.raises(toyrsa.OperandOutOfRangeError, match="code point"):
        mc.decode_message([large.encrypt(1_400_000)])
    with pytest.raises(toyrsa.OperandOutOfRangeError, match="code point"):
        mc.decode_digest([large.sign(1_400_000)])
    assert mc.decode_message(mc.encode_message("still fine")) == "still fine"
