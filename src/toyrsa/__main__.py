"""The Command Line Interface for the toy cryptosystem.

Every subcommand runs non-interactively; missing arguments fall back to the defaults in `help_dict` or abort. The
`demo` subcommand prints the classroom walkthrough (encrypt, decrypt, sign, verify, then re-sign an altered message)
in one go.

Typical usage example:

    toyrsa demo --message "Hello"
    OR
    python -m toyrsa keygen -p 53 -q 59 --private_key key.pem --public_key key.pub
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import binascii
import logging
import pathlib
import random
import sys
import typing
import warnings

from pyasn1 import error

import toyrsa
from toyrsa import codec
from toyrsa import keys


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None


help_dict: dict[str, HelpData] = {
    "keygen": HelpData("Write a key pair derived from two primes."),
    "encrypt": HelpData("Encrypt a message character by character."),
    "decrypt": HelpData("Decrypt a ciphertext container."),
    "sign": HelpData("Sign the hex digest of a message character by character."),
    "verify": HelpData("Verify a signature container against a message."),
    "demo": HelpData("Run the whole walkthrough on one message."),
    "p": HelpData(description="The first prime.", format=int, default=53),
    "q": HelpData(description="The second prime.", format=int, default=59),
    "public_key": HelpData(description="Location of the public key file.", format=pathlib.Path),
    "private_key": HelpData(description="Location of the private key file.", format=pathlib.Path),
    "message": HelpData(description="Message or path to file containing payload. If Path start with `P:`"),
    "signature": HelpData(description="The signature container to validate against the message."),
    "sha": HelpData(description="Hash function for the digest.", choices=list(codec.HASH_TLL), default="sha256"),
    "seed": HelpData(description="Seed for the random letter appended in the demo.", format=int),
    "search_limit": HelpData(description="Maximum candidates tried by the exponent searches.",
                             format=int,
                             default=keys.DEFAULT_SEARCH_LIMIT),
}

needs = {
    "keygen": ("p", "q", "public_key", "private_key", "search_limit"),
    "encrypt": ("public_key", "message"),
    "decrypt": ("private_key", "message", "search_limit"),
    "sign": ("private_key", "message", "sha", "search_limit"),
    "verify": ("public_key", "message", "signature"),
    "demo": ("p", "q", "message", "sha", "search_limit"),
}

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-k", type=help_dict["public_key"].format, help=help_dict["public_key"].description)
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key",
                     "-K",
                     type=help_dict["private_key"].format,
                     help=help_dict["private_key"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", "-m", type=help_dict["message"].format, help=help_dict["message"].description)
primes = argparse.ArgumentParser(add_help=False)
primes.add_argument("-p", type=help_dict["p"].format, help=help_dict["p"].description)
primes.add_argument("-q", type=help_dict["q"].format, help=help_dict["q"].description)
limits = argparse.ArgumentParser(add_help=False)
limits.add_argument("--search-limit",
                    dest="search_limit",
                    type=help_dict["search_limit"].format,
                    help=help_dict["search_limit"].description)
sha = argparse.ArgumentParser(add_help=False)
sha.add_argument("--sha", "-s", choices=help_dict["sha"].choices, help=help_dict["sha"].description)
corep = argparse.ArgumentParser(prog="toyrsa")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {toyrsa.__version__}")
corep.add_argument("--verbose", "-V", action="store_true", help="Enable debug logging")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands", required=True)

keygen = commands.add_parser("keygen", parents=[primes, privkey, pubkey, limits], help=help_dict["keygen"].description)
keygen.add_argument("--overwrite", "-o", action="store_true", help="Overwrite existing key files")
encrypt = commands.add_parser("encrypt", parents=[pubkey, payloads], help=help_dict["encrypt"].description)
decrypt = commands.add_parser("decrypt", parents=[privkey, payloads, limits], help=help_dict["decrypt"].description)
sign = commands.add_parser("sign", parents=[privkey, payloads, sha, limits], help=help_dict["sign"].description)
verify = commands.add_parser("verify", parents=[pubkey, payloads], help=help_dict["verify"].description)
verify.add_argument("--signature", "-S", type=help_dict["signature"].format, help=help_dict["signature"].description)
demo = commands.add_parser("demo", parents=[primes, payloads, sha, limits], help=help_dict["demo"].description)
demo.add_argument("--seed", type=help_dict["seed"].format, help=help_dict["seed"].description)


def fill_defaults(args: argparse.Namespace) -> None:
    """Fill unset arguments from `help_dict`, failing on those without a default."""
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is not None:
            continue
        default = help_dict[reqs].default
        if default is None:
            raise IOError(f"Argument {reqs} is missing.")
        setattr(args, reqs, default)


def check_message(mess: str, enc: str = "utf-8") -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        mess = mess[2:]
        with open(mess, "r", encoding=enc) as f:
            mess = f.read()
    return mess


def run_demo(system: toyrsa.Cryptosystem, message: str, hashf: str, rng: random.Random) -> None:
    """Print the walkthrough for one message."""
    mc = toyrsa.MessageCodec(system)
    print(f"Public exponent e = {system.pub.expo}, private exponent d = {system.expo}, modulus n = {system.mod}\n")
    encrypted = mc.encode_message(message)
    print(f"The encrypted message is: {encrypted}\n")
    print(f"The decrypted message is: {mc.decode_message(encrypted)}\n")
    message_hash = codec.digest_hex(message, hashf)
    signature = mc.encode_digest(message_hash)
    print(f"The message signature is: {signature}\n")
    print(f"The message hash is: {message_hash}")
    print(f"The hash derived from the message signature is: {mc.decode_digest(signature)}\n")
    message2 = toyrsa.append_random_letter(message, rng)
    print(f"The plain-text message with one character appended is: {message2}\n")
    print(f"The message signature with only one character appended is: {mc.sign_message(message2, hashf)}")


def main(argv: list[str] | None = None) -> None:
    """Core Command Line Interface."""
    args = corep.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    fill_defaults(args)
    warnings.warn("Textbook RSA without padding is unsecure! Please use with care.", RuntimeWarning)
    try:
        match args.subcommand:
            case "keygen":
                if (args.private_key.exists() or args.public_key.exists()) and not args.overwrite:
                    print("Destination private or public key already exists!")
                    return
                if args.p == args.q:
                    raise ValueError(f"p and q must be distinct primes, both are {args.p}")
                for prm in (args.p, args.q):
                    if not keys.looks_prime(prm):
                        warnings.warn(f"{prm} is not prime, decryption will not round-trip.", RuntimeWarning)
                system = toyrsa.Cryptosystem.from_primes(args.p, args.q, search_limit=args.search_limit)
                system.export(args.private_key)
                system.pub.export(args.public_key)
                print(f"Key pair generated! n={system.mod}, e={system.pub.expo}")
            case "encrypt":
                mc = toyrsa.MessageCodec(toyrsa.PublicKey.import_key(args.public_key))
                print(codec.pack_ciphertext(mc.encode_message(check_message(args.message))))
            case "decrypt":
                system = toyrsa.Cryptosystem.import_key(args.private_key, search_limit=args.search_limit)
                blob = check_message(args.message, "ascii")
                print(toyrsa.MessageCodec(system).decode_message(codec.unpack_ciphertext(blob.strip())))
            case "sign":
                system = toyrsa.Cryptosystem.import_key(args.private_key, search_limit=args.search_limit)
                seq = toyrsa.MessageCodec(system).sign_message(check_message(args.message), args.sha)
                print(codec.pack_signature(seq, args.sha))
            case "verify":
                mc = toyrsa.MessageCodec(toyrsa.PublicKey.import_key(args.public_key))
                try:
                    hashf, seq = codec.unpack_signature(args.signature)
                    verified = mc.check_signature(check_message(args.message), seq, hashf)
                except (binascii.Error, error.PyAsn1Error, RuntimeError):
                    verified = False
                if verified:
                    print("Signature Verified!")
                else:
                    print("Signature Verification Failed!")
                    sys.exit(1)
            case "demo":
                system = toyrsa.Cryptosystem.from_primes(args.p, args.q, search_limit=args.search_limit)
                run_demo(system, check_message(args.message), args.sha, random.Random(args.seed))
    except (toyrsa.ToyRSAError, ValueError) as exc:
        corep.error(str(exc))


if __name__ == "__main__":
    main()
