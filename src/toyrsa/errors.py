"""Exceptions raised by the toy cryptosystem.

Every failure is a caller-visible precondition error, so nothing here is retried. Each class also derives from the
matching builtin (`ValueError` for bad input, `RuntimeError` for an exhausted search) so callers catching those keep
working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class ToyRSAError(Exception):
    """Base class for all toyrsa errors."""


class DegenerateModulusError(ToyRSAError, ValueError):
    """The totient is too small (<= 2) for an exponent to be derived."""


class ExponentSearchExhaustedError(ToyRSAError, RuntimeError):
    """A bounded exponent search finished without finding a candidate."""


class OperandOutOfRangeError(ToyRSAError, ValueError):
    """An integer operand lies outside `[0, n)`."""


class CharacterOverflowError(ToyRSAError, ValueError):
    """A character ordinal is not below the modulus and could not round-trip."""
