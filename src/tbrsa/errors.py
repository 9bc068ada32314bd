"""Exception hierarchy for tbrsa.

Every error the library raises on purpose derives from `TBRSAError`, and additionally from the builtin exception a
caller would expect for that situation, so `except ValueError` keeps working for parameter and format problems.
Failures while reading or writing files are not wrapped and surface as the builtin `OSError`.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class TBRSAError(Exception):
    """Base exception for all tbrsa errors."""


class InvalidParameterError(TBRSAError, ValueError):
    """A bit count, exponent or numeric argument is unusable."""


class KeyFormatError(TBRSAError, ValueError):
    """A key file is missing required fields or they do not parse."""


class GenerationFailedError(TBRSAError, RuntimeError):
    """The bounded prime search ran out of attempts."""


class MessageRangeError(TBRSAError, ValueError):
    """A message or ciphertext representative is outside [0, n-1]."""
