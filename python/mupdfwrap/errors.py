# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from enum import Enum


class ErrorKind(Enum):
    GENERIC = 1
    SYNTAX = 2
    RANGE = 3
    NOT_FOUND = 4
    FORMAT = 5
    CRYPTO = 6
    PASSWORD_REQUIRED = 7
    PASSWORD_FAILED = 8
    SYSTEM = 9
    MEMORY = 10
    PRECONDITION = 11
    ABORT = 12

    @classmethod
    def from_code(cls, code):
        try:
            return cls(code)
        except ValueError:
            return cls.GENERIC


class MuPDFError(Exception):
    """An error reported by the native library or by the wrapper around it.

    ``kind`` is an :class:`ErrorKind`, ``message`` the text the library
    produced. Neither is localized.
    """

    def __init__(self, kind, message):
        super().__init__(f'{kind.name.lower()}: {message}')
        self.kind = kind
        self.message = message


class PreconditionError(MuPDFError):
    """Arguments were rejected before the native library was entered."""

    def __init__(self, message):
        super().__init__(ErrorKind.PRECONDITION, message)


def error_for(kind, message):
    if kind is ErrorKind.PRECONDITION:
        return PreconditionError(message)
    return MuPDFError(kind, message)
