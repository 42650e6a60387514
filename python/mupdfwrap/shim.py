# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

# Calling convention of the native shim. Every fallible entry point takes
# the calling thread's context first and an error slot last. A filled slot
# is converted to an exception and released exactly once.

import ctypes
import math
import os

from .context import context
from .errors import ErrorKind, PreconditionError, error_for
from .geometry import Quad
from .native import libfile, ErrorStruct

INT_MIN = -2**31
INT_MAX = 2**31 - 1
INT64_MIN = -2**63
INT64_MAX = 2**63 - 1


def _to_native(arg):
    resolve = getattr(arg, 'native_pointer', None)
    if resolve is not None:
        return resolve()
    return arg


def _call(func, args):
    try:
        return func(*args)
    except ctypes.ArgumentError as e:
        raise PreconditionError(f'Invalid argument: {e}') from None


def ffi_try(func, *args):
    err = ctypes.POINTER(ErrorStruct)()
    cargs = [context()]
    cargs += [_to_native(a) for a in args]
    cargs.append(ctypes.pointer(err))
    result = _call(func, cargs)
    if err:
        payload = err.contents
        kind = ErrorKind.from_code(payload.type)
        message = payload.message.decode('UTF-8', errors='replace') if payload.message else ''
        libfile.mupdf_drop_error(err)
        raise error_for(kind, message)
    return result


def ffi_call(func, *args):
    cargs = [context()]
    cargs += [_to_native(a) for a in args]
    return _call(func, cargs)


def check_not_null(ptr, what):
    if not ptr:
        raise error_for(ErrorKind.GENERIC, f'{what} returned no object.')
    return ptr


def to_cstr(value, what='String'):
    if isinstance(value, str):
        value = value.encode('UTF-8')
    elif not isinstance(value, bytes):
        raise PreconditionError(f'{what} must be a string.')
    if b'\0' in value:
        raise PreconditionError(f'{what} must not contain NUL characters.')
    return value


def to_bytepath(filename):
    if isinstance(filename, bytes):
        path = filename
    elif isinstance(filename, str):
        path = filename.encode('UTF-8')
    elif isinstance(filename, os.PathLike):
        path = os.fsencode(filename)
    else:
        raise PreconditionError('File name must be a string, bytes or path object.')
    if b'\0' in path:
        raise PreconditionError('File name must not contain NUL characters.')
    return path


def to_c_int(value, what='Integer'):
    if isinstance(value, bool) or not isinstance(value, int):
        raise PreconditionError(f'{what} must be an integer.')
    if not INT_MIN <= value <= INT_MAX:
        raise PreconditionError(f'{what} {value} does not fit in a C int.')
    return value


def to_c_int64(value, what='Integer'):
    if isinstance(value, bool) or not isinstance(value, int):
        raise PreconditionError(f'{what} must be an integer.')
    if not INT64_MIN <= value <= INT64_MAX:
        raise PreconditionError(f'{what} {value} does not fit in 64 bits.')
    return value


def to_c_size(value, what='Size'):
    if isinstance(value, bool) or not isinstance(value, int):
        raise PreconditionError(f'{what} must be an integer.')
    if value < 0:
        raise PreconditionError(f'{what} must not be negative.')
    return value


def to_float(value, what='Value'):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PreconditionError(f'{what} must be a number.')
    return float(value)


def to_finite_float(value, what='Value'):
    value = to_float(value, what)
    if not math.isfinite(value):
        raise PreconditionError(f'{what} must be finite.')
    return value


def to_array(ctype, array):
    if not isinstance(array, (list, tuple)):
        raise PreconditionError('Array value argument must be a list or tuple.')
    return (ctype * len(array))(*array), len(array)


def to_float_array(values, what='Color'):
    if not isinstance(values, (list, tuple)):
        raise PreconditionError(f'{what} must be a list or tuple.')
    for v in values:
        to_float(v, f'{what} component')
    return to_array(ctypes.c_float, values)


def check_enum(value, enum_type, what):
    if not isinstance(value, enum_type):
        raise PreconditionError(f'{what} must be a {enum_type.__name__} value.')
    return value.value


def check_instance(value, cls, what, optional=False):
    if value is None and optional:
        return None
    if not isinstance(value, cls):
        raise PreconditionError(f'{what} must be a {cls.__name__} object.')
    return value


def take_string(ptr):
    """Copy and free a string the shim allocated for the caller."""
    if not ptr:
        return None
    try:
        return ctypes.string_at(ptr).decode('UTF-8', errors='replace')
    finally:
        libfile.mupdf_drop_str(context(), ptr)


def borrowed_string(value):
    if value is None:
        return None
    return value.decode('UTF-8', errors='replace')


def take_quads(ptr, count):
    """Copy ``count`` quads out of a shim-allocated array and free it."""
    if not ptr:
        return []
    try:
        return [Quad.from_buffer_copy(ptr[i]) for i in range(count)]
    finally:
        libfile.mupdf_drop_quads(context(), ptr)
