# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes

from .errors import PreconditionError
from .handles import Handle, Kind
from .native import libfile
from .shim import ffi_try, ffi_call, to_c_size, to_cstr


class Buffer(Handle):
    kind = Kind.BUFFER

    def __init__(self, capacity=0):
        self._init_owned(ffi_try(libfile.mupdf_new_buffer, to_c_size(capacity, 'Capacity')))

    @classmethod
    def from_bytes(cls, data):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise PreconditionError('Buffer data must be a bytes-like object.')
        data = bytes(data)
        return cls.from_owned(ffi_try(libfile.mupdf_buffer_from_bytes, data, len(data)))

    @classmethod
    def from_str(cls, text):
        return cls.from_owned(ffi_try(libfile.mupdf_buffer_from_str, to_cstr(text, 'Buffer text')))

    @classmethod
    def from_base64(cls, text):
        return cls.from_owned(ffi_try(libfile.mupdf_buffer_from_base64, to_cstr(text, 'Base64 text')))

    def __len__(self):
        return ffi_call(libfile.mupdf_buffer_len, self)

    def read_bytes(self, at, n):
        to_c_size(at, 'Offset')
        to_c_size(n, 'Read length')
        out = ctypes.create_string_buffer(n)
        got = ffi_try(libfile.mupdf_buffer_read_bytes, self, at, out, n)
        return out.raw[:got]

    def write_bytes(self, data):
        if isinstance(data, str):
            data = data.encode('UTF-8')
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise PreconditionError('Buffer data must be a bytes-like object.')
        data = bytes(data)
        ffi_try(libfile.mupdf_buffer_write_bytes, self, data, len(data))

    def to_bytes(self):
        return self.read_bytes(0, len(self))

    def to_str(self):
        return self.to_bytes().decode('UTF-8')
