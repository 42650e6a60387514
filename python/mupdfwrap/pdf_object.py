# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes

from .buffer import Buffer
from .errors import PreconditionError
from .handles import Handle, Kind, check_kind
from .native import libfile
from .shim import (ffi_try, to_c_int, to_c_int64, to_cstr, to_float, borrowed_string,
                   take_string)

IS_INDIRECT = 0
IS_NULL = 1
IS_BOOL = 2
IS_INT = 3
IS_REAL = 4
IS_NUMBER = 5
IS_STRING = 6
IS_NAME = 7
IS_ARRAY = 8
IS_DICT = 9
IS_STREAM = 10


class PdfObject(Handle):
    """A PDF object: a scalar, array, dictionary, stream or reference.

    ``null``, ``true`` and ``false`` are static values in the native
    library. Their handles hold no reference and closing them does nothing.
    Objects created in the context of a document keep that document alive.
    """

    kind = Kind.PDF_OBJ
    _static = False
    _bound = None

    @classmethod
    def _from_static(cls, ptr):
        self = cls.__new__(cls)
        self._ptr = ptr
        self._static = True
        return self

    def native_pointer(self):
        if self._static:
            return self._ptr
        return super().native_pointer()

    def clone(self):
        if self._static:
            return self
        return super().clone()

    def close(self):
        if self._static:
            return
        bound = self._bound
        self._bound = None
        super().close()
        if bound is not None:
            bound.close()

    @classmethod
    def null(cls):
        return cls._from_static(libfile.mupdf_pdf_new_null())

    @classmethod
    def new_bool(cls, value):
        return cls._from_static(libfile.mupdf_pdf_new_bool(bool(value)))

    @classmethod
    def true(cls):
        return cls.new_bool(True)

    @classmethod
    def false(cls):
        return cls.new_bool(False)

    @classmethod
    def new_int(cls, value):
        return cls.from_owned(ffi_try(libfile.mupdf_pdf_new_int, to_c_int64(value, 'Integer value')))

    @classmethod
    def new_real(cls, value):
        return cls.from_owned(ffi_try(libfile.mupdf_pdf_new_real, to_float(value, 'Real value')))

    @classmethod
    def new_string(cls, value):
        return cls.from_owned(ffi_try(libfile.mupdf_pdf_new_string, to_cstr(value, 'String value')))

    @classmethod
    def new_name(cls, value):
        return cls.from_owned(ffi_try(libfile.mupdf_pdf_new_name, to_cstr(value, 'Name')))

    @classmethod
    def new_indirect(cls, document, num, gen=0):
        check_kind(document, Kind.PDF_DOCUMENT, 'Document')
        ptr = ffi_try(libfile.mupdf_pdf_new_indirect, document, to_c_int(num, 'Object number'),
                      to_c_int(gen, 'Generation'))
        return cls.from_owned(ptr, document)

    @classmethod
    def new_array(cls, document=None, capacity=0):
        check_kind(document, Kind.PDF_DOCUMENT, 'Document', optional=True)
        ptr = ffi_try(libfile.mupdf_pdf_new_array, document, to_c_int(capacity, 'Capacity'))
        return cls.from_owned(ptr, document)

    @classmethod
    def new_dict(cls, document=None, capacity=0):
        check_kind(document, Kind.PDF_DOCUMENT, 'Document', optional=True)
        ptr = ffi_try(libfile.mupdf_pdf_new_dict, document, to_c_int(capacity, 'Capacity'))
        return cls.from_owned(ptr, document)

    @classmethod
    def parse(cls, source, document=None):
        """Parse one object from PDF syntax, such as ``<< /Type /Page >>``."""
        check_kind(document, Kind.PDF_DOCUMENT, 'Document', optional=True)
        ptr = ffi_try(libfile.mupdf_pdf_obj_from_str, document, to_cstr(source, 'Object source'))
        return cls.from_owned(ptr, document)

    @classmethod
    def from_value(cls, value):
        if isinstance(value, PdfObject):
            return value.clone()
        if value is None:
            return cls.null()
        if isinstance(value, bool):
            return cls.new_bool(value)
        if isinstance(value, int):
            return cls.new_int(value)
        if isinstance(value, float):
            return cls.new_real(value)
        if isinstance(value, str):
            return cls.new_string(value)
        raise PreconditionError(f'Can not convert {type(value).__name__} to a PDF object.')

    def _child(self, ptr):
        if not ptr:
            return None
        return PdfObject.from_owned(ptr, self._parent)

    def _is(self, which):
        return bool(ffi_try(libfile.mupdf_pdf_obj_is, self, which))

    def is_indirect(self):
        return self._is(IS_INDIRECT)

    def is_null(self):
        return self._is(IS_NULL)

    def is_bool(self):
        return self._is(IS_BOOL)

    def is_int(self):
        return self._is(IS_INT)

    def is_real(self):
        return self._is(IS_REAL)

    def is_number(self):
        return self._is(IS_NUMBER)

    def is_string(self):
        return self._is(IS_STRING)

    def is_name(self):
        return self._is(IS_NAME)

    def is_array(self):
        return self._is(IS_ARRAY)

    def is_dict(self):
        return self._is(IS_DICT)

    def is_stream(self):
        return self._is(IS_STREAM)

    def to_bool(self):
        return bool(ffi_try(libfile.mupdf_pdf_to_bool, self))

    def to_int(self):
        return ffi_try(libfile.mupdf_pdf_to_int, self)

    def to_float(self):
        return ffi_try(libfile.mupdf_pdf_to_float, self)

    def to_indirect(self):
        return ffi_try(libfile.mupdf_pdf_to_indirect, self)

    def to_string(self):
        return borrowed_string(ffi_try(libfile.mupdf_pdf_to_string, self))

    def to_name(self):
        return borrowed_string(ffi_try(libfile.mupdf_pdf_to_name, self))

    def to_bytes(self):
        n = ctypes.c_size_t(0)
        ptr = ffi_try(libfile.mupdf_pdf_to_bytes, self, ctypes.pointer(n))
        if not ptr:
            return b''
        return ctypes.string_at(ptr, n.value)

    def resolve(self):
        return self._child(ffi_try(libfile.mupdf_pdf_resolve_indirect, self))

    def deep_copy(self):
        return PdfObject.from_owned(ffi_try(libfile.mupdf_pdf_clone_obj, self), self._parent)

    def document(self):
        """Return the document this object belongs to, or None."""
        if self._bound is not None and not self._bound.closed:
            return self._bound
        ptr = ffi_try(libfile.mupdf_pdf_get_bound_document, self)
        if not ptr:
            return None
        from .pdf_document import PdfDocument
        self._bound = PdfDocument.adopt(ptr)
        return self._bound

    # Arrays

    def array_len(self):
        return ffi_try(libfile.mupdf_pdf_array_len, self)

    def array_get(self, index):
        return self._child(ffi_try(libfile.mupdf_pdf_array_get, self, to_c_int(index, 'Index')))

    def array_put(self, index, value):
        with PdfObject.from_value(value) as item:
            ffi_try(libfile.mupdf_pdf_array_put, self, to_c_int(index, 'Index'), item)

    def array_push(self, value):
        with PdfObject.from_value(value) as item:
            ffi_try(libfile.mupdf_pdf_array_push, self, item)

    def array_delete(self, index):
        ffi_try(libfile.mupdf_pdf_array_delete, self, to_c_int(index, 'Index'))

    # Dictionaries

    def _with_key(self, key, func, *rest):
        if isinstance(key, PdfObject):
            return ffi_try(func, self, key, *rest)
        with PdfObject.new_name(key) as name:
            return ffi_try(func, self, name, *rest)

    def dict_len(self):
        return ffi_try(libfile.mupdf_pdf_dict_len, self)

    def dict_get(self, key):
        return self._child(self._with_key(key, libfile.mupdf_pdf_dict_get))

    def dict_get_key(self, index):
        return self._child(ffi_try(libfile.mupdf_pdf_dict_get_key, self, to_c_int(index, 'Index')))

    def dict_get_val(self, index):
        return self._child(ffi_try(libfile.mupdf_pdf_dict_get_val, self, to_c_int(index, 'Index')))

    def dict_get_inheritable(self, key):
        return self._child(self._with_key(key, libfile.mupdf_pdf_dict_get_inheritable))

    def dict_put(self, key, value):
        with PdfObject.from_value(value) as item:
            self._with_key(key, libfile.mupdf_pdf_dict_put, item)

    def dict_delete(self, key):
        self._with_key(key, libfile.mupdf_pdf_dict_delete)

    def dict_items(self):
        for i in range(self.dict_len()):
            yield self.dict_get_key(i), self.dict_get_val(i)

    # Streams and updates

    def read_stream(self):
        with Buffer.from_owned(ffi_try(libfile.mupdf_pdf_read_stream, self, False)) as buf:
            return buf.to_bytes()

    def read_raw_stream(self):
        with Buffer.from_owned(ffi_try(libfile.mupdf_pdf_read_stream, self, True)) as buf:
            return buf.to_bytes()

    def write_object(self, obj):
        """Replace the object this indirect reference points to."""
        check_kind(obj, Kind.PDF_OBJ, 'Object')
        ffi_try(libfile.mupdf_pdf_write_object, self, obj)

    def write_stream(self, data, compressed=False):
        if isinstance(data, Buffer):
            ffi_try(libfile.mupdf_pdf_write_stream_buffer, self, data, int(bool(compressed)))
            return
        with Buffer.from_bytes(data) as buf:
            ffi_try(libfile.mupdf_pdf_write_stream_buffer, self, buf, int(bool(compressed)))

    def to_source(self, tight=True, ascii=False):
        return take_string(ffi_try(libfile.mupdf_pdf_obj_to_string, self, bool(tight), bool(ascii)))

    def __str__(self):
        return self.to_source()

    def __repr__(self):
        if self.closed:
            return super().__repr__()
        text = self.to_source()
        if len(text) > 60:
            text = text[:57] + '...'
        return f'<PdfObject {text}>'
