# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes

from .buffer import Buffer
from .colorspace import Colorspace
from .cookie import Cookie
from .device import Device
from .errors import PreconditionError
from .geometry import as_rect
from .handles import Handle, Kind
from .native import libfile
from .outline import Outline
from .page import Page
from .shim import ffi_try, to_bytepath, to_c_int, to_cstr, to_finite_float, check_instance, take_string

METADATA_KEYS = ('format', 'encryption', 'info:Title', 'info:Author', 'info:Subject',
                 'info:Keywords', 'info:Creator', 'info:Producer', 'info:CreationDate',
                 'info:ModDate')


def _buffer_argument(data):
    if isinstance(data, Buffer):
        return data.clone()
    return Buffer.from_bytes(data)


class Document(Handle):
    kind = Kind.DOCUMENT

    def __init__(self, filename):
        self._init_owned(ffi_try(libfile.mupdf_open_document, to_bytepath(filename)))

    @classmethod
    def from_bytes(cls, data, magic):
        """Open a document held in memory. ``magic`` is a file name or MIME type."""
        magic = to_cstr(magic, 'Document magic')
        with _buffer_argument(data) as buf:
            return cls.from_owned(ffi_try(libfile.mupdf_open_document_from_bytes, buf, magic))

    @staticmethod
    def recognize(magic):
        return bool(ffi_try(libfile.mupdf_recognize_document, to_cstr(magic, 'Document magic')))

    def needs_password(self):
        return bool(ffi_try(libfile.mupdf_needs_password, self))

    def authenticate_password(self, password):
        return bool(ffi_try(libfile.mupdf_authenticate_password, self, to_cstr(password, 'Password')))

    @property
    def page_count(self):
        return ffi_try(libfile.mupdf_document_page_count, self)

    def __len__(self):
        return self.page_count

    def lookup_metadata(self, key):
        return take_string(ffi_try(libfile.mupdf_lookup_metadata, self, to_cstr(key, 'Metadata key')))

    def metadata(self):
        result = {}
        for key in METADATA_KEYS:
            value = self.lookup_metadata(key)
            if value is not None:
                result[key] = value
        return result

    def is_reflowable(self):
        return bool(ffi_try(libfile.mupdf_is_document_reflowable, self))

    def layout(self, width, height, em=11.0):
        width = to_finite_float(width, 'Width')
        height = to_finite_float(height, 'Height')
        if width <= 0 or height <= 0:
            raise PreconditionError('Layout size must be positive.')
        ffi_try(libfile.mupdf_layout_document, self, width, height, to_finite_float(em, 'Font size'))

    def _check_page_number(self, page_no):
        to_c_int(page_no, 'Page number')
        count = self.page_count
        if not 0 <= page_no < count:
            raise PreconditionError(f'Page number {page_no} out of range, document has {count} pages.')

    def load_page(self, page_no):
        self._check_page_number(page_no)
        return Page.from_owned(ffi_try(libfile.mupdf_load_page, self, page_no), self)

    def pages(self):
        for i in range(self.page_count):
            yield self.load_page(i)

    def convert_to_pdf(self, from_page=0, to_page=None, rotate=0, cookie=None):
        """Render a page range into a new PDF document.

        Both bounds are inclusive. The range is walked backwards when
        ``from_page`` is greater than ``to_page``, and a negative bound
        gives an empty document.
        """
        from .pdf_document import PdfDocument
        if to_page is None:
            to_page = self.page_count - 1
        to_c_int(from_page, 'First page')
        to_c_int(to_page, 'Last page')
        if to_c_int(rotate, 'Rotation') % 90 != 0:
            raise PreconditionError('rotation not multiple of 90')
        check_instance(cookie, Cookie, 'Cookie', optional=True)
        return PdfDocument.from_owned(ffi_try(libfile.mupdf_convert_to_pdf, self, from_page, to_page,
                                              rotate, cookie))

    def resolve_link(self, uri):
        """Return ``(location, x, y)`` for an internal link target."""
        xp = ctypes.c_float(0)
        yp = ctypes.c_float(0)
        loc = ffi_try(libfile.mupdf_resolve_link, self, to_cstr(uri, 'Link'),
                      ctypes.pointer(xp), ctypes.pointer(yp))
        if not loc.is_valid():
            return None, 0.0, 0.0
        return loc, xp.value, yp.value

    def resolve_link_dest(self, uri):
        return ffi_try(libfile.mupdf_resolve_link_dest, self, to_cstr(uri, 'Link'))

    def output_intent(self):
        ptr = ffi_try(libfile.mupdf_document_output_intent, self)
        if not ptr:
            return None
        return Colorspace.adopt(ptr)

    def outline(self):
        ptr = ffi_try(libfile.mupdf_load_outline, self)
        if not ptr:
            return None
        return Outline.from_owned(ptr)


class DocumentWriter(Handle):
    """Writes pages drawn through devices into an output file.

    :meth:`close` finishes the file. Leaving a ``with`` block because of an
    exception, or collecting the writer, only releases it.
    """

    kind = Kind.DOCUMENT_WRITER
    _finished = False

    def __init__(self, filename, fmt=None, options=''):
        fmt = None if fmt is None else to_cstr(fmt, 'Format')
        options = to_cstr(options, 'Options')
        if fmt is not None and fmt.lower() == b'pdfocr':
            ptr = ffi_try(libfile.mupdf_new_pdfocr_writer, to_bytepath(filename), options)
        else:
            ptr = ffi_try(libfile.mupdf_new_document_writer, to_bytepath(filename), fmt, options)
        self._init_owned(ptr)

    def begin_page(self, mediabox):
        ptr = ffi_try(libfile.mupdf_document_writer_begin_page, self, as_rect(mediabox, 'Media box'))
        return Device.adopt(ptr, self)

    def end_page(self):
        ffi_try(libfile.mupdf_document_writer_end_page, self)

    def close(self):
        if self.closed or self._finished:
            super().close()
            return
        self._finished = True
        try:
            ffi_try(libfile.mupdf_document_writer_close, self)
        finally:
            super().close()

    def __del__(self):
        Handle.close(self)

    def __exit__(self, exc_type, exc_value, exc_tb):
        if exc_type is None:
            self.close()
        else:
            Handle.close(self)
