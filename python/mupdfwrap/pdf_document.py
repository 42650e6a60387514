# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes

from .buffer import Buffer
from .document import Document, _buffer_argument
from .errors import PreconditionError
from .font import Font
from .handles import Handle, Kind
from .image import Image
from .native import libfile
from .options import CjkOrdering, SimpleFontEncoding, WriteOptions
from .pdf_object import PdfObject
from .pdf_page import PdfPage
from .shade import Shade
from .shim import ffi_try, ffi_call, to_bytepath, to_c_int, to_finite_float, check_enum, check_instance


def _options_pointer(options):
    check_instance(options, WriteOptions, 'Write options', optional=True)
    if options is None:
        return None
    return ctypes.pointer(options)


class PdfDocument(Handle):
    kind = Kind.PDF_DOCUMENT

    def __init__(self):
        self._init_owned(ffi_try(libfile.mupdf_pdf_new_document))

    @classmethod
    def open(cls, filename):
        return cls.from_owned(ffi_try(libfile.mupdf_pdf_open_document, to_bytepath(filename)))

    @classmethod
    def from_bytes(cls, data):
        with _buffer_argument(data) as buf:
            return cls.from_owned(ffi_try(libfile.mupdf_pdf_open_document_from_bytes, buf))

    @classmethod
    def from_document(cls, document):
        """Return the PDF view of ``document``. Fails if it is not a PDF file."""
        check_instance(document, Document, 'Document')
        return cls.adopt(ffi_try(libfile.mupdf_pdf_from_document, document))

    def to_document(self):
        return Document.adopt(ffi_call(libfile.mupdf_pdf_to_document, self))

    def _object(self, ptr):
        if not ptr:
            return None
        return PdfObject.from_owned(ptr, self)

    def trailer(self):
        return self._object(ffi_try(libfile.mupdf_pdf_trailer, self))

    def catalog(self):
        return self._object(ffi_try(libfile.mupdf_pdf_catalog, self))

    def count_objects(self):
        return ffi_try(libfile.mupdf_pdf_count_objects, self)

    @property
    def page_count(self):
        return ffi_try(libfile.mupdf_pdf_count_pages, self)

    def __len__(self):
        return self.page_count

    def add_object(self, obj):
        """Store ``obj`` as a new numbered object and return a reference to it."""
        check_instance(obj, PdfObject, 'Object')
        return self._object(ffi_try(libfile.mupdf_pdf_add_object, self, obj))

    def create_object(self):
        return self._object(ffi_try(libfile.mupdf_pdf_create_object, self))

    def delete_object(self, num):
        ffi_try(libfile.mupdf_pdf_delete_object, self, to_c_int(num, 'Object number'))

    def add_image(self, image):
        check_instance(image, Image, 'Image')
        return self._object(ffi_try(libfile.mupdf_pdf_add_image, self, image))

    def add_font(self, font):
        check_instance(font, Font, 'Font')
        return self._object(ffi_try(libfile.mupdf_pdf_add_font, self, font))

    def add_cjk_font(self, font, ordering, vertical=False, serif=True):
        check_instance(font, Font, 'Font')
        ordering = check_enum(ordering, CjkOrdering, 'Ordering')
        return self._object(ffi_try(libfile.mupdf_pdf_add_cjk_font, self, font, ordering,
                                    1 if vertical else 0, bool(serif)))

    def add_simple_font(self, font, encoding=SimpleFontEncoding.Latin):
        check_instance(font, Font, 'Font')
        encoding = check_enum(encoding, SimpleFontEncoding, 'Encoding')
        return self._object(ffi_try(libfile.mupdf_pdf_add_simple_font, self, font, encoding))

    def save(self, filename, options=None):
        ffi_try(libfile.mupdf_pdf_save_document, self, to_bytepath(filename), _options_pointer(options))

    def write(self, options=None):
        return Buffer.from_owned(ffi_try(libfile.mupdf_pdf_write_document, self, _options_pointer(options)))

    def to_bytes(self, options=None):
        with self.write(options) as buf:
            return buf.to_bytes()

    def enable_js(self):
        ffi_try(libfile.mupdf_pdf_enable_js, self)

    def disable_js(self):
        ffi_try(libfile.mupdf_pdf_disable_js, self)

    def js_supported(self):
        return bool(ffi_try(libfile.mupdf_pdf_js_supported, self))

    def calculate_form(self):
        ffi_try(libfile.mupdf_pdf_calculate_form, self)

    def new_graft_map(self):
        return PdfGraftMap(self)

    def graft_object(self, obj):
        """Copy ``obj`` and everything it references from another document."""
        check_instance(obj, PdfObject, 'Object')
        return self._object(ffi_try(libfile.mupdf_pdf_graft_object, self, obj))

    def new_page(self, index=-1, width=612, height=792):
        """Create a page and insert it before ``index``. A negative index appends."""
        to_c_int(index, 'Page index')
        width = to_finite_float(width, 'Width')
        height = to_finite_float(height, 'Height')
        if width <= 0 or height <= 0:
            raise PreconditionError('Page size must be positive.')
        if index > self.page_count:
            raise PreconditionError(f'Page index {index} is past the end of the document.')
        return PdfPage.from_owned(ffi_try(libfile.mupdf_pdf_new_page, self, index, width, height), self)

    def _check_page_number(self, page_no, end):
        to_c_int(page_no, 'Page number')
        if not 0 <= page_no < end:
            raise PreconditionError(f'Page number {page_no} out of range, document has {self.page_count} pages.')

    def load_page(self, page_no):
        self._check_page_number(page_no, self.page_count)
        return PdfPage.from_owned(ffi_try(libfile.mupdf_pdf_load_page, self, page_no), self)

    def pages(self):
        for i in range(self.page_count):
            yield self.load_page(i)

    def lookup_page_obj(self, page_no):
        self._check_page_number(page_no, self.page_count)
        return self._object(ffi_try(libfile.mupdf_pdf_lookup_page_obj, self, page_no))

    def insert_page(self, page_no, page_obj):
        self._check_page_number(page_no, self.page_count + 1)
        check_instance(page_obj, PdfObject, 'Page object')
        ffi_try(libfile.mupdf_pdf_insert_page, self, page_no, page_obj)

    def delete_page(self, page_no):
        self._check_page_number(page_no, self.page_count)
        ffi_try(libfile.mupdf_pdf_delete_page, self, page_no)

    def load_shading(self, obj):
        """Load the shading dictionary or stream ``obj`` for use with :meth:`Device.fill_shade`."""
        check_instance(obj, PdfObject, 'Shading object')
        return Shade.from_owned(ffi_try(libfile.mupdf_pdf_load_shading, self, obj))

    def load_name_tree(self, name):
        """Flatten the name tree ``name`` (for example ``Dests``) into a dictionary."""
        if isinstance(name, PdfObject):
            return self._object(ffi_try(libfile.mupdf_pdf_load_name_tree, self, name))
        with PdfObject.new_name(name) as key:
            return self._object(ffi_try(libfile.mupdf_pdf_load_name_tree, self, key))


class PdfGraftMap(Handle):
    """Copies objects into one destination document, sharing repeated references."""

    kind = Kind.PDF_GRAFT_MAP

    def __init__(self, document):
        check_instance(document, PdfDocument, 'Document')
        self._init_owned(ffi_try(libfile.mupdf_pdf_new_graft_map, document), document)

    @property
    def document(self):
        return self._parent

    def graft(self, obj):
        check_instance(obj, PdfObject, 'Object')
        ptr = ffi_try(libfile.mupdf_pdf_graft_mapped_object, self, obj)
        return PdfObject.from_owned(ptr, self._parent)
