# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes

from .errors import PreconditionError
from .geometry import as_point, as_rect
from .handles import Handle, Kind
from .native import libfile
from .options import AnnotationFlag, AnnotationType, FilterOptions, Intent
from .page import Page
from .pdf_object import PdfObject
from .shim import (ffi_try, ffi_call, to_c_int, to_cstr, to_finite_float, to_float_array,
                   borrowed_string, check_enum, check_instance)

ANNOT_COLOR_SIZES = (0, 1, 3, 4)


def _filter_options(options):
    if options is None:
        return FilterOptions()
    check_instance(options, FilterOptions, 'Filter options')
    return options


class PdfAnnotation(Handle):
    kind = Kind.PDF_ANNOT

    @property
    def type(self):
        return AnnotationType(ffi_try(libfile.mupdf_pdf_annot_type, self))

    @property
    def author(self):
        return borrowed_string(ffi_try(libfile.mupdf_pdf_annot_author, self))

    def set_author(self, author):
        ffi_try(libfile.mupdf_pdf_set_annot_author, self, to_cstr(author, 'Author'))

    def set_line(self, a, b):
        ffi_try(libfile.mupdf_pdf_set_annot_line, self, as_point(a, 'Line start'), as_point(b, 'Line end'))

    def set_rect(self, rect):
        ffi_try(libfile.mupdf_pdf_set_annot_rect, self, as_rect(rect))

    def set_color(self, color):
        """Set the color from 0 (transparent), 1 (gray), 3 (RGB) or 4 (CMYK) components."""
        values, n = to_float_array(color)
        if n not in ANNOT_COLOR_SIZES:
            raise PreconditionError(f'Annotation color must have 0, 1, 3 or 4 components, not {n}.')
        ffi_try(libfile.mupdf_pdf_set_annot_color, self, n, values)

    def set_flags(self, flags):
        if not isinstance(flags, AnnotationFlag):
            raise PreconditionError('Flags must be an AnnotationFlag value.')
        ffi_try(libfile.mupdf_pdf_set_annot_flags, self, int(flags))

    def set_popup(self, rect):
        ffi_try(libfile.mupdf_pdf_set_annot_popup, self, as_rect(rect, 'Popup rectangle'))

    def set_active(self, active):
        ffi_try(libfile.mupdf_pdf_set_annot_active, self, 1 if active else 0)

    def set_border_width(self, width):
        width = to_finite_float(width, 'Border width')
        if width < 0:
            raise PreconditionError('Border width must not be negative.')
        ffi_try(libfile.mupdf_pdf_set_annot_border_width, self, width)

    def set_intent(self, intent):
        ffi_try(libfile.mupdf_pdf_set_annot_intent, self, check_enum(intent, Intent, 'Intent'))

    def filter_contents(self, options=None):
        ffi_try(libfile.mupdf_pdf_filter_annot_contents, self, ctypes.pointer(_filter_options(options)))

    def __repr__(self):
        if self.closed:
            return super().__repr__()
        return f'<PdfAnnotation {self.type.name}>'


class PdfPage(Handle):
    kind = Kind.PDF_PAGE

    def to_page(self):
        return Page.adopt(ffi_call(libfile.mupdf_pdf_page_to_page, self), self._parent)

    def obj(self):
        return PdfObject.from_owned(ffi_call(libfile.mupdf_pdf_page_obj, self), self._parent)

    def create_annotation(self, subtype):
        subtype = check_enum(subtype, AnnotationType, 'Annotation type')
        if subtype < 0:
            raise PreconditionError('Can not create an annotation of unknown type.')
        return PdfAnnotation.from_owned(ffi_try(libfile.mupdf_pdf_create_annot, self, subtype), self)

    def delete_annotation(self, annot):
        check_instance(annot, PdfAnnotation, 'Annotation')
        ffi_try(libfile.mupdf_pdf_delete_annot, self, annot)

    def annotations(self):
        result = []
        ptr = ffi_call(libfile.mupdf_pdf_first_annot, self)
        while ptr:
            annot = PdfAnnotation.adopt(ptr, self)
            result.append(annot)
            ptr = ffi_call(libfile.mupdf_pdf_next_annot, annot)
        return result

    def update(self):
        """Regenerate changed annotation appearances. Returns True if anything changed."""
        return bool(ffi_try(libfile.mupdf_pdf_update_page, self))

    def redact(self):
        return bool(ffi_try(libfile.mupdf_pdf_redact_page, self))

    def set_rotation(self, rotation):
        if to_c_int(rotation, 'Rotation') % 90 != 0:
            raise PreconditionError('rotation not multiple of 90')
        ffi_try(libfile.mupdf_pdf_page_set_rotation, self, rotation)

    def set_crop_box(self, rect):
        """Set the crop box. ``rect`` uses page coordinates with the origin at the top left."""
        ffi_try(libfile.mupdf_pdf_page_set_crop_box, self, as_rect(rect, 'Crop box'))

    def crop_box_position(self):
        return ffi_try(libfile.mupdf_pdf_page_crop_box_position, self)

    def media_box(self):
        return ffi_try(libfile.mupdf_pdf_page_media_box, self)

    def transform(self):
        return ffi_try(libfile.mupdf_pdf_page_transform, self)

    def obj_transform(self, page_obj=None):
        if page_obj is None:
            with self.obj() as own:
                return ffi_try(libfile.mupdf_pdf_page_obj_transform, own)
        check_instance(page_obj, PdfObject, 'Page object')
        return ffi_try(libfile.mupdf_pdf_page_obj_transform, page_obj)

    def filter_contents(self, options=None):
        """Rewrite the content stream, sanitizing it unless ``options`` says otherwise."""
        ffi_try(libfile.mupdf_pdf_filter_page_contents, self, ctypes.pointer(_filter_options(options)))
