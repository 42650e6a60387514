# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from .colorspace import Colorspace, color_argument
from .display_list import DisplayList
from .errors import PreconditionError
from .geometry import ColorParams, IRect, as_irect, as_matrix, as_rect
from .handles import Handle, Kind
from .image import Image
from .native import libfile
from .options import BlendMode, Metatext, StextFlags
from .path import Path, StrokeState
from .pixmap import Pixmap
from .shade import Shade
from .shim import ffi_try, to_c_int, to_cstr, to_float, check_enum, check_instance
from .stext import StextPage
from .text import Text


def _color_params(cp):
    if cp is None:
        return ColorParams.default()
    return check_instance(cp, ColorParams, 'Color parameters')


def _alpha(alpha):
    alpha = to_float(alpha, 'Alpha')
    if not 0.0 <= alpha <= 1.0:
        raise PreconditionError('Alpha must be between 0 and 1.')
    return alpha


class Device(Handle):
    """Receiver of drawing commands.

    A device writes into the object it was created for, which is kept
    alive for as long as the device is. Call :meth:`close_device` to flush
    it before reading the target; leaving a ``with`` block without an
    exception does that automatically.
    """

    kind = Kind.DEVICE
    _device_closed = False

    @classmethod
    def draw(cls, pixmap, clip=None):
        check_instance(pixmap, Pixmap, 'Pixmap')
        clip = IRect.infinite() if clip is None else as_irect(clip, 'Clip rectangle')
        return cls.from_owned(ffi_try(libfile.mupdf_new_draw_device, pixmap, clip), pixmap)

    @classmethod
    def display_list(cls, display_list):
        check_instance(display_list, DisplayList, 'Display list')
        return cls.from_owned(ffi_try(libfile.mupdf_new_display_list_device, display_list), display_list)

    @classmethod
    def stext(cls, page, flags=StextFlags(0)):
        check_instance(page, StextPage, 'Text page')
        return cls.from_owned(ffi_try(libfile.mupdf_new_stext_device, page, int(flags)), page)

    def close_device(self):
        ffi_try(libfile.mupdf_close_device, self)
        self._device_closed = True

    def __exit__(self, exc_type, exc_value, exc_tb):
        try:
            if exc_type is None and not self.closed and not self._device_closed:
                self.close_device()
        finally:
            self.close()

    def fill_path(self, path, colorspace, color, ctm=None, alpha=1.0, even_odd=False, color_params=None):
        check_instance(path, Path, 'Path')
        values = color_argument(colorspace, color)
        ffi_try(libfile.mupdf_fill_path, self, path, bool(even_odd), as_matrix(ctm),
                colorspace, values, _alpha(alpha), _color_params(color_params))

    def stroke_path(self, path, stroke, colorspace, color, ctm=None, alpha=1.0, color_params=None):
        check_instance(path, Path, 'Path')
        check_instance(stroke, StrokeState, 'Stroke state')
        values = color_argument(colorspace, color)
        ffi_try(libfile.mupdf_stroke_path, self, path, stroke, as_matrix(ctm),
                colorspace, values, _alpha(alpha), _color_params(color_params))

    def clip_path(self, path, ctm=None, even_odd=False):
        check_instance(path, Path, 'Path')
        ffi_try(libfile.mupdf_clip_path, self, path, bool(even_odd), as_matrix(ctm))

    def clip_stroke_path(self, path, stroke, ctm=None):
        check_instance(path, Path, 'Path')
        check_instance(stroke, StrokeState, 'Stroke state')
        ffi_try(libfile.mupdf_clip_stroke_path, self, path, stroke, as_matrix(ctm))

    def fill_text(self, text, colorspace, color, ctm=None, alpha=1.0, color_params=None):
        check_instance(text, Text, 'Text')
        values = color_argument(colorspace, color)
        ffi_try(libfile.mupdf_fill_text, self, text, as_matrix(ctm), colorspace, values,
                _alpha(alpha), _color_params(color_params))

    def stroke_text(self, text, stroke, colorspace, color, ctm=None, alpha=1.0, color_params=None):
        check_instance(text, Text, 'Text')
        check_instance(stroke, StrokeState, 'Stroke state')
        values = color_argument(colorspace, color)
        ffi_try(libfile.mupdf_stroke_text, self, text, stroke, as_matrix(ctm), colorspace, values,
                _alpha(alpha), _color_params(color_params))

    def clip_text(self, text, ctm=None):
        check_instance(text, Text, 'Text')
        ffi_try(libfile.mupdf_clip_text, self, text, as_matrix(ctm))

    def clip_stroke_text(self, text, stroke, ctm=None):
        check_instance(text, Text, 'Text')
        check_instance(stroke, StrokeState, 'Stroke state')
        ffi_try(libfile.mupdf_clip_stroke_text, self, text, stroke, as_matrix(ctm))

    def ignore_text(self, text, ctm=None):
        check_instance(text, Text, 'Text')
        ffi_try(libfile.mupdf_ignore_text, self, text, as_matrix(ctm))

    def fill_shade(self, shade, ctm=None, alpha=1.0, color_params=None):
        check_instance(shade, Shade, 'Shade')
        ffi_try(libfile.mupdf_fill_shade, self, shade, as_matrix(ctm), _alpha(alpha),
                _color_params(color_params))

    def fill_image(self, image, ctm=None, alpha=1.0, color_params=None):
        check_instance(image, Image, 'Image')
        ffi_try(libfile.mupdf_fill_image, self, image, as_matrix(ctm), _alpha(alpha),
                _color_params(color_params))

    def fill_image_mask(self, image, colorspace, color, ctm=None, alpha=1.0, color_params=None):
        check_instance(image, Image, 'Image')
        values = color_argument(colorspace, color)
        ffi_try(libfile.mupdf_fill_image_mask, self, image, as_matrix(ctm), colorspace, values,
                _alpha(alpha), _color_params(color_params))

    def clip_image_mask(self, image, ctm=None):
        check_instance(image, Image, 'Image')
        ffi_try(libfile.mupdf_clip_image_mask, self, image, as_matrix(ctm))

    def pop_clip(self):
        ffi_try(libfile.mupdf_pop_clip, self)

    def begin_layer(self, name):
        ffi_try(libfile.mupdf_begin_layer, self, to_cstr(name, 'Layer name'))

    def end_layer(self):
        ffi_try(libfile.mupdf_end_layer, self)

    def begin_structure(self, tag, index=0):
        """Open a structure element such as ``'P'`` or ``'H1'``. Tags MuPDF
        does not know are passed through as raw tags."""
        ffi_try(libfile.mupdf_begin_structure, self, to_cstr(tag, 'Structure tag'),
                to_c_int(index, 'Structure index'))

    def end_structure(self):
        ffi_try(libfile.mupdf_end_structure, self)

    def begin_metatext(self, meta, text):
        ffi_try(libfile.mupdf_begin_metatext, self, check_enum(meta, Metatext, 'Metatext kind'),
                to_cstr(text, 'Metatext'))

    def end_metatext(self):
        ffi_try(libfile.mupdf_end_metatext, self)

    def begin_mask(self, area, luminosity, colorspace, color, color_params=None):
        values = color_argument(colorspace, color)
        ffi_try(libfile.mupdf_begin_mask, self, as_rect(area, 'Mask area'), bool(luminosity),
                colorspace, values, _color_params(color_params))

    def end_mask(self):
        ffi_try(libfile.mupdf_end_mask, self)

    def begin_group(self, area, colorspace=None, isolated=False, knockout=False,
                    blendmode=BlendMode.Normal, alpha=1.0):
        check_instance(colorspace, Colorspace, 'Colorspace', optional=True)
        ffi_try(libfile.mupdf_begin_group, self, as_rect(area, 'Group area'), colorspace,
                bool(isolated), bool(knockout), check_enum(blendmode, BlendMode, 'Blend mode'),
                _alpha(alpha))

    def end_group(self):
        ffi_try(libfile.mupdf_end_group, self)

    def begin_tile(self, area, view, xstep, ystep, ctm=None, tile_id=0):
        """Start a tiling pattern. Returns true if the device already has
        the tile cached, in which case its contents must not be drawn."""
        cached = ffi_try(libfile.mupdf_begin_tile, self, as_rect(area, 'Tile area'),
                         as_rect(view, 'Tile view'), to_float(xstep, 'X step'),
                         to_float(ystep, 'Y step'), as_matrix(ctm), to_c_int(tile_id, 'Tile id'))
        return bool(cached)

    def end_tile(self):
        ffi_try(libfile.mupdf_end_tile, self)
