# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from .geometry import as_matrix
from .handles import Handle, Kind
from .native import libfile
from .path import StrokeState
from .shim import ffi_try, check_instance


class Text(Handle):
    kind = Kind.TEXT

    def __init__(self):
        self._init_owned(ffi_try(libfile.mupdf_new_text))

    def bound(self, stroke=None, ctm=None):
        check_instance(stroke, StrokeState, 'Stroke state', optional=True)
        return ffi_try(libfile.mupdf_bound_text, self, stroke, as_matrix(ctm))
