# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from .geometry import as_matrix
from .handles import Handle, Kind
from .native import libfile
from .shim import ffi_try


class Shade(Handle):
    """A smooth shading, as loaded by :meth:`PdfDocument.load_shading`.

    The shading keeps no reference to the document it came from.
    """

    kind = Kind.SHADE

    def bound(self, ctm=None):
        return ffi_try(libfile.mupdf_bound_shade, self, as_matrix(ctm))
