# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from .handles import Handle, Kind
from .native import libfile
from .shim import ffi_try, ffi_call


class Cookie(Handle):
    """Progress and cancellation token for long running operations.

    The fields are written by the operation in progress and may be read,
    and :meth:`abort` called, from any thread while it runs.
    """

    kind = Kind.COOKIE

    def __init__(self):
        self._init_owned(ffi_try(libfile.mupdf_new_cookie))

    def _property(self, which):
        return ffi_call(libfile.mupdf_cookie_property, self, which)

    def abort(self):
        ffi_call(libfile.mupdf_cookie_abort, self)

    @property
    def progress(self):
        return self._property(0)

    @property
    def progress_max(self):
        return self._property(1)

    @property
    def errors(self):
        return self._property(2)

    @property
    def incomplete(self):
        return bool(self._property(3))

    @property
    def aborted(self):
        return bool(self._property(4))
