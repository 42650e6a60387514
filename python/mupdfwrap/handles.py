# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import threading
from enum import IntEnum

from . import context as _context
from .errors import PreconditionError
from .native import libfile
from .shim import ffi_try, check_not_null


class Kind(IntEnum):
    PIXMAP = 0
    FONT = 1
    IMAGE = 2
    PATH = 3
    TEXT = 4
    STROKE_STATE = 5
    PAGE = 6
    DISPLAY_LIST = 7
    DEVICE = 8
    BUFFER = 9
    COOKIE = 10
    SEPARATIONS = 11
    LINK = 12
    OUTLINE = 13
    COLORSPACE = 14
    STEXT_PAGE = 15
    OUTPUT = 16
    DOCUMENT = 17
    DOCUMENT_WRITER = 18
    PDF_DOCUMENT = 19
    PDF_OBJ = 20
    PDF_PAGE = 21
    PDF_ANNOT = 22
    PDF_GRAFT_MAP = 23
    BITMAP = 24
    SHADE = 25


# Kinds whose native objects have a single owner.
UNCLONABLE = frozenset((Kind.COOKIE, Kind.OUTPUT, Kind.STEXT_PAGE, Kind.DOCUMENT_WRITER))

_close_lock = threading.RLock()


class Handle:
    """Owns exactly one native reference of kind ``kind``.

    The reference is released by :meth:`close`, by leaving a ``with`` block
    or when the handle is collected. A handle may keep a reference to a
    parent object that must outlive it, such as the document of a page.
    """

    kind = None
    _ptr = None
    _parent = None
    _owns_parent = False
    _generation = -1

    @classmethod
    def from_owned(cls, ptr, parent=None):
        self = cls.__new__(cls)
        self._init_owned(ptr, parent)
        return self

    @classmethod
    def adopt(cls, ptr, parent=None):
        """Wrap a borrowed pointer, taking a new native reference first."""
        check_not_null(ptr, cls.__name__)
        ptr = ffi_try(libfile.mupdf_keep, int(cls.kind), ptr)
        return cls.from_owned(ptr, parent)

    def _init_owned(self, ptr, parent=None):
        check_not_null(ptr, type(self).__name__)
        self._attach(ptr, parent)

    def _attach(self, ptr, parent):
        try:
            if parent is not None:
                if parent.kind in UNCLONABLE:
                    self._parent = parent
                    self._owns_parent = False
                else:
                    self._parent = parent.clone()
                    self._owns_parent = True
        except BaseException:
            libfile.mupdf_drop(_context.context(), int(self.kind), ptr)
            raise
        self._ptr = ptr
        self._generation = _context.generation()
        _context.register(self.kind)

    def native_pointer(self):
        ptr = self._ptr
        if ptr is None:
            raise PreconditionError(f'{type(self).__name__} has been closed.')
        if self._generation != _context.generation():
            raise PreconditionError(f'{type(self).__name__} belongs to a context that was shut down.')
        return ptr

    @property
    def _as_parameter_(self):
        return self.native_pointer()

    @property
    def closed(self):
        return self._ptr is None

    def clone(self):
        if self.kind in UNCLONABLE:
            raise PreconditionError(f'{type(self).__name__} objects can not be cloned.')
        ptr = ffi_try(libfile.mupdf_keep, int(self.kind), self)
        return type(self).from_owned(ptr, self._parent)

    def close(self):
        with _close_lock:
            ptr = self._ptr
            self._ptr = None
            parent = self._parent
            self._parent = None
        if ptr is None:
            return
        if _context.alive(self._generation):
            libfile.mupdf_drop(_context.context(), int(self.kind), ptr)
        _context.forget(self.kind, self._generation)
        if parent is not None and self._owns_parent:
            parent.close()

    def __del__(self):
        self.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        self.close()

    def __repr__(self):
        if self._ptr is None:
            return f'<{type(self).__name__} closed>'
        return f'<{type(self).__name__} {self._ptr:#x}>'


def check_kind(value, kind, what, optional=False):
    if value is None and optional:
        return None
    if not isinstance(value, Handle) or value.kind != kind:
        raise PreconditionError(f'{what} must be a {kind.name.lower().replace("_", " ")} object.')
    return value
