# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from .handles import Handle, Kind
from .native import libfile
from .shim import ffi_call, borrowed_string


class Outline(Handle):
    """One entry of a document's table of contents."""

    kind = Kind.OUTLINE

    @property
    def title(self):
        return borrowed_string(ffi_call(libfile.mupdf_outline_title, self))

    @property
    def uri(self):
        return borrowed_string(ffi_call(libfile.mupdf_outline_uri, self))

    @property
    def page(self):
        loc = ffi_call(libfile.mupdf_outline_page, self)
        return loc if loc.is_valid() else None

    def _follow(self, func):
        ptr = ffi_call(func, self)
        if not ptr:
            return None
        return Outline.adopt(ptr)

    @property
    def next(self):
        return self._follow(libfile.mupdf_outline_next)

    @property
    def down(self):
        return self._follow(libfile.mupdf_outline_down)

    def siblings(self):
        """Yield this entry and every entry after it on the same level."""
        node = self.clone()
        while node is not None:
            yield node
            node = node.next

    def children(self):
        first = self.down
        if first is None:
            return []
        with first:
            return list(first.siblings())

    def walk(self, depth=0):
        """Yield ``(depth, entry)`` for this level and all nested levels."""
        for node in self.siblings():
            yield depth, node
            child = node.down
            if child is not None:
                with child:
                    yield from child.walk(depth + 1)

    def __repr__(self):
        if self.closed:
            return super().__repr__()
        return f'<Outline {self.title!r}>'
