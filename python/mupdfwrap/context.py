# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

# Process-wide rendering context.
#
# The native library keeps its exception stack inside the context, so every
# thread works on its own clone of one shared base context. Clones share
# the resource store and lock table of the base, which makes handles usable
# from any thread.

import atexit
import collections
import logging
import threading
import weakref

from .errors import MuPDFError, ErrorKind, PreconditionError
from .native import libfile

logger = logging.getLogger(__name__)

AA_ALL = 0
AA_TEXT = 1
AA_GRAPHICS = 2

_state_lock = threading.RLock()
_base = None
_generation = 0
_finalizing = False
_local = threading.local()
_clones = weakref.WeakSet()
_live = collections.Counter()
_settings = {}
_settings_version = 0


class _ThreadContext:

    def __init__(self, ptr, generation):
        self.ptr = ptr
        self.generation = generation
        self.settings_version = -1

    def drop(self):
        with _state_lock:
            ptr = self.ptr
            self.ptr = None
            if ptr is not None and self.generation == _generation and not _finalizing:
                libfile.mupdf_drop_context(ptr)
                logger.debug('Dropped context clone %#x', ptr)

    def __del__(self):
        self.drop()


def _ensure_base():
    global _base
    if _base is None:
        # The shim supplies its own platform mutexes when given no lock table.
        ptr = libfile.mupdf_new_base_context(None)
        if not ptr:
            raise MuPDFError(ErrorKind.MEMORY, 'Failed to create base context.')
        _base = ptr
        logger.debug('Created base context %#x with %d native locks', ptr, libfile.mupdf_lock_max())
    return _base


def context():
    """Return the calling thread's native context, creating it on first use."""
    tc = getattr(_local, 'ctx', None)
    if tc is None or tc.ptr is None or tc.generation != _generation:
        with _state_lock:
            if _finalizing:
                raise PreconditionError('Interpreter is shutting down.')
            base = _ensure_base()
            ptr = libfile.mupdf_clone_context(base)
            if not ptr:
                raise MuPDFError(ErrorKind.MEMORY, 'Failed to clone context.')
            tc = _ThreadContext(ptr, _generation)
            _clones.add(tc)
            _local.ctx = tc
            logger.debug('Created context clone %#x for thread %s', ptr, threading.current_thread().name)
    if tc.settings_version != _settings_version:
        _apply_settings(tc)
    return tc.ptr


def _apply_settings(tc):
    with _state_lock:
        for which, bits in _settings.get('aa', {}).items():
            libfile.mupdf_set_aa_level(tc.ptr, which, bits)
        if 'min_line_width' in _settings:
            libfile.mupdf_set_graphics_min_line_width(tc.ptr, _settings['min_line_width'])
        if 'icc' in _settings:
            libfile.mupdf_set_icc(tc.ptr, int(_settings['icc']))
        tc.settings_version = _settings_version


def _update_setting(name, value):
    global _settings_version
    with _state_lock:
        _settings[name] = value
        _settings_version += 1


def generation():
    return _generation


def alive(gen):
    return gen == _generation and _base is not None and not _finalizing


def is_initialized():
    return _base is not None


def register(kind):
    with _state_lock:
        _live[kind] += 1


def forget(kind, gen):
    with _state_lock:
        if gen == _generation and _live[kind] > 0:
            _live[kind] -= 1


def live_handles():
    """Map each resource kind to the number of native references held."""
    with _state_lock:
        return {kind: count for kind, count in _live.items() if count}


def shutdown(force=False):
    """Drop every context clone, then the base context.

    Handles still alive at this point become unusable. Unless ``force`` is
    true, the call is refused while any exist.
    """
    global _base, _generation, _local
    with _state_lock:
        if _base is None:
            return
        live = sum(_live.values())
        if live:
            if not force:
                raise PreconditionError(f'Cannot shut down, {live} handles are still alive.')
            logger.warning('Shutting down context with %d live handles: %r', live, live_handles())
        for tc in list(_clones):
            tc.drop()
        _clones.clear()
        libfile.mupdf_drop_base_context(_base)
        logger.debug('Dropped base context %#x', _base)
        _base = None
        _generation += 1
        _live.clear()
        _local = threading.local()


@atexit.register
def _at_exit():
    global _finalizing
    # Native memory is reclaimed by the process; later drops from
    # finalizers must not call into a library that may be unloaded.
    _finalizing = True


def _check_aa_bits(bits):
    if not isinstance(bits, int) or not 0 <= bits <= 8:
        raise PreconditionError('Anti-aliasing level must be an integer between 0 and 8.')


def _set_aa(which, bits):
    _check_aa_bits(bits)
    with _state_lock:
        aa = dict(_settings.get('aa', {}))
        if which == AA_ALL:
            aa.clear()
        aa[which] = bits
        _update_setting('aa', aa)


def aa_level():
    return libfile.mupdf_aa_level(context(), AA_ALL)


def set_aa_level(bits):
    _set_aa(AA_ALL, bits)


def text_aa_level():
    return libfile.mupdf_aa_level(context(), AA_TEXT)


def set_text_aa_level(bits):
    _set_aa(AA_TEXT, bits)


def graphics_aa_level():
    return libfile.mupdf_aa_level(context(), AA_GRAPHICS)


def set_graphics_aa_level(bits):
    _set_aa(AA_GRAPHICS, bits)


def graphics_min_line_width():
    return libfile.mupdf_graphics_min_line_width(context())


def set_graphics_min_line_width(width):
    if not isinstance(width, (int, float)) or width < 0:
        raise PreconditionError('Minimum line width must be a non-negative number.')
    _update_setting('min_line_width', float(width))


def enable_icc():
    _update_setting('icc', True)


def disable_icc():
    _update_setting('icc', False)


def use_document_css():
    return bool(libfile.mupdf_use_document_css(context()))


def set_use_document_css(use):
    libfile.mupdf_set_use_document_css(context(), int(bool(use)))


def user_css():
    css = libfile.mupdf_user_css(context())
    if css is None:
        return None
    return css.decode('UTF-8')


def set_user_css(css):
    from .shim import ffi_try, to_cstr
    ffi_try(libfile.mupdf_set_user_css, to_cstr(css, 'User CSS'))
