# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes

from .errors import PreconditionError
from .geometry import as_matrix, as_rect
from .handles import Handle, Kind
from .native import libfile, PathWalker, POINT_FUNC, CURVE_FUNC, CLOSE_FUNC
from .options import LineCap, LineJoin, StrokeParams, DASH_MAX
from .shim import ffi_try, ffi_call, to_float, to_finite_float, check_enum, check_instance


class StrokeState(Handle):
    kind = Kind.STROKE_STATE

    def __init__(self, start_cap=LineCap.Butt, dash_cap=LineCap.Butt, end_cap=LineCap.Butt,
                 line_join=LineJoin.Miter, line_width=1.0, miter_limit=10.0,
                 dash_phase=0.0, dash=()):
        if not isinstance(dash, (list, tuple)):
            raise PreconditionError('Dash pattern must be a list or tuple.')
        if len(dash) > DASH_MAX:
            raise PreconditionError(f'Dash pattern may have at most {DASH_MAX} entries.')
        params = StrokeParams(check_enum(start_cap, LineCap, 'Start cap'),
                              check_enum(dash_cap, LineCap, 'Dash cap'),
                              check_enum(end_cap, LineCap, 'End cap'),
                              check_enum(line_join, LineJoin, 'Line join'),
                              to_finite_float(line_width, 'Line width'),
                              to_finite_float(miter_limit, 'Miter limit'),
                              to_finite_float(dash_phase, 'Dash phase'),
                              len(dash))
        pattern = (ctypes.c_float * len(dash))(*[to_finite_float(d, 'Dash length') for d in dash])
        self._init_owned(ffi_try(libfile.mupdf_new_stroke_state, ctypes.pointer(params),
                                 pattern if dash else None))

    @classmethod
    def default(cls):
        return cls.from_owned(ffi_try(libfile.mupdf_default_stroke_state))

    def params(self):
        params = StrokeParams()
        dash = (ctypes.c_float * DASH_MAX)()
        ffi_call(libfile.mupdf_stroke_state_params, self, ctypes.pointer(params), dash, DASH_MAX)
        return params, tuple(dash[:min(params.dash_len, DASH_MAX)])

    @property
    def start_cap(self):
        return LineCap(self.params()[0].start_cap)

    @property
    def dash_cap(self):
        return LineCap(self.params()[0].dash_cap)

    @property
    def end_cap(self):
        return LineCap(self.params()[0].end_cap)

    @property
    def line_join(self):
        return LineJoin(self.params()[0].line_join)

    @property
    def line_width(self):
        return self.params()[0].line_width

    @property
    def miter_limit(self):
        return self.params()[0].miter_limit

    @property
    def dash_phase(self):
        return self.params()[0].dash_phase

    @property
    def dash(self):
        return self.params()[1]

    def adjust_rect(self, rect, ctm=None):
        return ffi_try(libfile.mupdf_adjust_rect_for_stroke, as_rect(rect), self, as_matrix(ctm))


class Path(Handle):
    kind = Kind.PATH

    def __init__(self):
        self._init_owned(ffi_try(libfile.mupdf_new_path))

    def copy(self):
        return Path.from_owned(ffi_try(libfile.mupdf_clone_path, self))

    def move_to(self, x, y):
        ffi_try(libfile.mupdf_moveto, self, to_float(x, 'X'), to_float(y, 'Y'))

    def line_to(self, x, y):
        ffi_try(libfile.mupdf_lineto, self, to_float(x, 'X'), to_float(y, 'Y'))

    def curve_to(self, cx1, cy1, cx2, cy2, ex, ey):
        ffi_try(libfile.mupdf_curveto, self, *[to_float(v, 'Coordinate') for v in (cx1, cy1, cx2, cy2, ex, ey)])

    def curve_to_v(self, cx, cy, ex, ey):
        ffi_try(libfile.mupdf_curvetov, self, *[to_float(v, 'Coordinate') for v in (cx, cy, ex, ey)])

    def curve_to_y(self, cx, cy, ex, ey):
        ffi_try(libfile.mupdf_curvetoy, self, *[to_float(v, 'Coordinate') for v in (cx, cy, ex, ey)])

    def rect_to(self, x1, y1, x2, y2):
        ffi_try(libfile.mupdf_rectto, self, *[to_float(v, 'Coordinate') for v in (x1, y1, x2, y2)])

    def close_path(self):
        ffi_try(libfile.mupdf_closepath, self)

    def transform(self, ctm):
        ffi_try(libfile.mupdf_transform_path, self, as_matrix(ctm))

    def trim(self):
        ffi_try(libfile.mupdf_trim_path, self)

    def bound(self, stroke=None, ctm=None):
        check_instance(stroke, StrokeState, 'Stroke state', optional=True)
        return ffi_try(libfile.mupdf_bound_path, self, stroke, as_matrix(ctm))

    def walk(self, walker):
        """Report every segment of the path to ``walker``.

        The walker may define ``move_to(x, y)``, ``line_to(x, y)``,
        ``curve_to(x1, y1, x2, y2, x3, y3)`` and ``close_path()``; segments
        without a matching method are skipped. Quadratic curves and
        rectangles arrive as cubic curves and lines. If a walker method
        raises, the remaining segments are skipped and the exception is
        raised again once the walk returns.
        """
        raised = []

        def forward(name):
            method = getattr(walker, name, None)

            def callback(arg, *coords):
                if method is None or raised:
                    return
                try:
                    method(*coords)
                except BaseException as e:
                    raised.append(e)
            return callback

        callbacks = PathWalker(POINT_FUNC(forward('move_to')),
                               POINT_FUNC(forward('line_to')),
                               CURVE_FUNC(forward('curve_to')),
                               CLOSE_FUNC(forward('close_path')))
        ffi_try(libfile.mupdf_walk_path, self, ctypes.pointer(callbacks), None)
        if raised:
            raise raised[0]
