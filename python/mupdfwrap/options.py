# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes
from enum import Enum, IntFlag, auto

from .errors import PreconditionError

PASSWORD_MAX = 128
DASH_MAX = 32


class LineCap(Enum):
    Butt = 0
    Round = 1
    Square = 2
    Triangle = 3


class LineJoin(Enum):
    Miter = 0
    Round = 1
    Bevel = 2
    MiterXPS = 3


class BlendMode(Enum):
    Normal = 0
    Multiply = 1
    Screen = 2
    Overlay = 3
    Darken = 4
    Lighten = 5
    Colordodge = 6
    Colorburn = 7
    Hardlight = 8
    Softlight = 9
    Difference = 10
    Exclusion = 11
    Hue = 12
    Saturation = 13
    Color = 14
    Luminosity = 15


class ImageFormat(Enum):
    PNG = 0
    PNM = 1
    PAM = 2
    PSD = 3
    PS = 4


class TextFormat(Enum):
    Text = 0
    HTML = 1
    XHTML = 2
    XML = 3
    JSON = 4


class StextFlags(IntFlag):
    PreserveLigatures = 1
    PreserveWhitespace = 2
    PreserveImages = 4
    InhibitSpaces = 8
    Dehyphenate = 16
    PreserveSpans = 32
    MediaboxClip = 64
    UseCidForUnknownUnicode = 128
    CollectStructure = 256
    AccurateBboxes = 512
    CollectVectors = 1024
    IgnoreActualtext = 2048
    Segment = 4096


class AnnotationType(Enum):
    Unknown = -1
    Text = 0
    Link = 1
    FreeText = 2
    Line = 3
    Square = 4
    Circle = 5
    Polygon = 6
    PolyLine = 7
    Highlight = 8
    Underline = 9
    Squiggly = 10
    StrikeOut = 11
    Redact = 12
    Stamp = 13
    Caret = 14
    Ink = 15
    Popup = 16
    FileAttachment = 17
    Sound = 18
    Movie = 19
    RichMedia = 20
    Widget = 21
    Screen = 22
    PrinterMark = 23
    TrapNet = 24
    Watermark = 25
    ThreeD = 26
    Projection = 27


class AnnotationFlag(IntFlag):
    Invisible = auto()
    Hidden = auto()
    Print = auto()
    NoZoom = auto()
    NoRotate = auto()
    NoView = auto()
    ReadOnly = auto()
    Locked = auto()
    ToggleNoView = auto()
    LockedContents = auto()


class Intent(Enum):
    Default = 0
    FreeTextCallout = 1
    FreeTextTypewriter = 2
    LineArrow = 3
    LineDimension = 4
    PolyLineDimension = 5
    PolygonCloud = 6
    PolygonDimension = 7
    Unknown = 255


class Metatext(Enum):
    ActualText = 0
    Alt = 1
    Abbreviation = 2
    Title = 3


class CjkOrdering(Enum):
    AdobeCNS = 0
    AdobeGB = 1
    AdobeJapan = 2
    AdobeKorea = 3


class SimpleFontEncoding(Enum):
    Latin = 0
    Greek = 1
    Cyrillic = 2


class Encryption(Enum):
    Keep = 0
    Nothing = 1
    RC4_40 = 2
    RC4_128 = 3
    AES_128 = 4
    AES_256 = 5


def _password_bytes(value, what):
    if value is None:
        return b''
    if isinstance(value, str):
        value = value.encode('UTF-8')
    if not isinstance(value, bytes):
        raise PreconditionError(f'{what} must be a string.')
    if b'\0' in value:
        raise PreconditionError(f'{what} must not contain NUL characters.')
    if len(value) >= PASSWORD_MAX:
        raise PreconditionError(f'{what} is too long, maximum is {PASSWORD_MAX - 1} bytes.')
    return value


class WriteOptions(ctypes.Structure):
    _fields_ = [('garbage', ctypes.c_int),
                ('ascii', ctypes.c_int),
                ('decompress', ctypes.c_int),
                ('compress', ctypes.c_int),
                ('compress_images', ctypes.c_int),
                ('compress_fonts', ctypes.c_int),
                ('pretty', ctypes.c_int),
                ('linearize', ctypes.c_int),
                ('clean', ctypes.c_int),
                ('sanitize', ctypes.c_int),
                ('incremental', ctypes.c_int),
                ('encryption', ctypes.c_int),
                ('permissions', ctypes.c_int),
                ('owner_password', ctypes.c_char * PASSWORD_MAX),
                ('user_password', ctypes.c_char * PASSWORD_MAX)]

    def __init__(self, garbage=0, ascii=False, decompress=False, compress=False,
                 compress_images=False, compress_fonts=False, pretty=False,
                 linearize=False, clean=False, sanitize=False, incremental=False,
                 encryption=Encryption.Keep, permissions=-1,
                 owner_password=None, user_password=None):
        if not isinstance(garbage, int) or not 0 <= garbage <= 4:
            raise PreconditionError('Garbage collection level must be between 0 and 4.')
        if not isinstance(encryption, Encryption):
            raise PreconditionError('Encryption argument must be an Encryption value.')
        super().__init__(garbage, int(ascii), int(decompress), int(compress),
                         int(compress_images), int(compress_fonts), int(pretty),
                         int(linearize), int(clean), int(sanitize), int(incremental),
                         encryption.value, permissions,
                         _password_bytes(owner_password, 'Owner password'),
                         _password_bytes(user_password, 'User password'))


class StrokeParams(ctypes.Structure):
    _fields_ = [('start_cap', ctypes.c_int),
                ('dash_cap', ctypes.c_int),
                ('end_cap', ctypes.c_int),
                ('line_join', ctypes.c_int),
                ('line_width', ctypes.c_float),
                ('miter_limit', ctypes.c_float),
                ('dash_phase', ctypes.c_float),
                ('dash_len', ctypes.c_int)]


class FilterOptions(ctypes.Structure):
    """How content streams are rewritten by ``filter_contents``.

    ``sanitize`` drops operators that paint nothing visible; the other
    switches mirror MuPDF's filter options.
    """

    _fields_ = [('recurse', ctypes.c_int),
                ('instance_forms', ctypes.c_int),
                ('ascii', ctypes.c_int),
                ('sanitize', ctypes.c_int)]

    def __init__(self, recurse=False, instance_forms=False, ascii=False, sanitize=True):
        super().__init__(int(bool(recurse)), int(bool(instance_forms)), int(bool(ascii)),
                         int(bool(sanitize)))
