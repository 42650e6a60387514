# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import logging

from .errors import ErrorKind, MuPDFError, PreconditionError
from .native import load_library, set_library, library_available
from .context import (shutdown, live_handles, is_initialized, aa_level, set_aa_level,
                      text_aa_level, set_text_aa_level, graphics_aa_level,
                      set_graphics_aa_level, graphics_min_line_width,
                      set_graphics_min_line_width, enable_icc, disable_icc,
                      use_document_css, set_use_document_css, user_css, set_user_css)
from .geometry import (Point, Rect, IRect, Matrix, Quad, Location, LinkDestType, LinkDest,
                       RenderingIntent, ColorParams)
from .options import (LineCap, LineJoin, BlendMode, ImageFormat, TextFormat, StextFlags,
                      AnnotationType, AnnotationFlag, Intent, CjkOrdering,
                      SimpleFontEncoding, Encryption, WriteOptions, Metatext, FilterOptions)
from .handles import Kind, Handle
from .buffer import Buffer
from .colorspace import Colorspace, DeviceColorspace
from .pixmap import Pixmap, Bitmap
from .font import Font
from .path import Path, StrokeState
from .text import Text
from .image import Image
from .shade import Shade
from .cookie import Cookie
from .stext import StextPage
from .display_list import DisplayList
from .device import Device
from .page import Page, Link, Separations, RunMode
from .outline import Outline
from .document import Document, DocumentWriter
from .pdf_object import PdfObject
from .pdf_page import PdfPage, PdfAnnotation
from .pdf_document import PdfDocument, PdfGraftMap

__version__ = '0.3.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())
