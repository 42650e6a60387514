#!/usr/bin/env python3

# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

# Tests against the compiled shim and MuPDF. Skipped when the shared
# library can not be found; point MUPDFWRAP_SO_OVERRIDE at the build
# directory to run them.

import unittest
import io, os, sys, pathlib, tempfile, threading
try:
    import PIL.Image
except ModuleNotFoundError:
    sys.exit('PIL not found, test suite can not be run.')

source_root = pathlib.Path(__file__).parent.parent
sys.path.append(str(source_root / 'python'))

import mupdfwrap
from mupdfwrap import (AnnotationType, Buffer, Colorspace, Cookie, Device, DisplayList, Document,
                       Encryption, ErrorKind, FilterOptions, Font, ImageFormat, Matrix, Metatext,
                       MuPDFError, Path, PdfDocument, PdfObject, Pixmap, PreconditionError, Rect,
                       WriteOptions)

HELLO_CONTENT = b'BT /F1 24 Tf 72 700 Td (Hello needle) Tj ET'


def make_pdf(num_pages=1, options=None, text=None):
    with PdfDocument() as pdf:
        for _ in range(num_pages):
            with pdf.new_page(-1, 612, 792) as page:
                if text is not None:
                    add_text(pdf, page, text)
        return pdf.to_bytes(options)


def add_text(pdf, page, content):
    with Font('Helvetica') as font, page.obj() as pobj:
        fobj = pdf.add_simple_font(font)
        fonts = PdfObject.new_dict(pdf)
        fonts.dict_put('F1', fobj)
        resources = pobj.dict_get('Resources')
        resources.dict_put('Font', fonts)
        contents = pdf.add_object(PdfObject.new_dict(pdf))
        contents.write_stream(content)
        pobj.dict_put('Contents', contents)
        for obj in (fobj, fonts, resources, contents):
            obj.close()


def open_pdf(data):
    return Document.from_bytes(data, 'application/pdf')


def decode_png(pixmap):
    with pixmap.image_data(ImageFormat.PNG) as buf:
        return PIL.Image.open(io.BytesIO(buf.to_bytes())).convert('RGB')


class NativeTestCase(unittest.TestCase):

    def setUp(self):
        mupdfwrap.set_library(None)
        if not mupdfwrap.library_available():
            self.skipTest('Shim library not found.')

    def tearDown(self):
        mupdfwrap.shutdown(force=True)


class TestScenarios(NativeTestCase):

    def test_open_page_pixmap(self):
        with open_pdf(make_pdf()) as doc:
            self.assertEqual(doc.page_count, 1)
            with doc.load_page(0) as page, Colorspace.device_rgb() as rgb:
                self.assertEqual(page.bounds(), Rect(0, 0, 612, 792))
                with page.to_pixmap(Matrix.identity(), rgb, False, True) as pix:
                    self.assertEqual((pix.width, pix.height), (612, 792))
                    self.assertEqual(pix.n, 3)
                    img = decode_png(pix)
        self.assertEqual(img.size, (612, 792))
        self.assertEqual(img.getextrema(), ((255, 255), (255, 255), (255, 255)))
        self.assertEqual(mupdfwrap.live_handles(), {})

    def test_password(self):
        opts = WriteOptions(encryption=Encryption.AES_256, owner_password='owner',
                            user_password='correct')
        with open_pdf(make_pdf(options=opts)) as doc:
            self.assertTrue(doc.needs_password())
            self.assertFalse(doc.authenticate_password('wrong'))
            self.assertTrue(doc.authenticate_password('correct'))
            self.assertEqual(doc.page_count, 1)

    def test_invalid_rotation(self):
        with open_pdf(make_pdf()) as doc:
            with self.assertRaises(PreconditionError) as cm:
                doc.convert_to_pdf(0, 0, rotate=45)
            self.assertEqual(cm.exception.kind, ErrorKind.PRECONDITION)
            self.assertIn('rotation not multiple of 90', cm.exception.message)

    def test_search_no_hits(self):
        with open_pdf(make_pdf()) as doc, doc.load_page(0) as page:
            self.assertEqual(page.search('needle-not-present', 16), [])

    def test_write_round_trip(self):
        with open_pdf(make_pdf(3)) as doc, PdfDocument.from_document(doc) as pdf:
            with pdf.write() as buf:
                with Document.from_bytes(buf, 'pdf') as copy:
                    self.assertEqual(copy.page_count, doc.page_count)

    def test_concurrent_rendering(self):
        errors = []
        areas = []
        with open_pdf(make_pdf(4)) as doc:
            def render():
                try:
                    for i in range(doc.page_count):
                        with doc.load_page(i) as page, page.to_pixmap() as pix:
                            areas.append(pix.width * pix.height)
                except MuPDFError as e:
                    errors.append(e)
            threads = [threading.Thread(target=render) for _ in range(2)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()
        self.assertEqual(errors, [])
        self.assertEqual(len(areas), 8)
        self.assertTrue(all(a > 0 for a in areas))


class TestConversion(NativeTestCase):

    def test_ranges(self):
        with open_pdf(make_pdf(3)) as doc:
            with doc.convert_to_pdf() as pdf:
                self.assertEqual(pdf.page_count, 3)
            with doc.convert_to_pdf(2, 1) as pdf:
                self.assertEqual(pdf.page_count, 2)
            with doc.convert_to_pdf(1, 1, rotate=90) as pdf:
                self.assertEqual(pdf.page_count, 1)
            with doc.convert_to_pdf(-1, -1) as pdf:
                self.assertEqual(pdf.page_count, 0)

    def test_bad_page(self):
        with open_pdf(make_pdf(2)) as doc:
            with self.assertRaises(MuPDFError) as cm:
                doc.convert_to_pdf(0, 5)
            self.assertEqual(cm.exception.kind, ErrorKind.RANGE)
        self.assertEqual(mupdfwrap.live_handles(), {})

    def test_failure_after_first_page(self):
        with PdfDocument() as pdf:
            pdf.new_page().close()
            pdf.new_page().close()
            # The page tree claims a third page that does not exist.
            with pdf.catalog() as catalog, catalog.dict_get('Pages') as pages:
                pages.dict_put('Count', 3)
            data = pdf.to_bytes()
        with open_pdf(data) as doc:
            self.assertEqual(doc.page_count, 3)
            with doc.convert_to_pdf(0, 1) as good:
                self.assertEqual(good.page_count, 2)
            with self.assertRaises(MuPDFError) as cm:
                doc.convert_to_pdf(0, 2)
            self.assertNotEqual(cm.exception.kind, ErrorKind.PRECONDITION)
        self.assertEqual(mupdfwrap.live_handles(), {})


class TestCancellation(NativeTestCase):

    def assertAborted(self, func, *args, **kwargs):
        with self.assertRaises(MuPDFError) as cm:
            func(*args, **kwargs)
        self.assertEqual(cm.exception.kind, ErrorKind.ABORT)

    def test_page_to_svg(self):
        with open_pdf(make_pdf(text=HELLO_CONTENT)) as doc, doc.load_page(0) as page, Cookie() as cookie:
            cookie.abort()
            self.assertTrue(cookie.aborted)
            self.assertAborted(page.to_svg, cookie=cookie)
        self.assertEqual(mupdfwrap.live_handles(), {})

    def test_display_list_run(self):
        with open_pdf(make_pdf(text=HELLO_CONTENT)) as doc, doc.load_page(0) as page:
            with page.to_display_list() as dl, Colorspace.device_rgb() as rgb, \
                    Pixmap(rgb, 0, 0, 612, 792, False) as pix, Cookie() as cookie:
                pix.clear(255)
                cookie.abort()
                with Device.draw(pix) as dev:
                    self.assertAborted(dl.run, dev, cookie=cookie)
                self.assertAborted(dl.to_svg, cookie=cookie)
        self.assertEqual(mupdfwrap.live_handles(), {})

    def test_convert_to_pdf(self):
        with open_pdf(make_pdf(3, text=HELLO_CONTENT)) as doc, Cookie() as cookie:
            cookie.abort()
            self.assertAborted(doc.convert_to_pdf, cookie=cookie)
            with doc.convert_to_pdf() as pdf:
                self.assertEqual(pdf.page_count, 3)
        self.assertEqual(mupdfwrap.live_handles(), {})


class TestText(NativeTestCase):

    def test_search_and_extract(self):
        with open_pdf(make_pdf(text=HELLO_CONTENT)) as doc, doc.load_page(0) as page:
            hits = page.search('needle')
            self.assertEqual(len(hits), 1)
            self.assertGreater(hits[0].rect.x0, 72)
            self.assertIn('Hello needle', page.to_text())
            with page.to_display_list() as dl:
                self.assertEqual(len(dl.search('Hello')), 1)
            svg = page.to_svg()
            self.assertTrue(svg.startswith('<?xml') or svg.startswith('<svg'))

    def test_text_renders(self):
        with open_pdf(make_pdf(text=HELLO_CONTENT)) as doc, doc.load_page(0) as page:
            with page.to_pixmap() as pix:
                img = decode_png(pix)
        # Text was drawn in black somewhere in the top band of the page.
        band = img.crop((72, 60, 300, 100))
        self.assertEqual(band.convert('L').getextrema()[0], 0)


class TestDrawing(NativeTestCase):

    def test_fill_rect(self):
        with Colorspace.device_rgb() as rgb, Pixmap(rgb, 0, 0, 100, 100, False) as pix:
            pix.clear(255)
            with Path() as path:
                path.rect_to(25, 25, 75, 75)
                with Device.draw(pix) as dev:
                    dev.fill_path(path, rgb, [1, 0, 0])
            img = decode_png(pix)
        self.assertEqual(img.getpixel((50, 50)), (255, 0, 0))
        self.assertEqual(img.getpixel((5, 5)), (255, 255, 255))

    def test_pixmap_properties(self):
        with Colorspace.device_rgb() as rgb, Pixmap(rgb, 0, 0, 10, 20, True) as pix:
            self.assertEqual((pix.width, pix.height, pix.n), (10, 20, 4))
            self.assertTrue(pix.alpha)
            self.assertEqual(pix.stride, 40)
            pix.clear()
            self.assertEqual(pix.samples, bytes(800))
            with pix.colorspace as cs:
                self.assertEqual(cs.n, 3)

    def test_fill_shade(self):
        source = ('<< /ShadingType 2 /ColorSpace /DeviceRGB /Coords [0 0 100 0] '
                  '/Function << /FunctionType 2 /Domain [0 1] /C0 [1 0 0] /C1 [1 0 0] /N 1 >> '
                  '/Extend [true true] >>')
        with PdfDocument() as pdf, PdfObject.parse(source, pdf) as obj:
            shade = pdf.load_shading(obj)
        with shade, Colorspace.device_rgb() as rgb, Pixmap(rgb, 0, 0, 100, 100, False) as pix:
            pix.clear(255)
            with Device.draw(pix) as dev:
                dev.fill_shade(shade, Matrix.identity())
            img = decode_png(pix)
        self.assertEqual(img.getpixel((50, 50)), (255, 0, 0))
        self.assertEqual(mupdfwrap.live_handles(), {})

    def test_shading_needs_object(self):
        with PdfDocument() as pdf:
            with self.assertRaises(PreconditionError):
                pdf.load_shading('<< /ShadingType 2 >>')

    def test_structure_and_metatext(self):
        with DisplayList(Rect(0, 0, 100, 100)) as dl:
            with Device.display_list(dl) as dev, Path() as path, Colorspace.device_rgb() as rgb:
                path.rect_to(10, 10, 90, 90)
                dev.begin_structure('P', 1)
                dev.begin_metatext(Metatext.Alt, 'a red square')
                dev.fill_path(path, rgb, [1, 0, 0])
                dev.end_metatext()
                dev.end_structure()
                dev.begin_structure('NotAStandardTag')
                dev.end_structure()
                with self.assertRaises(PreconditionError):
                    dev.begin_metatext(7, 'bad kind')
            with dl.to_pixmap() as pix:
                img = decode_png(pix)
        self.assertEqual(img.getpixel((50, 50)), (255, 0, 0))
        self.assertEqual(mupdfwrap.live_handles(), {})


class TestPathWalk(NativeTestCase):

    class Recorder:
        def __init__(self):
            self.seen = []

        def move_to(self, x, y):
            self.seen.append(('m', x, y))

        def line_to(self, x, y):
            self.seen.append(('l', x, y))

        def curve_to(self, x1, y1, x2, y2, x3, y3):
            self.seen.append(('c', x1, y1, x2, y2, x3, y3))

        def close_path(self):
            self.seen.append(('h',))

    def test_segments(self):
        recorder = self.Recorder()
        with Path() as path:
            path.move_to(10, 20)
            path.line_to(30, 20)
            path.curve_to(40, 20, 50, 30, 50, 40)
            path.close_path()
            path.walk(recorder)
        self.assertEqual(recorder.seen, [('m', 10, 20), ('l', 30, 20),
                                         ('c', 40, 20, 50, 30, 50, 40), ('h',)])

    def test_rectangle_expanded(self):
        recorder = self.Recorder()
        with Path() as path:
            path.rect_to(0, 0, 10, 5)
            path.walk(recorder)
        self.assertEqual(recorder.seen[0], ('m', 0, 0))
        self.assertEqual([s[0] for s in recorder.seen], ['m', 'l', 'l', 'l', 'h'])
        corners = {s[1:] for s in recorder.seen if s[0] in 'ml'}
        self.assertEqual(corners, {(0, 0), (10, 0), (10, 5), (0, 5)})

    def test_glyph_outline(self):
        recorder = self.Recorder()
        with Font('Helvetica') as font:
            glyph = font.encode_character(ord('O'))
            with font.outline_glyph(glyph, Matrix.identity()) as path:
                path.walk(recorder)
        kinds = [s[0] for s in recorder.seen]
        self.assertEqual(kinds[0], 'm')
        self.assertIn('c', kinds)


class TestBuffer(NativeTestCase):

    def test_contents(self):
        with Buffer.from_str('hello') as buf:
            self.assertEqual(len(buf), 5)
            self.assertEqual(buf.read_bytes(1, 3), b'ell')
            buf.write_bytes(b' world')
            self.assertEqual(buf.to_str(), 'hello world')
            with self.assertRaises(PreconditionError):
                buf.read_bytes(100, 1)
        with Buffer.from_base64('aGVsbG8=') as buf:
            self.assertEqual(buf.to_bytes(), b'hello')


class TestPdf(NativeTestCase):

    def test_objects(self):
        with PdfDocument() as pdf:
            obj = PdfObject.parse('<< /Type /Catalog /Count 3 /Kids [1 2 3] /Title (Hi) >>', pdf)
            self.assertTrue(obj.is_dict())
            self.assertEqual(obj.dict_len(), 4)
            self.assertEqual(obj.dict_get('Count').to_int(), 3)
            self.assertEqual(obj.dict_get('Type').to_name(), 'Catalog')
            kids = obj.dict_get('Kids')
            self.assertTrue(kids.is_array())
            self.assertEqual(kids.array_len(), 3)
            self.assertEqual(kids.array_get(1).to_int(), 2)
            kids.array_push(4.5)
            self.assertAlmostEqual(kids.array_get(3).to_float(), 4.5)
            self.assertEqual(obj.dict_get('Title').to_string(), 'Hi')
            self.assertIsNone(obj.dict_get('Missing'))
            obj.dict_delete('Title')
            self.assertEqual(obj.dict_len(), 3)
            self.assertIn('/Catalog', obj.to_source())
            copy = obj.deep_copy()
            copy.dict_put('Count', 5)
            self.assertEqual(obj.dict_get('Count').to_int(), 3)

    def test_sentinels(self):
        self.assertTrue(PdfObject.null().is_null())
        self.assertTrue(PdfObject.true().to_bool())
        self.assertFalse(PdfObject.false().to_bool())
        self.assertEqual(PdfObject.new_int(7).to_int(), 7)

    def test_document_structure(self):
        with open_pdf(make_pdf(2)) as doc, PdfDocument.from_document(doc) as pdf:
            self.assertEqual(pdf.page_count, 2)
            self.assertEqual(pdf.catalog().dict_get('Type').to_name(), 'Catalog')
            self.assertTrue(pdf.trailer().dict_get('Root').is_indirect())
            mediabox = pdf.lookup_page_obj(0).dict_get('MediaBox')
            self.assertEqual(mediabox.array_get(2).to_float(), 612)
            bound = pdf.trailer().document()
            self.assertIsNotNone(bound)
            self.assertGreater(pdf.count_objects(), 0)

    def test_page_editing(self):
        with PdfDocument() as pdf:
            pdf.new_page().close()
            pdf.new_page(0, 300, 400).close()
            self.assertEqual(pdf.page_count, 2)
            with pdf.load_page(0) as page:
                self.assertEqual(page.media_box(), Rect(0, 0, 300, 400))
                page.set_rotation(90)
                with page.obj() as pobj:
                    self.assertEqual(pobj.dict_get('Rotate').to_int(), 90)
            with self.assertRaises(PreconditionError):
                pdf.delete_page(2)
            pdf.delete_page(0)
            self.assertEqual(pdf.page_count, 1)
            with self.assertRaises(PreconditionError):
                pdf.new_page(5)

    def test_annotations(self):
        with PdfDocument() as pdf, pdf.new_page() as page:
            annot = page.create_annotation(AnnotationType.Square)
            annot.set_rect((100, 100, 200, 200))
            annot.set_color([1, 0, 0])
            annot.set_border_width(2)
            annot.set_author('mupdfwrap')
            self.assertEqual(annot.author, 'mupdfwrap')
            self.assertEqual(annot.type, AnnotationType.Square)
            page.update()
            self.assertEqual(len(page.annotations()), 1)
            page.delete_annotation(annot)
            self.assertEqual(page.annotations(), [])

    def test_graft(self):
        with open_pdf(make_pdf()) as doc, PdfDocument.from_document(doc) as src, PdfDocument() as dst:
            page_obj = src.lookup_page_obj(0)
            copied = dst.graft_object(page_obj)
            self.assertTrue(copied.is_indirect())
            with dst.new_graft_map() as gmap:
                again = gmap.graft(page_obj)
                self.assertTrue(again.is_indirect())
            dst.insert_page(0, copied)
            self.assertEqual(dst.page_count, 1)

    def test_save(self):
        with tempfile.TemporaryDirectory() as d:
            fname = pathlib.Path(d) / 'out.pdf'
            with PdfDocument() as pdf:
                pdf.new_page().close()
                pdf.save(fname, WriteOptions(garbage=1, compress=True))
            self.assertTrue(fname.read_bytes().startswith(b'%PDF'))
            with PdfDocument.open(fname) as pdf:
                self.assertEqual(pdf.page_count, 1)

    def test_filter_page_contents(self):
        with PdfDocument.from_bytes(make_pdf(text=HELLO_CONTENT)) as pdf:
            with pdf.load_page(0) as page:
                page.filter_contents()
                page.filter_contents(FilterOptions(ascii=True, sanitize=False))
                with page.to_page() as p:
                    self.assertIn('Hello needle', p.to_text())
                    with p.to_pixmap() as pix:
                        img = decode_png(pix)
        band = img.crop((72, 60, 300, 100))
        self.assertEqual(band.convert('L').getextrema()[0], 0)
        self.assertEqual(mupdfwrap.live_handles(), {})

    def test_filter_annotation_contents(self):
        with PdfDocument() as pdf, pdf.new_page() as page:
            annot = page.create_annotation(AnnotationType.Square)
            annot.set_rect((100, 100, 200, 200))
            annot.set_color([1, 0, 0])
            page.update()
            annot.filter_contents()
            page.update()
            self.assertEqual(len(page.annotations()), 1)
            with self.assertRaises(PreconditionError):
                annot.filter_contents(object())


class TestContextSettings(NativeTestCase):

    def test_aa_level(self):
        mupdfwrap.set_aa_level(4)
        self.assertEqual(mupdfwrap.aa_level(), 4)
        mupdfwrap.set_aa_level(8)
        self.assertEqual(mupdfwrap.aa_level(), 8)

    def test_metadata(self):
        with open_pdf(make_pdf()) as doc:
            self.assertTrue(doc.lookup_metadata('format').startswith('PDF'))
            self.assertIsNone(doc.outline())


if __name__ == "__main__":
    unittest.main()
