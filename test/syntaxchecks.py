#!/usr/bin/env python3

# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers


import unittest
import os, sys, pathlib, re

source_root = pathlib.Path(__file__).parent.parent
sys.path.append(str(source_root / 'python'))

from mupdfwrap.errors import ErrorKind
from mupdfwrap.handles import Kind
from mupdfwrap.native import cfunc_types
from mupdfwrap.options import PASSWORD_MAX

headerfile = (source_root / 'include/mupdfwrap.h').read_text()


def header_functions():
    return set(re.findall(r'MUPDFWRAP_API[^;(]*?\b(mupdf_\w+)\s*\(', headerfile))


def header_enum(prefix):
    return {name: int(value) for name, value in re.findall(rf'\b{prefix}(\w+) = (\d+)', headerfile)}


class TestSyntax(unittest.TestCase):

    def test_declarations_match(self):
        declared = {name for name, _, _ in cfunc_types}
        exported = header_functions()
        self.assertEqual(declared - exported, set(), 'Python declares functions the header does not have.')
        self.assertEqual(exported - declared, set(), 'Header functions missing from cfunc_types.')

    def test_unique_declarations(self):
        names = [name for name, _, _ in cfunc_types]
        self.assertEqual(len(names), len(set(names)))

    def test_error_codes(self):
        codes = header_enum('MUPDF_ERROR_')
        self.assertEqual(codes, {kind.name: kind.value for kind in ErrorKind})

    def test_kinds(self):
        kinds = re.findall(r'\bMUPDF_KIND_(\w+)', headerfile)
        self.assertEqual(kinds[-1], 'COUNT')
        self.assertEqual(kinds[:-1], [kind.name for kind in Kind])

    def test_password_size(self):
        self.assertIn(f'#define MUPDF_PASSWORD_MAX {PASSWORD_MAX}', headerfile)

    def test_license_header(self):
        for f in sorted(source_root.glob('src/*.[ch]')) + [source_root / 'include/mupdfwrap.h']:
            self.assertTrue(f.read_text().startswith('/* SPDX-License-Identifier: Apache-2.0 */'), str(f))
        for f in sorted(source_root.glob('python/mupdfwrap/*.py')):
            self.assertTrue(f.read_text().startswith('# SPDX-License-Identifier: Apache-2.0'), str(f))

    def test_tab(self):
        for pattern in ('**/meson.build', 'src/*.[ch]', 'include/*.h', 'python/**/*.py'):
            for f in source_root.glob(pattern):
                if 'mesoncheckout' in str(f):
                    continue
                self.assertNotIn(b'\t', f.read_bytes(), str(f.resolve()))


if __name__ == "__main__":
    unittest.main()
