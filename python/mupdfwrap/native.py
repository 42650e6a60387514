# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes
import logging
import os, sys
import threading

from .errors import MuPDFError, ErrorKind
from .geometry import Point, Rect, IRect, Matrix, Quad, Location, LinkDest, ColorParams
from .options import WriteOptions, StrokeParams, FilterOptions

logger = logging.getLogger(__name__)


class ErrorStruct(ctypes.Structure):
    _fields_ = [('type', ctypes.c_int),
                ('message', ctypes.c_char_p)]


POINT_FUNC = ctypes.CFUNCTYPE(None, ctypes.c_void_p, ctypes.c_float, ctypes.c_float)
CURVE_FUNC = ctypes.CFUNCTYPE(None, ctypes.c_void_p, ctypes.c_float, ctypes.c_float,
                              ctypes.c_float, ctypes.c_float, ctypes.c_float, ctypes.c_float)
CLOSE_FUNC = ctypes.CFUNCTYPE(None, ctypes.c_void_p)


class PathWalker(ctypes.Structure):
    _fields_ = [('move_to', POINT_FUNC),
                ('line_to', POINT_FUNC),
                ('curve_to', CURVE_FUNC),
                ('close_path', CLOSE_FUNC)]


ctx_t = ctypes.c_void_p
ptr_t = ctypes.c_void_p
errptr_t = ctypes.POINTER(ctypes.POINTER(ErrorStruct))
float_p = ctypes.POINTER(ctypes.c_float)
int_p = ctypes.POINTER(ctypes.c_int)
quad_p = ctypes.POINTER(Quad)
c_int = ctypes.c_int
c_float = ctypes.c_float
c_bool = ctypes.c_bool
c_char_p = ctypes.c_char_p
c_size_t = ctypes.c_size_t
c_int64 = ctypes.c_int64

# (name, argtypes, restype)
cfunc_types = (

('mupdf_drop_error', [errptr_t._type_], None),
('mupdf_drop_str', [ctx_t, ptr_t], None),
('mupdf_keep', [ctx_t, c_int, ptr_t, errptr_t], ptr_t),
('mupdf_drop', [ctx_t, c_int, ptr_t], None),

('mupdf_lock_max', [], c_int),
('mupdf_new_base_context', [ptr_t], ctx_t),
('mupdf_drop_base_context', [ctx_t], None),
('mupdf_clone_context', [ctx_t], ctx_t),
('mupdf_drop_context', [ctx_t], None),
('mupdf_aa_level', [ctx_t, c_int], c_int),
('mupdf_set_aa_level', [ctx_t, c_int, c_int], None),
('mupdf_graphics_min_line_width', [ctx_t], c_float),
('mupdf_set_graphics_min_line_width', [ctx_t, c_float], None),
('mupdf_set_icc', [ctx_t, c_int], None),
('mupdf_use_document_css', [ctx_t], c_int),
('mupdf_set_use_document_css', [ctx_t, c_int], None),
('mupdf_user_css', [ctx_t], c_char_p),
('mupdf_set_user_css', [ctx_t, c_char_p, errptr_t], None),

('mupdf_new_buffer', [ctx_t, c_size_t, errptr_t], ptr_t),
('mupdf_buffer_from_bytes', [ctx_t, c_char_p, c_size_t, errptr_t], ptr_t),
('mupdf_buffer_from_str', [ctx_t, c_char_p, errptr_t], ptr_t),
('mupdf_buffer_from_base64', [ctx_t, c_char_p, errptr_t], ptr_t),
('mupdf_buffer_len', [ctx_t, ptr_t], c_size_t),
('mupdf_buffer_read_bytes', [ctx_t, ptr_t, c_size_t, ptr_t, c_size_t, errptr_t], c_size_t),
('mupdf_buffer_write_bytes', [ctx_t, ptr_t, c_char_p, c_size_t, errptr_t], None),

('mupdf_device_colorspace', [ctx_t, c_int, errptr_t], ptr_t),
('mupdf_colorspace_n', [ctx_t, ptr_t], c_int),
('mupdf_colorspace_name', [ctx_t, ptr_t], c_char_p),
('mupdf_convert_color', [ctx_t, ptr_t, float_p, ptr_t, float_p, ptr_t, ColorParams, errptr_t], None),

('mupdf_new_pixmap', [ctx_t, ptr_t, c_int, c_int, c_int, c_int, c_bool, errptr_t], ptr_t),
('mupdf_clone_pixmap', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_clear_pixmap', [ctx_t, ptr_t, errptr_t], None),
('mupdf_clear_pixmap_with_value', [ctx_t, ptr_t, c_int, errptr_t], None),
('mupdf_invert_pixmap', [ctx_t, ptr_t, errptr_t], None),
('mupdf_gamma_pixmap', [ctx_t, ptr_t, c_float, errptr_t], None),
('mupdf_tint_pixmap', [ctx_t, ptr_t, c_int, c_int, errptr_t], None),
('mupdf_save_pixmap_as', [ctx_t, ptr_t, c_char_p, c_int, errptr_t], None),
('mupdf_pixmap_get_image_data', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pixmap_property', [ctx_t, ptr_t, c_int], c_int),
('mupdf_pixmap_samples', [ctx_t, ptr_t], ptr_t),
('mupdf_pixmap_colorspace', [ctx_t, ptr_t], ptr_t),
('mupdf_new_bitmap_from_pixmap', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_bitmap_property', [ctx_t, ptr_t, c_int], c_int),

('mupdf_new_font', [ctx_t, c_char_p, c_int, errptr_t], ptr_t),
('mupdf_new_font_from_buffer', [ctx_t, c_char_p, c_int, ptr_t, errptr_t], ptr_t),
('mupdf_font_name', [ctx_t, ptr_t], c_char_p),
('mupdf_encode_character', [ctx_t, ptr_t, c_int, errptr_t], c_int),
('mupdf_advance_glyph', [ctx_t, ptr_t, c_int, c_bool, errptr_t], c_float),
('mupdf_outline_glyph', [ctx_t, ptr_t, c_int, Matrix, errptr_t], ptr_t),

('mupdf_new_path', [ctx_t, errptr_t], ptr_t),
('mupdf_clone_path', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_trim_path', [ctx_t, ptr_t, errptr_t], None),
('mupdf_moveto', [ctx_t, ptr_t, c_float, c_float, errptr_t], None),
('mupdf_lineto', [ctx_t, ptr_t, c_float, c_float, errptr_t], None),
('mupdf_closepath', [ctx_t, ptr_t, errptr_t], None),
('mupdf_rectto', [ctx_t, ptr_t, c_float, c_float, c_float, c_float, errptr_t], None),
('mupdf_curveto', [ctx_t, ptr_t, c_float, c_float, c_float, c_float, c_float, c_float, errptr_t], None),
('mupdf_curvetov', [ctx_t, ptr_t, c_float, c_float, c_float, c_float, errptr_t], None),
('mupdf_curvetoy', [ctx_t, ptr_t, c_float, c_float, c_float, c_float, errptr_t], None),
('mupdf_transform_path', [ctx_t, ptr_t, Matrix, errptr_t], None),
('mupdf_bound_path', [ctx_t, ptr_t, ptr_t, Matrix, errptr_t], Rect),
('mupdf_walk_path', [ctx_t, ptr_t, ctypes.POINTER(PathWalker), ptr_t, errptr_t], None),

('mupdf_new_text', [ctx_t, errptr_t], ptr_t),
('mupdf_bound_text', [ctx_t, ptr_t, ptr_t, Matrix, errptr_t], Rect),

('mupdf_default_stroke_state', [ctx_t, errptr_t], ptr_t),
('mupdf_new_stroke_state', [ctx_t, ctypes.POINTER(StrokeParams), float_p, errptr_t], ptr_t),
('mupdf_stroke_state_params', [ctx_t, ptr_t, ctypes.POINTER(StrokeParams), float_p, c_int], None),
('mupdf_adjust_rect_for_stroke', [ctx_t, Rect, ptr_t, Matrix, errptr_t], Rect),

('mupdf_new_image_from_pixmap', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_new_image_from_file', [ctx_t, c_char_p, errptr_t], ptr_t),
('mupdf_new_image_from_display_list', [ctx_t, ptr_t, c_float, c_float, errptr_t], ptr_t),
('mupdf_get_pixmap_from_image', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_image_property', [ctx_t, ptr_t, c_int], c_int),

('mupdf_new_cookie', [ctx_t, errptr_t], ptr_t),
('mupdf_cookie_abort', [ctx_t, ptr_t], None),
('mupdf_cookie_property', [ctx_t, ptr_t, c_int], c_int64),

('mupdf_new_draw_device', [ctx_t, ptr_t, IRect, errptr_t], ptr_t),
('mupdf_new_display_list_device', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_new_stext_device', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_close_device', [ctx_t, ptr_t, errptr_t], None),
('mupdf_fill_path', [ctx_t, ptr_t, ptr_t, c_bool, Matrix, ptr_t, float_p, c_float, ColorParams, errptr_t], None),
('mupdf_stroke_path', [ctx_t, ptr_t, ptr_t, ptr_t, Matrix, ptr_t, float_p, c_float, ColorParams, errptr_t], None),
('mupdf_clip_path', [ctx_t, ptr_t, ptr_t, c_bool, Matrix, errptr_t], None),
('mupdf_clip_stroke_path', [ctx_t, ptr_t, ptr_t, ptr_t, Matrix, errptr_t], None),
('mupdf_fill_text', [ctx_t, ptr_t, ptr_t, Matrix, ptr_t, float_p, c_float, ColorParams, errptr_t], None),
('mupdf_stroke_text', [ctx_t, ptr_t, ptr_t, ptr_t, Matrix, ptr_t, float_p, c_float, ColorParams, errptr_t], None),
('mupdf_clip_text', [ctx_t, ptr_t, ptr_t, Matrix, errptr_t], None),
('mupdf_clip_stroke_text', [ctx_t, ptr_t, ptr_t, ptr_t, Matrix, errptr_t], None),
('mupdf_ignore_text', [ctx_t, ptr_t, ptr_t, Matrix, errptr_t], None),
('mupdf_fill_shade', [ctx_t, ptr_t, ptr_t, Matrix, c_float, ColorParams, errptr_t], None),
('mupdf_fill_image', [ctx_t, ptr_t, ptr_t, Matrix, c_float, ColorParams, errptr_t], None),
('mupdf_fill_image_mask', [ctx_t, ptr_t, ptr_t, Matrix, ptr_t, float_p, c_float, ColorParams, errptr_t], None),
('mupdf_clip_image_mask', [ctx_t, ptr_t, ptr_t, Matrix, errptr_t], None),
('mupdf_pop_clip', [ctx_t, ptr_t, errptr_t], None),
('mupdf_begin_layer', [ctx_t, ptr_t, c_char_p, errptr_t], None),
('mupdf_end_layer', [ctx_t, ptr_t, errptr_t], None),
('mupdf_begin_structure', [ctx_t, ptr_t, c_char_p, c_int, errptr_t], None),
('mupdf_end_structure', [ctx_t, ptr_t, errptr_t], None),
('mupdf_begin_metatext', [ctx_t, ptr_t, c_int, c_char_p, errptr_t], None),
('mupdf_end_metatext', [ctx_t, ptr_t, errptr_t], None),
('mupdf_begin_mask', [ctx_t, ptr_t, Rect, c_bool, ptr_t, float_p, ColorParams, errptr_t], None),
('mupdf_end_mask', [ctx_t, ptr_t, errptr_t], None),
('mupdf_begin_group', [ctx_t, ptr_t, Rect, ptr_t, c_bool, c_bool, c_int, c_float, errptr_t], None),
('mupdf_end_group', [ctx_t, ptr_t, errptr_t], None),
('mupdf_begin_tile', [ctx_t, ptr_t, Rect, Rect, c_float, c_float, Matrix, c_int, errptr_t], c_int),
('mupdf_end_tile', [ctx_t, ptr_t, errptr_t], None),

('mupdf_new_display_list', [ctx_t, Rect, errptr_t], ptr_t),
('mupdf_bound_display_list', [ctx_t, ptr_t, errptr_t], Rect),
('mupdf_display_list_to_pixmap', [ctx_t, ptr_t, Matrix, ptr_t, c_bool, errptr_t], ptr_t),
('mupdf_display_list_to_svg', [ctx_t, ptr_t, Matrix, ptr_t, errptr_t], ptr_t),
('mupdf_display_list_to_text_page', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_display_list_run', [ctx_t, ptr_t, ptr_t, Matrix, Rect, ptr_t, errptr_t], None),
('mupdf_search_display_list', [ctx_t, ptr_t, c_char_p, c_int, int_p, errptr_t], quad_p),

('mupdf_new_stext_page', [ctx_t, Rect, errptr_t], ptr_t),
('mupdf_search_stext_page', [ctx_t, ptr_t, c_char_p, c_int, int_p, errptr_t], quad_p),
('mupdf_highlight_selection', [ctx_t, ptr_t, Point, Point, quad_p, c_int, errptr_t], c_int),
('mupdf_stext_page_to_buffer', [ctx_t, ptr_t, c_int, c_float, errptr_t], ptr_t),
('mupdf_drop_quads', [ctx_t, quad_p], None),

('mupdf_bound_page', [ctx_t, ptr_t, errptr_t], Rect),
('mupdf_page_to_pixmap', [ctx_t, ptr_t, Matrix, ptr_t, c_bool, c_bool, errptr_t], ptr_t),
('mupdf_page_to_svg', [ctx_t, ptr_t, Matrix, ptr_t, errptr_t], ptr_t),
('mupdf_page_to_text_page', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_page_to_display_list', [ctx_t, ptr_t, c_bool, errptr_t], ptr_t),
('mupdf_run_page', [ctx_t, ptr_t, ptr_t, Matrix, c_int, ptr_t, errptr_t], None),
('mupdf_load_links', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_page_separations', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_search_page', [ctx_t, ptr_t, c_char_p, c_int, int_p, errptr_t], quad_p),

('mupdf_link_rect', [ctx_t, ptr_t], Rect),
('mupdf_link_uri', [ctx_t, ptr_t], c_char_p),
('mupdf_link_next', [ctx_t, ptr_t], ptr_t),
('mupdf_outline_title', [ctx_t, ptr_t], c_char_p),
('mupdf_outline_uri', [ctx_t, ptr_t], c_char_p),
('mupdf_outline_page', [ctx_t, ptr_t], Location),
('mupdf_outline_next', [ctx_t, ptr_t], ptr_t),
('mupdf_outline_down', [ctx_t, ptr_t], ptr_t),
('mupdf_count_separations', [ctx_t, ptr_t], c_int),

('mupdf_open_document', [ctx_t, c_char_p, errptr_t], ptr_t),
('mupdf_open_document_from_bytes', [ctx_t, ptr_t, c_char_p, errptr_t], ptr_t),
('mupdf_recognize_document', [ctx_t, c_char_p, errptr_t], c_bool),
('mupdf_needs_password', [ctx_t, ptr_t, errptr_t], c_bool),
('mupdf_authenticate_password', [ctx_t, ptr_t, c_char_p, errptr_t], c_bool),
('mupdf_document_page_count', [ctx_t, ptr_t, errptr_t], c_int),
('mupdf_lookup_metadata', [ctx_t, ptr_t, c_char_p, errptr_t], ptr_t),
('mupdf_is_document_reflowable', [ctx_t, ptr_t, errptr_t], c_bool),
('mupdf_layout_document', [ctx_t, ptr_t, c_float, c_float, c_float, errptr_t], None),
('mupdf_load_page', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_convert_to_pdf', [ctx_t, ptr_t, c_int, c_int, c_int, ptr_t, errptr_t], ptr_t),
('mupdf_resolve_link', [ctx_t, ptr_t, c_char_p, float_p, float_p, errptr_t], Location),
('mupdf_resolve_link_dest', [ctx_t, ptr_t, c_char_p, errptr_t], LinkDest),
('mupdf_document_output_intent', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_load_outline', [ctx_t, ptr_t, errptr_t], ptr_t),

('mupdf_new_document_writer', [ctx_t, c_char_p, c_char_p, c_char_p, errptr_t], ptr_t),
('mupdf_new_pdfocr_writer', [ctx_t, c_char_p, c_char_p, errptr_t], ptr_t),
('mupdf_document_writer_begin_page', [ctx_t, ptr_t, Rect, errptr_t], ptr_t),
('mupdf_document_writer_end_page', [ctx_t, ptr_t, errptr_t], None),
('mupdf_document_writer_close', [ctx_t, ptr_t, errptr_t], None),

('mupdf_pdf_load_shading', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_bound_shade', [ctx_t, ptr_t, Matrix, errptr_t], Rect),

('mupdf_pdf_new_document', [ctx_t, errptr_t], ptr_t),
('mupdf_pdf_open_document', [ctx_t, c_char_p, errptr_t], ptr_t),
('mupdf_pdf_open_document_from_bytes', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_from_document', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_to_document', [ctx_t, ptr_t], ptr_t),
('mupdf_pdf_add_object', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_create_object', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_delete_object', [ctx_t, ptr_t, c_int, errptr_t], None),
('mupdf_pdf_add_image', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_add_font', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_add_cjk_font', [ctx_t, ptr_t, ptr_t, c_int, c_int, c_bool, errptr_t], ptr_t),
('mupdf_pdf_add_simple_font', [ctx_t, ptr_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_save_document', [ctx_t, ptr_t, c_char_p, ctypes.POINTER(WriteOptions), errptr_t], None),
('mupdf_pdf_write_document', [ctx_t, ptr_t, ctypes.POINTER(WriteOptions), errptr_t], ptr_t),
('mupdf_pdf_enable_js', [ctx_t, ptr_t, errptr_t], None),
('mupdf_pdf_disable_js', [ctx_t, ptr_t, errptr_t], None),
('mupdf_pdf_js_supported', [ctx_t, ptr_t, errptr_t], c_bool),
('mupdf_pdf_calculate_form', [ctx_t, ptr_t, errptr_t], None),
('mupdf_pdf_trailer', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_catalog', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_load_name_tree', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_count_objects', [ctx_t, ptr_t, errptr_t], c_int),
('mupdf_pdf_count_pages', [ctx_t, ptr_t, errptr_t], c_int),
('mupdf_pdf_new_graft_map', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_graft_object', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_graft_mapped_object', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_new_page', [ctx_t, ptr_t, c_int, c_float, c_float, errptr_t], ptr_t),
('mupdf_pdf_load_page', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_lookup_page_obj', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_insert_page', [ctx_t, ptr_t, c_int, ptr_t, errptr_t], None),
('mupdf_pdf_delete_page', [ctx_t, ptr_t, c_int, errptr_t], None),

('mupdf_pdf_page_to_page', [ctx_t, ptr_t], ptr_t),
('mupdf_pdf_page_obj', [ctx_t, ptr_t], ptr_t),
('mupdf_pdf_create_annot', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_delete_annot', [ctx_t, ptr_t, ptr_t, errptr_t], None),
('mupdf_pdf_first_annot', [ctx_t, ptr_t], ptr_t),
('mupdf_pdf_next_annot', [ctx_t, ptr_t], ptr_t),
('mupdf_pdf_update_page', [ctx_t, ptr_t, errptr_t], c_bool),
('mupdf_pdf_redact_page', [ctx_t, ptr_t, errptr_t], c_bool),
('mupdf_pdf_page_set_rotation', [ctx_t, ptr_t, c_int, errptr_t], None),
('mupdf_pdf_page_set_crop_box', [ctx_t, ptr_t, Rect, errptr_t], None),
('mupdf_pdf_page_crop_box_position', [ctx_t, ptr_t, errptr_t], Point),
('mupdf_pdf_page_media_box', [ctx_t, ptr_t, errptr_t], Rect),
('mupdf_pdf_page_transform', [ctx_t, ptr_t, errptr_t], Matrix),
('mupdf_pdf_page_obj_transform', [ctx_t, ptr_t, errptr_t], Matrix),
('mupdf_pdf_filter_page_contents', [ctx_t, ptr_t, ctypes.POINTER(FilterOptions), errptr_t], None),

('mupdf_pdf_annot_type', [ctx_t, ptr_t, errptr_t], c_int),
('mupdf_pdf_annot_author', [ctx_t, ptr_t, errptr_t], c_char_p),
('mupdf_pdf_set_annot_author', [ctx_t, ptr_t, c_char_p, errptr_t], None),
('mupdf_pdf_set_annot_line', [ctx_t, ptr_t, Point, Point, errptr_t], None),
('mupdf_pdf_set_annot_rect', [ctx_t, ptr_t, Rect, errptr_t], None),
('mupdf_pdf_set_annot_color', [ctx_t, ptr_t, c_int, float_p, errptr_t], None),
('mupdf_pdf_set_annot_flags', [ctx_t, ptr_t, c_int, errptr_t], None),
('mupdf_pdf_set_annot_popup', [ctx_t, ptr_t, Rect, errptr_t], None),
('mupdf_pdf_set_annot_active', [ctx_t, ptr_t, c_int, errptr_t], None),
('mupdf_pdf_set_annot_border_width', [ctx_t, ptr_t, c_float, errptr_t], None),
('mupdf_pdf_set_annot_intent', [ctx_t, ptr_t, c_int, errptr_t], None),
('mupdf_pdf_filter_annot_contents', [ctx_t, ptr_t, ctypes.POINTER(FilterOptions), errptr_t], None),

('mupdf_pdf_new_null', [], ptr_t),
('mupdf_pdf_new_bool', [c_bool], ptr_t),
('mupdf_pdf_new_int', [ctx_t, c_int64, errptr_t], ptr_t),
('mupdf_pdf_new_real', [ctx_t, c_float, errptr_t], ptr_t),
('mupdf_pdf_new_string', [ctx_t, c_char_p, errptr_t], ptr_t),
('mupdf_pdf_new_name', [ctx_t, c_char_p, errptr_t], ptr_t),
('mupdf_pdf_new_indirect', [ctx_t, ptr_t, c_int, c_int, errptr_t], ptr_t),
('mupdf_pdf_new_array', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_new_dict', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_obj_from_str', [ctx_t, ptr_t, c_char_p, errptr_t], ptr_t),
('mupdf_pdf_clone_obj', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_get_bound_document', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_obj_is', [ctx_t, ptr_t, c_int, errptr_t], c_int),
('mupdf_pdf_to_bool', [ctx_t, ptr_t, errptr_t], c_bool),
('mupdf_pdf_to_int', [ctx_t, ptr_t, errptr_t], c_int64),
('mupdf_pdf_to_float', [ctx_t, ptr_t, errptr_t], c_float),
('mupdf_pdf_to_indirect', [ctx_t, ptr_t, errptr_t], c_int),
('mupdf_pdf_to_string', [ctx_t, ptr_t, errptr_t], c_char_p),
('mupdf_pdf_to_name', [ctx_t, ptr_t, errptr_t], c_char_p),
('mupdf_pdf_to_bytes', [ctx_t, ptr_t, ctypes.POINTER(c_size_t), errptr_t], ptr_t),
('mupdf_pdf_resolve_indirect', [ctx_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_array_len', [ctx_t, ptr_t, errptr_t], c_int),
('mupdf_pdf_array_get', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_array_put', [ctx_t, ptr_t, c_int, ptr_t, errptr_t], None),
('mupdf_pdf_array_push', [ctx_t, ptr_t, ptr_t, errptr_t], None),
('mupdf_pdf_array_delete', [ctx_t, ptr_t, c_int, errptr_t], None),
('mupdf_pdf_dict_len', [ctx_t, ptr_t, errptr_t], c_int),
('mupdf_pdf_dict_get', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_dict_get_key', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_dict_get_val', [ctx_t, ptr_t, c_int, errptr_t], ptr_t),
('mupdf_pdf_dict_get_inheritable', [ctx_t, ptr_t, ptr_t, errptr_t], ptr_t),
('mupdf_pdf_dict_put', [ctx_t, ptr_t, ptr_t, ptr_t, errptr_t], None),
('mupdf_pdf_dict_delete', [ctx_t, ptr_t, ptr_t, errptr_t], None),
('mupdf_pdf_read_stream', [ctx_t, ptr_t, c_bool, errptr_t], ptr_t),
('mupdf_pdf_write_object', [ctx_t, ptr_t, ptr_t, errptr_t], None),
('mupdf_pdf_write_stream_buffer', [ctx_t, ptr_t, ptr_t, c_int, errptr_t], None),
('mupdf_pdf_obj_to_string', [ctx_t, ptr_t, c_bool, c_bool, errptr_t], ptr_t),

)


def locate_shared_lib():
    if sys.platform == 'win32':
        libfile_name = 'mupdfwrap.dll'
    elif sys.platform == 'darwin':
        libfile_name = 'libmupdfwrap.dylib'
    else:
        libfile_name = 'libmupdfwrap.so'
    libfile = None

    if 'MUPDFWRAP_SO_OVERRIDE' in os.environ:
        path = os.path.join(os.environ['MUPDFWRAP_SO_OVERRIDE'], libfile_name)
        logger.debug('Loading %s from MUPDFWRAP_SO_OVERRIDE', path)
        libfile = ctypes.cdll.LoadLibrary(path)

    if libfile is None:
        try:
            libfile = ctypes.cdll.LoadLibrary(libfile_name)
        except (FileNotFoundError, OSError):
            pass

    if libfile is None:
        from glob import glob
        # A copy bundled next to the package, e.g. inside a wheel.
        sdir = os.path.split(__file__)[0]
        matches = glob(os.path.join(sdir, libfile_name + '*'))
        if len(matches) == 1:
            libfile = ctypes.cdll.LoadLibrary(matches[0])
    return libfile


def declare(libfile):
    for funcname, argtypes, restype in cfunc_types:
        funcobj = getattr(libfile, funcname)
        funcobj.argtypes = argtypes
        funcobj.restype = restype
    return libfile


class LibraryProxy:
    """Resolves attribute lookups against the currently installed shim.

    The shared library is located and declared on first use, so importing
    the package never touches the file system.
    """

    def __init__(self):
        self._lib = None
        self._lock = threading.Lock()

    def __getattr__(self, name):
        return getattr(self.get(), name)

    def get(self):
        lib = self._lib
        if lib is None:
            with self._lock:
                if self._lib is None:
                    found = locate_shared_lib()
                    if found is None:
                        raise MuPDFError(ErrorKind.SYSTEM, 'Could not locate shared library.')
                    logger.debug('Loaded shim library %s', found._name)
                    self._lib = declare(found)
                lib = self._lib
        return lib

    def set(self, lib):
        with self._lock:
            self._lib = lib

    def is_loaded(self):
        return self._lib is not None


libfile = LibraryProxy()


def load_library(path):
    lib = declare(ctypes.cdll.LoadLibrary(os.fspath(path)))
    logger.debug('Loaded shim library %s', path)
    libfile.set(lib)
    return lib


def set_library(lib):
    """Install ``lib`` as the shim implementation, bypassing the loader.

    ``lib`` must provide the functions listed in ``cfunc_types``. Passing
    None makes the next call locate the shared library again.
    """
    libfile.set(lib)


def library_available():
    try:
        libfile.get()
    except (MuPDFError, OSError):
        return False
    return True
