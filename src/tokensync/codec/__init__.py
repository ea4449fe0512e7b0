"""Stateless codecs for values, colors, names and the W3C token format."""

from tokensync.codec.color import parse_color, to_all_formats, to_hex
from tokensync.codec.naming import convert, convert_path, converted_with_original
from tokensync.codec.values import AliasLeaf, LiteralLeaf, decode_leaf, decode_scalar, encode_scalar
from tokensync.codec.w3c import document_to_w3c, is_w3c_payload, w3c_to_document

__all__ = [
    "AliasLeaf",
    "LiteralLeaf",
    "convert",
    "convert_path",
    "converted_with_original",
    "decode_leaf",
    "decode_scalar",
    "document_to_w3c",
    "encode_scalar",
    "is_w3c_payload",
    "parse_color",
    "to_all_formats",
    "to_hex",
    "w3c_to_document",
]
