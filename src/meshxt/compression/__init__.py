"""Payload compression: dictionary substitution and template codebook."""

from .codebook import (
    DecodedTemplate,
    TemplateInfo,
    decode_template,
    encode_template,
    find_template,
    list_templates,
)
from .dictionary import LITERAL_MARKER, RESERVED_BYTE, SUBSTITUTION_TABLE
from .substitution import Token, compress, decompress, iter_tokens, tokenize

__all__ = [
    "DecodedTemplate",
    "LITERAL_MARKER",
    "RESERVED_BYTE",
    "SUBSTITUTION_TABLE",
    "TemplateInfo",
    "Token",
    "compress",
    "decode_template",
    "decompress",
    "encode_template",
    "find_template",
    "iter_tokens",
    "list_templates",
    "tokenize",
]
