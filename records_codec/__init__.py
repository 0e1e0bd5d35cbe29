"""Records codec: tag-driven mapping between dataclass entries and rows of text."""

from records_codec.codec import (
    build_column_index,
    decode_row,
    encode_entry,
    header,
    marshal,
    unmarshal,
)
from records_codec.coercion import decode_value, encode_value, format_float
from records_codec.introspector import (
    clear_descriptor_cache,
    column,
    describe,
    is_record_sequence,
    is_record_type,
)

__all__ = [
    "build_column_index",
    "clear_descriptor_cache",
    "column",
    "decode_row",
    "decode_value",
    "describe",
    "encode_entry",
    "encode_value",
    "format_float",
    "header",
    "is_record_sequence",
    "is_record_type",
    "marshal",
    "unmarshal",
]
