"""Core transcoding modules for qqcodec."""

from .decoder import DecodeResult, decode_message
from .encoder import EncodeResult, Encoder, encode_message

__all__ = [
    "DecodeResult",
    "decode_message",
    "EncodeResult",
    "Encoder",
    "encode_message",
]
