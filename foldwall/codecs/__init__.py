"""Foldwall Codecs: transform sequence encoding/decoding."""

from .transform import TransformCodec

__all__ = ["TransformCodec"]
