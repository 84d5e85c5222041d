import codecs
import functools
import typing
import zlib

import chardet


def parse_charset(content_type: typing.Optional[str]) -> typing.Optional[str]:
    """Pulls the 'charset' parameter out of a 'Content-Type' value"""
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            return value.strip(' "') or None
    return None


@functools.lru_cache(128)
def is_known_encoding(encoding: str) -> typing.Optional[str]:
    """Given an encoding type, return either it's normalized name
    if it's a text codec we understand otherwise return 'None'.
    Codecs like 'base64' or 'zlib' don't decode bytes to 'str'.
    """
    try:
        codec = codecs.lookup(encoding)
    except LookupError:
        return None
    if not getattr(codec, "_is_text_encoding", True):
        return None
    return codec.name


def detect_encoding(data: bytes, content_type: typing.Optional[str] = None) -> str:
    """Picks the encoding for a response body.
    - If there is a 'charset=X' within the 'Content-Type' header
      and its an encoding that Python understands, use it.
    - Otherwise feed the body to chardet.
    - If chardet isn't sure about the encoding fall back to 'utf-8'.
    """
    charset = parse_charset(content_type)
    if charset:
        encoding = is_known_encoding(charset)
        if encoding:
            return encoding

    detected = chardet.detect(data).get("encoding")
    if detected and is_known_encoding(detected):
        return typing.cast(str, is_known_encoding(detected))
    return "utf-8"


def decode_text(data: bytes, content_type: typing.Optional[str] = None) -> str:
    if not data:
        return ""
    return data.decode(detect_encoding(data, content_type), errors="replace")


def to_bytes(value: typing.Union[str, bytes], encoding: str = "utf-8") -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode(encoding)


def _decompress_gzip(data: bytes) -> bytes:
    # Concatenated gzip members are all decoded, like other clients do.
    output = bytearray()
    while data:
        obj = zlib.decompressobj(16 + zlib.MAX_WBITS)
        output += obj.decompress(data)
        output += obj.flush()
        data = obj.unused_data
    return bytes(output)


def _decompress_deflate(data: bytes) -> bytes:
    # Servers disagree on whether 'deflate' means zlib-wrapped
    # or raw deflate data so try both.
    try:
        return zlib.decompress(data)
    except zlib.error:
        return zlib.decompress(data, -zlib.MAX_WBITS)


_CONTENT_DECODERS: typing.Dict[str, typing.Callable[[bytes], bytes]] = {
    "gzip": _decompress_gzip,
    "x-gzip": _decompress_gzip,
    "deflate": _decompress_deflate,
    "x-deflate": _decompress_deflate,
}


def decode_content(data: bytes, content_encoding: typing.Optional[str]) -> bytes:
    """Undoes every coding listed in 'Content-Encoding'. Codings are
    removed in the reverse of the order they were applied in.
    Unknown codings are left alone.
    """
    if not data or not content_encoding:
        return data
    for coding in reversed(content_encoding.split(",")):
        decoder = _CONTENT_DECODERS.get(coding.strip().lower())
        if decoder is not None:
            data = decoder(data)
    return data
