"""
Типы

Строки - <длина строки>:<строка>
4:spam, 1:a, 0:

Целые числа - i<число>e
i3e, i0e, i-3e
i03e, i-0e - нельзя (можно только с strict=False)

Списки - l<bencoded элементы>e
l4:spam1:ae - [b"spam", b"a"]
le - []

Словари - d<bencoded строка><bencoded элемент>e
d4:spam1:ae - {b"spam": b"a"}
de - {}
"""

import io
from typing import Any, BinaryIO, Union

from .values import ByteString, Integer, List, Map, Value

END = b"e"
INTEGER_PREFIX = b"i"
LIST_PREFIX = b"l"
MAP_PREFIX = b"d"
LENGTH_SEPARATOR = b":"

READ_CHUNK = 2 ** 16  # 64KiB

# int <-> str по кускам, чтобы не упираться в sys.set_int_max_str_digits
DECIMAL_CHUNK = 500
DECIMAL_BASE = 10 ** DECIMAL_CHUNK


class DecodingError(ValueError):
    def __init__(self, message: str, position: int = -1) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position < 0:
            return self.message
        return f"{self.message} (at byte {self.position})"


class EncodingError(ValueError):
    pass


class PushbackReader:
    """
    Byte reader with a single byte of pushback over any object with read(n).
    """

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self.position = 0
        self._pushed = b""

    def read(self, size: int = 1) -> bytes:
        parts = []
        if self._pushed and size > 0:
            parts.append(self._pushed)
            self._pushed = b""
            size -= 1

        while size > 0:
            chunk = self.stream.read(min(size, READ_CHUNK))
            if not chunk:
                break
            parts.append(chunk)
            size -= len(chunk)

        data = b"".join(parts)
        self.position += len(data)
        return data

    def unread(self, c: bytes) -> None:
        if self._pushed:
            raise RuntimeError("only one byte can be pushed back")
        if len(c) != 1:
            raise ValueError("unread() takes exactly one byte")
        self._pushed = c
        self.position -= 1


def parse_decimal(digits: bytes) -> int:
    negative = digits.startswith(b"-")
    if negative:
        digits = digits[1:]
    n = 0
    for i in range(0, len(digits), DECIMAL_CHUNK):
        chunk = digits[i : i + DECIMAL_CHUNK]
        n = n * 10 ** len(chunk) + int(chunk)
    return -n if negative else n


def format_decimal(n: int) -> bytes:
    sign = "-" if n < 0 else ""
    n = abs(n)
    chunks = []
    while n >= DECIMAL_BASE:
        n, low = divmod(n, DECIMAL_BASE)
        chunks.append(str(low).zfill(DECIMAL_CHUNK))
    chunks.append(str(n))
    return (sign + "".join(reversed(chunks))).encode("ascii")


def _is_digit(c: bytes) -> bool:
    return len(c) == 1 and b"0" <= c <= b"9"


def _decode_int(buf: PushbackReader, strict: bool) -> Integer:
    acc = io.BytesIO()
    c = buf.read()
    if c == b"-":
        acc.write(c)
        c = buf.read()

    while c != END:
        if not c:
            raise DecodingError("unterminated integer", buf.position)
        if not _is_digit(c):
            raise DecodingError(
                f"unexpected character {c!r} in integer", buf.position
            )
        acc.write(c)
        c = buf.read()

    digits = acc.getvalue()
    magnitude = digits.lstrip(b"-")
    if not magnitude:
        raise DecodingError("integer has no digits", buf.position)
    if strict:
        if magnitude.startswith(b"0") and len(magnitude) > 1:
            raise DecodingError("integer has leading zeros", buf.position)  # i03e
        if digits == b"-0":
            raise DecodingError("negative zero", buf.position)  # i-0e
    return Integer(parse_decimal(digits))


def _decode_length(buf: PushbackReader) -> int:
    acc = io.BytesIO()
    c = buf.read()
    while c != LENGTH_SEPARATOR:
        if not c:
            raise DecodingError("unexpected end of data in string length", buf.position)
        if not _is_digit(c):
            raise DecodingError("length had non-integer characters", buf.position)
        acc.write(c)
        c = buf.read()
    return parse_decimal(acc.getvalue())


def _decode_string(buf: PushbackReader) -> ByteString:
    length = _decode_length(buf)
    s = buf.read(length)
    if len(s) != length:
        raise DecodingError(
            f"string length mismatch: expected {length} bytes, got {len(s)}",
            buf.position,
        )
    return ByteString(s)


def _decode_list(buf: PushbackReader, strict: bool) -> List:
    items = []
    while True:
        c = buf.read()
        if c == END:
            return List(items)
        if not c:
            raise DecodingError("unterminated list", buf.position)
        buf.unread(c)
        items.append(_decode(buf, strict))


def _decode_map(buf: PushbackReader, strict: bool) -> Map:
    entries = {}
    while True:
        c = buf.read()
        if c == END:
            return Map(entries)
        if not c:
            raise DecodingError("unterminated map", buf.position)
        buf.unread(c)

        key = _decode(buf, strict)
        # ключ не может быть не строкой
        if not isinstance(key, ByteString):
            raise DecodingError(
                f"map keys must be strings, found {key.kind.value}", buf.position
            )
        # повторный ключ перезаписывает предыдущий
        entries[key.data] = _decode(buf, strict)


def _decode(buf: PushbackReader, strict: bool) -> Value:
    c = buf.read()
    if not c:
        raise DecodingError("unexpected end of data", buf.position)

    if c == INTEGER_PREFIX:
        return _decode_int(buf, strict)
    elif c == LIST_PREFIX:
        return _decode_list(buf, strict)
    elif c == MAP_PREFIX:
        return _decode_map(buf, strict)
    elif _is_digit(c):
        buf.unread(c)
        return _decode_string(buf)
    else:
        raise DecodingError(f"invalid type prefix {c!r}", buf.position)


def decode(
    source: Union[BinaryIO, PushbackReader, bytes, bytearray, memoryview],
    strict: bool = True,
) -> Value:
    """
    Reads exactly one value from source and leaves it positioned right after
    that value. Whatever follows is not read.
    """
    if isinstance(source, str):
        raise TypeError("bencoded data must be bytes, not str")
    if isinstance(source, PushbackReader):
        buf = source
    elif isinstance(source, (bytes, bytearray, memoryview)):
        buf = PushbackReader(io.BytesIO(source))
    else:
        buf = PushbackReader(source)

    try:
        return _decode(buf, strict)
    except RecursionError:
        raise DecodingError("nesting too deep", buf.position) from None


def loads(data: Union[bytes, bytearray, memoryview], strict: bool = True) -> Value:
    """
    Decodes a complete document. Trailing bytes after the value are an error.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(
            f"bencoded data must be bytes-like, not {type(data).__name__}"
        )
    buf = PushbackReader(io.BytesIO(data))
    value = decode(buf, strict)
    if buf.read():
        raise DecodingError("trailing data after value", buf.position - 1)
    return value


def _encode_bytes(data: bytes, sink: BinaryIO) -> None:
    sink.write(format_decimal(len(data)))
    sink.write(LENGTH_SEPARATOR)
    sink.write(data)


def encode(value: Value, sink: BinaryIO) -> None:
    """
    Writes the canonical encoding of value to sink. Errors raised by the
    sink propagate.
    """
    if isinstance(value, Integer):
        sink.write(INTEGER_PREFIX)
        sink.write(format_decimal(value.value))
        sink.write(END)
    elif isinstance(value, ByteString):
        _encode_bytes(value.data, sink)
    elif isinstance(value, List):
        sink.write(LIST_PREFIX)
        for item in value:
            encode(item, sink)
        sink.write(END)
    elif isinstance(value, Map):
        sink.write(MAP_PREFIX)
        for key, item in value.sorted_items():
            _encode_bytes(key, sink)
            encode(item, sink)
        sink.write(END)
    else:
        raise EncodingError(
            f"can't encode {type(value).__name__}, convert it with from_python()"
        )


def dumps(value: Value) -> bytes:
    buf = io.BytesIO()
    encode(value, buf)
    return buf.getvalue()


def from_python(obj: Any) -> Value:
    """
    Builds a value tree from int, bytes, str (stored as UTF-8), list, tuple
    and dict with bytes or str keys.
    """
    if isinstance(obj, Value):
        return obj
    elif type(obj) == int:
        return Integer(obj)
    elif type(obj) in (bytes, bytearray):
        return ByteString(obj)
    elif type(obj) == str:
        return ByteString(obj.encode("utf-8"))
    elif type(obj) in (list, tuple):
        return List(from_python(item) for item in obj)
    elif type(obj) == dict:
        entries = {}
        for k, v in obj.items():
            if type(k) == str:
                k = k.encode("utf-8")
            elif type(k) not in (bytes, bytearray):
                raise EncodingError(f"dict keys must be bytes or str, got {type(k).__name__}")
            entries[bytes(k)] = from_python(v)
        return Map(entries)
    else:
        raise EncodingError(f"unsupported type {type(obj).__name__}")


def to_python(value: Value) -> Any:
    if isinstance(value, Integer):
        return value.value
    elif isinstance(value, ByteString):
        return value.data
    elif isinstance(value, List):
        return [to_python(item) for item in value]
    elif isinstance(value, Map):
        return {k: to_python(v) for k, v in value.items()}
    else:
        raise EncodingError(f"not a bencode value: {type(value).__name__}")
