from .bencoding import (
    DecodingError,
    EncodingError,
    PushbackReader,
    decode,
    dumps,
    encode,
    from_python,
    loads,
    to_python,
)
from .values import ByteString, Integer, Kind, List, Map, Value

__version__ = "0.1.0"
