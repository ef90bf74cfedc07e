"""
Дерево значений bencode

Integer     - i<число>e
ByteString  - <длина>:<байты>
List        - l<элементы>e
Map         - d<ключ><значение>...e, ключи только строки

Значения неизменяемые, сравниваются структурно.
"""

import enum
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union


class Kind(enum.Enum):
    INTEGER = "integer"
    STRING = "string"
    LIST = "list"
    MAP = "map"


class Value:
    """
    Base of the four bencode variants. The set of variants is fixed.
    """

    __slots__ = ()
    kind: Kind

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError("bencode values are Integer, ByteString, List or Map")

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")


class Integer(Value):
    __slots__ = ("_value",)
    kind = Kind.INTEGER

    def __init__(self, value: int) -> None:
        # bool - подкласс int, но это не число bencode
        if type(value) is bool or not isinstance(value, int):
            raise TypeError(f"Integer needs an int, got {type(value).__name__}")
        object.__setattr__(self, "_value", int(value))

    @property
    def value(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return isinstance(other, Integer) and other._value == self._value

    def __hash__(self) -> int:
        return hash((self.kind, self._value))

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"Integer({self._value!r})"


class ByteString(Value):
    __slots__ = ("_data",)
    kind = Kind.STRING

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"ByteString needs bytes, got {type(data).__name__}"
            )
        object.__setattr__(self, "_data", bytes(data))

    @property
    def data(self) -> bytes:
        return self._data

    def text(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        """
        Decodes the raw bytes on every call. Only for display: equality,
        hashing and key order always use the bytes.
        """
        return self._data.decode(encoding, errors)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __getitem__(self, index):
        return self._data[index]

    def __bytes__(self) -> bytes:
        return self._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return isinstance(other, ByteString) and other._data == self._data

    def __hash__(self) -> int:
        return hash((self.kind, self._data))

    def __repr__(self) -> str:
        return f"ByteString({self._data!r})"


class List(Value):
    __slots__ = ("_items",)
    kind = Kind.LIST

    def __init__(self, items: Iterable[Value] = ()) -> None:
        items = tuple(items)
        for item in items:
            if not isinstance(item, Value):
                raise TypeError(
                    f"List items must be bencode values, got {type(item).__name__}"
                )
        object.__setattr__(self, "_items", items)

    @property
    def items(self) -> Tuple[Value, ...]:
        return self._items

    def append(self, item: Value) -> "List":
        return List(self._items + (item,))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return isinstance(other, List) and other._items == self._items

    def __hash__(self) -> int:
        return hash((self.kind, self._items))

    def __repr__(self) -> str:
        return f"List({list(self._items)!r})"


Key = Union[bytes, bytearray, ByteString]


def _key(key: Key) -> bytes:
    if isinstance(key, ByteString):
        return key.data
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise TypeError(f"Map keys must be byte strings, got {type(key).__name__}")


class Map(Value):
    """
    Byte string keys to values. Insertion order is not kept as meaningful:
    the encoder sorts keys, see sorted_items().
    """

    __slots__ = ("_entries",)
    kind = Kind.MAP

    def __init__(
        self, entries: Union[Mapping[Key, Value], Iterable[Tuple[Key, Value]]] = ()
    ) -> None:
        if isinstance(entries, (Mapping, Map)):
            entries = entries.items()
        d = {}
        for key, value in entries:
            if not isinstance(value, Value):
                raise TypeError(
                    f"Map values must be bencode values, got {type(value).__name__}"
                )
            d[_key(key)] = value
        object.__setattr__(self, "_entries", d)

    def sorted_items(self):
        # побайтовое сравнение, bytes в python сравниваются как unsigned
        return sorted(self._entries.items(), key=lambda item: item[0])

    def get(self, key: Key, default: Optional[Value] = None) -> Optional[Value]:
        return self._entries.get(_key(key), default)

    def keys(self):
        return self._entries.keys()

    def values(self):
        return self._entries.values()

    def items(self):
        return self._entries.items()

    def set(self, key: Key, value: Value) -> "Map":
        d = dict(self._entries)
        d[_key(key)] = value
        return Map(d)

    def remove(self, key: Key) -> "Map":
        d = dict(self._entries)
        del d[_key(key)]
        return Map(d)

    def __getitem__(self, key: Key) -> Value:
        return self._entries[_key(key)]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (bytes, bytearray, ByteString)):
            return False
        return _key(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return isinstance(other, Map) and other._entries == self._entries

    def __hash__(self) -> int:
        return hash((self.kind, frozenset(self._entries.items())))

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.sorted_items())
        return f"Map({{{body}}})"
