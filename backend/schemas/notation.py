"""
Notation Value Model

Generic value tree produced by the notation parser. Every variant is an
immutable, hashable dataclass so values can be used directly as map keys or
set members. Collections cache their structural hash when built and compare
with an explicit work list, so neither hashing nor ``==`` recurses natively
and deeply nested trees stay usable.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Nil:
    pass


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True, eq=False)
class Number:
    """Integer or float. ``1`` and ``1.0`` are different values."""
    value: Union[int, float]

    def _key(self) -> Tuple[bool, Union[int, float]]:
        return isinstance(self.value, float), self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


@dataclass(frozen=True)
class Str:
    value: str


@dataclass(frozen=True)
class Keyword:
    """Namespaced symbolic identifier written with a leading colon (``:process/id``)."""
    name: str
    namespace: Optional[str] = None

    @property
    def qualified(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


@dataclass(frozen=True)
class Symbol:
    """Same shape as a keyword, written without the leading colon."""
    name: str
    namespace: Optional[str] = None

    @property
    def qualified(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


class _Collection:
    """Cached structural hash and non-recursive equality for Vector, Set and Map."""

    _hash: int

    def __post_init__(self) -> None:
        # Children are built first, so hashing them only reads their cached hashes
        object.__setattr__(self, "_hash", hash((type(self).__name__, self._hash_key())))

    def _hash_key(self) -> object:
        raise NotImplementedError

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return values_equal(self, other)


@dataclass(frozen=True, eq=False)
class Vector(_Collection):
    items: Tuple["Value", ...] = ()
    _hash: int = field(default=0, init=False, repr=False)

    def _hash_key(self) -> object:
        return self.items

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, eq=False)
class Set(_Collection):
    """Collection without structural duplicates. Keeps insertion order, but
    member order does not take part in equality."""
    items: Tuple["Value", ...] = ()
    _hash: int = field(default=0, init=False, repr=False)

    def _hash_key(self) -> object:
        return frozenset(self.items)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, item: object) -> bool:
        return item in self.items


@dataclass(frozen=True, eq=False)
class Map(_Collection):
    """Insertion-ordered key/value pairs with structurally unique keys."""
    entries: Tuple[Tuple["Value", "Value"], ...] = ()
    _hash: int = field(default=0, init=False, repr=False)

    def _hash_key(self) -> object:
        return self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> Tuple["Value", ...]:
        return tuple(key for key, _ in self.entries)

    def get(self, key: "Value", default: Optional["Value"] = None) -> Optional["Value"]:
        for entry_key, entry_value in self.entries:
            if entry_key == key:
                return entry_value
        return default

    def __contains__(self, key: object) -> bool:
        return any(entry_key == key for entry_key, _ in self.entries)


Value = Union[Nil, Bool, Number, Str, Keyword, Symbol, Vector, Set, Map]

NIL = Nil()


def _pair_set_members(left: Set, right: Set) -> Optional[List[Tuple["Value", "Value"]]]:
    """Match each member of ``left`` with the member of ``right`` that has the
    same hash. Returns None when the sets cannot be equal."""
    if len(left.items) != len(right.items):
        return None
    by_hash: Dict[int, List[Value]] = {}
    for item in right.items:
        by_hash.setdefault(hash(item), []).append(item)

    pairs: List[Tuple[Value, Value]] = []
    for item in left.items:
        candidates = by_hash.get(hash(item))
        if not candidates:
            return None
        if len(candidates) == 1:
            pairs.append((item, candidates.pop()))
            continue
        # Hash collision inside one set: fall back to a direct comparison
        for i, candidate in enumerate(candidates):
            if candidate == item:
                del candidates[i]
                break
        else:
            return None
    return pairs


def values_equal(left: Value, right: Value) -> bool:
    """Structural equality of two value trees, walked with an explicit stack."""
    pending: List[Tuple[Value, Value]] = [(left, right)]
    while pending:
        a, b = pending.pop()
        if a is b:
            continue
        if type(a) is not type(b) or hash(a) != hash(b):
            return False
        if isinstance(a, Vector):
            if len(a.items) != len(b.items):
                return False
            pending.extend(zip(a.items, b.items))
        elif isinstance(a, Map):
            if len(a.entries) != len(b.entries):
                return False
            for (key_a, value_a), (key_b, value_b) in zip(a.entries, b.entries):
                pending.append((key_a, key_b))
                pending.append((value_a, value_b))
        elif isinstance(a, Set):
            pairs = _pair_set_members(a, b)
            if pairs is None:
                return False
            pending.extend(pairs)
        elif a != b:
            return False
    return True


def keyword(qualified: str) -> Keyword:
    """Build a keyword from ``ns/name`` or ``name`` text (no leading colon)."""
    namespace, _, name = qualified.rpartition("/")
    if not name:
        return Keyword(name=qualified)
    return Keyword(name=name, namespace=namespace or None)


def type_name(value: Value) -> str:
    """Short human-readable variant name used in error messages."""
    return {
        Nil: "nil",
        Bool: "boolean",
        Number: "number",
        Str: "string",
        Keyword: "keyword",
        Symbol: "symbol",
        Vector: "vector",
        Set: "set",
        Map: "map",
    }.get(type(value), type(value).__name__)
