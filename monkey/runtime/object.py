"""Runtime object model for the Monkey language.

Every value produced by the evaluator is an Object. Two of the variants are signals rather than values:

- ReturnValue wraps the operand of a `return` statement until the enclosing function call (or program) unwraps it
- Error carries a message and short-circuits every block, call and program it passes through

Booleans and null are interned: TRUE, FALSE and NULL are the only instances the evaluator ever hands out, so they can
be compared by identity. Integer, Boolean and String are hashable and may be used as hash keys.
"""

from abc import ABC, abstractmethod
from collections import namedtuple
from dataclasses import dataclass, field
from typing import Callable, Dict, List


INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
STRING_OBJ = "STRING"
NULL_OBJ = "NULL"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"

FNV_OFFSET_BASIS = 0xcbf29ce484222325
FNV_PRIME = 0x100000001b3
UINT64_MASK = 2 ** 64 - 1

HashKey = namedtuple("HashKey", ["type", "value"])
HashPair = namedtuple("HashPair", ["key", "value"])


def fnv1a_64(data):
    """64-bit FNV-1a hash of data (bytes). Stable across processes, unlike hash(str)."""
    result = FNV_OFFSET_BASIS
    for byte in data:
        result ^= byte
        result = (result * FNV_PRIME) & UINT64_MASK
    return result


class Object(ABC):
    """Superclass of every runtime value."""

    @property
    @abstractmethod
    def type(self):
        """Type name used in error messages (e.g. INTEGER)."""

    @abstractmethod
    def inspect(self):
        """Human-readable rendering, used by print and the shell."""

    def __str__(self):
        return self.inspect()


class Hashable(ABC):
    """Capability of objects that can be used as hash keys."""

    @abstractmethod
    def hash_key(self):
        """Returns a HashKey. Objects with equal HashKeys are the same hash key."""


@dataclass
class Integer(Object, Hashable):
    value: int

    @property
    def type(self):
        return INTEGER_OBJ

    def inspect(self):
        return str(self.value)

    def hash_key(self):
        return HashKey(self.type, self.value)


@dataclass
class Boolean(Object, Hashable):
    value: bool

    @property
    def type(self):
        return BOOLEAN_OBJ

    def inspect(self):
        return "true" if self.value else "false"

    def hash_key(self):
        return HashKey(self.type, 1 if self.value else 0)


@dataclass
class String(Object, Hashable):
    value: str

    @property
    def type(self):
        return STRING_OBJ

    def inspect(self):
        return self.value

    def hash_key(self):
        return HashKey(self.type, fnv1a_64(self.value.encode("utf-8")))


@dataclass
class Null(Object):

    @property
    def type(self):
        return NULL_OBJ

    def inspect(self):
        return "null"


@dataclass
class Array(Object):
    elements: List[Object] = field(default_factory=list)

    @property
    def type(self):
        return ARRAY_OBJ

    def inspect(self):
        return f"[{', '.join(element.inspect() for element in self.elements)}]"


@dataclass
class Hash(Object):
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)

    @property
    def type(self):
        return HASH_OBJ

    def inspect(self):
        return "{" + ", ".join(f"{pair.key.inspect()}: {pair.value.inspect()}" for pair in self.pairs.values()) + "}"


@dataclass(eq=False)
class Function(Object):
    """User-defined function. env is the Environment the function literal was evaluated in (the closure), shared
    rather than copied.
    """
    parameters: list
    body: object
    env: object

    @property
    def type(self):
        return FUNCTION_OBJ

    def inspect(self):
        return f"fn({', '.join(str(param) for param in self.parameters)}) {self.body}"


@dataclass(eq=False)
class Builtin(Object):
    name: str
    fn: Callable

    @property
    def type(self):
        return BUILTIN_OBJ

    def inspect(self):
        return "builtin function"


@dataclass
class ReturnValue(Object):
    value: Object

    @property
    def type(self):
        return RETURN_VALUE_OBJ

    def inspect(self):
        return self.value.inspect()


@dataclass
class Error(Object):
    message: str

    @property
    def type(self):
        return ERROR_OBJ

    def inspect(self):
        return f"ERROR: {self.message}"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool(value):
    """Returns the interned Boolean for value."""
    return TRUE if value else FALSE


def is_error(obj):
    return isinstance(obj, Error)
