"""Built-in functions available to every Monkey program. The registry is fixed at import time and never mutated.

Built-ins report misuse (wrong arity, wrong argument type) by returning an Error object, just like the evaluator.
"""

from monkey.runtime.object import ARRAY_OBJ, NULL, Array, Builtin, Error, Integer, String


def _wrong_arity(args, want):
    return Error(f"wrong number of arguments. got={len(args)}, want={want}")


def _not_array(name, arg):
    return Error(f"argument to `{name}` must be {ARRAY_OBJ}, got {arg.type}")


def len_fn(*args):
    """Length of a string (in characters) or an array."""
    if len(args) != 1:
        return _wrong_arity(args, 1)

    arg, = args
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return Error(f"argument to `len` not supported, got {arg.type}")


def first_fn(*args):
    if len(args) != 1:
        return _wrong_arity(args, 1)
    if not isinstance(args[0], Array):
        return _not_array("first", args[0])

    elements = args[0].elements
    return elements[0] if elements else NULL


def last_fn(*args):
    if len(args) != 1:
        return _wrong_arity(args, 1)
    if not isinstance(args[0], Array):
        return _not_array("last", args[0])

    elements = args[0].elements
    return elements[-1] if elements else NULL


def rest_fn(*args):
    """New array holding every element but the first. null for an empty array."""
    if len(args) != 1:
        return _wrong_arity(args, 1)
    if not isinstance(args[0], Array):
        return _not_array("rest", args[0])

    elements = args[0].elements
    return Array(list(elements[1:])) if elements else NULL


def push_fn(*args):
    """New array with the second argument appended. The original array is left untouched."""
    if len(args) != 2:
        return _wrong_arity(args, 2)
    if not isinstance(args[0], Array):
        return _not_array("push", args[0])

    array, element = args
    return Array(array.elements + [element])


def print_fn(*args):
    """Writes the rendering of every argument, space-separated, as one line on stdout."""
    print(" ".join(arg.inspect() for arg in args))
    return NULL


BUILTINS = {
    name: Builtin(name, fn) for name, fn in [
        ("len", len_fn),
        ("first", first_fn),
        ("last", last_fn),
        ("rest", rest_fn),
        ("push", push_fn),
        ("print", print_fn),
    ]
}
