"""Lexically scoped variable bindings. Each function call gets a new Environment enclosed by the function's captured
one, so closures keep their defining scope alive for as long as they are referenced.
"""


class Environment:
    """Mapping of name to Object, plus an optional enclosing Environment."""

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    @classmethod
    def enclosed(cls, outer):
        """Returns a new Environment whose lookups fall back to outer."""
        return cls(outer)

    def get(self, name):
        """Returns the Object bound to name in this or an enclosing Environment, or None if name is unbound."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name, value):
        """Binds name in this Environment (never an enclosing one), shadowing outer bindings. Returns value."""
        self.store[name] = value
        return value

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"Environment({list(self.store)}, outer={self.outer!r})"
