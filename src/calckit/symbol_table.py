"""Provides the SymbolTable that stores variable and function bindings."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from calckit.expressions import Declaration

__all__ = ["SymbolTable"]


class SymbolTable:
    """Maps names to variable and function declarations.

    Variables and functions share one namespace keyed by the declared
    identifier's full name. Setting a name that is already bound silently
    replaces the old declaration.
    """

    def __init__(self) -> None:
        self._declarations: dict[str, Declaration] = {}

    def set(self, decl: Declaration) -> None:
        """Binds ``decl`` under its identifier's name, replacing any previous binding."""
        self._declarations[decl.identifier.full_name] = decl

    insert = set

    def get(self, name: str) -> Declaration | None:
        return self._declarations.get(name)

    def contains(self, name: str) -> bool:
        return name in self._declarations

    __contains__ = contains

    def remove(self, name: str) -> None:
        self._declarations.pop(name, None)

    def get_and_remove(self, name: str) -> Declaration | None:
        """Removes the binding of ``name`` and returns it, or ``None`` if unbound."""
        return self._declarations.pop(name, None)

    def snapshot(self) -> dict[str, Declaration]:
        """Returns a shallow copy of all current bindings."""
        return dict(self._declarations)

    def __len__(self) -> int:
        return len(self._declarations)

    @contextmanager
    def shadowed(self, name: str) -> Iterator[None]:
        """Temporarily takes ownership of ``name``.

        The current binding is removed on entry. Inside the block the caller
        may bind ``name`` freely. On exit, normal or through an exception,
        the saved binding is put back, or ``name`` is removed if it was
        unbound before. Nested blocks on the same name unwind last-in
        first-out.

        Args:
            name: The name to shadow.

        Yields:
            Nothing; the caller binds ``name`` with :meth:`set`.
        """
        saved = self.get_and_remove(name)
        try:
            yield
        finally:
            if saved is not None:
                self.set(saved)
            else:
                self.remove(name)
