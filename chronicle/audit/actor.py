"""Actor resolution for audited operations.

The engine asks an ActorResolver for the current actor on every call.
Resolvers are passed explicitly; ContextActorResolver is the opt-in way
to carry an actor through a call stack without threading it by hand.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Protocol, runtime_checkable

# Task-local: each asyncio task sees the actor set in its own context
_current_actor: ContextVar[str | None] = ContextVar("chronicle_actor", default=None)


@runtime_checkable
class ActorResolver(Protocol):
    """Supplies the identity performing the current operation."""

    def resolve(self) -> str | None:
        """Return the current actor, or None when unknown."""
        ...


class StaticActorResolver:
    """Always resolves to the same actor."""

    def __init__(self, actor: str) -> None:
        self._actor = actor

    def resolve(self) -> str | None:
        return self._actor


class CallableActorResolver:
    """Adapts a zero-argument callable, e.g. a session lookup."""

    def __init__(self, func: Callable[[], str | None]) -> None:
        self._func = func

    def resolve(self) -> str | None:
        return self._func()


class ContextActorResolver:
    """Resolves the actor bound with actor_scope() or set_current_actor()."""

    def resolve(self) -> str | None:
        return _current_actor.get()


def get_current_actor() -> str | None:
    """Get the actor bound to the current context."""
    return _current_actor.get()


def set_current_actor(actor: str | None) -> Token[str | None]:
    """Bind an actor to the current context.

    Returns:
        Token for reset_current_actor()
    """
    return _current_actor.set(actor)


def reset_current_actor(token: Token[str | None]) -> None:
    """Restore the actor binding that was active before set_current_actor()."""
    _current_actor.reset(token)


@contextmanager
def actor_scope(actor: str) -> Iterator[None]:
    """Bind actor for the duration of a with-block.

    Usage:
        with actor_scope("alice"):
            await create_habit(...)
    """
    token = set_current_actor(actor)
    try:
        yield
    finally:
        reset_current_actor(token)
