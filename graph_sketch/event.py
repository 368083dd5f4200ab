"""Hooks on vertex lifecycle changes made by GraphModel.

Events:
    post_add           a reconciliation created the vertex
    post_remove        a reconciliation dropped the vertex
    pre_state_change   before an explicit enable/disable (kwarg ``enabled``)
    post_state_change  after it, once edges have been refreshed

Handlers are registered per model class and called as
``fn(target, event, **kwargs)``; every hook also receives ``model=``.
"""

from collections import defaultdict

EVENTS = frozenset({"post_add", "post_remove", "pre_state_change", "post_state_change"})

_registrars: dict = defaultdict(lambda: defaultdict(list))


def _event_names(event: str | list[str]) -> list[str]:
    names = [event] if isinstance(event, str) else list(event)
    unknown = set(names) - EVENTS
    if unknown:
        raise ValueError(f"Unknown event(s): {', '.join(sorted(unknown))}")
    return names


def dispatch(target, event: str, *args, **kwargs):
    """Call every handler registered for ``event`` on a class ``target`` is an instance of."""
    for target_class, handlers in list(_registrars[event].items()):
        if isinstance(target, target_class):
            for fn in list(handlers):
                fn(target, event, *args, **kwargs)


def listen(target, event: str | list[str], fn):
    """Register fn for event(s) on target class. Raises ValueError for unknown events."""
    for name in _event_names(event):
        _registrars[name][target].append(fn)


def remove(target, event: str | list[str], fn):
    """Unregister fn from event(s) on target class; unknown handlers are ignored."""
    for name in _event_names(event):
        handlers = _registrars[name].get(target, [])
        if fn in handlers:
            handlers.remove(fn)


def listens_for(target, event: str | list[str]):
    """Decorator form of ``listen``."""

    def decorator(fn):
        listen(target, event, fn)
        return fn

    return decorator
