# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Change notification for documents.

Every successful mutation emits exactly one ``TreeChange``. Presentation
layers subscribe to refresh; the tree itself never depends on them.

Example:
    >>> doc.subscribe('canvas', lambda change: print(change.event))
    >>> editor.insert_row(2)
    ins
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

EVENTS = ('ins', 'del', 'move', 'upd')


@dataclass(frozen=True)
class TreeChange:
    """One change to a document tree.

    Attributes:
        event: 'ins', 'del', 'move' or 'upd'.
        node_id: Id of the inserted, removed, moved or updated node.
        parent_id: Parent after the change (before it, for 'del').
        index: Position under parent_id, when meaningful.
        reason: Free-form detail, e.g. the updated field.
    """

    event: str
    node_id: str
    parent_id: str | None = None
    index: int | None = None
    reason: str | None = None


SubscriberCallback = Callable[[TreeChange], Any]


class SubscriptionMixin:
    """Subscriber registry keyed by event, then by subscriber id."""

    __slots__ = ()

    _subscribers: dict[str, dict[str, SubscriberCallback]]

    def _init_subscribers(self) -> None:
        self._subscribers = {event: {} for event in EVENTS}

    def subscribe(
        self,
        subscriber_id: str,
        callback: SubscriberCallback,
        event: str = 'any',
    ) -> None:
        """Register callback for one event, or for all with 'any'.

        Registering the same subscriber_id again replaces the callback.

        Raises:
            ValueError: If event is unknown.
        """
        for name in self._event_names(event):
            self._subscribers[name][subscriber_id] = callback

    def unsubscribe(self, subscriber_id: str, event: str = 'any') -> None:
        """Remove a subscriber. Unknown ids are ignored."""
        for name in self._event_names(event):
            self._subscribers[name].pop(subscriber_id, None)

    def _event_names(self, event: str) -> tuple[str, ...]:
        if event == 'any':
            return EVENTS
        if event not in EVENTS:
            raise ValueError(f"Unknown event '{event}'. Valid events: any, {', '.join(EVENTS)}")
        return (event,)

    def _notify(self, change: TreeChange) -> None:
        for callback in list(self._subscribers[change.event].values()):
            callback(change)
