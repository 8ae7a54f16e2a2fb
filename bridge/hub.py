"""
Event Hub
=========

Typed publish/subscribe fan-out between producers and renderers.

DELIVERY CONTRACT:
==================
- Four independent channels (see Channel)
- publish() delivers synchronously, in registration order
- Total order within a channel; no ordering across channels
- VISUAL_STATE replays its latest value to each new subscriber;
  event channels never replay
- Subscription.cancel() takes effect immediately and is idempotent

REENTRANCY:
===========
A callback may publish, subscribe or cancel. A publish on the channel
currently being delivered is queued and delivered once the current value
has reached every subscriber, so order within the channel holds.
"""

from __future__ import annotations
from collections import deque
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class Channel(Enum):
    VISUAL_STATE = "visual_state"
    ANOMALY = "anomaly"
    THREAT = "threat"
    PIPELINE_STATUS = "pipeline_status"

    @property
    def replays_latest(self) -> bool:
        return self is Channel.VISUAL_STATE


Callback = Callable[[Any], None]


class Subscription:
    """Handle returned by EventHub.subscribe."""

    def __init__(self, hub: 'EventHub', channel: Channel, callback: Callback):
        self._hub = hub
        self._channel = channel
        self._callback = callback
        self._active = True

    @property
    def channel(self) -> Channel:
        return self._channel

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Deregister the callback. Cancelling twice is a no-op."""
        if not self._active:
            return
        self._active = False
        self._hub._remove(self)

    unsubscribe = cancel

    def _deliver(self, value: Any) -> None:
        if self._active:
            self._callback(value)

    def __repr__(self) -> str:
        state = "active" if self._active else "cancelled"
        return f"Subscription({self._channel.value}, {state})"


class _ChannelState:
    __slots__ = ("subscribers", "latest", "has_latest", "pending", "dispatching")

    def __init__(self):
        self.subscribers: List[Subscription] = []
        self.latest: Any = None
        self.has_latest = False
        self.pending: Deque[Any] = deque()
        self.dispatching = False


class EventHub:
    """
    Explicitly constructed fan-out, owned by the pipeline.

    There is no module-level instance; producers and consumers receive the
    hub by reference.
    """

    def __init__(self):
        self._channels: Dict[Channel, _ChannelState] = {
            channel: _ChannelState() for channel in Channel
        }

    def subscribe(self, channel: Channel, callback: Callback) -> Subscription:
        """
        Register ``callback`` on ``channel``.

        On VISUAL_STATE the most recent value (if any) is delivered to the
        new subscriber before this method returns.
        """
        state = self._channels[channel]
        subscription = Subscription(self, channel, callback)
        state.subscribers.append(subscription)

        if channel.replays_latest and state.has_latest:
            subscription._deliver(state.latest)

        return subscription

    def publish(self, channel: Channel, value: Any) -> None:
        """Deliver ``value`` to every current subscriber of ``channel``."""
        state = self._channels[channel]
        state.pending.append(value)
        if state.dispatching:
            return

        state.dispatching = True
        try:
            while state.pending:
                current = state.pending.popleft()
                if channel.replays_latest:
                    state.latest = current
                    state.has_latest = True
                for subscription in list(state.subscribers):
                    subscription._deliver(current)
        except Exception:
            if state.pending:
                logger.warning(
                    "Subscriber on %s raised; discarding %d queued value(s)",
                    channel.value, len(state.pending),
                )
                state.pending.clear()
            raise
        finally:
            state.dispatching = False

    def latest(self, channel: Channel) -> Optional[Any]:
        """Replay value of ``channel``; always None for event channels."""
        state = self._channels[channel]
        return state.latest if state.has_latest else None

    def subscriber_count(self, channel: Channel) -> int:
        return len(self._channels[channel].subscribers)

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._channels[subscription.channel].subscribers
        if subscription in subscribers:
            subscribers.remove(subscription)
