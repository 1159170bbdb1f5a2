"""Handler protocol for subscription callbacks."""

from typing import Protocol, TypeVar, runtime_checkable

P_contra = TypeVar("P_contra", contravariant=True)


@runtime_checkable
class EventHandler(Protocol[P_contra]):
    """
    Callable that receives event payloads.

    Handlers are compared by identity: registering the same callable twice
    for the same (channel, event) has no additional effect.

    Note:
        With the mido backend this is called from the backend's I/O thread
        (messages) or the hot-plug monitor thread (connect/disconnect), so
        implementations should be fast and avoid blocking operations.
    """

    def __call__(self, payload: P_contra) -> None:
        """
        Handle one emitted event.

        Args:
            payload: The event payload dataclass for the subscribed event kind
        """
        ...
