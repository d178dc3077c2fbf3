"""Ordered per-attribute error messages."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional


class ErrorBag:
    """Ordered multimap from attribute name to validation messages.

    Keys keep the order in which they first received a message and every
    message is kept, including repeats of the same text.
    """

    def __init__(self, messages: Optional[Mapping[str, Any]] = None):
        self._messages: Dict[str, List[str]] = {}
        if messages:
            self.merge(messages)

    def add(self, key: str, message: str) -> None:
        self._messages.setdefault(key, []).append(message)

    def merge(self, messages: Mapping[Any, Any], prefix: str = "") -> None:
        """Append messages from a (possibly nested) marshmallow error dict.

        Nested errors, such as those produced by ``List`` or ``Nested`` fields,
        are stored under dotted keys, e.g. ``tags.0``.
        """

        for key, value in messages.items():
            name = f"{prefix}{key}"
            if isinstance(value, Mapping):
                self.merge(value, prefix=f"{name}.")
            elif isinstance(value, (list, tuple)):
                for item in value:
                    if isinstance(item, Mapping):
                        self.merge(item, prefix=f"{name}.")
                    else:
                        self.add(name, str(item))
            else:
                self.add(name, str(value))

    def has(self, key: Optional[str] = None) -> bool:
        if key is None:
            return bool(self._messages)
        return bool(self._messages.get(key))

    def is_empty(self) -> bool:
        return not self._messages

    def get(self, key: str) -> List[str]:
        return list(self._messages.get(key, []))

    def first(self, key: Optional[str] = None) -> str:
        """Return the first message for ``key``, or the first message overall."""

        if key is not None:
            messages = self._messages.get(key)
            return messages[0] if messages else ""
        for messages in self._messages.values():
            if messages:
                return messages[0]
        return ""

    def messages(self) -> Dict[str, List[str]]:
        return {key: list(values) for key, values in self._messages.items()}

    def clear(self, key: Optional[str] = None) -> None:
        if key is None:
            self._messages.clear()
        else:
            self._messages.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._messages)

    def __contains__(self, key: object) -> bool:
        return key in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return sum(len(values) for values in self._messages.values())

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __repr__(self) -> str:
        return f"ErrorBag({self._messages!r})"
