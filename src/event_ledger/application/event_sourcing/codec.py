"""Application event sourcing – type-tag registry and JSON event codec.

Encoded payloads are JSON objects with camelCase keys, ``Decimal`` values
as strings and ``datetime`` values in ISO 8601. Decoding is strict: an
unknown tag, a missing field or a value of the wrong shape is an error,
never a default.
"""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator

from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.errors import SerializationError, UnknownEventTypeError

EventType = type[DomainEvent]


def to_camel(name: str) -> str:
    """``balance_after`` -> ``balanceAfter``."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class EventTypeRegistry:
    """Bidirectional mapping between ``type_tag`` strings and event classes.

    :meth:`register` returns the class, so it also works as a decorator::

        registry = EventTypeRegistry()

        @registry.register
        @dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
        class AccountCreated(DomainEvent): ...
    """

    def __init__(self, *event_types: EventType) -> None:
        self._types: dict[str, EventType] = {}
        for event_type in event_types:
            self.register(event_type)

    def register(self, event_type: EventType) -> EventType:
        tag = event_type.type_tag
        existing = self._types.get(tag)
        if existing is not None and existing is not event_type:
            raise ValueError(
                f"type_tag {tag!r} already registered for {existing.__qualname__}"
            )
        self._types[tag] = event_type
        return event_type

    def resolve(self, type_tag: str) -> EventType:
        try:
            return self._types[type_tag]
        except KeyError:
            raise UnknownEventTypeError(type_tag) from None

    def tags(self) -> frozenset[str]:
        return frozenset(self._types)

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._types

    def __iter__(self) -> Iterator[EventType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


def _encode_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _decode_value(raw: Any, hint: Any) -> Any:
    """Convert a JSON value into *hint*; raises ``TypeError``/``ValueError``."""
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(hint)
        if raw is None:
            if type(None) in args:
                return None
            raise TypeError("null is not allowed")
        inner = [a for a in args if a is not type(None)]
        if len(inner) != 1:
            raise TypeError(f"unsupported union {hint!r}")
        return _decode_value(raw, inner[0])

    if hint is Decimal:
        if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
            raise TypeError(f"expected a decimal, got {type(raw).__name__}")
        try:
            return Decimal(str(raw))
        except InvalidOperation as exc:
            raise ValueError(f"invalid decimal {raw!r}") from exc
    if hint is datetime:
        if not isinstance(raw, str):
            raise TypeError(f"expected an ISO 8601 string, got {type(raw).__name__}")
        return datetime.fromisoformat(raw)
    if hint is bool:
        if not isinstance(raw, bool):
            raise TypeError(f"expected a boolean, got {type(raw).__name__}")
        return raw
    if hint is int:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(f"expected an integer, got {type(raw).__name__}")
        return raw
    if hint is str:
        if not isinstance(raw, str):
            raise TypeError(f"expected a string, got {type(raw).__name__}")
        return raw
    raise TypeError(f"unsupported field type {hint!r}")


class JsonEventCodec:
    """Encode events to ``(type_tag, json)`` pairs and back."""

    def __init__(self, registry: EventTypeRegistry) -> None:
        self._registry = registry
        self._hints: dict[EventType, dict[str, Any]] = {}

    @property
    def registry(self) -> EventTypeRegistry:
        return self._registry

    def encode(self, event: DomainEvent) -> tuple[str, str]:
        """Return the event's ``type_tag`` and its serialised payload.

        Every value is checked against the rules :meth:`decode` applies, so
        nothing is written that could not be read back.
        """
        tag = event.type_tag
        if self._registry.resolve(tag) is not type(event):
            raise SerializationError(
                f"{type(event).__qualname__} is not the class registered for {tag!r}",
                type_tag=tag,
            )
        hints = self._type_hints(type(event))
        data: dict[str, Any] = {}
        for field in dataclasses.fields(event):
            key = to_camel(field.name)
            value = _encode_value(getattr(event, field.name))
            try:
                _decode_value(value, hints[field.name])
            except (TypeError, ValueError) as exc:
                raise SerializationError(
                    f"{type(event).__qualname__} has an invalid {key!r}: {exc}",
                    type_tag=tag,
                    detail={"field": key},
                    cause=exc,
                ) from exc
            data[key] = value
        return tag, json.dumps(data, sort_keys=True, separators=(",", ":"))

    def decode(self, type_tag: str, payload: str | bytes) -> DomainEvent:
        """Rebuild the event registered under *type_tag* from *payload*."""
        event_type = self._registry.resolve(type_tag)
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise SerializationError(
                f"Payload for {type_tag!r} is not valid JSON", type_tag=type_tag, cause=exc
            ) from exc
        if not isinstance(data, dict):
            raise SerializationError(
                f"Payload for {type_tag!r} must be a JSON object", type_tag=type_tag
            )

        hints = self._type_hints(event_type)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(event_type):
            if not field.init:
                continue
            key = to_camel(field.name)
            if key not in data:
                raise SerializationError(
                    f"Payload for {type_tag!r} is missing required field {key!r}",
                    type_tag=type_tag,
                    detail={"field": key},
                )
            try:
                kwargs[field.name] = _decode_value(data[key], hints[field.name])
            except (TypeError, ValueError) as exc:
                raise SerializationError(
                    f"Payload for {type_tag!r} has an invalid {key!r}: {exc}",
                    type_tag=type_tag,
                    detail={"field": key},
                    cause=exc,
                ) from exc
        return event_type(**kwargs)

    def _type_hints(self, event_type: EventType) -> dict[str, Any]:
        hints = self._hints.get(event_type)
        if hints is None:
            hints = typing.get_type_hints(event_type)
            self._hints[event_type] = hints
        return hints


__all__ = ["EventTypeRegistry", "JsonEventCodec", "to_camel"]
