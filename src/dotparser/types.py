"""Shared type definitions for dotparser parsers.

Small enums used while parsing and never exposed in the event stream.
"""

from __future__ import annotations

from enum import Enum

from dotparser.events import MessageType


class ArrowType(Enum):
    SolidSync = "->"
    SolidAsync = "->>"
    DashedSync = "-->"
    DashedAsync = "-->>"
    LeftSync = "<-"
    LeftAsync = "<<-"
    LeftDashedSync = "<--"
    LeftDashedAsync = "<<--"
    BiDirectional = "<->"
    BiDashedDirectional = "<-->"
    Lost = "-\\"
    Found = "\\-"
    SelfCall = "\\\\"

    @classmethod
    def from_token(cls, token: str) -> ArrowType | None:
        """Return the arrow for a lexical token, or None if the shape is unknown."""
        try:
            return cls(token)
        except ValueError:
            return None

    @property
    def message_type(self) -> MessageType:
        if self in _ASYNC:
            return MessageType.Asynchronous
        if self in _RETURN:
            return MessageType.Return
        return MessageType.Synchronous

    @property
    def is_reversed(self) -> bool:
        """True when the arrow points from the right-hand participant to the left-hand one."""
        return self in _REVERSED


_ASYNC = frozenset({ArrowType.SolidAsync, ArrowType.LeftAsync})

_RETURN = frozenset(
    {
        ArrowType.DashedSync,
        ArrowType.DashedAsync,
        ArrowType.LeftDashedSync,
        ArrowType.LeftDashedAsync,
        ArrowType.BiDashedDirectional,
    }
)

_REVERSED = frozenset(
    {
        ArrowType.LeftSync,
        ArrowType.LeftAsync,
        ArrowType.LeftDashedSync,
        ArrowType.LeftDashedAsync,
        ArrowType.Found,
    }
)
