#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
rb_events.py
------------

Structural event log for :class:`red_black_tree.RedBlackTree`.

An animator (or a curious test) can ask the tree to record every structural
step it takes while inserting and removing keys: new leaves, recolours,
rotations, the fix‑up case that fired, and so on.  Recording is off by
default; while it is off the tree allocates no recorder and every step
costs one flag check.

Typical usage
~~~~~~~~~~~~~
>>> from red_black_tree import RedBlackTree
>>> from rb_events import EventType
>>> rbt = RedBlackTree(record_events=True)
>>> rbt.insert(10)
True
>>> [e.type for e in rbt.get_and_clear_events()]
[<EventType.INSERT_NODE: 'insert_node'>]
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")


class EventType(enum.Enum):
    """Kinds of structural steps the tree reports."""

    INSERT_NODE = "insert_node"
    RECOLOR = "recolor"
    ROTATE_LEFT = "rotate_left"
    ROTATE_RIGHT = "rotate_right"
    CASE1_UNCLE_RED = "case1_uncle_red"
    CASE2_TRIANGLE = "case2_triangle"
    CASE3_LINE = "case3_line"
    SET_ROOT_BLACK = "set_root_black"
    DELETE_NODE = "delete_node"
    DELETE_FIXUP = "delete_fixup"


@dataclass(frozen=True)
class TreeEvent(Generic[K]):
    """
    One recorded step.

    ``key`` is the primary node of the step (the new leaf, the recoloured
    node, the rotation pivot that moves down, ``z`` of an insert fix‑up case
    or ``x`` of a delete fix‑up case, which is ``None`` while ``x`` is still
    an empty leaf).  The optional family keys are filled in where the step
    has a meaningful parent / grandparent / uncle (insert fix‑up) or
    sibling (delete fix‑up).
    """

    type: EventType
    key: Optional[K]
    parent: Optional[K] = None
    grandparent: Optional[K] = None
    uncle: Optional[K] = None
    sibling: Optional[K] = None
    from_color: Optional[Any] = None
    to_color: Optional[Any] = None
    case: Optional[int] = None
    explanation: str = ""


class EventRecorder(Generic[K]):
    """Append‑only buffer of :class:`TreeEvent` objects."""

    __slots__ = ("_events",)

    def __init__(self) -> None:
        self._events: List[TreeEvent[K]] = []

    def record(self, event: TreeEvent[K]) -> None:
        self._events.append(event)

    def drain(self) -> List[TreeEvent[K]]:
        """Return everything recorded so far and start a fresh buffer."""
        events, self._events = self._events, []
        logger.debug("Drained %d tree events", len(events))
        return events

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return f"EventRecorder({len(self._events)} events)"
