#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
red_black_tree.py
-----------------

A self‑balancing ordered set based on the **Red‑Black** algorithm.
Keys must be totally ordered; inserting a key that is already present is a
silent no‑op.  Height stays within ``2 * log2(n + 1)`` so insert, remove and
lookup are all O(log n).

Features
~~~~~~~~
* `tree.insert(key)`        – add a key (returns False for a duplicate)
* `tree.remove(key)`        – delete a key (returns False if it is missing)
* `tree.search(key)`, `key in tree` – membership test
* `tree.find(key)`          – read‑only :class:`NodeView` or ``None``
* `tree.root`               – read‑only view of the root, for renderers
* in‑, pre‑, post‑order traversals with a visitor, plus level order
* `tree.height()`, `tree.black_height()`
* `tree.min_key()`, `tree.max_key()`, `tree.successor(k)`, `tree.predecessor(k)`
* `tree.verify_properties()` / `tree.validate()` – invariant checks
* optional structural event log (see :mod:`rb_events`)

The implementation uses a **single shared sentinel node** (`self._nil`) to
represent all leaves, which eliminates `None` checks everywhere and makes the
code easier to follow.  The sentinel is never handed out: node views report
a missing child as ``None``.

Typical usage
~~~~~~~~~~~~~
>>> from red_black_tree import RedBlackTree
>>> rbt = RedBlackTree([10, 20, 30])
>>> rbt.root.key
20
>>> rbt.level_order_traversal()
[20, 10, 30]
>>> rbt.remove(20)
True
>>> 20 in rbt
False
>>> list(rbt)
[10, 30]
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from typing import (
    Any,
    Callable,
    Deque,
    Generator,
    Generic,
    Iterable,
    List,
    Optional,
    TypeVar,
)

from rb_events import EventRecorder, EventType, TreeEvent

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  Type variable (keys must be comparable)
# ----------------------------------------------------------------------
K = TypeVar("K")


class Color(enum.Enum):
    RED = "red"
    BLACK = "black"


RED = Color.RED
BLACK = Color.BLACK


class Side(enum.IntEnum):
    """Which child slot of a node; lets each fix‑up be written once."""

    LEFT = 0
    RIGHT = 1

    @property
    def opposite(self) -> "Side":
        return Side(1 - self)


class InvariantViolation(AssertionError):
    """Raised by :meth:`RedBlackTree.validate` when the tree is malformed."""


class _Node(Generic[K]):
    """Internal node object – not meant to be used directly by callers."""

    __slots__ = ("key", "color", "left", "right", "parent")

    def __init__(
        self,
        key: Optional[K] = None,
        color: Color = BLACK,
        left: Optional["_Node[K]"] = None,
        right: Optional["_Node[K]"] = None,
        parent: Optional["_Node[K]"] = None,
    ) -> None:
        self.key = key
        self.color = color
        self.left = left
        self.right = right
        self.parent = parent

    def child(self, side: Side) -> "_Node[K]":
        return self.left if side == Side.LEFT else self.right

    def set_child(self, side: Side, node: "_Node[K]") -> None:
        if side == Side.LEFT:
            self.left = node
        else:
            self.right = node

    def __repr__(self) -> str:
        col = "R" if self.color is RED else "B"
        return f"<{col} {self.key!r}>"


class NodeView(Generic[K]):
    """
    Read‑only handle on one node of a tree.

    Views are what a renderer walks: ``key``, ``color`` and the ``left`` /
    ``right`` / ``parent`` neighbours (``None`` where there is no node).
    There are no setters, so the only way to change the structure is through
    :meth:`RedBlackTree.insert` and :meth:`RedBlackTree.remove`.  A view taken
    before a removal may describe a node that has since left the tree.
    """

    __slots__ = ("_node", "_nil")

    def __init__(self, node: _Node[K], nil: _Node[K]) -> None:
        self._node = node
        self._nil = nil

    def _wrap(self, node: _Node[K]) -> Optional["NodeView[K]"]:
        if node is self._nil or node is None:
            return None
        return NodeView(node, self._nil)

    @property
    def key(self) -> K:
        return self._node.key  # type: ignore[return-value]

    @property
    def color(self) -> Color:
        return self._node.color

    @property
    def is_red(self) -> bool:
        return self._node.color is RED

    @property
    def is_black(self) -> bool:
        return self._node.color is BLACK

    @property
    def left(self) -> Optional["NodeView[K]"]:
        return self._wrap(self._node.left)

    @property
    def right(self) -> Optional["NodeView[K]"]:
        return self._wrap(self._node.right)

    @property
    def parent(self) -> Optional["NodeView[K]"]:
        return self._wrap(self._node.parent)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeView):
            return NotImplemented
        return self._node is other._node

    def __hash__(self) -> int:
        return id(self._node)

    def __repr__(self) -> str:
        return f"NodeView{self._node!r}"


class RedBlackTree(Generic[K]):
    """
    An ordered set of keys stored in a red‑black binary search tree.

    The container protocol is supported where it makes sense
    (``__contains__``, ``__len__``, ``__iter__``, ``__bool__``) next to the
    explicit method names that renderers and tests use.  The tree is not
    thread‑safe; callers sharing one between threads must lock around it.
    """

    __slots__ = ("_root", "_nil", "_size", "_recorder", "_recording")

    # ------------------------------------------------------------------
    #   Construction / basic container protocol
    # ------------------------------------------------------------------
    def __init__(
        self,
        keys: Optional[Iterable[K]] = None,
        *,
        record_events: bool = False,
    ) -> None:
        """
        Create an empty tree or optionally fill it from an iterable of keys.

        Parameters
        ----------
        keys : iterable of keys   optional
            Each key is inserted with :meth:`insert`, in iteration order, so
            duplicates are dropped and the whole operation is O(n log n).
        record_events : bool, default ``False``
            Start with the structural event log switched on.
        """
        # The sentinel leaf node – shared by every leaf in the tree.
        self._nil: _Node[K] = _Node()
        self._nil.color = BLACK
        self._nil.left = self._nil.right = self._nil.parent = self._nil

        self._root: _Node[K] = self._nil
        self._size: int = 0

        self._recorder: Optional[EventRecorder[K]] = None
        self._recording: bool = False
        if record_events:
            self.enable_event_recording()

        if keys is not None:
            for key in keys:
                self.insert(key)

    def __contains__(self, key: object) -> bool:
        return self._search_node(key) is not self._nil  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def size(self) -> int:
        """Return the number of stored keys."""
        return self._size

    def is_empty(self) -> bool:
        return self._root is self._nil

    def clear(self) -> None:
        """Drop every node.  The event log, if any, is left alone."""
        logger.debug("Clearing tree of %d keys", self._size)
        self._root = self._nil
        self._nil.parent = self._nil
        self._size = 0

    @property
    def root(self) -> Optional[NodeView[K]]:
        """Read‑only view of the root node, or ``None`` for an empty tree."""
        if self._root is self._nil:
            return None
        return NodeView(self._root, self._nil)

    # ------------------------------------------------------------------
    #   Helper index look‑up (internal)
    # ------------------------------------------------------------------
    def _search_node(self, key: K) -> _Node[K]:
        """Return the node that holds *key* or the sentinel `_nil` if not found."""
        cur = self._root
        while cur is not self._nil:
            if key == cur.key:
                return cur
            elif key < cur.key:
                cur = cur.left
            else:
                cur = cur.right
        return self._nil

    def _key_of(self, node: _Node[K]) -> Optional[K]:
        return None if node is self._nil else node.key

    # ------------------------------------------------------------------
    #   Search
    # ------------------------------------------------------------------
    def search(self, key: K) -> bool:
        """Return ``True`` if *key* is stored in the tree."""
        return self._search_node(key) is not self._nil

    def find(self, key: K) -> Optional[NodeView[K]]:
        """Return a read‑only view of the node holding *key*, or ``None``."""
        node = self._search_node(key)
        if node is self._nil:
            return None
        return NodeView(node, self._nil)

    # ------------------------------------------------------------------
    #   Traversals
    # ------------------------------------------------------------------
    def __iter__(self) -> Generator[K, None, None]:
        """Yield keys in ascending order (in‑order traversal)."""
        stack: List[_Node[K]] = []
        cur: _Node[K] = self._root
        while stack or cur is not self._nil:
            while cur is not self._nil:
                stack.append(cur)
                cur = cur.left
            cur = stack.pop()
            yield cur.key  # type: ignore[misc]
            cur = cur.right

    def keys(self) -> List[K]:
        """Return a list of all keys in sorted order."""
        return list(self)

    def inorder_traversal(self, visitor: Callable[[K], Any]) -> None:
        """Call *visitor* on every key, left subtree – node – right subtree."""

        def walk(node: _Node[K]) -> None:
            if node is self._nil:
                return
            walk(node.left)
            visitor(node.key)  # type: ignore[arg-type]
            walk(node.right)

        walk(self._root)

    def preorder_traversal(self, visitor: Callable[[K], Any]) -> None:
        """Call *visitor* on every key, node – left subtree – right subtree."""

        def walk(node: _Node[K]) -> None:
            if node is self._nil:
                return
            visitor(node.key)  # type: ignore[arg-type]
            walk(node.left)
            walk(node.right)

        walk(self._root)

    def postorder_traversal(self, visitor: Callable[[K], Any]) -> None:
        """Call *visitor* on every key, left subtree – right subtree – node."""

        def walk(node: _Node[K]) -> None:
            if node is self._nil:
                return
            walk(node.left)
            walk(node.right)
            visitor(node.key)  # type: ignore[arg-type]

        walk(self._root)

    def level_order_traversal(self) -> List[K]:
        """Return the keys breadth‑first, top level first, left to right."""
        result: List[K] = []
        if self._root is self._nil:
            return result

        queue: Deque[_Node[K]] = deque([self._root])
        while queue:
            node = queue.popleft()
            result.append(node.key)  # type: ignore[arg-type]
            if node.left is not self._nil:
                queue.append(node.left)
            if node.right is not self._nil:
                queue.append(node.right)
        return result

    # ------------------------------------------------------------------
    #   Height helpers
    # ------------------------------------------------------------------
    def height(self) -> int:
        """
        Number of edges on the longest root‑to‑leaf path.
        A single node has height 0 and an empty tree has height -1.
        """

        def depth(node: _Node[K]) -> int:
            if node is self._nil:
                return -1
            return 1 + max(depth(node.left), depth(node.right))

        return depth(self._root)

    def black_height(self) -> int:
        """
        Number of BLACK nodes on the leftmost root‑to‑leaf path (the sentinel
        leaf is not counted).  Every path agrees while the tree is valid.
        """
        count = 0
        node = self._root
        while node is not self._nil:
            if node.color is BLACK:
                count += 1
            node = node.left
        return count

    # ------------------------------------------------------------------
    #   Extremes and ordered neighbours
    # ------------------------------------------------------------------
    def _extreme_node(self, start: _Node[K], side: Side) -> _Node[K]:
        """Follow *side* links from *start* as far as they go."""
        if start is self._nil:
            raise ValueError("Tree is empty")
        node = start
        while node.child(side) is not self._nil:
            node = node.child(side)
        return node

    def _minimum_node(self, start: Optional[_Node[K]] = None) -> _Node[K]:
        """Return the node with the smallest key in the subtree rooted at *start*."""
        return self._extreme_node(self._root if start is None else start, Side.LEFT)

    def _maximum_node(self, start: Optional[_Node[K]] = None) -> _Node[K]:
        return self._extreme_node(self._root if start is None else start, Side.RIGHT)

    def min_key(self) -> K:
        """Return the smallest key stored in the tree."""
        return self._minimum_node().key  # type: ignore[return-value]

    def max_key(self) -> K:
        """Return the largest key stored in the tree."""
        return self._maximum_node().key  # type: ignore[return-value]

    def _neighbour(self, key: K, side: Side) -> K:
        """
        Key next to *key* in sorted order: toward larger keys for
        ``Side.RIGHT``, toward smaller keys for ``Side.LEFT``.
        Raises KeyError if *key* is absent or sits at that end of the tree.
        """
        node = self._search_node(key)
        if node is self._nil:
            raise KeyError(key)

        if node.child(side) is not self._nil:
            return self._extreme_node(node.child(side), side.opposite).key  # type: ignore[return-value]

        # Climb while we are coming up from the *side* subtree.
        above = node.parent
        while above is not self._nil and node is above.child(side):
            node = above
            above = above.parent
        if above is self._nil:
            which = "successor" if side == Side.RIGHT else "predecessor"
            raise KeyError(f"No {which} for {key!r}")
        return above.key  # type: ignore[return-value]

    def successor(self, key: K) -> K:
        """Return the smallest key greater than *key*; raise KeyError if none."""
        return self._neighbour(key, Side.RIGHT)

    def predecessor(self, key: K) -> K:
        """Return the greatest key smaller than *key*; raise KeyError if none."""
        return self._neighbour(key, Side.LEFT)

    # ------------------------------------------------------------------
    #   Event log
    # ------------------------------------------------------------------
    @property
    def is_recording_events(self) -> bool:
        return self._recording

    def enable_event_recording(self) -> None:
        """Start recording structural events, discarding any unread ones."""
        if self._recorder is None:
            self._recorder = EventRecorder()
        else:
            self._recorder.drain()
        self._recording = True
        logger.debug("Event recording enabled")

    def disable_event_recording(self) -> None:
        """Stop recording.  Events already recorded stay readable."""
        self._recording = False
        logger.debug("Event recording disabled")

    def get_and_clear_events(self) -> List[TreeEvent[K]]:
        """Return the recorded events, oldest first, and empty the log."""
        if self._recorder is None:
            return []
        return self._recorder.drain()

    def _record(self, kind: EventType, key: Optional[K], **details: Any) -> None:
        if self._recording:
            self._recorder.record(TreeEvent(kind, key, **details))  # type: ignore[union-attr]

    def _paint(self, node: _Node[K], color: Color) -> None:
        """Set *node*'s colour.  The sentinel stays BLACK whatever is asked."""
        if node is self._nil or node.color is color:
            return
        if self._recording:
            self._record(
                EventType.RECOLOR,
                node.key,
                from_color=node.color,
                to_color=color,
                explanation=f"{node.key!r} becomes {color.name}",
            )
        node.color = color

    def _blacken_root(self) -> None:
        if self._root.color is RED:
            if self._recording:
                self._record(
                    EventType.SET_ROOT_BLACK,
                    self._root.key,
                    from_color=RED,
                    to_color=BLACK,
                    explanation="The root is always BLACK",
                )
            self._root.color = BLACK

    # ------------------------------------------------------------------
    #   Left / right rotations – helper primitives
    # ------------------------------------------------------------------
    def _rotate(self, x: _Node[K], side: Side) -> None:
        r"""
        Rotate the subtree rooted at `x` so that `x` moves down toward
        *side*; its child on the opposite side takes its place.

            rotate(x, LEFT):     x                y
                                / \              / \
                               a   y     =>     x   c
                                  / \          / \
                                 b   c        a   b
        """
        y = x.child(side.opposite)
        if y is self._nil:
            raise RuntimeError(
                f"rotate_{side.name.lower()} called on a node with nil "
                f"{side.opposite.name.lower()} child"
            )
        # Turn y's inner subtree into x's outer subtree
        inner = y.child(side)
        x.set_child(side.opposite, inner)
        if inner is not self._nil:
            inner.parent = x
        # Link x's parent to y
        y.parent = x.parent
        if x.parent is self._nil:
            self._root = y
        elif x is x.parent.left:
            x.parent.left = y
        else:
            x.parent.right = y
        # Put x under y
        y.set_child(side, x)
        x.parent = y

        if self._recording:
            self._record(
                EventType.ROTATE_LEFT if side == Side.LEFT else EventType.ROTATE_RIGHT,
                x.key,
                parent=y.key,
                explanation=f"{y.key!r} rotates up over {x.key!r}",
            )

    def _rotate_left(self, x: _Node[K]) -> None:
        """Left‑rotate the subtree rooted at `x`."""
        self._rotate(x, Side.LEFT)

    def _rotate_right(self, y: _Node[K]) -> None:
        """Right‑rotate the subtree rooted at `y`."""
        self._rotate(y, Side.RIGHT)

    # ------------------------------------------------------------------
    #   Insertion
    # ------------------------------------------------------------------
    def insert(self, key: K) -> bool:
        """
        Add *key* to the tree.

        Returns ``True`` if a node was created and ``False`` if the key was
        already present, in which case the tree is left untouched.
        """
        if self._root is self._nil:
            self._root = _Node(key, BLACK, self._nil, self._nil, self._nil)
            self._size = 1
            if self._recording:
                self._record(
                    EventType.INSERT_NODE,
                    key,
                    to_color=BLACK,
                    explanation=f"{key!r} becomes the BLACK root of an empty tree",
                )
            return True

        parent = self._nil
        cur = self._root
        while cur is not self._nil:
            parent = cur
            if key == cur.key:
                logger.debug("Ignoring duplicate key %r", key)
                return False
            elif key < cur.key:
                cur = cur.left
            else:
                cur = cur.right

        # At this point `cur` is the sentinel, `parent` is where we attach.
        new_node = _Node(key, RED, self._nil, self._nil, parent)
        if key < parent.key:
            parent.left = new_node
        else:
            parent.right = new_node
        self._size += 1

        if self._recording:
            self._record(
                EventType.INSERT_NODE,
                key,
                parent=parent.key,
                to_color=RED,
                explanation=f"{key!r} attached as a RED leaf under {parent.key!r}",
            )
        self._fix_insert(new_node)
        return True

    def _fix_insert(self, z: _Node[K]) -> None:
        """Restore red‑black properties after inserting node `z` (which is RED)."""
        while z is not self._root and z.parent.color is RED:
            p = z.parent
            g = p.parent
            if g is self._nil:
                # p would be a RED root; the final recolour handles it.
                break

            outer = Side.LEFT if p is g.left else Side.RIGHT
            uncle = g.child(outer.opposite)

            if uncle.color is RED:
                # Case 1 – recolour and push the violation up two levels
                if self._recording:
                    self._record(
                        EventType.CASE1_UNCLE_RED,
                        z.key,
                        parent=p.key,
                        grandparent=g.key,
                        uncle=uncle.key,
                        explanation="Uncle is RED: recolour parent, uncle and grandparent",
                    )
                self._paint(p, BLACK)
                self._paint(uncle, BLACK)
                self._paint(g, RED)
                z = g
                continue

            if z is p.child(outer.opposite):
                # Case 2 – triangle; rotate the parent to make a line
                if self._recording:
                    self._record(
                        EventType.CASE2_TRIANGLE,
                        z.key,
                        parent=p.key,
                        grandparent=g.key,
                        uncle=self._key_of(uncle),
                        explanation="Triangle: rotate the parent to form a line",
                    )
                z = p
                self._rotate(z, outer)
                p = z.parent
                g = p.parent

            # Case 3 – line; rotate the grandparent, which ends the loop
            if self._recording:
                self._record(
                    EventType.CASE3_LINE,
                    z.key,
                    parent=p.key,
                    grandparent=g.key,
                    uncle=self._key_of(g.child(outer.opposite)),
                    explanation="Line: recolour and rotate the grandparent",
                )
            self._paint(p, BLACK)
            self._paint(g, RED)
            self._rotate(g, outer.opposite)

        self._blacken_root()

    # ------------------------------------------------------------------
    #   Deletion
    # ------------------------------------------------------------------
    def remove(self, key: K) -> bool:
        """
        Delete *key* from the tree.

        Returns ``False`` (and changes nothing) when the key is not present.
        """
        node = self._search_node(key)
        if node is self._nil:
            logger.debug("remove(%r): key not found", key)
            return False
        self._delete_node(node)
        return True

    def _transplant(self, u: _Node[K], v: _Node[K]) -> None:
        """Replace subtree rooted at `u` with the subtree rooted at `v`."""
        if u.parent is self._nil:
            self._root = v
        elif u is u.parent.left:
            u.parent.left = v
        else:
            u.parent.right = v
        # Also set when `v` is the sentinel so the fix‑up can walk upward.
        v.parent = u.parent

    def _delete_node(self, z: _Node[K]) -> None:
        """Delete the node `z` from the tree and fix up any colour violations."""
        if self._recording:
            self._record(
                EventType.DELETE_NODE,
                z.key,
                parent=self._key_of(z.parent),
                from_color=z.color,
                explanation=f"{z.key!r} is removed",
            )

        y = z  # node to be spliced out
        y_original_color = y.color
        if z.left is self._nil:
            x = z.right
            self._transplant(z, z.right)
        elif z.right is self._nil:
            x = z.left
            self._transplant(z, z.left)
        else:
            # z has two children: its in‑order successor `y` takes its place
            y = self._minimum_node(z.right)
            y_original_color = y.color
            x = y.right
            if y.parent is z:
                x.parent = y
            else:
                self._transplant(y, y.right)
                y.right = z.right
                y.right.parent = y
            self._transplant(z, y)
            y.left = z.left
            y.left.parent = y
            self._paint(y, z.color)

        # Detach the released node so stale views see no neighbours.
        z.left = z.right = z.parent = self._nil
        self._size -= 1

        if y_original_color is BLACK:
            self._fix_delete(x)
        self._blacken_root()
        # Fix-up is done with the sentinel; drop its borrowed parent link.
        self._nil.parent = self._nil

    def _fix_delete(self, x: _Node[K]) -> None:
        """
        Restore red‑black properties after removing a black node.
        `x` is the node that moved into the vacated position (could be `nil`)
        and carries an extra unit of blackness until the loop ends.
        """
        while x is not self._root and x.color is BLACK:
            parent = x.parent
            side = Side.LEFT if x is parent.left else Side.RIGHT
            far = side.opposite
            w = parent.child(far)  # sibling

            if w.color is RED:
                # Case 1 – sibling is red
                self._record_delete_case(1, x, parent, w, "Sibling is RED: rotate it above the parent")
                self._paint(w, BLACK)
                self._paint(parent, RED)
                self._rotate(parent, side)
                w = parent.child(far)

            if w.left.color is BLACK and w.right.color is BLACK:
                # Case 2 – both of sibling's children are black
                self._record_delete_case(2, x, parent, w, "Sibling's children are BLACK: push the deficit up")
                self._paint(w, RED)
                x = parent
            else:
                if w.child(far).color is BLACK:
                    # Case 3 – near nephew red, far nephew black
                    self._record_delete_case(3, x, parent, w, "Near nephew is RED: rotate the sibling")
                    self._paint(w.child(side), BLACK)
                    self._paint(w, RED)
                    self._rotate(w, far)
                    w = parent.child(far)
                # Case 4 – far nephew red
                self._record_delete_case(4, x, parent, w, "Far nephew is RED: rotate the parent, done")
                self._paint(w, parent.color)
                self._paint(parent, BLACK)
                self._paint(w.child(far), BLACK)
                self._rotate(parent, side)
                x = self._root
        self._paint(x, BLACK)

    def _record_delete_case(
        self, case: int, x: _Node[K], parent: _Node[K], sibling: _Node[K], explanation: str
    ) -> None:
        if self._recording:
            self._record(
                EventType.DELETE_FIXUP,
                self._key_of(x),
                parent=parent.key,
                sibling=self._key_of(sibling),
                case=case,
                explanation=explanation,
            )

    # ------------------------------------------------------------------
    #   Validation/checking utilities – useful for debugging
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """
        Verify that the tree satisfies all red‑black invariants.
        Raises :class:`InvariantViolation` (an ``AssertionError``) with a
        descriptive message if something is broken.
        """
        if self._nil.color is not BLACK:
            raise InvariantViolation("Sentinel leaf is not black")

        if self._root is self._nil:
            if self._size != 0:
                raise InvariantViolation(f"Empty tree reports size {self._size}")
            return

        # Property 2: root is black
        if self._root.color is not BLACK:
            raise InvariantViolation("Root is not black")
        if self._root.parent is not self._nil:
            raise InvariantViolation("Root has a parent")

        def dfs(node: _Node[K]) -> int:
            """Return the black height of the subtree, sentinel included."""
            if node is self._nil:
                return 1

            # Property 1: node colour is either RED or BLACK
            if node.color is not RED and node.color is not BLACK:
                raise InvariantViolation(f"Node {node.key!r} has colour {node.color!r}")

            # Property 4: red nodes have black children
            if node.color is RED:
                if node.left.color is RED:
                    raise InvariantViolation(f"Red node {node.key!r} has red left child")
                if node.right.color is RED:
                    raise InvariantViolation(f"Red node {node.key!r} has red right child")

            for child in (node.left, node.right):
                if child is not self._nil and child.parent is not node:
                    raise InvariantViolation(f"Child {child.key!r} does not point back to {node.key!r}")

            left_black = dfs(node.left)
            right_black = dfs(node.right)

            # Property 5: all paths have the same black height
            if left_black != right_black:
                raise InvariantViolation(f"Black-height mismatch below {node.key!r}")
            return left_black + (1 if node.color is BLACK else 0)

        dfs(self._root)

        # BST ordering and size bookkeeping
        keys = list(self)
        for lo, hi in zip(keys, keys[1:]):
            if not lo < hi:
                raise InvariantViolation(f"BST order violated: {lo!r} before {hi!r}")
        if len(keys) != self._size:
            raise InvariantViolation(f"Size is {self._size} but {len(keys)} nodes are reachable")

    def verify_properties(self) -> bool:
        """Return ``True`` if every invariant holds.  O(n) and read‑only."""
        try:
            self.validate()
        except InvariantViolation as exc:
            logger.debug("Invariant check failed: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------
    #   Convenience string representation (for debugging)
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"RedBlackTree({list(self)!r})"
