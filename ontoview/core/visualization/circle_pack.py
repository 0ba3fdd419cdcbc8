"""
Circle Packing - nested, non-overlapping circles for a bounded tree.

Leaves get radius ``sqrt(weight)`` with ``weight = sqrt(value)``, so a leaf's
area grows with the square root of its value. Siblings are packed with the
front-chain algorithm of Wang et al. and every parent becomes the smallest
circle enclosing its children (Welzl's algorithm). The whole packing is then
scaled into the canvas.

Shuffling inside the enclosing-circle search uses a fixed linear congruential
generator, so a tree always packs to the same geometry.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from ontoview.core.config import Settings, get_settings
from .colors import ColorScale, depth_color_scale, normalized_depth
from .schemas import Bounds, Circle
from .tree_builder import HierarchyTree, TreeNode

logger = logging.getLogger(__name__)

Random = Callable[[], float]


class _Disc:
    """Mutable circle used while packing."""

    __slots__ = ("x", "y", "r")

    def __init__(self, x: float = 0.0, y: float = 0.0, r: float = 0.0):
        self.x = x
        self.y = y
        self.r = r


class _PackNode(_Disc):
    __slots__ = ("source", "parent", "children", "weight")

    def __init__(self, source: TreeNode, parent: _PackNode | None = None):
        super().__init__()
        self.source = source
        self.parent = parent
        self.children: list[_PackNode] = []
        self.weight = 0.0


class _ChainLink:
    """Entry of the circular front chain."""

    __slots__ = ("disc", "next", "previous")

    def __init__(self, disc: _Disc):
        self.disc = disc
        self.next: _ChainLink | None = None
        self.previous: _ChainLink | None = None


def _lcg() -> Random:
    state = 1

    def next_value() -> float:
        nonlocal state
        state = (1664525 * state + 1013904223) % 4294967296
        return state / 4294967296

    return next_value


def _shuffle(items: list, random: Random) -> list:
    m = len(items)
    while m:
        i = int(random() * m)
        m -= 1
        items[m], items[i] = items[i], items[m]
    return items


# =============================================================================
# Enclosing Circle
# =============================================================================


def _encloses_not(a: _Disc, b: _Disc) -> bool:
    dr = a.r - b.r
    dx = b.x - a.x
    dy = b.y - a.y
    return dr < 0 or dr * dr < dx * dx + dy * dy


def _encloses_weak(a: _Disc, b: _Disc) -> bool:
    dr = a.r - b.r + max(a.r, b.r, 1) * 1e-9
    dx = b.x - a.x
    dy = b.y - a.y
    return dr > 0 and dr * dr > dx * dx + dy * dy


def _encloses_weak_all(a: _Disc, basis: list[_Disc]) -> bool:
    return all(_encloses_weak(a, b) for b in basis)


def _enclose_one(a: _Disc) -> _Disc:
    return _Disc(a.x, a.y, a.r)


def _enclose_two(a: _Disc, b: _Disc) -> _Disc:
    x21 = b.x - a.x
    y21 = b.y - a.y
    r21 = b.r - a.r
    length = math.sqrt(x21 * x21 + y21 * y21)
    return _Disc(
        (a.x + b.x + x21 / length * r21) / 2,
        (a.y + b.y + y21 / length * r21) / 2,
        (length + a.r + b.r) / 2,
    )


def _enclose_three(a: _Disc, b: _Disc, c: _Disc) -> _Disc:
    x1, y1, r1 = a.x, a.y, a.r
    x2, y2, r2 = b.x, b.y, b.r
    x3, y3, r3 = c.x, c.y, c.r
    a2 = x1 - x2
    a3 = x1 - x3
    b2 = y1 - y2
    b3 = y1 - y3
    c2 = r2 - r1
    c3 = r3 - r1
    d1 = x1 * x1 + y1 * y1 - r1 * r1
    d2 = d1 - x2 * x2 - y2 * y2 + r2 * r2
    d3 = d1 - x3 * x3 - y3 * y3 + r3 * r3
    ab = a3 * b2 - a2 * b3
    xa = (b2 * d3 - b3 * d2) / (ab * 2) - x1
    xb = (b3 * c2 - b2 * c3) / ab
    ya = (a3 * d2 - a2 * d3) / (ab * 2) - y1
    yb = (a2 * c3 - a3 * c2) / ab
    qa = xb * xb + yb * yb - 1
    qb = 2 * (r1 + xa * xb + ya * yb)
    qc = xa * xa + ya * ya - r1 * r1
    if abs(qa) > 1e-6:
        r = -(qb + math.sqrt(max(0.0, qb * qb - 4 * qa * qc))) / (2 * qa)
    else:
        r = -(qc / qb)
    return _Disc(x1 + xa + xb * r, y1 + ya + yb * r, r)


def _enclose_basis(basis: list[_Disc]) -> _Disc:
    if len(basis) == 1:
        return _enclose_one(basis[0])
    if len(basis) == 2:
        return _enclose_two(basis[0], basis[1])
    return _enclose_three(basis[0], basis[1], basis[2])


def _extend_basis(basis: list[_Disc], p: _Disc) -> list[_Disc]:
    if _encloses_weak_all(p, basis):
        return [p]

    for b in basis:
        if _encloses_not(p, b) and _encloses_weak_all(_enclose_two(b, p), basis):
            return [b, p]

    for i in range(len(basis) - 1):
        for j in range(i + 1, len(basis)):
            bi, bj = basis[i], basis[j]
            if (
                _encloses_not(_enclose_two(bi, bj), p)
                and _encloses_not(_enclose_two(bi, p), bj)
                and _encloses_not(_enclose_two(bj, p), bi)
                and _encloses_weak_all(_enclose_three(bi, bj, p), basis)
            ):
                return [bi, bj, p]

    raise ValueError("No enclosing basis found")


def enclose(discs: list[_Disc], random: Random) -> _Disc | None:
    """Smallest circle enclosing every disc."""
    discs = _shuffle(list(discs), random)
    basis: list[_Disc] = []
    e: _Disc | None = None
    i = 0
    while i < len(discs):
        p = discs[i]
        if e is not None and _encloses_weak(e, p):
            i += 1
        else:
            basis = _extend_basis(basis, p)
            e = _enclose_basis(basis)
            i = 0
    return e


# =============================================================================
# Sibling Packing
# =============================================================================


def _place(b: _Disc, a: _Disc, c: _Disc) -> None:
    """Put ``c`` tangent to both ``a`` and ``b``."""
    dx = b.x - a.x
    dy = b.y - a.y
    d2 = dx * dx + dy * dy
    if d2:
        a2 = (a.r + c.r) ** 2
        b2 = (b.r + c.r) ** 2
        if a2 > b2:
            x = (d2 + b2 - a2) / (2 * d2)
            y = math.sqrt(max(0.0, b2 / d2 - x * x))
            c.x = b.x - x * dx - y * dy
            c.y = b.y - x * dy + y * dx
        else:
            x = (d2 + a2 - b2) / (2 * d2)
            y = math.sqrt(max(0.0, a2 / d2 - x * x))
            c.x = a.x + x * dx - y * dy
            c.y = a.y + x * dy + y * dx
    else:
        c.x = a.x + c.r
        c.y = a.y


def _intersects(a: _Disc, b: _Disc) -> bool:
    dr = a.r + b.r - 1e-6
    dx = b.x - a.x
    dy = b.y - a.y
    return dr > 0 and dr * dr > dx * dx + dy * dy


def _score(link: _ChainLink) -> float:
    a = link.disc
    b = link.next.disc
    ab = a.r + b.r
    dx = (a.x * b.r + b.x * a.r) / ab
    dy = (a.y * b.r + b.y * a.r) / ab
    return dx * dx + dy * dy


def pack_siblings(discs: list[_Disc], random: Random) -> float:
    """Pack ``discs`` around the origin without overlap.

    Positions are written into the discs; returns the radius of the circle
    enclosing them all.
    """
    n = len(discs)
    if not n:
        return 0.0

    first = discs[0]
    first.x = first.y = 0.0
    if n == 1:
        return first.r

    second = discs[1]
    first.x = -second.r
    second.x = first.r
    second.y = 0.0
    if n == 2:
        return first.r + second.r

    _place(second, first, discs[2])

    a = _ChainLink(first)
    b = _ChainLink(second)
    c = _ChainLink(discs[2])
    a.next = c.previous = b
    b.next = a.previous = c
    c.next = b.previous = a

    i = 3
    while i < n:
        _place(a.disc, b.disc, discs[i])
        c = _ChainLink(discs[i])

        # Closest intersecting circle along the front chain, searching both ways
        j, k = b.next, a.previous
        sj, sk = b.disc.r, a.disc.r
        retry = False
        while True:
            if sj <= sk:
                if _intersects(j.disc, c.disc):
                    b = j
                    a.next = b
                    b.previous = a
                    retry = True
                    break
                sj += j.disc.r
                j = j.next
            else:
                if _intersects(k.disc, c.disc):
                    a = k
                    a.next = b
                    b.previous = a
                    retry = True
                    break
                sk += k.disc.r
                k = k.previous
            if j is k.next:
                break
        if retry:
            continue

        c.previous = a
        c.next = b
        a.next = c
        b.previous = c
        b = c

        # Pair closest to the centroid becomes the new insertion point
        best = _score(a)
        c = c.next
        while c is not b:
            score = _score(c)
            if score < best:
                a = c
                best = score
            c = c.next
        b = a.next
        i += 1

    chain = [b.disc]
    c = b.next
    while c is not b:
        chain.append(c.disc)
        c = c.next
    e = enclose(chain, random)

    for disc in discs:
        disc.x -= e.x
        disc.y -= e.y
    return e.r


# =============================================================================
# Tree Packing
# =============================================================================


def choose_padding(node_count: int, settings: Settings | None = None) -> float:
    """Sibling padding for a view showing ``node_count`` nodes.

    Tiny views get generous padding so a handful of circles stay legible.
    """
    settings = settings or get_settings()
    if node_count < settings.pack_small_tree_threshold:
        return settings.pack_padding_pair if node_count == 2 else settings.pack_padding_small
    return settings.pack_padding


def _mirror(root: TreeNode) -> tuple[_PackNode, list[_PackNode]]:
    """Pack nodes for the subtree at ``root`` plus their breadth-first order."""
    pack_root = _PackNode(root)
    order = [pack_root]
    index = 0
    while index < len(order):
        current = order[index]
        index += 1
        for child in current.source.children:
            pack_child = _PackNode(child, current)
            current.children.append(pack_child)
            order.append(pack_child)
    return pack_root, order


def _pack_children(node: _PackNode, padding: float, random: Random) -> None:
    if not node.children:
        return
    if padding:
        for child in node.children:
            child.r += padding
    e = pack_siblings(node.children, random)
    if padding:
        for child in node.children:
            child.r -= padding
    node.r = e + padding


def pack_tree(
    tree: HierarchyTree | TreeNode,
    bounds: Bounds,
    max_depth: int | None = None,
    color_scale: ColorScale | None = None,
    settings: Settings | None = None,
) -> list[Circle]:
    """Lay out a tree as nested circles inside ``bounds``.

    Args:
        tree: Tree (or subtree root) to pack
        bounds: Canvas size; the outermost circle fills the shorter side
        max_depth: Depth used to normalize fill colors (defaults to the
            deepest node packed)
        color_scale: Maps normalized depth to a fill; nodes with an explicit
            ``color`` keep it
        settings: Padding configuration

    Returns:
        One Circle per node, breadth-first, with absolute canvas coordinates
    """
    settings = settings or get_settings()
    root = tree.root if isinstance(tree, HierarchyTree) else tree
    pack_root, order = _mirror(root)
    random = _lcg()

    if max_depth is None:
        max_depth = max(node.source.depth for node in order) - root.depth
    color_scale = color_scale or depth_color_scale(settings)
    padding = choose_padding(len(order), settings)

    # weight = sqrt(value) summed upward; only leaf weights set radii
    for node in reversed(order):
        node.weight = math.sqrt(node.source.value) + sum(child.weight for child in node.children)
        if not node.children:
            node.r = max(0.0, math.sqrt(node.weight))

    dx, dy = bounds.width, bounds.height
    side = min(dx, dy)
    pack_root.x = dx / 2
    pack_root.y = dy / 2

    for node in reversed(order):
        _pack_children(node, 0.0, random)
    k = pack_root.r / side
    for node in reversed(order):
        _pack_children(node, padding * k, random)

    scale = side / (2 * pack_root.r)
    for node in order:
        node.r *= scale
        if node.parent is not None:
            node.x = node.parent.x + scale * node.x
            node.y = node.parent.y + scale * node.y

    circles = []
    for node in order:
        source = node.source
        relative_depth = source.depth - root.depth
        circles.append(
            Circle(
                key=source.key,
                id=source.id,
                label=source.label,
                x=node.x,
                y=node.y,
                r=node.r,
                depth=source.depth,
                is_leaf=source.is_leaf,
                expandable=source.expandable,
                parent=source.parent_key if source is not root else None,
                fill=source.color or color_scale(normalized_depth(relative_depth, max_depth)),
            )
        )

    logger.debug("Packed %d circles with padding %s", len(circles), padding)
    return circles
