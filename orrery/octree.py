"""
Barnes-Hut octree for O(n log n) gravity.

The tree is rebuilt from scratch every tick from a snapshot of the current
bodies and is read-only once built.

Nodes live in an arena of flat numpy arrays (no Python node objects). Each
row is tagged with a kind:
    - NODE_INTERNAL: bounding cube, up to 8 children, total mass and
      center of mass of its subtree
    - NODE_BODY: leaf holding one snapshot body by index
    - NODE_AGGREGATE: leaf holding a synthetic point mass (mass, position)
      that stands in for a cluster of coincident bodies

A node's ``size`` is its half-edge: the cube spans ``center ± size`` on
each axis. The root takes the largest bounding-box span as its size, and
each child of a (center, size) cube has size ``size / 2`` and a center
offset by ``± size / 2``, so children tile their parent.

Construction is recursive Python over numpy index arrays; traversal is a
Numba stack-based kernel, so force queries never touch Python objects.
"""

from typing import Iterator, NamedTuple, Optional, Tuple

import numpy as np
from numba import njit, prange

from config import physics as config
from .forces import pair_force
from .vector import Vector3D, ZERO


# ============================================================================
# NODE KINDS
# ============================================================================

NODE_INTERNAL = 0
NODE_BODY = 1
NODE_AGGREGATE = 2

NODE_KIND_NAMES = {
    NODE_INTERNAL: "internal",
    NODE_BODY: "body",
    NODE_AGGREGATE: "aggregate",
}

# Sign of each axis offset for octant index (x > cx) << 2 | (y > cy) << 1 | (z > cz)
OCTANT_SIGNS = np.array([
    [-1.0 if (octant & 4) == 0 else 1.0,
     -1.0 if (octant & 2) == 0 else 1.0,
     -1.0 if (octant & 1) == 0 else 1.0]
    for octant in range(8)
], dtype=np.float64)


class OctreeNode(NamedTuple):
    """Read-only view of one arena row."""
    index: int
    kind: str
    center: Vector3D
    size: float
    mass: float
    center_of_mass: Vector3D
    children: Tuple[int, ...]
    body: Optional[object]

    @property
    def is_leaf(self) -> bool:
        return self.kind != "internal"


# ============================================================================
# TRAVERSAL KERNELS
# ============================================================================

@njit(cache=True)
def tree_force(px: float, py: float, pz: float, mass: float, is_static: bool,
               target_idx: int,
               node_kind: np.ndarray,
               node_centers: np.ndarray,
               node_sizes: np.ndarray,
               node_masses: np.ndarray,
               node_com: np.ndarray,
               node_children: np.ndarray,
               node_body_idx: np.ndarray,
               node_static: np.ndarray,
               num_nodes: int,
               stack_size: int,
               theta: float,
               G: float,
               min_distance: float,
               max_distance: float) -> tuple:
    """
    Net force on a point mass from the tree rooted at node 0.

    Uses stack-based traversal to avoid recursion (Numba-friendly). Opening
    a node pops one entry and pushes at most 8, so a tree whose internal
    nodes nest ``depth`` deep never holds more than 7 * depth + 1 entries;
    the caller passes that bound as stack_size.
    Leaves whose body index equals target_idx are skipped (self-exclusion).
    """
    fx, fy, fz = 0.0, 0.0, 0.0
    if num_nodes == 0:
        return fx, fy, fz

    stack = np.empty(stack_size, dtype=np.int64)
    stack[0] = 0
    stack_ptr = 1

    while stack_ptr > 0:
        stack_ptr -= 1
        node = stack[stack_ptr]
        kind = node_kind[node]

        if kind == NODE_BODY and node_body_idx[node] == target_idx:
            continue

        if kind == NODE_INTERNAL:
            dx = node_centers[node, 0] - px
            dy = node_centers[node, 1] - py
            dz = node_centers[node, 2] - pz
            d = np.sqrt(dx * dx + dy * dy + dz * dz)

            if not (d > 0.0 and node_sizes[node] / d < theta):
                # Node too close: open it. Push in reverse so octant 0 is summed first
                for c in range(7, -1, -1):
                    child = node_children[node, c]
                    if child >= 0:
                        stack[stack_ptr] = child
                        stack_ptr += 1
                continue

        # Leaf, or internal node far enough away to act as one point mass
        gx, gy, gz = pair_force(
            px, py, pz, mass, is_static,
            node_com[node, 0], node_com[node, 1], node_com[node, 2],
            node_masses[node], node_static[node],
            G, min_distance, max_distance,
        )
        fx += gx
        fy += gy
        fz += gz

    return fx, fy, fz


@njit(parallel=True, cache=True)
def compute_forces_barnes_hut(
    positions: np.ndarray,
    masses: np.ndarray,
    static: np.ndarray,
    forces: np.ndarray,
    node_kind: np.ndarray,
    node_centers: np.ndarray,
    node_sizes: np.ndarray,
    node_masses: np.ndarray,
    node_com: np.ndarray,
    node_children: np.ndarray,
    node_body_idx: np.ndarray,
    node_static: np.ndarray,
    num_nodes: int,
    num_bodies: int,
    stack_size: int,
    theta: float,
    G: float,
    min_distance: float,
    max_distance: float,
):
    """Net force on every snapshot body into a zeroed (n, 3) array. Static rows stay zero."""
    for i in prange(num_bodies):
        if not static[i]:
            fx, fy, fz = tree_force(
                positions[i, 0], positions[i, 1], positions[i, 2], masses[i], False, i,
                node_kind, node_centers, node_sizes, node_masses, node_com,
                node_children, node_body_idx, node_static, num_nodes, stack_size,
                theta, G, min_distance, max_distance,
            )
            forces[i, 0] = fx
            forces[i, 1] = fy
            forces[i, 2] = fz


@njit(cache=True)
def compute_forces_serial(
    positions: np.ndarray,
    masses: np.ndarray,
    static: np.ndarray,
    forces: np.ndarray,
    node_kind: np.ndarray,
    node_centers: np.ndarray,
    node_sizes: np.ndarray,
    node_masses: np.ndarray,
    node_com: np.ndarray,
    node_children: np.ndarray,
    node_body_idx: np.ndarray,
    node_static: np.ndarray,
    num_nodes: int,
    num_bodies: int,
    stack_size: int,
    theta: float,
    G: float,
    min_distance: float,
    max_distance: float,
):
    """Single-threaded twin of compute_forces_barnes_hut."""
    for i in range(num_bodies):
        if not static[i]:
            fx, fy, fz = tree_force(
                positions[i, 0], positions[i, 1], positions[i, 2], masses[i], False, i,
                node_kind, node_centers, node_sizes, node_masses, node_com,
                node_children, node_body_idx, node_static, num_nodes, stack_size,
                theta, G, min_distance, max_distance,
            )
            forces[i, 0] = fx
            forces[i, 1] = fy
            forces[i, 2] = fz


# ============================================================================
# BARNES-HUT TREE
# ============================================================================

class BarnesHutTree:
    """
    Octree over a snapshot of bodies.

    Usage:
        tree = BarnesHutTree(bodies)
        force = tree.force_on(body)     # Vector3D
        all_forces = tree.forces()      # (n, 3) array, row i for tree.bodies[i]

    ``None`` entries in ``bodies`` are skipped. The snapshot (positions,
    masses, static flags) is copied at construction, so mutating bodies
    afterwards does not change the tree.
    """

    def __init__(self, bodies, theta: float = None, G: float = None,
                 min_distance: float = None, max_distance: float = None,
                 min_node_size: float = None, coincidence_tolerance: float = None,
                 parallel: bool = None):
        cfg = config.PHYSICS
        self.theta = float(cfg["theta"] if theta is None else theta)
        self.G = float(cfg["G"] if G is None else G)
        self.min_distance = float(cfg["min_distance"] if min_distance is None else min_distance)
        self.max_distance = float(cfg["max_distance"] if max_distance is None else max_distance)
        self.min_node_size = float(cfg["min_node_size"] if min_node_size is None else min_node_size)
        self.coincidence_tolerance = float(
            cfg["coincidence_tolerance"] if coincidence_tolerance is None else coincidence_tolerance
        )
        self.parallel = bool(cfg["parallel"] if parallel is None else parallel)

        self.bodies = [] if bodies is None else [b for b in bodies if b is not None]
        n = len(self.bodies)
        self._index = {id(body): i for i, body in enumerate(self.bodies)}

        # Snapshot
        self._positions = np.zeros((n, 3), dtype=np.float64)
        self._masses = np.zeros(n, dtype=np.float64)
        self._static = np.zeros(n, dtype=np.bool_)
        for i, body in enumerate(self.bodies):
            p = body.position
            self._positions[i, 0] = p.x
            self._positions[i, 1] = p.y
            self._positions[i, 2] = p.z
            self._masses[i] = body.mass
            self._static[i] = body.is_static

        # Arena
        self._allocate_arena(max(8, 2 * n))
        self._num_nodes = 0
        self._max_depth = 0

        if n > 0:
            self._build_root()
        self._stack_size = 7 * self._max_depth + 1
        self._freeze()

    # -------------------------------------------------------------------------
    # Arena
    # -------------------------------------------------------------------------

    def _allocate_arena(self, capacity: int):
        self._capacity = capacity
        self._node_kind = np.zeros(capacity, dtype=np.int8)
        self._node_centers = np.zeros((capacity, 3), dtype=np.float64)
        self._node_sizes = np.zeros(capacity, dtype=np.float64)
        self._node_masses = np.zeros(capacity, dtype=np.float64)
        self._node_com = np.zeros((capacity, 3), dtype=np.float64)
        self._node_children = np.full((capacity, 8), -1, dtype=np.int64)
        self._node_body_idx = np.full(capacity, -1, dtype=np.int64)
        self._node_static = np.zeros(capacity, dtype=np.bool_)

    def _grow_arena(self):
        """Double the arena, preserving existing rows."""
        old = (self._node_kind, self._node_centers, self._node_sizes, self._node_masses,
               self._node_com, self._node_children, self._node_body_idx, self._node_static)
        used = self._num_nodes
        self._allocate_arena(self._capacity * 2)
        new = (self._node_kind, self._node_centers, self._node_sizes, self._node_masses,
               self._node_com, self._node_children, self._node_body_idx, self._node_static)
        for src, dst in zip(old, new):
            dst[:used] = src[:used]

    def _allocate_node(self, kind: int, center: np.ndarray, size: float) -> int:
        if self._num_nodes >= self._capacity:
            self._grow_arena()
        idx = self._num_nodes
        self._num_nodes += 1
        self._node_kind[idx] = kind
        self._node_centers[idx] = center
        self._node_sizes[idx] = size
        return idx

    def _freeze(self):
        """Trim the arena to its used rows and make it read-only."""
        used = self._num_nodes
        self._node_kind = self._node_kind[:used].copy()
        self._node_centers = self._node_centers[:used].copy()
        self._node_sizes = self._node_sizes[:used].copy()
        self._node_masses = self._node_masses[:used].copy()
        self._node_com = self._node_com[:used].copy()
        self._node_children = self._node_children[:used].copy()
        self._node_body_idx = self._node_body_idx[:used].copy()
        self._node_static = self._node_static[:used].copy()
        self._capacity = used
        for arr in (self._node_kind, self._node_centers, self._node_sizes, self._node_masses,
                    self._node_com, self._node_children, self._node_body_idx, self._node_static,
                    self._positions, self._masses, self._static):
            arr.flags.writeable = False

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def _build_root(self):
        """Root cube: midpoint of the bounding box, size = largest axis span."""
        lo = self._positions.min(axis=0)
        hi = self._positions.max(axis=0)
        size = float((hi - lo).max())
        center = (lo + hi) / 2.0
        self._build(np.arange(len(self.bodies)), center, size, 1)

    def _build(self, members: np.ndarray, center: np.ndarray, size: float, depth: int) -> int:
        """Build the subtree for ``members`` in cube (center, size) at ``depth``; returns node index or -1."""
        if members.size == 0:
            return -1
        if members.size == 1:
            return self._add_body_leaf(int(members[0]), center, size)

        node = self._allocate_node(NODE_INTERNAL, center, size)
        self._max_depth = max(self._max_depth, depth)
        # Acts as a static equivalent body when approximated
        self._node_static[node] = True
        pos = self._positions[members]
        octants = (
            ((pos[:, 0] > center[0]).astype(np.int64) << 2)
            | ((pos[:, 1] > center[1]).astype(np.int64) << 1)
            | (pos[:, 2] > center[2]).astype(np.int64)
        )

        child_size = size / 2.0
        total_mass = 0.0
        weighted = np.zeros(3, dtype=np.float64)

        for octant in range(8):
            group = members[octants == octant]
            if group.size == 0:
                continue

            # Child cube: half the size, center offset by ± size / 2
            child_center = center + OCTANT_SIGNS[octant] * child_size
            if group.size > 1 and (child_size < self.min_node_size or self._coincident(group)):
                child = self._add_aggregate_leaf(group, child_center, child_size)
            else:
                child = self._build(group, child_center, child_size, depth + 1)

            # Arena may have grown during recursion; always index through self
            self._node_children[node, octant] = child
            child_mass = self._node_masses[child]
            total_mass += child_mass
            weighted += self._node_com[child] * child_mass

        self._node_masses[node] = total_mass
        if total_mass > 0:
            self._node_com[node] = weighted / total_mass
        return node

    def _coincident(self, group: np.ndarray) -> bool:
        """True if every body in ``group`` lies within tolerance of the first."""
        pos = self._positions[group]
        offsets = pos - pos[0]
        distances = np.sqrt((offsets * offsets).sum(axis=1))
        return bool(np.all(distances <= self.coincidence_tolerance))

    def _add_body_leaf(self, body_idx: int, center: np.ndarray, size: float) -> int:
        node = self._allocate_node(NODE_BODY, center, size)
        self._node_body_idx[node] = body_idx
        self._node_masses[node] = self._masses[body_idx]
        self._node_com[node] = self._positions[body_idx]
        self._node_static[node] = self._static[body_idx]
        return node

    def _add_aggregate_leaf(self, group: np.ndarray, center: np.ndarray, size: float) -> int:
        """Merge a cluster into one static point mass at its first body's position."""
        node = self._allocate_node(NODE_AGGREGATE, center, size)
        self._node_masses[node] = float(self._masses[group].sum())
        self._node_com[node] = self._positions[group[0]]
        self._node_static[node] = True
        return node

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def force_on(self, body) -> Vector3D:
        """
        Net gravitational force on ``body``.

        ``body`` need not be part of the snapshot; if it is, its own leaf is
        excluded. Its current position and mass are used.
        """
        if self._num_nodes == 0 or body is None:
            return ZERO

        target_idx = self._index.get(id(body), -1)
        p = body.position
        fx, fy, fz = tree_force(
            p.x, p.y, p.z, body.mass, body.is_static, target_idx,
            self._node_kind, self._node_centers, self._node_sizes, self._node_masses,
            self._node_com, self._node_children, self._node_body_idx, self._node_static,
            self._num_nodes, self._stack_size, self.theta, self.G, self.min_distance, self.max_distance,
        )
        return Vector3D(fx, fy, fz)

    def forces(self) -> np.ndarray:
        """Net force on every snapshot body as an (n, 3) array in ``self.bodies`` order."""
        n = len(self.bodies)
        forces = np.zeros((n, 3), dtype=np.float64)
        if self._num_nodes == 0:
            return forces

        kernel = compute_forces_barnes_hut if self.parallel else compute_forces_serial
        kernel(
            self._positions, self._masses, self._static, forces,
            self._node_kind, self._node_centers, self._node_sizes, self._node_masses,
            self._node_com, self._node_children, self._node_body_idx, self._node_static,
            self._num_nodes, n, self._stack_size, self.theta, self.G, self.min_distance, self.max_distance,
        )
        return forces

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return self._num_nodes

    @property
    def root(self) -> Optional[OctreeNode]:
        return self.node(0) if self._num_nodes else None

    @property
    def max_depth(self) -> int:
        """Nesting depth of internal nodes (0 for an empty or single-leaf tree)."""
        return self._max_depth

    @property
    def is_empty(self) -> bool:
        return self._num_nodes == 0

    def node(self, index: int) -> OctreeNode:
        if not 0 <= index < self._num_nodes:
            raise IndexError(f"Node {index} out of range (tree has {self._num_nodes} nodes)")
        kind = int(self._node_kind[index])
        body_idx = int(self._node_body_idx[index])
        return OctreeNode(
            index=index,
            kind=NODE_KIND_NAMES[kind],
            center=Vector3D.from_array(self._node_centers[index]),
            size=float(self._node_sizes[index]),
            mass=float(self._node_masses[index]),
            center_of_mass=Vector3D.from_array(self._node_com[index]),
            children=tuple(int(c) for c in self._node_children[index] if c >= 0),
            body=self.bodies[body_idx] if kind == NODE_BODY else None,
        )

    def iter_nodes(self) -> Iterator[OctreeNode]:
        for index in range(self._num_nodes):
            yield self.node(index)

    def __len__(self) -> int:
        return self._num_nodes

    def __repr__(self) -> str:
        return f"BarnesHutTree(bodies={len(self.bodies)}, nodes={self._num_nodes}, theta={self.theta})"
