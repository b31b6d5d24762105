"""Physics tick: build the octree, then semi-implicit Euler for every moving body."""

from config import physics as config
from .octree import BarnesHutTree
from .vector import Vector3D


class Stepper:
    """
    Advances a body collection by one time step.

    The tree is built from every body (static ones still attract) and then
    discarded; only its node count is kept for stats.
    """

    def __init__(self, theta: float = None, G: float = None,
                 min_distance: float = None, max_distance: float = None,
                 min_node_size: float = None, coincidence_tolerance: float = None,
                 parallel: bool = None):
        cfg = config.PHYSICS
        self.theta = cfg["theta"] if theta is None else theta
        self.G = cfg["G"] if G is None else G
        self.min_distance = cfg["min_distance"] if min_distance is None else min_distance
        self.max_distance = cfg["max_distance"] if max_distance is None else max_distance
        self.min_node_size = cfg["min_node_size"] if min_node_size is None else min_node_size
        self.coincidence_tolerance = (
            cfg["coincidence_tolerance"] if coincidence_tolerance is None else coincidence_tolerance
        )
        self.parallel = cfg["parallel"] if parallel is None else parallel

        self.last_node_count = 0

    def build_tree(self, bodies) -> BarnesHutTree:
        return BarnesHutTree(
            bodies,
            theta=self.theta,
            G=self.G,
            min_distance=self.min_distance,
            max_distance=self.max_distance,
            min_node_size=self.min_node_size,
            coincidence_tolerance=self.coincidence_tolerance,
            parallel=self.parallel,
        )

    def advance(self, bodies, delta_time: float):
        """
        Advance ``bodies`` in place by ``delta_time`` seconds.

        Forces are evaluated against the snapshot taken at tick start, so the
        order in which bodies are integrated does not matter. ``None`` bodies
        and static bodies are skipped.
        """
        if bodies is None:
            return

        tree = self.build_tree(bodies)
        self.last_node_count = tree.node_count
        if tree.is_empty:
            return

        forces = tree.forces()
        for i, body in enumerate(tree.bodies):
            if body.is_static:
                continue
            body.apply_force(Vector3D.from_array(forces[i]), delta_time)
            body.update_position(delta_time)


_default_stepper = None


def advance(bodies, delta_time: float):
    """Advance ``bodies`` by one tick with the configured physics defaults."""
    global _default_stepper
    if _default_stepper is None:
        _default_stepper = Stepper()
    _default_stepper.advance(bodies, delta_time)
