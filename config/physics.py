"""Configuration for the Barnes-Hut gravity core and the orrery driver."""

# =============================================================================
# ACCURACY PRESETS - Choose one by uncommenting
# =============================================================================

# PRESET: EXACT (pairwise sum, O(n^2)) - reference runs
# THETA = 0.0

# PRESET: STANDARD - good balance for solar-system scale runs
THETA = 0.5

# PRESET: FAST - large clusters, coarser far-field
# THETA = 0.8

# =============================================================================

PHYSICS = {
    "G": 6.674e-11,                    # Gravitational constant (SI)
    "theta": THETA,                    # Barnes-Hut opening angle (size / distance)

    # Force law clamps: pairs outside [min, max] exert no force
    "min_distance": 1e-5,
    "max_distance": 1e16,

    # Octree degenerate-cluster guard
    "min_node_size": 1e-10,            # Stop subdividing below this child size
    "coincidence_tolerance": 1e-6,     # Bodies closer than this are one cluster

    "parallel": True,                  # Evaluate per-body forces with prange
}

SIMULATION = {
    "time_scale": 86400.0,             # 1 simulated day per wall-clock second
    "min_time_scale": 0.1,
    "max_time_scale": 1e6,

    # Headless driver defaults
    "preset": "solar_system",
    "ticks": 365,
    "dt": 1.0,                         # Wall-clock seconds per tick
    "seed": 42,
}

SPACECRAFT = {
    "fuel_efficiency": 0.1,            # Fuel burned per unit of thrust impulse
}
