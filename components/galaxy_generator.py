# ------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------
import numpy as np

from components.galaxy_parameters import InvalidParameters


# ------------------------------------------------------------------------------
# ParticleBuffers Class
# ------------------------------------------------------------------------------
class ParticleBuffers:
    """
    A matching pair of flat float32 arrays, one XYZ triple and one RGB triple
    per particle. Both arrays are made read-only so a pair can only ever be
    replaced as a whole.
    """

    def __init__(self, positions, colors):
        positions = np.ascontiguousarray(positions, dtype=np.float32).reshape(-1)
        colors = np.ascontiguousarray(colors, dtype=np.float32).reshape(-1)
        if positions.size != colors.size or positions.size % 3 != 0:
            raise ValueError(
                f"Position and color buffers must have matching lengths divisible by 3 "
                f"(got {positions.size} and {colors.size})."
            )
        positions.flags.writeable = False
        colors.flags.writeable = False
        self.positions = positions
        self.colors = colors

    @property
    def count(self):
        return self.positions.size // 3

    @property
    def nbytes(self):
        return self.positions.nbytes + self.colors.nbytes

    def positions_xyz(self):
        """Return the positions as a (count, 3) view."""
        return self.positions.reshape(-1, 3)

    def colors_rgb(self):
        """Return the colors as a (count, 3) view."""
        return self.colors.reshape(-1, 3)


# ------------------------------------------------------------------------------
# Generation
# ------------------------------------------------------------------------------
def default_random_source(seed=None):
    """
    Create the default random source: a NumPy generator drawing uniform [0, 1).
    """
    return np.random.default_rng(seed)


def check_generator_input(params):
    """
    Raise InvalidParameters for values the generator cannot work with.
    """
    if params.count <= 0:
        raise InvalidParameters(f"count must be > 0 (got {params.count})")
    if params.branches < 1:
        raise InvalidParameters(f"branches must be >= 1 (got {params.branches})")
    if params.radius <= 0:
        raise InvalidParameters(f"radius must be > 0 (got {params.radius})")


def generate_galaxy(params, rng):
    """
    Generate the positions and colors of a spiral galaxy point cloud.

    Particles are dealt round-robin onto the spiral arms by index. Each one is
    placed at a random radius, twisted by spin * radius, and pushed off the arm
    by a per-axis jitter of magnitude u**randomness_power scaled by
    randomness * radius. Colors fade from inside_color at the centre to
    outside_color at the rim.

    Random values are drawn in this order: all radii, then the jitter
    magnitudes (count x 3), then the jitter signs (count x 3).

    Args:
        params: A GalaxyParameters instance (read only).
        rng: Any object with a random(size) method returning floats in [0, 1),
            such as numpy.random.Generator.

    Returns:
        ParticleBuffers: The generated position/color pair.
    """
    check_generator_input(params)

    count = int(params.count)
    branches = int(params.branches)
    radius = float(params.radius)

    particle_radii = np.asarray(rng.random(count), dtype=np.float64) * radius
    spin_angles = particle_radii * params.spin
    branch_angles = (np.arange(count) % branches) / branches * 2.0 * np.pi

    # Sign and magnitude come from independent draws.
    magnitudes = np.power(np.asarray(rng.random((count, 3)), dtype=np.float64), params.randomness_power)
    signs = np.where(np.asarray(rng.random((count, 3))) < 0.5, 1.0, -1.0)
    jitter = magnitudes * signs * params.randomness * particle_radii[:, np.newaxis]

    angles = branch_angles + spin_angles
    positions = np.empty((count, 3), dtype=np.float64)
    positions[:, 0] = np.cos(angles) * particle_radii + jitter[:, 0]
    positions[:, 1] = jitter[:, 1]
    positions[:, 2] = np.sin(angles) * particle_radii + jitter[:, 2]

    inside = np.asarray(params.inside_color, dtype=np.float64)
    outside = np.asarray(params.outside_color, dtype=np.float64)
    mix = (particle_radii / radius)[:, np.newaxis]
    colors = inside + (outside - inside) * mix

    return ParticleBuffers(positions, colors)
