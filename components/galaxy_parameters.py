"""
Galaxy Parameters Module

Holds the editable parameter set that drives galaxy generation. The object is
created once with defaults, then mutated in place by the parameter panel.
Observers subscribed via subscribe() are notified only when an edit is
committed, never on intermediate slider drags.
"""

from PIL import ImageColor

# ------------------------------------------------------------------------------
# Defaults and Panel Bounds
# ------------------------------------------------------------------------------
DEFAULT_PARAMETERS = {
    "count": 100000,
    "size": 0.01,
    "radius": 5.0,
    "branches": 3,
    "spin": 1.0,
    "randomness": 0.2,
    "randomness_power": 3.0,
    "inside_color": "#ff6030",
    "outside_color": "#1b3984",
}

# (min, max, step) for every numeric field exposed by the parameter panel.
PARAMETER_BOUNDS = {
    "count": (100, 1000000, 100),
    "size": (0.001, 0.1, 0.001),
    "radius": (0.01, 20.0, 0.01),
    "branches": (2, 20, 1),
    "spin": (-5.0, 5.0, 0.001),
    "randomness": (0.0, 2.0, 0.001),
    "randomness_power": (1.0, 10.0, 0.001),
}

INTEGER_FIELDS = ("count", "branches")
COLOR_FIELDS = ("inside_color", "outside_color")


class InvalidParameters(ValueError):
    """Raised when a parameter set cannot produce a galaxy."""


def parse_color(value):
    """
    Convert a color into a normalized (r, g, b) tuple.

    Args:
        value: A hex/CSS color string (e.g. "#ff6030") or a sequence of three
            floats in [0, 1].

    Returns:
        tuple: (r, g, b) floats in [0, 1].
    """
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError as e:
            raise ValueError(f"Invalid color value: {value!r}") from e
        return tuple(channel / 255.0 for channel in rgb[:3])

    channels = tuple(float(channel) for channel in value)
    if len(channels) != 3:
        raise ValueError(f"Color must have exactly 3 channels, got {len(channels)}.")
    if any(channel < 0.0 or channel > 1.0 for channel in channels):
        raise ValueError(f"Color channels must lie in [0, 1], got {channels}.")
    return channels


def color_to_hex(color):
    """Format a normalized (r, g, b) tuple as '#rrggbb'."""
    return "#" + "".join(f"{int(round(channel * 255)):02x}" for channel in color)


# ------------------------------------------------------------------------------
# GalaxyParameters Class
# ------------------------------------------------------------------------------
class GalaxyParameters:
    """
    Mutable parameter set for the spiral galaxy.

    The generator only reads these values. The panel writes them through
    update() and signals the end of an edit session with commit().
    """

    def __init__(
        self,
        count=DEFAULT_PARAMETERS["count"],
        size=DEFAULT_PARAMETERS["size"],
        radius=DEFAULT_PARAMETERS["radius"],
        branches=DEFAULT_PARAMETERS["branches"],
        spin=DEFAULT_PARAMETERS["spin"],
        randomness=DEFAULT_PARAMETERS["randomness"],
        randomness_power=DEFAULT_PARAMETERS["randomness_power"],
        inside_color=DEFAULT_PARAMETERS["inside_color"],
        outside_color=DEFAULT_PARAMETERS["outside_color"],
    ):
        self.count = int(count)
        self.size = float(size)
        self.radius = float(radius)
        self.branches = int(branches)
        self.spin = float(spin)
        self.randomness = float(randomness)
        self.randomness_power = float(randomness_power)
        self._inside_color = parse_color(inside_color)
        self._outside_color = parse_color(outside_color)

        self._observers = []

    # --------------------------------------------------------------------------
    # Colors
    # --------------------------------------------------------------------------
    @property
    def inside_color(self):
        return self._inside_color

    @inside_color.setter
    def inside_color(self, value):
        self._inside_color = parse_color(value)

    @property
    def outside_color(self):
        return self._outside_color

    @outside_color.setter
    def outside_color(self, value):
        self._outside_color = parse_color(value)

    # --------------------------------------------------------------------------
    # Mutation
    # --------------------------------------------------------------------------
    def update(self, **changes):
        """
        Set one or more fields in place without notifying observers.

        Raises:
            ValueError: If a field name is unknown.
        """
        unknown = set(changes) - set(DEFAULT_PARAMETERS)
        if unknown:
            raise ValueError(f"Unknown galaxy parameters: {sorted(unknown)}")

        for name, value in changes.items():
            if name in INTEGER_FIELDS:
                value = int(round(value))
            elif name not in COLOR_FIELDS:
                value = float(value)
            setattr(self, name, value)
        return self

    def clamp(self):
        """
        Clamp every numeric field into the panel bounds.
        """
        for name, (lower, upper, _step) in PARAMETER_BOUNDS.items():
            value = min(max(getattr(self, name), lower), upper)
            setattr(self, name, int(value) if name in INTEGER_FIELDS else float(value))
        return self

    def validate(self):
        """
        Check the values generation cannot work with.

        Raises:
            InvalidParameters: If count, branches or radius is not positive.
        """
        problems = []
        if self.count <= 0:
            problems.append(f"count must be > 0 (got {self.count})")
        if self.branches <= 0:
            problems.append(f"branches must be > 0 (got {self.branches})")
        if self.radius <= 0:
            problems.append(f"radius must be > 0 (got {self.radius})")
        if problems:
            raise InvalidParameters("Invalid galaxy parameters: " + "; ".join(problems))

    # --------------------------------------------------------------------------
    # Observers
    # --------------------------------------------------------------------------
    def subscribe(self, callback):
        """
        Register a callback invoked with this object on every commit().
        """
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback):
        if callback in self._observers:
            self._observers.remove(callback)

    def commit(self):
        """
        Signal that an edit session finished and notify all observers.
        """
        for callback in list(self._observers):
            callback(self)

    # --------------------------------------------------------------------------
    # Introspection
    # --------------------------------------------------------------------------
    def snapshot(self):
        """
        Return the current values as a plain dictionary (colors as hex strings).
        """
        values = {name: getattr(self, name) for name in DEFAULT_PARAMETERS}
        for name in COLOR_FIELDS:
            values[name] = color_to_hex(values[name])
        return values

    def __repr__(self):
        fields = ", ".join(f"{name}={value!r}" for name, value in self.snapshot().items())
        return f"GalaxyParameters({fields})"
