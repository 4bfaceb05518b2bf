import copy
import os

from config.path_config import screenshots_dir, shaders_dir

BLEND_MODES = ("alpha", "additive")


class RendererConfig:
    """
    RendererConfig stores all major configuration options for the galaxy viewer:
    - Window properties
    - Camera settings
    - Galaxy presentation (point style, blending)
    - Animation (constant rotation)
    - Parameter panel and screenshots
    - Random seed and debug mode
    """

    def __init__(
        self,
            # ------------------------------------------------------------------------------
            # Window/Runtime Settings
            # ------------------------------------------------------------------------------
        window_title="Galaxy Generator",
        window_size=(800, 600),
        vsync_enabled=True,
        fullscreen=False,
        msaa_level=4,
        background_color=(0.0, 0.0, 0.0),
        duration=None,

            # ------------------------------------------------------------------------------
            # Camera Settings
            # ------------------------------------------------------------------------------
        camera_positions=None,
        camera_target=(0.0, 0.0, 0.0),
        fov=75,
        near_plane=0.1,
        far_plane=100,
            auto_camera=False,
            move_speed=0.1,
            loop=True,

            # ------------------------------------------------------------------------------
            # Galaxy Presentation
            # ------------------------------------------------------------------------------
        shader_names=None,
        blend_mode="additive",
        depth_write=False,
        size_attenuation=True,
        particle_smooth_edges=False,

            # ------------------------------------------------------------------------------
            # Animation
            # ------------------------------------------------------------------------------
        rotation_step=0.001,

            # ------------------------------------------------------------------------------
            # Parameter Panel and Screenshots
            # ------------------------------------------------------------------------------
        show_panel=True,
        screenshots_dir=screenshots_dir,

            # ------------------------------------------------------------------------------
            # Randomness and Debug
            # ------------------------------------------------------------------------------
        seed=None,
        debug_mode=False,
    ):
        """
        If camera_positions is not given, it defaults to a single position looking
        down at the galaxy from (3, 3, 3).
        """
        if camera_positions is None:
            camera_positions = [(3.0, 3.0, 3.0)]
        if shader_names is None:
            shader_names = {"vertex": "galaxy", "fragment": "galaxy"}

        # ------------------------------------------------------------------------------
        # Store Window/Runtime Settings
        # ------------------------------------------------------------------------------
        self.window_title = window_title
        self.window_size = window_size
        self.vsync_enabled = vsync_enabled
        self.fullscreen = fullscreen
        self.msaa_level = msaa_level
        self.background_color = background_color
        self.duration = duration

        # ------------------------------------------------------------------------------
        # Camera Settings
        # ------------------------------------------------------------------------------
        self.camera_positions = camera_positions
        self.camera_target = camera_target
        self.fov = fov
        self.near_plane = near_plane
        self.far_plane = far_plane
        self.auto_camera = auto_camera
        self.move_speed = move_speed
        self.loop = loop

        # ------------------------------------------------------------------------------
        # Galaxy Presentation
        # ------------------------------------------------------------------------------
        self.shader_names = shader_names
        self.blend_mode = blend_mode
        self.depth_write = depth_write
        self.size_attenuation = size_attenuation
        self.particle_smooth_edges = particle_smooth_edges
        self.shaders = {}

        # ------------------------------------------------------------------------------
        # Animation, Panel, Randomness, Debug
        # ------------------------------------------------------------------------------
        self.rotation_step = rotation_step
        self.show_panel = show_panel
        self.screenshots_dir = screenshots_dir
        self.seed = seed
        self.debug_mode = debug_mode

        self._validate_config(self.__dict__)

    def discover_shaders(self, shader_root=shaders_dir):
        """
        Populate self.shaders by scanning the shader directory for
        <type>/<name>/<type>.glsl files (type is vertex or fragment).
        """
        if not os.path.exists(shader_root):
            raise FileNotFoundError(f"The shader root directory '{shader_root}' does not exist.")

        for shader_type in ["vertex", "fragment"]:
            type_path = os.path.join(shader_root, shader_type)
            if not os.path.exists(type_path):
                continue

            for shader_dir in sorted(os.listdir(type_path)):
                shader_file_path = os.path.join(type_path, shader_dir, f"{shader_type}.glsl")
                if os.path.exists(shader_file_path):
                    self.shaders.setdefault(shader_type, {})[shader_dir] = shader_file_path
        return self.shaders

    def unpack(self):
        """
        Unpack the configuration into a dictionary.
        Returns a deep copy so mutations won't affect this config.
        """
        return copy.deepcopy(self.__dict__)

    def _validate_config(self, config):
        """
        Private method to validate certain configuration options.
        Raises ValueError if invalid options or combinations are detected.
        """
        window_size = config.get("window_size", self.window_size)
        if len(window_size) != 2 or any(int(v) <= 0 for v in window_size):
            raise ValueError("Invalid window_size. Use a (width, height) pair of positive integers.")

        blend_mode = config.get("blend_mode", self.blend_mode)
        if blend_mode not in BLEND_MODES:
            raise ValueError(f"Invalid blend_mode option. Use one of: {', '.join(BLEND_MODES)}.")

        if "particle_size" in config and not config["particle_size"] > 0:
            raise ValueError("Invalid particle_size value. Must be greater than 0.")

        if config.get("msaa_level", self.msaa_level) not in (0, 2, 4, 8, 16):
            raise ValueError("Invalid msaa_level option. Use 0, 2, 4, 8 or 16.")

        fov = config.get("fov", self.fov)
        if not (0 < fov < 180):
            raise ValueError("Invalid fov value. Must be between 0 and 180 degrees.")

    # ------------------------------------------------------------------------------
    # Methods to produce specialized configurations
    # ------------------------------------------------------------------------------
    def add_galaxy_renderer(
        self,
        particle_size=None,
        blend_mode=None,
        depth_write=None,
        size_attenuation=None,
        particle_smooth_edges=None,
        shader_names=None,
        debug_mode=None,
        **kwargs,
    ):
        """
        Create and return the keyword arguments for a GalaxyRenderer.
        Values left as None fall back to this configuration.
        """
        base = self.unpack()
        galaxy_config = {
            "shader_names": base["shader_names"],
            "shaders": base["shaders"],
            "alpha_blending": True,
            "blend_mode": base["blend_mode"],
            "depth_testing": True,
            "depth_write": base["depth_write"],
            "size_attenuation": base["size_attenuation"],
            "particle_smooth_edges": base["particle_smooth_edges"],
            "window_size": base["window_size"],
            "debug_mode": base["debug_mode"],
        }

        overrides = {
            "particle_size": particle_size,
            "blend_mode": blend_mode,
            "depth_write": depth_write,
            "size_attenuation": size_attenuation,
            "particle_smooth_edges": particle_smooth_edges,
            "shader_names": shader_names,
            "debug_mode": debug_mode,
        }
        galaxy_config.update({k: v for k, v in overrides.items() if v is not None})

        # Apply additional kwargs
        for key, value in kwargs.items():
            if key not in galaxy_config:
                galaxy_config[key] = value

        self._validate_config(galaxy_config)
        return galaxy_config
