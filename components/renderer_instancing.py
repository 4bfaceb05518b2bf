# ------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------
import time

from components.camera_control import CameraController
from components.galaxy_generator import default_random_source
from components.galaxy_parameters import GalaxyParameters
from components.galaxy_renderer import GalaxyRenderer
from components.renderer_window import RendererWindow
from components.scene_binder import GalaxySceneBinder
from components.scene_constructor import SceneConstructor
from utils.image_saver import ImageSaver


class RenderingInstance:
    """
    RenderingInstance coordinates the galaxy viewer:
      - Window creation and management
      - Camera and scene graph
      - The scene binder that (re)generates the galaxy
      - The optional parameter panel
      - Main loop and updates (FPS, events, screenshots)

    Everything runs on one thread. The panel is pumped from the render loop,
    so a committed edit regenerates the galaxy between two frames.
    """

    # --------------------------------------------------------------------------
    # Initialization
    # --------------------------------------------------------------------------
    def __init__(self, config, parameters=None, rng=None, panel_factory=None):
        """
        Initialize the RenderingInstance with a given configuration.

        Args:
            config: A RendererConfig object containing various rendering options.
            parameters: The GalaxyParameters to display (defaults are used when omitted).
            rng: Random source for the generator (seeded from config.seed when omitted).
            panel_factory (callable, optional): factory(parameters, instance) -> panel
                with update() and destroy(). Used when config.show_panel is set.
        """
        # --- Primary Configuration ---
        self.config = config
        self.parameters = parameters if parameters is not None else GalaxyParameters()
        self.rng = rng if rng is not None else default_random_source(config.seed)
        self.panel_factory = panel_factory

        # --- Window/Context & Runtime State ---
        self.render_window = None
        self.running = False
        self.screenshot_requested = False

        # --- Scene Management ---
        self.scene_construct = SceneConstructor()
        self.camera = CameraController(
            config.camera_positions,
            target=config.camera_target,
            fov=config.fov,
            near_plane=config.near_plane,
            far_plane=config.far_plane,
            auto_camera=config.auto_camera,
            move_speed=config.move_speed,
            loop=config.loop,
        )
        self.binder = GalaxySceneBinder(
            self.scene_construct,
            self.create_galaxy_renderer,
            rng=self.rng,
            rotation_step=config.rotation_step,
            debug_mode=config.debug_mode,
        )

        # --- Panel and screenshots ---
        self.panel = None
        self.image_saver = None

    # --------------------------------------------------------------------------
    # Setup and Lifecycle Methods
    # --------------------------------------------------------------------------
    def setup(self):
        """
        Set up the rendering instance:
          - Create the window (and its OpenGL context)
          - Discover shaders
          - Bind the parameters and generate the first galaxy
          - Open the parameter panel
        """
        self.render_window = RendererWindow(
            window_size=self.config.window_size,
            title=self.config.window_title,
            msaa_level=self.config.msaa_level,
            vsync_enabled=self.config.vsync_enabled,
            fullscreen=self.config.fullscreen,
            background_color=self.config.background_color,
        )
        # Fullscreen may have changed the size.
        self.config.window_size = self.render_window.window_size

        self.config.discover_shaders()
        self.image_saver = ImageSaver(screenshots_dir=self.config.screenshots_dir)

        self.binder.bind(self.parameters)
        self.binder.regenerate(self.parameters)

        if self.config.show_panel and self.panel_factory is not None:
            self.panel = self.panel_factory(self.parameters, self)

    def create_galaxy_renderer(self, buffers, particle_size):
        """
        Renderable factory handed to the scene binder: build and upload a
        GalaxyRenderer for a freshly generated buffer pair.
        """
        renderer = GalaxyRenderer(
            renderer_name="galaxy",
            buffers=buffers,
            **self.config.add_galaxy_renderer(particle_size=particle_size),
        )
        renderer.setup()
        return renderer

    def run(self, stop_event=None):
        """
        Start the main rendering loop.

        Args:
            stop_event: Optional threading/multiprocessing Event for stopping externally.
        """
        self.setup()

        self.running = True
        start_time = time.time()

        # --- FPS Tracking ---
        fps_update_interval = 1.0  # seconds
        last_fps_update_time = start_time
        fps_accumulator = 0.0
        fps_frame_count = 0

        while self.running:
            if self.config.duration is not None and time.time() - start_time >= self.config.duration:
                break
            if stop_event is not None and stop_event.is_set():
                print("Galaxy viewer stopped externally.")
                break

            delta_time = self.render_window.clock.tick() / 1000.0

            if self.render_window.handle_events():
                break

            # Pump the panel; a committed edit regenerates the galaxy here.
            if self.panel is not None:
                self.panel.update()
                if not self.running:
                    break

            self.binder.tick(delta_time)
            self.render_frame(delta_time)

            if self.screenshot_requested:
                self.capture_screenshot()

            fps_accumulator += self.render_window.clock.get_fps()
            fps_frame_count += 1
            current_time = time.time()
            if current_time - last_fps_update_time >= fps_update_interval:
                particle_count = self.binder.active_buffers.count if self.binder.active_buffers else 0
                self.render_window.draw_stats_in_title(fps_accumulator / fps_frame_count, particle_count)
                fps_accumulator = 0.0
                fps_frame_count = 0
                last_fps_update_time = current_time

            self.render_window.display_flip()

        self.shutdown()

    def render_frame(self, delta_time):
        """
        Clear the window and draw the scene from the current camera.
        """
        self.camera.update(delta_time)
        self.render_window.clear()
        self.binder.render(
            self.camera.view_matrix(),
            self.camera.projection_matrix(self.render_window.window_size),
        )

    def stop(self):
        """
        Ask the main loop to finish after the current frame.
        """
        self.running = False

    def shutdown(self):
        """
        Clean up the rendering instance:
          - Close the panel
          - Release the galaxy and any other renderer left in the scene
          - Close the window (OpenGL context)
        """
        self.running = False

        if self.panel is not None:
            self.panel.destroy()
            self.panel = None

        self.binder.unbind()
        self.binder.release()
        self.scene_construct.shutdown()

        if self.render_window:
            self.render_window.shutdown()
            self.render_window = None

    # --------------------------------------------------------------------------
    # Screenshots
    # --------------------------------------------------------------------------
    def request_screenshot(self):
        """
        Capture the back buffer after the next frame is drawn.
        """
        self.screenshot_requested = True

    def capture_screenshot(self):
        self.screenshot_requested = False
        pixels = self.render_window.read_pixels()
        count = self.binder.active_buffers.count if self.binder.active_buffers else 0
        return self.image_saver.save_framebuffer(
            pixels, self.render_window.window_size, f"galaxy_{count}_particles"
        )
