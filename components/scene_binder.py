import threading
import time

from components.galaxy_generator import default_random_source, generate_galaxy


class GalaxySceneBinder:
    """
    GalaxySceneBinder owns the single galaxy renderable that is bound into the scene.

    Every regenerate() call is a dispose-then-replace transaction:
      - validate the parameters (nothing is touched if they are invalid)
      - release the geometry and material of the active renderable and remove it
      - generate fresh buffers and build a new renderable from them
      - add the new renderable to the scene and make it the active one

    The binder knows nothing about the event loop. Parameter commits and frame
    ticks reach it through callbacks (bind() and tick()).
    """

    def __init__(
        self,
        scene,
        renderable_factory,
        rng=None,
        renderer_name="galaxy",
        rotation_step=0.0,
        debug_mode=False,
    ):
        """
        Args:
            scene: Scene graph exposing add_renderer(name, r) and remove_renderer(name).
            renderable_factory (callable): factory(buffers, point_size) -> renderable.
                The renderable must provide release_geometry(), release_material()
                and set_rotation_y(angle).
            rng: Random source with a random(size) method. Defaults to NumPy's generator.
            renderer_name (str): Name the renderable is registered under in the scene.
            rotation_step (float): Y-axis rotation (radians) applied on every tick.
            debug_mode (bool): Print regeneration diagnostics.
        """
        self.scene = scene
        self.renderable_factory = renderable_factory
        self.rng = rng if rng is not None else default_random_source()
        self.renderer_name = renderer_name
        self.rotation_step = rotation_step
        self.debug_mode = debug_mode

        self.active_renderable = None
        self.active_buffers = None
        self.rotation_angle = 0.0
        self.regeneration_count = 0

        self.swap_lock = threading.Lock()
        self.tick_callbacks = []
        self.bound_parameters = None

    # --------------------------------------------------------------------------
    # Regeneration
    # --------------------------------------------------------------------------
    def regenerate(self, params):
        """
        Replace the active galaxy with one generated from params.

        Raises:
            InvalidParameters: If params cannot produce a galaxy. The active
                renderable is left untouched in that case.
            Exception: Anything raised by the renderable factory (e.g. a
                RuntimeError from shader compilation) propagates after the old
                renderable was already released, so the scene holds no galaxy
                until the next successful regenerate().
        """
        params.validate()

        with self.swap_lock:
            start_time = time.perf_counter()
            self._release_active()

            buffers = generate_galaxy(params, self.rng)
            renderable = self.renderable_factory(buffers, params.size)
            renderable.set_rotation_y(self.rotation_angle)
            self.scene.add_renderer(self.renderer_name, renderable)

            self.active_renderable = renderable
            self.active_buffers = buffers
            self.regeneration_count += 1

            if self.debug_mode:
                elapsed_ms = (time.perf_counter() - start_time) * 1000.0
                print(
                    f"Regenerated galaxy #{self.regeneration_count}: {buffers.count} particles, "
                    f"{buffers.nbytes / 1024:.1f} KiB in {elapsed_ms:.1f} ms"
                )

    def release(self):
        """
        Release the active renderable (process teardown).
        """
        with self.swap_lock:
            self._release_active()

    def _release_active(self):
        """
        Dispose the active renderable's resources and unbind it from the scene.
        Must be called with swap_lock held.
        """
        if self.active_renderable is None:
            return

        self.active_renderable.release_geometry()
        self.active_renderable.release_material()
        self.scene.remove_renderer(self.renderer_name)
        self.active_renderable = None
        self.active_buffers = None

    # --------------------------------------------------------------------------
    # Parameter Binding (edit-finished observer)
    # --------------------------------------------------------------------------
    def bind(self, params):
        """
        Regenerate whenever params.commit() is called.
        """
        self.unbind()
        params.subscribe(self.regenerate)
        self.bound_parameters = params

    def unbind(self):
        if self.bound_parameters is not None:
            self.bound_parameters.unsubscribe(self.regenerate)
            self.bound_parameters = None

    # --------------------------------------------------------------------------
    # Per-frame Tick
    # --------------------------------------------------------------------------
    def add_tick_callback(self, callback):
        """
        Register callback(delta_time, renderable) to run on every tick.
        """
        self.tick_callbacks.append(callback)

    def remove_tick_callback(self, callback):
        if callback in self.tick_callbacks:
            self.tick_callbacks.remove(callback)

    def tick(self, delta_time):
        """
        Advance the constant Y rotation and notify tick callbacks.

        Callbacks run after the swap lock is released, so they may call
        regenerate(), release() or render() on this binder.
        """
        with self.swap_lock:
            self.rotation_angle += self.rotation_step
            renderable = self.active_renderable
            if renderable is not None:
                renderable.set_rotation_y(self.rotation_angle)
            callbacks = list(self.tick_callbacks)

        for callback in callbacks:
            callback(delta_time, renderable)

    def render(self, view, projection):
        """
        Draw the scene with the given camera matrices. Holding the swap lock
        keeps a regeneration from replacing the galaxy mid-draw.
        """
        with self.swap_lock:
            self.scene.render(view=view, projection=projection)
