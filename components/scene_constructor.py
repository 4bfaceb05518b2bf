class SceneConstructor:
    """
    SceneConstructor is the scene graph: a collection of named renderers.

    It provides methods to add and remove renderers, apply transformations
    (translate, rotate, scale), render everything with a shared camera and
    shut all renderers down.
    """
    def __init__(self):
        """
        Initialize the scene with an empty dictionary of named renderers.
        """
        self.renderers = {}

    # --------------------------------------------------------------------------
    # Registration / Removal
    # --------------------------------------------------------------------------
    def add_renderer(self, name: str, renderer):
        """
        Add a renderer to the scene under the specified name.

        Args:
            name (str): Identifier for the renderer.
            renderer (AbstractRenderer): An instance of a renderer subclass.

        Raises:
            ValueError: If a renderer is already registered under that name.
        """
        if name in self.renderers:
            raise ValueError(f"A renderer named '{name}' is already in the scene.")
        self.renderers[name] = renderer

    def remove_renderer(self, name: str):
        """
        Remove and return the named renderer, or None if it is not in the scene.
        Releasing its GPU resources is the caller's job.
        """
        return self.renderers.pop(name, None)

    def get_renderer(self, name: str):
        return self.renderers.get(name)

    def __contains__(self, name):
        return name in self.renderers

    def __len__(self):
        return len(self.renderers)

    # --------------------------------------------------------------------------
    # Rendering
    # --------------------------------------------------------------------------
    def render(self, name=None, view=None, projection=None):
        """
        Render either a specific renderer (by name) or all renderers in the scene.

        Args:
            name (str, optional): If provided, only render the named renderer.
            view, projection (glm.mat4, optional): Camera matrices. When omitted
                each renderer uses the matrices it already holds.
        """
        def draw(r):
            if view is not None and projection is not None:
                r.render_with_custom_camera(view, projection)
            else:
                r.render()

        if name:
            self._apply_to_renderer(name, draw)
        else:
            self._apply_to_all_renderers(draw)

    # --------------------------------------------------------------------------
    # Transforms
    # --------------------------------------------------------------------------
    def translate_renderer(self, name, position):
        """
        Translate the named renderer to the specified (x, y, z) position.
        """
        self._apply_to_renderer(name, lambda r: r.translate(position))

    def rotate_renderer_euler(self, name, angles):
        """
        Rotate the named renderer by Euler angles (xDeg, yDeg, zDeg).
        """
        self._apply_to_renderer(name, lambda r: r.rotate_euler(angles))

    def scale_renderer(self, name, scale):
        """
        Scale the named renderer by (xScale, yScale, zScale).
        """
        self._apply_to_renderer(name, lambda r: r.scale(scale))

    # --------------------------------------------------------------------------
    # Shutdown
    # --------------------------------------------------------------------------
    def shutdown(self):
        """
        Shut down and remove every renderer still in the scene.
        """
        self._apply_to_all_renderers(lambda r: r.shutdown())
        self.renderers.clear()

    # --------------------------------------------------------------------------
    # Private Utility Methods
    # --------------------------------------------------------------------------
    def _apply_to_renderer(self, name, action):
        """
        Apply a given function (action) to the named renderer if it exists.
        """
        if name in self.renderers:
            action(self.renderers[name])

    def _apply_to_all_renderers(self, action):
        """
        Apply a given function (action) to every renderer in the scene.
        """
        for renderer in list(self.renderers.values()):
            action(renderer)
