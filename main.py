from components.galaxy_parameters import GalaxyParameters
from components.renderer_config import RendererConfig
from components.renderer_instancing import RenderingInstance
from version import __version__


def create_panel(parameters, instance):
    """
    Panel factory handed to the rendering instance. Imported lazily so the
    viewer can run without Tk when the panel is disabled.
    """
    from gui.parameter_panel import ParameterPanel

    return ParameterPanel(
        parameters,
        on_screenshot=instance.request_screenshot,
        on_close=instance.stop,
    )


def run_galaxy(
    stop_event=None,
    resolution=(1280, 720),
    msaa_level=4,
    vsync_enabled=True,
    fullscreen=False,
    show_panel=True,
    seed=None,
    debug_mode=False,
):
    """
    Open the galaxy viewer with the default parameters and the tweak panel.
    """
    # ------------------------------------------------------------------------------
    # Initialize the base renderer configuration
    # ------------------------------------------------------------------------------
    base_config = RendererConfig(
        window_title=f"Galaxy Generator {__version__}",
        window_size=resolution,
        vsync_enabled=vsync_enabled,
        fullscreen=fullscreen,
        msaa_level=msaa_level,
        camera_positions=[(3.0, 3.0, 3.0)],
        camera_target=(0.0, 0.0, 0.0),
        fov=75,
        near_plane=0.1,
        far_plane=100,
        blend_mode="additive",
        depth_write=False,
        size_attenuation=True,
        rotation_step=0.001,
        show_panel=show_panel,
        seed=seed,
        debug_mode=debug_mode,
    )

    # ------------------------------------------------------------------------------
    # Create the rendering instance and run it
    # ------------------------------------------------------------------------------
    instance = RenderingInstance(
        base_config,
        parameters=GalaxyParameters(),
        panel_factory=create_panel,
    )
    instance.run(stop_event=stop_event)


if __name__ == "__main__":
    run_galaxy()
