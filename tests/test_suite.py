"""
Extended Test Suite for the Galaxy Generator (Headless/Pure Python)

OpenGL and Tk are never given a real context here. The tests focus on:

  - Config logic (RendererConfig), including shader discovery, add_galaxy_renderer,
    validation and unpack behavior.
  - Camera interpolation (CameraController)
  - Scene construction logic (SceneConstructor)
  - Screenshot saving (ImageSaver)
  - GalaxyRenderer resource release with the GL calls patched out
  - RenderingInstance screenshot and shutdown wiring with a mocked window
  - ParameterPanel commits (only when a display is available)

Run via:
  pytest tests
or:
  python -m unittest discover -s tests
"""

import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import numpy as np
from PIL import Image

# Adjust PYTHONPATH to include project root
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# --------------------------------------------------------------------------------
# Pure-Python Components
# --------------------------------------------------------------------------------
from components.camera_control import CameraController
from components.galaxy_generator import ParticleBuffers
from components.galaxy_parameters import GalaxyParameters
from components.renderer_config import RendererConfig
from components.scene_constructor import SceneConstructor
from config.path_config import shaders_dir
from utils.image_saver import ImageSaver

# OpenGL-backed components import PyOpenGL, pygame and GPUtil. Skip their tests
# when any of those cannot be loaded.
try:
    from components.galaxy_renderer import GalaxyRenderer
    from components.renderer_instancing import RenderingInstance
except (ImportError, OSError):
    GalaxyRenderer = None
    RenderingInstance = None

# For GUI testing, try to import the ParameterPanel class (if available).
try:
    from gui.parameter_panel import ParameterPanel
except ImportError:
    ParameterPanel = None


# --------------------------------------------------------------------------------
# Helper: Walk the shaders directory and return a dictionary of discovered shaders.
# --------------------------------------------------------------------------------
def walk_shaders_dir(shader_root):
    """
    Walk the shader root directory and return a dictionary mapping shader types
    ("vertex", "fragment") to a dict of {shader_dir: path}.
    """
    result = {}
    for shader_type in ["vertex", "fragment"]:
        type_path = os.path.join(shader_root, shader_type)
        if not os.path.exists(type_path):
            continue
        for shader_dir in os.listdir(type_path):
            shader_file_path = os.path.join(type_path, shader_dir, f"{shader_type}.glsl")
            if os.path.exists(shader_file_path):
                result.setdefault(shader_type, {})[shader_dir] = shader_file_path
    return result


def make_buffers(count=4):
    return ParticleBuffers(np.zeros(count * 3), np.ones(count * 3))


# --------------------------------------------------------------------------------
# Tests: RendererConfig and Config Logic
# --------------------------------------------------------------------------------
class TestRendererConfig(unittest.TestCase):
    """
    Tests around RendererConfig to ensure it accepts/validates configuration properly.
    """
    maxDiff = None

    def test_basic_initialization(self):
        rc = RendererConfig(window_title="Test", window_size=(800, 600))
        self.assertEqual(rc.window_title, "Test")
        self.assertEqual(rc.window_size, (800, 600))
        self.assertTrue(rc.vsync_enabled)
        self.assertFalse(rc.fullscreen)
        self.assertEqual(rc.blend_mode, "additive")  # default
        self.assertFalse(rc.depth_write)
        self.assertEqual(rc.camera_positions, [(3.0, 3.0, 3.0)])

    def test_shader_discovery(self):
        """
        discover_shaders() should find the galaxy vertex/fragment pair.
        """
        if not os.path.exists(shaders_dir):
            self.skipTest("Shaders directory does not exist.")
        rc = RendererConfig()
        rc.discover_shaders()
        self.assertEqual(rc.shaders, walk_shaders_dir(shaders_dir))
        self.assertIn("galaxy", rc.shaders["vertex"])
        self.assertIn("galaxy", rc.shaders["fragment"])

    def test_shader_discovery_missing_root(self):
        rc = RendererConfig()
        with self.assertRaises(FileNotFoundError):
            rc.discover_shaders(shader_root=os.path.join(PROJECT_ROOT, "no_such_shaders"))

    def test_invalid_options_rejected(self):
        cases = [
            ({"blend_mode": "multiply"}, "Invalid blend_mode option"),
            ({"window_size": (0, 600)}, "Invalid window_size"),
            ({"msaa_level": 3}, "Invalid msaa_level option"),
            ({"fov": 180}, "Invalid fov value"),
        ]
        for kwargs, message in cases:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError) as ctx:
                    RendererConfig(**kwargs)
                self.assertIn(message, str(ctx.exception))

    def test_add_galaxy_renderer_valid(self):
        """
        add_galaxy_renderer merges overrides and extra keyword arguments into the defaults.
        """
        rc = RendererConfig(window_size=(1024, 768), particle_smooth_edges=True)
        galaxy_cfg = rc.add_galaxy_renderer(particle_size=0.05, depth_write=True, extra_param="extra_value")
        self.assertEqual(galaxy_cfg["particle_size"], 0.05)
        self.assertTrue(galaxy_cfg["depth_write"])
        self.assertTrue(galaxy_cfg["particle_smooth_edges"])
        self.assertTrue(galaxy_cfg["alpha_blending"])
        self.assertEqual(galaxy_cfg["blend_mode"], "additive")
        self.assertEqual(galaxy_cfg["window_size"], (1024, 768))
        self.assertEqual(galaxy_cfg["shader_names"], {"vertex": "galaxy", "fragment": "galaxy"})
        self.assertEqual(galaxy_cfg["extra_param"], "extra_value")

    def test_add_galaxy_renderer_invalid_particle_size(self):
        rc = RendererConfig()
        with self.assertRaises(ValueError) as ctx:
            rc.add_galaxy_renderer(particle_size=0.0)
        self.assertIn("Invalid particle_size value", str(ctx.exception))

    def test_add_galaxy_renderer_invalid_blend_mode(self):
        rc = RendererConfig()
        with self.assertRaises(ValueError):
            rc.add_galaxy_renderer(blend_mode="screen")

    def test_unpack_returns_copy(self):
        """
        Modifying the dictionary returned by unpack() should not affect the config.
        """
        rc = RendererConfig(window_title="UnpackTest", window_size=(800, 600))
        data1 = rc.unpack()
        data1["window_title"] = "Changed"
        data1["camera_positions"].append((1, 1, 1))
        data2 = rc.unpack()
        self.assertEqual(data2["window_title"], "UnpackTest")
        self.assertEqual(len(data2["camera_positions"]), 1)


# --------------------------------------------------------------------------------
# Tests: Other Pure Python Logic
# --------------------------------------------------------------------------------
class TestPurePythonExtended(unittest.TestCase):
    """
    Collection of tests for the camera and the scene graph.
    """

    def test_camera_controller_interpolation(self):
        positions = [(0, 0, 0), (10, 10, 10)]
        cc = CameraController(positions, auto_camera=True, move_speed=1.0, loop=False)
        pos = cc.update(0.5)
        self.assertAlmostEqual(pos.x, 5.0, places=5)
        self.assertAlmostEqual(pos.z, 5.0, places=5)

    def test_camera_controller_stops_without_loop(self):
        cc = CameraController([(0, 0, 0), (10, 0, 0)], auto_camera=True, move_speed=1.0, loop=False)
        pos = cc.update(5.0)
        self.assertAlmostEqual(pos.x, 10.0, places=5)
        pos = cc.update(0.5)
        self.assertAlmostEqual(pos.x, 10.0, places=5)

    def test_camera_controller_static(self):
        cc = CameraController([(3, 3, 3)], auto_camera=True)
        pos = cc.update(1.0)
        self.assertEqual((pos.x, pos.y, pos.z), (3.0, 3.0, 3.0))

    def test_camera_controller_requires_positions(self):
        with self.assertRaises(ValueError):
            CameraController([])

    def test_scene_constructor_add_remove(self):
        sc = SceneConstructor()
        renderer = MagicMock()
        sc.add_renderer("galaxy", renderer)
        self.assertIn("galaxy", sc)
        with self.assertRaises(ValueError):
            sc.add_renderer("galaxy", MagicMock())

        self.assertIs(sc.remove_renderer("galaxy"), renderer)
        self.assertEqual(len(sc), 0)
        self.assertIsNone(sc.remove_renderer("galaxy"))

    def test_scene_constructor_basic_actions(self):
        """
        Test basic scene actions in SceneConstructor (translation, rotation, scaling).
        We mock out the renderer so no real rendering calls occur.
        """
        sc = SceneConstructor()
        mock_renderer = MagicMock()
        sc.add_renderer("test_renderer", mock_renderer)
        sc.translate_renderer("test_renderer", (1, 2, 3))
        sc.rotate_renderer_euler("test_renderer", (0, 45, 0))
        sc.scale_renderer("test_renderer", (2, 2, 2))
        mock_renderer.translate.assert_called_with((1, 2, 3))
        mock_renderer.rotate_euler.assert_called_with((0, 45, 0))
        mock_renderer.scale.assert_called_with((2, 2, 2))

    def test_scene_constructor_render_with_camera(self):
        sc = SceneConstructor()
        mock_renderer = MagicMock()
        sc.add_renderer("galaxy", mock_renderer)
        sc.render(view="view", projection="projection")
        mock_renderer.render_with_custom_camera.assert_called_once_with("view", "projection")
        sc.render()
        mock_renderer.render.assert_called_once_with()

    def test_scene_constructor_shutdown(self):
        sc = SceneConstructor()
        mock_renderer = MagicMock()
        sc.add_renderer("galaxy", mock_renderer)
        sc.shutdown()
        mock_renderer.shutdown.assert_called_once()
        self.assertEqual(len(sc), 0)


# --------------------------------------------------------------------------------
# ImageSaver tests with a temporary screenshots directory
# --------------------------------------------------------------------------------
class TestImageSaver(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        ImageSaver.reset_instance()
        self.saver = ImageSaver(screenshots_dir=os.path.join(self.tmp_dir, "shots"))

    def tearDown(self):
        ImageSaver.reset_instance()
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_singleton(self):
        self.assertIs(ImageSaver(), self.saver)

    def test_save_image(self):
        path = self.saver.save_image(Image.new("RGB", (4, 4)), "galaxy", timestamped=False)
        self.assertEqual(path, os.path.join(self.tmp_dir, "shots", "galaxy.png"))
        self.assertTrue(os.path.exists(path))

    def test_save_framebuffer_flips_rows(self):
        # OpenGL returns the bottom row first: make it red.
        pixel_data = bytes([255, 0, 0] * 2 + [0, 0, 0] * 2)
        path = self.saver.save_framebuffer(pixel_data, (2, 2), "frame")
        self.assertTrue(os.path.basename(path).startswith("frame_"))
        with Image.open(path) as image:
            self.assertEqual(image.getpixel((0, 1)), (255, 0, 0))
            self.assertEqual(image.getpixel((0, 0)), (0, 0, 0))


# --------------------------------------------------------------------------------
# GalaxyRenderer tests with the OpenGL calls patched out
# --------------------------------------------------------------------------------
@unittest.skipIf(GalaxyRenderer is None, "PyOpenGL is not available")
class TestGalaxyRendererRelease(unittest.TestCase):

    def setUp(self):
        self.renderer = GalaxyRenderer(renderer_name="galaxy", buffers=make_buffers())
        self.renderer.shader_engine = MagicMock()
        self.renderer.vao = 1
        self.renderer.vaos = [1]
        self.renderer.vbos = [2, 3]

    def test_invalid_blend_mode(self):
        with self.assertRaises(ValueError):
            GalaxyRenderer(renderer_name="galaxy", buffers=make_buffers(), blend_mode="screen")

    @patch("components.galaxy_renderer.glDeleteBuffers")
    @patch("components.galaxy_renderer.glDeleteVertexArrays")
    def test_release_geometry_is_idempotent(self, mock_delete_vaos, mock_delete_buffers):
        self.renderer.release_geometry()
        self.renderer.release_geometry()
        mock_delete_vaos.assert_called_once_with(1, [1])
        mock_delete_buffers.assert_called_once_with(2, [2, 3])
        self.assertTrue(self.renderer.geometry_released)
        self.assertIsNone(self.renderer.buffers)

    def test_release_material_is_idempotent(self):
        shader_engine = self.renderer.shader_engine
        self.renderer.release_material()
        self.renderer.release_material()
        shader_engine.delete_shader_programs.assert_called_once()
        self.assertTrue(self.renderer.material_released)

    @patch("components.galaxy_renderer.glDeleteBuffers")
    @patch("components.galaxy_renderer.glDeleteVertexArrays")
    def test_released_renderer_draws_nothing(self, _mock_delete_vaos, _mock_delete_buffers):
        self.renderer.release_geometry()
        with patch.object(self.renderer, "_draw_points") as mock_draw:
            self.renderer.render()
        mock_draw.assert_not_called()

    def test_set_rotation_y(self):
        self.renderer.set_rotation_y(1.5)
        self.assertAlmostEqual(self.renderer.rotation.y, 1.5)


# --------------------------------------------------------------------------------
# RenderingInstance wiring with a mocked window (no real context)
# --------------------------------------------------------------------------------
@unittest.skipIf(RenderingInstance is None, "PyOpenGL/pygame is not available")
class TestRenderingInstanceHeadless(unittest.TestCase):

    def setUp(self):
        config = RendererConfig(show_panel=False, seed=1)
        self.instance = RenderingInstance(config, parameters=GalaxyParameters(count=10))
        self.instance.render_window = MagicMock(window_size=(2, 2))
        self.instance.render_window.read_pixels.return_value = bytes(12)
        self.instance.image_saver = MagicMock()

    def test_screenshot_request_is_consumed(self):
        self.instance.request_screenshot()
        self.assertTrue(self.instance.screenshot_requested)
        self.instance.capture_screenshot()
        self.assertFalse(self.instance.screenshot_requested)
        self.instance.image_saver.save_framebuffer.assert_called_once_with(
            bytes(12), (2, 2), "galaxy_0_particles"
        )

    def test_shutdown_closes_panel_and_window(self):
        window = self.instance.render_window
        panel = MagicMock()
        self.instance.panel = panel
        self.instance.shutdown()
        panel.destroy.assert_called_once()
        window.shutdown.assert_called_once()
        self.assertIsNone(self.instance.render_window)
        self.assertFalse(self.instance.running)


# --------------------------------------------------------------------------------
# GUI tests. Tk needs a display, so they only run where one exists.
# --------------------------------------------------------------------------------
@unittest.skipIf(ParameterPanel is None, "customtkinter is not available")
@unittest.skipIf(sys.platform.startswith("linux") and not os.environ.get("DISPLAY"), "No display available")
class TestParameterPanel(unittest.TestCase):

    def setUp(self):
        import _tkinter

        self.params = GalaxyParameters(count=1000)
        self.commits = []
        self.params.subscribe(self.commits.append)
        self.on_close = MagicMock()
        try:
            self.panel = ParameterPanel(self.params, on_close=self.on_close)
        except _tkinter.TclError as e:
            self.skipTest(f"Tk could not start: {e}")

    def tearDown(self):
        self.panel.destroy()

    def test_slider_release_commits(self):
        self.panel.sliders["count"].set(2000)
        self.panel.show_value("count", 2000)
        self.assertEqual(self.commits, [])
        self.panel.on_slider_release("count")
        self.assertEqual(self.params.count, 2000)
        self.assertEqual(self.commits, [self.params])

    def test_exit_calls_on_close_once(self):
        self.panel.exit_panel()
        self.panel.destroy()
        self.on_close.assert_called_once()
        self.assertTrue(self.panel.closed)


if __name__ == "__main__":
    unittest.main()
