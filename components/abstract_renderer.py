"""
AbstractRenderer Module

This module defines the AbstractRenderer class which provides an abstract
interface for drawing objects into the galaxy scene with OpenGL. It handles
shader initialization, the model transform, camera matrix upload and the
blending/depth state each renderer asks for.

The module also includes helper functions and decorators used by the renderer.
"""

import functools
from abc import ABC, abstractmethod

import glm
from OpenGL.GL import *

from components.renderer_config import BLEND_MODES
from components.shader_engine import ShaderEngine
from config.path_config import shaders_dir


def check_gl_error(context: str, debug_mode: bool):
    """
    Check for OpenGL errors if debug_mode is enabled.

    :param context: A string indicating where in the code the check occurs.
    :param debug_mode: If True, any OpenGL error raises a RuntimeError.
    """
    if debug_mode:
        gl_error = glGetError()
        if gl_error != GL_NO_ERROR:
            raise RuntimeError(f"OpenGL error in {context}: {gl_error}")


def with_gl_render_state(func):
    """
    Decorator to set up blending and depth state, upload the transform and
    camera uniforms, and reset state after a render function call.
    """

    @functools.wraps(func)
    def render_config(self, *args, **kwargs):
        self.shader_engine.use_shader_program()
        check_gl_error("glUseProgram", self.debug_mode)

        # --- Blending ---
        if self.alpha_blending:
            glEnable(GL_BLEND)
            if self.blend_mode == "additive":
                glBlendFunc(GL_SRC_ALPHA, GL_ONE)
            else:
                glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        else:
            glDisable(GL_BLEND)

        # --- Depth Testing / Writing ---
        if self.depth_testing:
            glEnable(GL_DEPTH_TEST)
        else:
            glDisable(GL_DEPTH_TEST)
        glDepthMask(GL_TRUE if self.depth_write else GL_FALSE)
        check_gl_error("Depth state setup", self.debug_mode)

        # --- Transform and camera uniforms ---
        self.apply_transformations()
        self.set_view_projection_matrices()
        check_gl_error("set_view_projection_matrices", self.debug_mode)

        self.set_shader_uniforms()
        check_gl_error("set_shader_uniforms", self.debug_mode)

        # --- Call the decorated render function ---
        result = func(self, *args, **kwargs)
        check_gl_error("render function", self.debug_mode)

        # --- Reset state ---
        glDepthMask(GL_TRUE)
        if self.alpha_blending:
            glDisable(GL_BLEND)
        if self.depth_testing:
            glDisable(GL_DEPTH_TEST)
        check_gl_error("State teardown", self.debug_mode)

        return result

    return render_config


class AbstractRenderer(ABC):
    """
    AbstractRenderer provides a base class for renderers that set up shaders,
    keep a model transform and draw with camera matrices handed in by the
    rendering instance. Concrete subclasses must implement create_buffers()
    and render().
    """

    def __init__(
        self,
        renderer_name,
        shader_names,
        shaders=None,
        shader_base_dir=shaders_dir,
        alpha_blending=False,
        blend_mode="alpha",
        depth_testing=True,
        depth_write=True,
        window_size=(800, 600),
        debug_mode=False,
        **kwargs,
    ):
        if blend_mode not in BLEND_MODES:
            raise ValueError(f"Invalid blend_mode option. Use one of: {', '.join(BLEND_MODES)}.")

        # Identification and basic settings
        self.renderer_name = renderer_name
        self.debug_mode = debug_mode
        self.dynamic_attrs = kwargs

        # Shader configuration
        self.shader_names = shader_names
        self.shaders = shaders or {}
        self.shader_base_dir = shader_base_dir
        self.shader_engine = None

        # View and projection matrices (set per frame by the rendering instance)
        self.view = glm.mat4(1.0)
        self.projection = glm.mat4(1.0)

        # Transformations
        self.translation = glm.vec3(0.0)
        self.rotation = glm.vec3(0.0)
        self.scaling = glm.vec3(1.0)
        self.model_matrix = glm.mat4(1)

        # Render options
        self.alpha_blending = alpha_blending
        self.blend_mode = blend_mode
        self.depth_testing = depth_testing
        self.depth_write = depth_write
        self.window_size = window_size

        # Size of a float in bytes
        self.float_size = 4

        # Buffers
        self.vbos = []
        self.vaos = []

    def setup(self):
        """
        Initialize shaders and buffers.
        """
        self.init_shaders()
        self.create_buffers()

    def init_shaders(self):
        """
        Compile and link the renderer's vertex/fragment program.
        """
        vertex_shader_path = self.shaders.get("vertex", {}).get(self.shader_names.get("vertex"))
        fragment_shader_path = self.shaders.get("fragment", {}).get(self.shader_names.get("fragment"))
        if vertex_shader_path is None or fragment_shader_path is None:
            raise FileNotFoundError(
                f"Shaders {self.shader_names} were not found for renderer '{self.renderer_name}'."
            )
        self.shader_engine = ShaderEngine(
            vertex_shader_path,
            fragment_shader_path,
            shader_base_dir=self.shader_base_dir,
        )

    # --------------------------------------------------------------------------
    # Camera
    # --------------------------------------------------------------------------
    def render_with_custom_camera(self, view_matrix, projection_matrix):
        """
        Render using a custom view and projection matrix.
        :param view_matrix: The view matrix to use.
        :param projection_matrix: The projection matrix to use.
        """
        self.view = view_matrix
        self.projection = projection_matrix
        self.render()

    def set_view_projection_matrices(self):
        """
        Upload the model, view and projection matrices to the shader.
        """
        program = self.shader_engine.shader_program
        glUniformMatrix4fv(glGetUniformLocation(program, "model"), 1, GL_FALSE, glm.value_ptr(self.model_matrix))
        glUniformMatrix4fv(glGetUniformLocation(program, "view"), 1, GL_FALSE, glm.value_ptr(self.view))
        glUniformMatrix4fv(
            glGetUniformLocation(program, "projection"), 1, GL_FALSE, glm.value_ptr(self.projection)
        )

    # --------------------------------------------------------------------------
    # Transformations
    # --------------------------------------------------------------------------
    def translate(self, position):
        """
        Translate the object.
        :param position: A tuple or list of (x, y, z) coordinates.
        """
        self.translation = glm.vec3(*position)
        self.update_model_matrix()

    def rotate_euler(self, angles_deg):
        """
        Set the object's rotation using Euler angles in degrees.
        :param angles_deg: Tuple of (xDeg, yDeg, zDeg).
        """
        xDeg, yDeg, zDeg = angles_deg
        self.rotation = glm.vec3(glm.radians(xDeg), glm.radians(yDeg), glm.radians(zDeg))
        self.update_model_matrix()

    def set_rotation_y(self, angle):
        """
        Set the rotation around the Y-axis in radians, keeping X and Z.
        """
        self.rotation.y = angle
        self.update_model_matrix()

    def scale(self, scale):
        """
        Scale the object.
        :param scale: Tuple or list representing scaling factors in (x, y, z).
        """
        self.scaling = glm.vec3(*scale)
        self.update_model_matrix()

    def update_model_matrix(self):
        """
        Recompute the model matrix from translation, rotation and scaling.
        """
        matrix = glm.translate(glm.mat4(1), self.translation)
        matrix = glm.rotate(matrix, self.rotation.x, glm.vec3(1, 0, 0))
        matrix = glm.rotate(matrix, self.rotation.y, glm.vec3(0, 1, 0))
        matrix = glm.rotate(matrix, self.rotation.z, glm.vec3(0, 0, 1))
        self.model_matrix = glm.scale(matrix, self.scaling)

    def apply_transformations(self):
        """
        Hook for subclasses that animate their model matrix before drawing.
        """
        pass

    def set_shader_uniforms(self):
        """
        Hook for subclasses to upload their own uniforms.
        """
        pass

    # --------------------------------------------------------------------------
    # Cleanup
    # --------------------------------------------------------------------------
    def shutdown(self):
        """
        Clean up OpenGL resources (VAOs, VBOs, shader programs).
        """
        if self.vaos:
            glDeleteVertexArrays(len(self.vaos), self.vaos)
            self.vaos = []
        if self.vbos:
            glDeleteBuffers(len(self.vbos), self.vbos)
            self.vbos = []
        if self.shader_engine is not None:
            self.shader_engine.delete_shader_programs()

    @abstractmethod
    def create_buffers(self):
        """
        Abstract method: subclasses should implement creation of VBOs/VAOs.
        """
        pass

    @abstractmethod
    def render(self):
        """
        Abstract method: subclasses should implement the actual render logic.
        """
        pass
