# ------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------
import ctypes

import numpy as np
from OpenGL.GL import *

from components.abstract_renderer import AbstractRenderer, with_gl_render_state


# ------------------------------------------------------------------------------
# GalaxyRenderer Class
# ------------------------------------------------------------------------------
class GalaxyRenderer(AbstractRenderer):
    """
    Draws one generated galaxy as GL_POINTS.

    The renderer owns a VAO with two VBOs: positions at attribute 0 and colors
    at attribute 1. Its geometry (VAO/VBOs) and material (shader program) are
    released separately so the scene binder can dispose of them before the
    next galaxy is bound.
    """

    POSITION_LOCATION = 0
    COLOR_LOCATION = 1

    # --------------------------------------------------------------------------
    # Initialization
    # --------------------------------------------------------------------------
    def __init__(
        self,
        renderer_name,
        buffers,
        particle_size=0.01,
        size_attenuation=True,
        particle_smooth_edges=False,
        shader_names=None,
        alpha_blending=True,
        blend_mode="additive",
        depth_testing=True,
        depth_write=False,
        **kwargs,
    ):
        """
        Args:
            renderer_name (str): Name of this renderer in the scene.
            buffers (ParticleBuffers): Position/color pair to upload.
            particle_size (float): Point size in world units (pixels if size_attenuation is off).
            size_attenuation (bool): Shrink points with distance from the camera.
            particle_smooth_edges (bool): Draw round, soft-edged points instead of squares.
        """
        super().__init__(
            renderer_name=renderer_name,
            shader_names=shader_names or {"vertex": "galaxy", "fragment": "galaxy"},
            alpha_blending=alpha_blending,
            blend_mode=blend_mode,
            depth_testing=depth_testing,
            depth_write=depth_write,
            **kwargs,
        )
        self.buffers = buffers
        self.particle_count = buffers.count
        self.particle_size = particle_size
        self.size_attenuation = size_attenuation
        self.particle_smooth_edges = particle_smooth_edges

        self.vao = None
        self.position_vbo = None
        self.color_vbo = None
        self.geometry_released = False
        self.material_released = False

    # --------------------------------------------------------------------------
    # Setup Methods
    # --------------------------------------------------------------------------
    def setup(self):
        """
        Compile shaders, upload the buffers and enable shader-controlled point size.
        """
        super().setup()
        glEnable(GL_PROGRAM_POINT_SIZE)

    def create_buffers(self):
        """
        Upload positions and colors into their own static VBOs under one VAO.
        """
        self.shader_engine.use_shader_program()
        self.vao = glGenVertexArrays(1)
        self.position_vbo, self.color_vbo = glGenBuffers(2)
        self.vaos = [self.vao]
        self.vbos = [self.position_vbo, self.color_vbo]

        glBindVertexArray(self.vao)
        self._upload_attribute(self.position_vbo, self.buffers.positions, self.POSITION_LOCATION)
        self._upload_attribute(self.color_vbo, self.buffers.colors, self.COLOR_LOCATION)
        glBindVertexArray(0)
        glBindBuffer(GL_ARRAY_BUFFER, 0)

        if self.debug_mode:
            print(
                f"[{self.renderer_name}] Uploaded {self.particle_count} particles "
                f"({self.buffers.nbytes / 1024:.1f} KiB)"
            )

    def _upload_attribute(self, vbo, data, location):
        glBindBuffer(GL_ARRAY_BUFFER, vbo)
        glBufferData(GL_ARRAY_BUFFER, data.nbytes, np.ascontiguousarray(data, dtype=np.float32), GL_STATIC_DRAW)
        glVertexAttribPointer(location, 3, GL_FLOAT, GL_FALSE, 3 * self.float_size, ctypes.c_void_p(0))
        glEnableVertexAttribArray(location)

    # --------------------------------------------------------------------------
    # Uniforms
    # --------------------------------------------------------------------------
    def set_shader_uniforms(self):
        program = self.shader_engine.shader_program
        glUniform1f(glGetUniformLocation(program, "pointSize"), np.float32(self.particle_size))
        glUniform1f(glGetUniformLocation(program, "viewportHeight"), np.float32(self.window_size[1]))
        glUniform1i(glGetUniformLocation(program, "sizeAttenuation"), int(self.size_attenuation))
        glUniform1i(glGetUniformLocation(program, "smoothEdges"), int(self.particle_smooth_edges))

    # --------------------------------------------------------------------------
    # Rendering
    # --------------------------------------------------------------------------
    def render(self):
        """
        Draw every particle as a point. Released renderers draw nothing.
        """
        if self.geometry_released or self.material_released:
            return
        self._draw_points()

    @with_gl_render_state
    def _draw_points(self):
        glBindVertexArray(self.vao)
        glDrawArrays(GL_POINTS, 0, self.particle_count)
        glBindVertexArray(0)

    # --------------------------------------------------------------------------
    # Resource Release
    # --------------------------------------------------------------------------
    def release_geometry(self):
        """
        Delete the VAO and both VBOs. Calling it again does nothing.
        """
        if self.geometry_released:
            return
        if self.vaos:
            glDeleteVertexArrays(len(self.vaos), self.vaos)
        if self.vbos:
            glDeleteBuffers(len(self.vbos), self.vbos)
        self.vaos = []
        self.vbos = []
        self.vao = self.position_vbo = self.color_vbo = None
        self.buffers = None
        self.geometry_released = True

    def release_material(self):
        """
        Delete the shader program. Calling it again does nothing.
        """
        if self.material_released:
            return
        if self.shader_engine is not None:
            self.shader_engine.delete_shader_programs()
        self.material_released = True

    def shutdown(self):
        self.release_geometry()
        self.release_material()
