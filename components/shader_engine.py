import os

from OpenGL.GL import *


class ShaderEngine:
    """
    ShaderEngine compiles and links the vertex/fragment program used by a renderer.
    It handles #include directives, searching the including file's directory first
    and then a shared 'common' GLSL include directory.
    """
    def __init__(
        self,
        vertex_shader_path,
        fragment_shader_path,
        shader_base_dir="shaders",
        common_dir_name="common",
    ):
        """
        Initialize the ShaderEngine and build the program.

        Args:
            vertex_shader_path (str): Path (absolute or relative to `shader_base_dir`) to the vertex shader.
            fragment_shader_path (str): Path to the fragment shader.
            shader_base_dir (str): Base directory for all shader files.
            common_dir_name (str): Subdirectory for common GLSL includes.
        """
        self.shader_base_dir = shader_base_dir
        self.common_dir_name = common_dir_name
        self.shader_program = self.create_shader_program(vertex_shader_path, fragment_shader_path)

    # --------------------------------------------------------------------------
    # Program Lifetime
    # --------------------------------------------------------------------------
    def use_shader_program(self):
        """Activate the vertex/fragment shader program."""
        if self.shader_program:
            glUseProgram(self.shader_program)

    def delete_shader_programs(self):
        """
        Delete the shader program to free OpenGL resources. Safe to call twice.
        """
        if self.shader_program:
            glDeleteProgram(self.shader_program)
            self.shader_program = None

    # --------------------------------------------------------------------------
    # Creation of Shader Programs
    # --------------------------------------------------------------------------
    def create_shader_program(self, vertex_shader_path, fragment_shader_path):
        """
        Compile both stages and link them into a program.
        """
        shaders = [
            self._create_and_compile_shader(vertex_shader_path, GL_VERTEX_SHADER),
            self._create_and_compile_shader(fragment_shader_path, GL_FRAGMENT_SHADER),
        ]
        try:
            return self._link_shader_program(shaders)
        finally:
            for shader in shaders:
                glDeleteShader(shader)

    # --------------------------------------------------------------------------
    # Internal Utilities for Loading and Compiling Shaders
    # --------------------------------------------------------------------------
    def _create_and_compile_shader(self, shader_path, shader_type):
        shader_source = self._load_shader_code(shader_path)
        return self._compile_shader(shader_source, shader_type)

    def _load_shader_code(self, shader_file):
        """
        Load shader code from file, then process #include directives.
        """
        full_path = os.path.join(self.shader_base_dir, shader_file)
        if not os.path.isfile(full_path):
            raise FileNotFoundError(f"Shader file not found: {full_path}")

        with open(full_path, "r", encoding="utf-8") as file:
            source = file.read()

        return self._process_includes(source, os.path.dirname(full_path))

    def _resolve_include(self, include_filename, current_dir):
        candidates = (
            os.path.join(current_dir, include_filename),
            os.path.join(self.shader_base_dir, self.common_dir_name, include_filename),
        )
        for candidate in candidates:
            if os.path.isfile(candidate):
                return candidate
        raise FileNotFoundError(
            "Included shader file not found in either:\n  " + "\n  ".join(candidates)
        )

    def _process_includes(self, source, current_dir):
        """
        Recursively replace #include "filename" lines with the file contents.
        """
        processed_lines = []

        for line in source.split("\n"):
            line_stripped = line.strip()
            if not line_stripped.startswith("#include"):
                processed_lines.append(line)
                continue

            start_idx = line_stripped.find('"')
            end_idx = line_stripped.find('"', start_idx + 1)
            if start_idx == -1 or end_idx == -1:
                raise RuntimeError('Malformed #include directive. Must be #include "filename"')

            use_path = self._resolve_include(line_stripped[start_idx + 1:end_idx], current_dir)
            with open(use_path, "r", encoding="utf-8") as inc_file:
                inc_source = inc_file.read()
            processed_lines.append(self._process_includes(inc_source, os.path.dirname(use_path)))

        return "\n".join(processed_lines)

    def _compile_shader(self, source, shader_type):
        """
        Compile the GLSL source for a vertex or fragment stage.
        """
        shader = glCreateShader(shader_type)
        glShaderSource(shader, source)
        glCompileShader(shader)

        if not glGetShaderiv(shader, GL_COMPILE_STATUS):
            log = glGetShaderInfoLog(shader)
            shader_type_str = "vertex" if shader_type == GL_VERTEX_SHADER else "fragment"
            glDeleteShader(shader)
            raise RuntimeError(f"Error compiling {shader_type_str} shader: {log.decode()}")

        return shader

    def _link_shader_program(self, shaders):
        shader_program = glCreateProgram()
        for shader in shaders:
            glAttachShader(shader_program, shader)

        glLinkProgram(shader_program)

        if not glGetProgramiv(shader_program, GL_LINK_STATUS):
            log = glGetProgramInfoLog(shader_program)
            glDeleteProgram(shader_program)
            raise RuntimeError(f"Error linking shader program: {log.decode()}")

        return shader_program
