import threading
import time

import psutil
import pygame
from GPUtil import getGPUs
from OpenGL.GL import *


class RendererWindow:
    """
    RendererWindow manages the Pygame-based OpenGL window the galaxy is drawn in:
    - Window creation (OpenGL 3.3 core context, optional fullscreen, vsync, MSAA)
    - Event handling (closing, ESC key)
    - FPS, particle count and CPU/GPU usage in the title bar
    - Background thread to monitor CPU/GPU usage
    """

    def __init__(
            self,
            window_size=(800, 600),
            title="Galaxy",
            msaa_level=4,
            vsync_enabled=True,
            fullscreen=False,
            background_color=(0.0, 0.0, 0.0),
    ):
        """
        Initialize the window parameters, prepare Pygame, and start the system usage monitoring thread.

        Args:
            window_size (tuple): (width, height) of the window.
            title (str): The title to display in the window bar.
            msaa_level (int): Level of MSAA anti-aliasing (0 disables it).
            vsync_enabled (bool): Whether to enable VSync (if supported).
            fullscreen (bool): If True, creates a fullscreen window.
            background_color (tuple): RGB clear color.
        """
        # ----------------------------------------------------------------------
        # Window and Rendering Config
        # ----------------------------------------------------------------------
        self.window_size = window_size
        self.title = title
        self.msaa_level = msaa_level
        self.vsync_enabled = vsync_enabled
        self.fullscreen = fullscreen
        self.background_color = background_color

        # ----------------------------------------------------------------------
        # Internal State
        # ----------------------------------------------------------------------
        self.clock = None
        self.should_close = False

        # ----------------------------------------------------------------------
        # CPU & GPU Usage Monitoring
        # ----------------------------------------------------------------------
        self.cpu_usage = 0.0
        self.gpu_usage = 0.0
        self.usage_lock = threading.Lock()
        self.monitoring_event = threading.Event()

        self.setup_pygame()
        self.clock = pygame.time.Clock()

        self.monitoring_thread = threading.Thread(target=self.monitor_system_usage, daemon=True)
        self.monitoring_thread.start()

    # --------------------------------------------------------------------------
    # Pygame and OpenGL Setup
    # --------------------------------------------------------------------------
    def setup_pygame(self):
        """
        Initialize Pygame, configure OpenGL attributes, and open the display.
        """
        pygame.init()
        self.configure_opengl_attributes()

        if self.fullscreen:
            desktop_info = pygame.display.Info()
            self.window_size = (desktop_info.current_w, desktop_info.current_h)

        display_flags = pygame.DOUBLEBUF | pygame.OPENGL
        if self.fullscreen:
            display_flags |= pygame.FULLSCREEN

        pygame.display.set_mode(self.window_size, display_flags, vsync=1 if self.vsync_enabled else 0)
        pygame.display.set_caption(self.title)

        if self.msaa_level > 0:
            glEnable(GL_MULTISAMPLE)
        glClearColor(*self.background_color, 1.0)
        glViewport(0, 0, self.window_size[0], self.window_size[1])

    def configure_opengl_attributes(self):
        """
        Request a 3.3 core profile context and configure multisampling.
        """
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MAJOR_VERSION, 3)
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MINOR_VERSION, 3)
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_PROFILE_MASK, pygame.GL_CONTEXT_PROFILE_CORE)
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_FORWARD_COMPATIBLE_FLAG, True)
        if self.msaa_level > 0:
            pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLEBUFFERS, 1)
            pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLESAMPLES, self.msaa_level)

    # --------------------------------------------------------------------------
    # System Usage Monitoring (Background Thread)
    # --------------------------------------------------------------------------
    def monitor_system_usage(self):
        """
        Continuously monitor CPU and GPU usage in a background thread
        and update shared usage variables.
        """
        while not self.monitoring_event.is_set():
            cpu = psutil.cpu_percent(interval=None)

            try:
                gpus = getGPUs()
                gpu = sum(gpu.load * 100 for gpu in gpus) if gpus else 0.0
            except Exception as e:
                print(f"Error retrieving GPU usage: {e}")
                gpu = 0.0

            with self.usage_lock:
                self.cpu_usage = cpu
                self.gpu_usage = gpu

            self.monitoring_event.wait(1.0)

    # --------------------------------------------------------------------------
    # Window Title and FPS
    # --------------------------------------------------------------------------
    def draw_stats_in_title(self, fps, particle_count=None):
        """
        Update the window title with FPS, particle count, CPU usage, and GPU usage.

        Args:
            fps (float): Current frames per second.
            particle_count (int, optional): Particles in the active galaxy.
        """
        with self.usage_lock:
            cpu = self.cpu_usage
            gpu = self.gpu_usage

        particles = f" | Particles: {particle_count:,}" if particle_count is not None else ""
        new_title = f"{self.title} - FPS: {fps:.2f}{particles} | CPU: {cpu:.1f}% | GPU: {gpu:.1f}%"
        pygame.display.set_caption(new_title)

    # --------------------------------------------------------------------------
    # Event Handling and Display
    # --------------------------------------------------------------------------
    def handle_events(self):
        """
        Process incoming Pygame events.

        Returns:
            bool: True if the window should close, False otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.should_close = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.should_close = True

        return self.should_close

    def clear(self):
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

    def display_flip(self):
        """
        Swap the front and back buffers to display the newly rendered frame.
        """
        pygame.display.flip()

    def read_pixels(self):
        """
        Read the back buffer as raw RGB bytes (bottom row first).
        """
        glPixelStorei(GL_PACK_ALIGNMENT, 1)
        return glReadPixels(0, 0, self.window_size[0], self.window_size[1], GL_RGB, GL_UNSIGNED_BYTE)

    # --------------------------------------------------------------------------
    # Shutdown and Cleanup
    # --------------------------------------------------------------------------
    def shutdown(self):
        """
        Stop monitoring, wait for the thread to finish, and quit Pygame.
        """
        self.monitoring_event.set()
        self.monitoring_thread.join()
        pygame.quit()
