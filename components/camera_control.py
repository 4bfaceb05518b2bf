# ------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------
import glm


# ------------------------------------------------------------------------------
# CameraController Class
# ------------------------------------------------------------------------------
class CameraController:
    """
    CameraController places the camera looking at a fixed target.

    With a single eye position the camera is static. With several, and
    auto_camera enabled, it glides between them over time, wrapping back to the
    first keyframe when loop is set.
    """

    def __init__(
        self,
        camera_positions,
        target=(0.0, 0.0, 0.0),
        fov=75.0,
        near_plane=0.1,
        far_plane=100.0,
        auto_camera=False,
        move_speed=1.0,
        loop=True,
    ):
        """
        Initialize the camera controller.

        Args:
            camera_positions (list): List of (x, y, z) eye positions.
            target (tuple): Point the camera looks at.
            fov (float): Vertical field of view in degrees.
            near_plane (float): Near clipping distance.
            far_plane (float): Far clipping distance.
            auto_camera (bool): Move between camera_positions over time.
            move_speed (float): Keyframe segments travelled per second.
            loop (bool): Whether to loop camera positions.
        """
        if not camera_positions:
            raise ValueError("CameraController needs at least one camera position.")

        self.camera_positions = [glm.vec3(*pos[:3]) for pos in camera_positions]
        self.target = glm.vec3(*target)
        self.up = glm.vec3(0.0, 1.0, 0.0)
        self.fov = fov
        self.near_plane = near_plane
        self.far_plane = far_plane
        self.auto_camera = auto_camera
        self.move_speed = move_speed
        self.loop = loop

        self.current_position_index = 0
        self.next_position_index = 1 if len(self.camera_positions) > 1 else 0
        self.t = 0.0
        self.position = glm.vec3(self.camera_positions[0])

    # --------------------------------------------------------------------------
    # Update and Interpolation Methods
    # --------------------------------------------------------------------------
    def update(self, delta_time):
        """
        Advance along the keyframes (when auto_camera is on).

        Args:
            delta_time (float): Time elapsed since the last update, in seconds.

        Returns:
            glm.vec3: The current eye position.
        """
        if not self.auto_camera or len(self.camera_positions) < 2:
            return self.position

        self.t += self.move_speed * delta_time
        while self.t > 1.0:
            self.t -= 1.0
            self._advance_keyframe()

        self.position = self.interpolate_positions()
        return self.position

    def _advance_keyframe(self):
        last_index = len(self.camera_positions) - 1
        if not self.loop and self.next_position_index == last_index:
            self.current_position_index = last_index
            self.t = 0.0
            return
        self.current_position_index = self.next_position_index
        self.next_position_index = (self.next_position_index + 1) % len(self.camera_positions)

    def interpolate_positions(self):
        """
        Interpolate between the current and next camera positions.

        Returns:
            glm.vec3: Interpolated position.
        """
        current_pos = self.camera_positions[self.current_position_index]
        next_pos = self.camera_positions[self.next_position_index]
        return glm.mix(current_pos, next_pos, self.t)

    # --------------------------------------------------------------------------
    # Matrices
    # --------------------------------------------------------------------------
    def view_matrix(self):
        return glm.lookAt(self.position, self.target, self.up)

    def projection_matrix(self, window_size):
        """
        Perspective projection for a window of the given (width, height).
        """
        width, height = window_size
        aspect_ratio = width / max(height, 1)
        return glm.perspective(glm.radians(self.fov), aspect_ratio, self.near_plane, self.far_plane)
