import os
from datetime import datetime
from threading import Lock

from PIL import Image

from config.path_config import screenshots_dir as default_screenshots_dir
from utils.decorators import singleton


@singleton
class ImageSaver:
    """
    Singleton that writes galaxy screenshots into one screenshots directory.

    Each saved image can have a timestamp appended to its filename.
    """

    def __init__(self, screenshots_dir=default_screenshots_dir, timestamp_format="%Y%m%d_%H%M%S"):
        self.screenshots_dir = screenshots_dir
        self.timestamp_format = timestamp_format
        self.lock = Lock()

    def save_image(self, image, filename, timestamped=True):
        """
        Save a PIL Image object to the screenshots directory.

        Parameters:
            image (PIL.Image): The image to be saved.
            filename (str): The base filename for the image.
            timestamped (bool): If True, a timestamp is appended to the filename.

        Returns:
            str: The full path of the written file.
        """
        with self.lock:
            os.makedirs(self.screenshots_dir, exist_ok=True)

            name, ext = os.path.splitext(filename)
            if not ext:
                ext = ".png"
            if timestamped:
                name = f"{name}_{datetime.now().strftime(self.timestamp_format)}"

            file_path = os.path.join(self.screenshots_dir, f"{name}{ext}")
            image.save(file_path)

        print(f"Image saved to {file_path}")
        return file_path

    def save_framebuffer(self, pixel_data, size, filename, timestamped=True):
        """
        Save raw RGB bytes read from OpenGL (bottom row first) as an image.

        Parameters:
            pixel_data (bytes): Output of glReadPixels with GL_RGB/GL_UNSIGNED_BYTE.
            size (tuple): (width, height) of the framebuffer.
            filename (str): The base filename for the image.
        """
        image = Image.frombytes("RGB", tuple(size), pixel_data)
        image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        return self.save_image(image, filename, timestamped=timestamped)
