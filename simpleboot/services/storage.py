"""Image catalog - discovers ISO/IMG files under the images directory"""

import os
from typing import List, Optional

from simpleboot.models import ImageFile
from simpleboot.utils.logger import get_logger
from simpleboot.utils.validators import is_supported_image

LOG = get_logger(__name__)


class ImageCatalog:
    """Lists the images the user has placed in the images directory."""

    def __init__(self, images_dir: str, log_dir: Optional[str] = None):
        self.images_dir = images_dir
        self.log_dir = log_dir

    @classmethod
    def from_config(cls, config) -> 'ImageCatalog':
        return cls(config.images_dir, config.log_dir)

    def ensure_directories(self) -> List[str]:
        """
        Create the images and logs directories if missing.

        Returns:
            List of directories that were created
        """
        created = []
        for directory in (self.images_dir, self.log_dir):
            if directory and not os.path.isdir(directory):
                os.makedirs(directory, exist_ok=True)
                LOG.info(f"Created directory {directory}")
                created.append(directory)
        return created

    def list_images(self) -> List[ImageFile]:
        """
        Images in the directory, sorted by name (case-insensitive).

        Subdirectories are not scanned.
        """
        if not os.path.isdir(self.images_dir):
            LOG.warning(f"Images directory not found: {self.images_dir}")
            return []

        images = []
        for entry in os.scandir(self.images_dir):
            if entry.is_file() and is_supported_image(entry.name):
                images.append(ImageFile(entry.name, entry.path, entry.stat().st_size))
        return sorted(images, key=lambda image: image.name.lower())

    def find_image(self, name: str) -> Optional[ImageFile]:
        """
        Look up an image by file name, or by path when one is given.

        Returns:
            ImageFile, or None if no such image exists
        """
        if os.sep in name:
            if os.path.isfile(name) and is_supported_image(name):
                return ImageFile(os.path.basename(name), os.path.abspath(name),
                                 os.path.getsize(name))
            return None

        for image in self.list_images():
            if image.name == name:
                return image
        return None
