"""
Image loading and debug-image persistence

Optional side collaborators of the pipeline:
- Load an image file as an RGB/RGBA array (OpenCV)
- Convert an array into the (buffer, width, height, layout) contract
- Write intermediate images for visual inspection
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Tuple

from ..core.exceptions import ImageLoadError


class ImageLoader:
    """
    Image loading with error handling

    Supports:
    - Single image loading in RGB or RGBA
    - Conversion to the flat pixel-buffer contract
    - Format checks
    """

    VALID_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.webp'}

    @staticmethod
    def load(image_path: str, color_space: str = 'rgb') -> np.ndarray:
        """
        Load a single image with error handling

        Args:
            image_path: Path to image file
            color_space: 'rgb' (default), 'rgba' or 'bgr' (OpenCV native)

        Returns:
            Image array (H, W, 3) or (H, W, 4) for 'rgba'

        Raises:
            ImageLoadError: If image cannot be loaded

        Example:
            >>> from topdown.io import ImageLoader
            >>> img = ImageLoader.load("frame_001.jpg")
            >>> print(img.shape)
            (640, 480, 3)
        """
        path = Path(image_path)

        if not path.exists():
            raise ImageLoadError(f"Image file not found: {image_path}")

        image = cv2.imread(str(path), cv2.IMREAD_COLOR)

        if image is None:
            raise ImageLoadError(
                f"Failed to read image (corrupted or unsupported format): {image_path}"
            )

        color_space = color_space.lower()
        if color_space == 'rgb':
            image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        elif color_space == 'rgba':
            image = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        elif color_space != 'bgr':
            raise ImageLoadError(f"Unsupported color space: {color_space}")

        return image

    @staticmethod
    def to_pixel_buffer(image: np.ndarray) -> Tuple[bytes, int, int, str]:
        """
        Flatten an (H, W, 3|4) uint8 RGB(A) image into the buffer contract

        Returns:
            (pixel_buffer, width, height, channel_layout)

        Example:
            >>> buf, w, h, layout = ImageLoader.to_pixel_buffer(img)
            >>> sample = preprocess(buf, w, h, layout, bbox)
        """
        if image.ndim != 3 or image.shape[2] not in (3, 4) or image.dtype != np.uint8:
            raise ImageLoadError(
                f"Expected uint8 (H, W, 3|4) image, got {image.dtype} {image.shape}"
            )
        height, width, channels = image.shape
        layout = 'rgba' if channels == 4 else 'rgb'
        return np.ascontiguousarray(image).tobytes(), width, height, layout

    @staticmethod
    def validate_format(image_path: str) -> bool:
        """
        Check if file has a supported image extension
        """
        return Path(image_path).suffix.lower() in ImageLoader.VALID_EXTENSIONS


def save_debug_image(image: np.ndarray, output_path: str, jpeg_quality: int = 90) -> Path:
    """
    Write an RGB image (e.g. OutputMode.IMAGE output) to disk

    Args:
        image: (H, W, 3) uint8 RGB image
        output_path: Destination file; parent directories are created
        jpeg_quality: JPEG quality when writing .jpg/.jpeg

    Returns:
        Path written

    Raises:
        ImageLoadError: If OpenCV cannot encode or write the file
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    params = []
    if path.suffix.lower() in ('.jpg', '.jpeg'):
        params = [cv2.IMWRITE_JPEG_QUALITY, jpeg_quality]

    if not cv2.imwrite(str(path), cv2.cvtColor(image, cv2.COLOR_RGB2BGR), params):
        raise ImageLoadError(f"Failed to write image: {path}")
    return path
