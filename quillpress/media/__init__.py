"""Image handling helpers."""

from .image_processing import image_pixel_size, image_size_emu, prepare_image

__all__ = ["image_pixel_size", "image_size_emu", "prepare_image"]
