# utils package initialization

from .codec import encode, decode
from .image_files import load_and_encode_image, save_image

__all__ = ['encode', 'decode', 'load_and_encode_image', 'save_image']
