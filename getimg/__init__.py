"""Client library and command-line tool for the GetImg image generation API"""

__version__ = "0.1.0"

from getimg.clients import AsyncGetImgClient
from getimg.config import Settings, load_settings
from getimg.exceptions import (
    AuthError,
    DecodeError,
    GetImgError,
    ImageFileError,
    ServiceError,
    TransportError,
)
from getimg.models import (
    ControlNetOptions,
    EditOptions,
    GenerationResult,
    ImageToImageOptions,
    RepaintOptions,
    TextToImageOptions,
)

__all__ = [
    'AsyncGetImgClient',
    'Settings',
    'load_settings',
    'GetImgError',
    'TransportError',
    'ServiceError',
    'AuthError',
    'DecodeError',
    'ImageFileError',
    'GenerationResult',
    'TextToImageOptions',
    'ImageToImageOptions',
    'ControlNetOptions',
    'RepaintOptions',
    'EditOptions',
]
