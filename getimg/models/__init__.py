from .image_models import (
    GenerationRequest,
    TextToImageRequest,
    ImageToImageRequest,
    ControlNetRequest,
    RepaintImageRequest,
    EditImageRequest,
    ToImageResponse,
    GenerationResult,
)
from .options import (
    GenerationOptions,
    TextToImageOptions,
    ImageToImageOptions,
    ControlNetOptions,
    RepaintOptions,
    EditOptions,
)

__all__ = [
    'GenerationRequest',
    'TextToImageRequest',
    'ImageToImageRequest',
    'ControlNetRequest',
    'RepaintImageRequest',
    'EditImageRequest',
    'ToImageResponse',
    'GenerationResult',
    'GenerationOptions',
    'TextToImageOptions',
    'ImageToImageOptions',
    'ControlNetOptions',
    'RepaintOptions',
    'EditOptions',
]
