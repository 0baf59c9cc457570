"""Optional parameters for each generation call.

Every field defaults to None, which means "leave it out of the request".
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class GenerationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextToImageOptions(GenerationOptions):
    """Optional parameters for text-to-image generation"""
    negative_prompt: Optional[str] = Field(None, description="Text describing what the image should not contain")
    seed: Optional[int] = Field(None, description="Seed for reproducible output")


class ImageToImageOptions(GenerationOptions):
    """Optional parameters for image-to-image generation"""
    negative_prompt: Optional[str] = Field(None, description="Text describing what the image should not contain")
    strength: Optional[float] = Field(None, description="How far the output may move away from the source image")


class ControlNetOptions(GenerationOptions):
    """Optional parameters for ControlNet generation"""
    model: Optional[str] = Field(None, description="Overrides the stable-diffusion-v1-5 base model")


class RepaintOptions(GenerationOptions):
    """Optional parameters for inpainting"""
    negative_prompt: Optional[str] = Field(None, description="Text describing what the image should not contain")
    strength: Optional[float] = Field(None, description="How far the painted area may move away from the source")
    model: Optional[str] = Field(None, description="Overrides the stable-diffusion-v1-5-inpainting model")


class EditOptions(GenerationOptions):
    """Optional parameters for instruction-based editing"""
    negative_prompt: Optional[str] = Field(None, description="Text describing what the image should not contain")
    model: Optional[str] = Field(None, description="Overrides the instruct-pix2pix model")
