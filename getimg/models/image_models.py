"""Pydantic models for GetImg generation requests and responses"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict


class GenerationRequest(BaseModel):
    """Base model for the request bodies of every generation endpoint"""
    model_config = ConfigDict(frozen=True)

    def to_payload(self) -> Dict[str, Any]:
        """Wire payload; optional fields left unset are omitted, never sent as null"""
        return self.model_dump(exclude_none=True)


class TextToImageRequest(GenerationRequest):
    """Request body for /latent-consistency/text-to-image"""
    prompt: str
    model: str
    negative_prompt: Optional[str] = None
    width: int
    height: int
    steps: int
    output_format: str
    seed: Optional[int] = None


class ImageToImageRequest(GenerationRequest):
    """Request body for /latent-consistency/image-to-image"""
    model: str
    prompt: str
    negative_prompt: Optional[str] = None
    image: str
    strength: Optional[float] = None
    steps: int
    output_format: str
    seed: Optional[int] = None


class ControlNetRequest(GenerationRequest):
    """Request body for /stable-diffusion/controlnet"""
    controlnet: str
    model: str
    prompt: str
    negative_prompt: Optional[str] = None
    image: str
    strength: float
    width: int
    height: int
    steps: int
    guidance: float
    seed: int
    scheduler: str
    output_format: str


class RepaintImageRequest(GenerationRequest):
    """Request body for /stable-diffusion/inpaint"""
    model: str
    prompt: str
    negative_prompt: Optional[str] = None
    image: str
    mask_image: str
    strength: Optional[float] = None
    width: int
    height: int
    steps: int
    guidance: float
    seed: int
    scheduler: str
    output_format: str


class EditImageRequest(GenerationRequest):
    """Request body for /stable-diffusion/instruct"""
    model: str
    prompt: str
    negative_prompt: Optional[str] = None
    image: str
    image_guidance: float
    steps: int
    guidance: float
    seed: int
    scheduler: str
    output_format: str


class ToImageResponse(BaseModel):
    """Response body shared by every generation endpoint"""
    model_config = ConfigDict(extra="ignore")

    image: str
    seed: Optional[int] = None
    cost: Optional[float] = None


class GenerationResult(BaseModel):
    """Decoded result handed back to callers"""
    model_config = ConfigDict(frozen=True)

    image: bytes
    seed: Optional[int] = None
    cost: Optional[float] = None
