"""Async client for the GetImg API with Pydantic models"""
import httpx
from typing import Optional, Union
from pydantic import ValidationError

from getimg.config import BASE_URL, CONTROLNET_MODEL, EDIT_MODEL, REPAINT_MODEL
from getimg.exceptions import AuthError, DecodeError, ServiceError, TransportError
from getimg.models.image_models import (
    ControlNetRequest,
    EditImageRequest,
    GenerationRequest,
    GenerationResult,
    ImageToImageRequest,
    RepaintImageRequest,
    TextToImageRequest,
    ToImageResponse,
)
from getimg.models.options import (
    ControlNetOptions,
    EditOptions,
    ImageToImageOptions,
    RepaintOptions,
    TextToImageOptions,
)
from getimg.utils.codec import decode, encode
from getimg.utils.logging_config import get_logger

logger = get_logger(__name__)

# Endpoint paths, relative to the versioned API root
TEXT_TO_IMAGE_PATH = "/latent-consistency/text-to-image"
IMAGE_TO_IMAGE_PATH = "/latent-consistency/image-to-image"
CONTROLNET_PATH = "/stable-diffusion/controlnet"
INPAINT_PATH = "/stable-diffusion/inpaint"
INSTRUCT_PATH = "/stable-diffusion/instruct"

# Raw bytes, or text that is already base64 encoded
ImageData = Union[bytes, bytearray, str]


def _as_base64(image: ImageData) -> str:
    if isinstance(image, (bytes, bytearray)):
        return encode(bytes(image))
    return image


class AsyncGetImgClient:
    """
    Client for the GetImg image generation endpoints.

    One instance holds the API key, the model used by the latent-consistency
    endpoints, and a pooled HTTP client. No state changes between calls, so
    a single instance can serve many sequential or concurrent requests.
    Every call makes exactly one HTTP round trip and is never retried.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_url = base_url.rstrip("/")

        # HTTP client; timeout=None means no client-wide deadline
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the underlying connection pool"""
        await self._client.aclose()

    def __repr__(self):
        return f"{type(self).__name__}(model={self.model!r}, api_url={self.api_url!r})"

    def _get_headers(self):
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _post(
        self,
        path: str,
        request: GenerationRequest,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """Send one request body to path and turn the reply into a GenerationResult"""
        url = f"{self.api_url}{path}"
        payload = request.to_payload()

        # Never log the payload values: they carry image data
        logger.debug(f"📤 POST {path} fields={sorted(payload)}")

        try:
            response = await self._client.post(
                url,
                headers=self._get_headers(),
                json=payload,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"GetImg API timeout on {path}")
            raise TransportError(f"Request to {path} timed out: {e}") from e
        except httpx.RequestError as e:
            logger.warning(f"Connection error on {path}: {e}")
            raise TransportError(f"Request to {path} failed: {e}") from e

        return self._parse_response(path, response)

    def _parse_response(self, path: str, response: httpx.Response) -> GenerationResult:
        status = response.status_code

        if status in (401, 403):
            logger.warning(f"GetImg API rejected credentials ({status}) on {path}")
            raise AuthError("GetImg API rejected the request", status, response.text)

        if not response.is_success:
            logger.warning(f"GetImg API error ({status}) on {path}")
            raise ServiceError("GetImg API request failed", status, response.text)

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {path} is not valid JSON: {e}", status) from e

        if isinstance(body, dict) and body.get("error") is not None:
            logger.warning(f"GetImg API reported an error on {path}")
            raise ServiceError("GetImg API reported an error", status, response.text)

        try:
            parsed = ToImageResponse.model_validate(body)
        except ValidationError as e:
            raise DecodeError(f"Unexpected response shape from {path}: {e}", status) from e

        logger.debug(f"📥 {path} returned seed={parsed.seed} cost={parsed.cost}")

        return GenerationResult(
            image=decode(parsed.image),
            seed=parsed.seed,
            cost=parsed.cost,
        )

    async def generate_image_from_text(
        self,
        prompt: str,
        width: int,
        height: int,
        steps: int,
        output_format: str,
        options: Optional[TextToImageOptions] = None,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """
        Generate an image from a text prompt with the client's model.

        Args:
            prompt: Description of the desired image
            width: Output width in pixels
            height: Output height in pixels
            steps: Number of denoising steps
            output_format: Image format, such as "png" or "jpeg"
            options: Negative prompt and seed, both optional
            timeout: Deadline for this call in seconds

        Returns:
            GenerationResult with the decoded image bytes
        """
        options = options or TextToImageOptions()
        request = TextToImageRequest(
            prompt=prompt,
            model=self.model,
            negative_prompt=options.negative_prompt,
            width=width,
            height=height,
            steps=steps,
            output_format=output_format,
            seed=options.seed,
        )
        return await self._post(TEXT_TO_IMAGE_PATH, request, timeout)

    async def generate_image_from_image(
        self,
        prompt: str,
        image: ImageData,
        steps: int,
        seed: int,
        output_format: str,
        options: Optional[ImageToImageOptions] = None,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """
        Generate an image from a source image and a prompt with the client's model.

        Args:
            prompt: Description of the desired changes
            image: Source image, raw bytes or base64 text
            steps: Number of denoising steps
            seed: Seed for reproducible output
            output_format: Image format, such as "png" or "jpeg"
            options: Negative prompt and strength, both optional
            timeout: Deadline for this call in seconds

        Returns:
            GenerationResult with the decoded image bytes
        """
        options = options or ImageToImageOptions()
        request = ImageToImageRequest(
            model=self.model,
            prompt=prompt,
            negative_prompt=options.negative_prompt,
            image=_as_base64(image),
            strength=options.strength,
            steps=steps,
            output_format=output_format,
            seed=seed,
        )
        return await self._post(IMAGE_TO_IMAGE_PATH, request, timeout)

    async def generate_image_using_controlnet(
        self,
        controlnet: str,
        prompt: str,
        negative_prompt: Optional[str],
        image: ImageData,
        strength: float,
        width: int,
        height: int,
        steps: int,
        guidance: float,
        seed: int,
        scheduler: str,
        output_format: str,
        options: Optional[ControlNetOptions] = None,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """
        Generate an image conditioned on a reference image through ControlNet.

        Uses stable-diffusion-v1-5 unless options.model says otherwise.
        A negative_prompt of None is left out of the request.
        """
        options = options or ControlNetOptions()
        request = ControlNetRequest(
            controlnet=controlnet,
            model=options.model or CONTROLNET_MODEL,
            prompt=prompt,
            negative_prompt=negative_prompt,
            image=_as_base64(image),
            strength=strength,
            width=width,
            height=height,
            steps=steps,
            guidance=guidance,
            seed=seed,
            scheduler=scheduler,
            output_format=output_format,
        )
        return await self._post(CONTROLNET_PATH, request, timeout)

    async def generate_repainted_image(
        self,
        prompt: str,
        image: ImageData,
        mask_image: ImageData,
        width: int,
        height: int,
        steps: int,
        guidance: float,
        seed: int,
        scheduler: str,
        output_format: str,
        options: Optional[RepaintOptions] = None,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """
        Repaint the masked area of an image (inpainting).

        Uses stable-diffusion-v1-5-inpainting unless options.model says otherwise.
        """
        options = options or RepaintOptions()
        request = RepaintImageRequest(
            model=options.model or REPAINT_MODEL,
            prompt=prompt,
            negative_prompt=options.negative_prompt,
            image=_as_base64(image),
            mask_image=_as_base64(mask_image),
            strength=options.strength,
            width=width,
            height=height,
            steps=steps,
            guidance=guidance,
            seed=seed,
            scheduler=scheduler,
            output_format=output_format,
        )
        return await self._post(INPAINT_PATH, request, timeout)

    async def generate_edited_image(
        self,
        prompt: str,
        image: ImageData,
        image_guidance: float,
        steps: int,
        guidance: float,
        seed: int,
        scheduler: str,
        output_format: str,
        options: Optional[EditOptions] = None,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """
        Edit an image following a written instruction.

        Uses instruct-pix2pix unless options.model says otherwise. A higher
        image_guidance keeps the result closer to the source image.
        """
        options = options or EditOptions()
        request = EditImageRequest(
            model=options.model or EDIT_MODEL,
            prompt=prompt,
            negative_prompt=options.negative_prompt,
            image=_as_base64(image),
            image_guidance=image_guidance,
            steps=steps,
            guidance=guidance,
            seed=seed,
            scheduler=scheduler,
            output_format=output_format,
        )
        return await self._post(INSTRUCT_PATH, request, timeout)
