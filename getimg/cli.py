"""Command-line interface for the GetImg API"""
import argparse
import asyncio
import sys
from pathlib import Path

from getimg import __version__
from getimg.clients import AsyncGetImgClient
from getimg.config import load_settings
from getimg.exceptions import GetImgError
from getimg.models.options import (
    ControlNetOptions,
    EditOptions,
    ImageToImageOptions,
    RepaintOptions,
    TextToImageOptions,
)
from getimg.utils.error_handler import describe_error
from getimg.utils.image_files import load_and_encode_image, save_image
from getimg.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

DESCRIPTION = """\
📸 GetImg: a command-line tool for the GetImg AI image generation API.

Functionalities:
  edit   Generate an edited image from a written instruction.
  paint  Repaint the masked area of an image.
  t2i    Generate an image from text.
  i2i    Generate an image from another image.
  cnet   Generate an image using ControlNet conditioning.
"""

EXAMPLES = """\
examples:
  getimg edit -p "A man riding a horse on Mars." -i image.jpg -s 25 -g 7.5 -e 25 -y 1.5 -o png -c ddim
  getimg paint -p "A cityscape with neon lights." -i image.png -m mask.png -w 512 -a 512 -s 50 -g 10.0 -e 1 -f 1 -c euler -o jpeg
  getimg t2i -p "A colorful sunset over the ocean." -w 512 -a 512 -s 5 -e 42 -o png
  getimg i2i -p "Add a forest in the background." -i t2i.png -s 6 -e 512 -f 0.5 -o jpeg
  getimg cnet -p "A painting of a landscape." -i t2i.png -r canny-1.1 -f 1.0 -w 512 -a 512 -s 25 -g 7.5 -e 512 -c lms -o png

The API key and model are read from GETIMG_API_KEY and GETIMG_MODEL when
--api-key and --model are not given.
"""

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Default output file name, before the format extension
OUTPUT_STEMS = {
    "edit": "edited_image",
    "paint": "repainted_image",
    "t2i": "t2i",
    "i2i": "i2i",
    "cnet": "cnet",
}

PROGRESS_MESSAGES = {
    "edit": "Generating edited image...",
    "paint": "Repainting image...",
    "t2i": "Generating image from text...",
    "i2i": "Generating image from image...",
    "cnet": "Generating image using ControlNet...",
}

SUCCESS_MESSAGES = {
    "edit": "Edited image generated and stored successfully.",
    "paint": "Image repainted and stored successfully.",
    "t2i": "Image generated from text and stored successfully.",
    "i2i": "Image generated from image and stored successfully.",
    "cnet": "ControlNet image generated and stored successfully.",
}


def _add_prompt_args(parser):
    parser.add_argument("-p", "--prompt", required=True,
                        help="Text prompt guiding the generation.")
    parser.add_argument("-n", "--negative-prompt", default=None,
                        help="Text describing what the image should not contain.")


def _add_output_args(parser):
    parser.add_argument("-o", "--output-format", required=True,
                        help="Output image format, for example png or jpeg.")
    parser.add_argument("-O", "--output", type=Path, default=None,
                        help="Where to save the result (default: <command name>.<format>).")


def _add_size_args(parser):
    parser.add_argument("-w", "--width", type=int, required=True, help="Width of the image.")
    parser.add_argument("-a", "--height", type=int, required=True, help="Height of the image.")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its five subcommands."""
    parser = argparse.ArgumentParser(
        prog="getimg",
        description=DESCRIPTION,
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-a", "--api-key", default=None,
                        help="API key for authentication (default: $GETIMG_API_KEY).")
    parser.add_argument("-m", "--model", default=None,
                        help="Model for t2i and i2i (default: $GETIMG_MODEL or lcm-realistic-vision-v5-1).")
    parser.add_argument("--base-url", default=None,
                        help="API root URL (default: $GETIMG_BASE_URL or https://api.getimg.ai/v1).")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Request deadline in seconds (default: $GETIMG_TIMEOUT, or none).")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None,
                        help="Logging verbosity (default: $GETIMG_LOG_LEVEL or WARNING).")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    edit = subparsers.add_parser("edit", help="Generate an edited image.")
    _add_prompt_args(edit)
    edit.add_argument("-i", "--image", required=True, help="Path to the input image file.")
    edit.add_argument("-y", "--image-guidance", type=float, required=True,
                      help="Higher values keep the result closer to the source image.")
    edit.add_argument("-s", "--steps", type=int, required=True, help="Number of steps for image generation.")
    edit.add_argument("-g", "--guidance", type=float, required=True, help="Guidance parameter.")
    edit.add_argument("-e", "--seed", type=int, required=True, help="Seed parameter.")
    edit.add_argument("-c", "--scheduler", required=True, help="Scheduler parameter.")
    _add_output_args(edit)

    paint = subparsers.add_parser("paint", help="Repaint an image.")
    _add_prompt_args(paint)
    paint.add_argument("-i", "--image", required=True, help="Path to the input image file.")
    paint.add_argument("-m", "--mask-image", required=True, help="Path to the mask image file.")
    _add_size_args(paint)
    paint.add_argument("-s", "--steps", type=int, required=True, help="Number of steps for image generation.")
    paint.add_argument("-g", "--guidance", type=float, required=True, help="Guidance parameter.")
    paint.add_argument("-e", "--seed", type=int, required=True, help="Seed parameter.")
    paint.add_argument("-f", "--strength", type=float, default=None, help="Strength parameter for image generation.")
    paint.add_argument("-c", "--scheduler", required=True, help="Scheduler parameter.")
    _add_output_args(paint)

    t2i = subparsers.add_parser("t2i", help="Generate an image from text.")
    _add_prompt_args(t2i)
    _add_size_args(t2i)
    t2i.add_argument("-s", "--steps", type=int, required=True, help="Number of steps for image generation.")
    t2i.add_argument("-e", "--seed", type=int, default=None, help="Seed parameter.")
    _add_output_args(t2i)

    i2i = subparsers.add_parser("i2i", help="Generate an image from another image.")
    _add_prompt_args(i2i)
    i2i.add_argument("-i", "--image", required=True, help="Path to the input image file.")
    i2i.add_argument("-f", "--strength", type=float, default=None, help="Strength parameter for image generation.")
    i2i.add_argument("-s", "--steps", type=int, required=True, help="Number of steps for image generation.")
    i2i.add_argument("-e", "--seed", type=int, required=True, help="Seed parameter.")
    _add_output_args(i2i)

    cnet = subparsers.add_parser("cnet", help="Generate an image using ControlNet conditioning.")
    cnet.add_argument("-r", "--controlnet", required=True, help="ControlNet conditioning type, for example canny-1.1.")
    _add_prompt_args(cnet)
    cnet.add_argument("-i", "--image", required=True, help="Path to the input image file.")
    cnet.add_argument("-f", "--strength", type=float, required=True, help="Strength parameter for image generation.")
    _add_size_args(cnet)
    cnet.add_argument("-s", "--steps", type=int, required=True, help="Number of steps for image generation.")
    cnet.add_argument("-g", "--guidance", type=float, required=True, help="Guidance parameter.")
    cnet.add_argument("-e", "--seed", type=int, required=True, help="Seed parameter.")
    cnet.add_argument("-c", "--scheduler", required=True, help="Scheduler parameter.")
    _add_output_args(cnet)

    return parser


async def _read_image(path):
    # File reads run in a worker thread to keep the event loop free
    return await asyncio.to_thread(load_and_encode_image, path)


async def _edit(client, args):
    return await client.generate_edited_image(
        prompt=args.prompt,
        image=await _read_image(args.image),
        image_guidance=args.image_guidance,
        steps=args.steps,
        guidance=args.guidance,
        seed=args.seed,
        scheduler=args.scheduler,
        output_format=args.output_format,
        options=EditOptions(negative_prompt=args.negative_prompt),
    )


async def _paint(client, args):
    return await client.generate_repainted_image(
        prompt=args.prompt,
        image=await _read_image(args.image),
        mask_image=await _read_image(args.mask_image),
        width=args.width,
        height=args.height,
        steps=args.steps,
        guidance=args.guidance,
        seed=args.seed,
        scheduler=args.scheduler,
        output_format=args.output_format,
        options=RepaintOptions(negative_prompt=args.negative_prompt, strength=args.strength),
    )


async def _t2i(client, args):
    return await client.generate_image_from_text(
        prompt=args.prompt,
        width=args.width,
        height=args.height,
        steps=args.steps,
        output_format=args.output_format,
        options=TextToImageOptions(negative_prompt=args.negative_prompt, seed=args.seed),
    )


async def _i2i(client, args):
    return await client.generate_image_from_image(
        prompt=args.prompt,
        image=await _read_image(args.image),
        steps=args.steps,
        seed=args.seed,
        output_format=args.output_format,
        options=ImageToImageOptions(negative_prompt=args.negative_prompt, strength=args.strength),
    )


async def _cnet(client, args):
    return await client.generate_image_using_controlnet(
        controlnet=args.controlnet,
        prompt=args.prompt,
        negative_prompt=args.negative_prompt,
        image=await _read_image(args.image),
        strength=args.strength,
        width=args.width,
        height=args.height,
        steps=args.steps,
        guidance=args.guidance,
        seed=args.seed,
        scheduler=args.scheduler,
        output_format=args.output_format,
    )


HANDLERS = {
    "edit": _edit,
    "paint": _paint,
    "t2i": _t2i,
    "i2i": _i2i,
    "cnet": _cnet,
}


def default_output_path(command: str, output_format: str) -> Path:
    return Path(f"{OUTPUT_STEMS[command]}.{output_format.lower()}")


async def run_command(args, settings) -> Path:
    """
    Run the selected subcommand against the API and save the result.

    Args:
        args: Parsed command-line arguments
        settings: Resolved Settings

    Returns:
        Path: Where the generated image was written
    """
    async with AsyncGetImgClient(
        settings.api_key,
        settings.model,
        base_url=settings.base_url,
        timeout=settings.timeout,
    ) as client:
        result = await HANDLERS[args.command](client, args)

    if result.seed is not None or result.cost is not None:
        logger.info(f"Generation finished: seed={result.seed} cost={result.cost}")

    output = args.output or default_output_path(args.command, args.output_format)
    return await asyncio.to_thread(save_image, result.image, output)


def main(argv=None) -> int:
    """Entry point for the getimg command. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(
            api_key=args.api_key,
            model=args.model,
            base_url=args.base_url,
            timeout=args.timeout,
            log_level=args.log_level,
        )
    except ValueError as e:
        parser.error(str(e))

    setup_logging(settings.log_level)
    if not settings.api_key:
        logger.warning("⚠️  No API key set. Pass --api-key or set GETIMG_API_KEY.")

    print(PROGRESS_MESSAGES[args.command])
    try:
        path = asyncio.run(run_command(args, settings))
    except GetImgError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"❌ {describe_error(e, secrets=[settings.api_key])}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("🛑 Cancelled by user", file=sys.stderr)
        return 130

    print(f"Image saved as: {path}")
    print(SUCCESS_MESSAGES[args.command])
    return 0


if __name__ == "__main__":
    sys.exit(main())
