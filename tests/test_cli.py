"""
Tests for the getimg command-line interface
"""

import base64
import contextlib
import functools
import io
import json
import os
import sys
import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx

# Add the project root to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from getimg import cli
from getimg.clients import AsyncGetImgClient
from getimg.utils.image_files import load_and_encode_image, save_image

API_KEY = "cli-secret-key"
CLEAN_ENV = {
    "GETIMG_API_KEY": API_KEY,
    "GETIMG_MODEL": "",
    "GETIMG_BASE_URL": "",
    "GETIMG_TIMEOUT": "",
    "GETIMG_LOG_LEVEL": "",
}


class TestArgumentParsing(unittest.TestCase):
    """Test the argument parser"""

    def setUp(self):
        self.parser = cli.build_parser()

    def test_t2i_arguments(self):
        """Test text-to-image flags are parsed with their types"""
        args = self.parser.parse_args([
            "t2i", "-p", "A colorful sunset", "-w", "512", "-a", "768",
            "-s", "5", "-e", "42", "-o", "png",
        ])
        self.assertEqual(args.command, "t2i")
        self.assertEqual(args.prompt, "A colorful sunset")
        self.assertEqual((args.width, args.height, args.steps, args.seed), (512, 768, 5, 42))
        self.assertIsNone(args.negative_prompt)
        self.assertIsNone(args.output)

    def test_global_and_subcommand_short_flags(self):
        """Test global -a/-m do not clash with the subcommand -a/-m flags"""
        args = self.parser.parse_args([
            "-a", "key", "-m", "my-model",
            "paint", "-p", "city", "-i", "in.png", "-m", "mask.png",
            "-w", "512", "-a", "256", "-s", "50", "-g", "10", "-e", "1",
            "-c", "euler", "-o", "jpeg",
        ])
        self.assertEqual(args.api_key, "key")
        self.assertEqual(args.model, "my-model")
        self.assertEqual(args.mask_image, "mask.png")
        self.assertEqual(args.height, 256)
        self.assertIsNone(args.strength)

    def test_missing_required_flag(self):
        """Test a missing required flag exits with a usage error"""
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                self.parser.parse_args(["edit", "-p", "snow", "-o", "png"])
        self.assertEqual(ctx.exception.code, 2)

    def test_subcommand_required(self):
        """Test running without a subcommand is a usage error"""
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                self.parser.parse_args([])
        self.assertEqual(ctx.exception.code, 2)

    def test_default_output_path(self):
        """Test output names follow the command and format"""
        self.assertEqual(cli.default_output_path("paint", "JPEG"), Path("repainted_image.jpeg"))
        self.assertEqual(cli.default_output_path("edit", "png"), Path("edited_image.png"))
        self.assertEqual(cli.default_output_path("cnet", "webp"), Path("cnet.webp"))


@patch("getimg.config.load_dotenv", lambda *args, **kwargs: False)
class TestMain(unittest.TestCase):
    """Test complete command runs against a mocked API"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dir = Path(self.tmp.name)
        self.image_path = self.dir / "input.png"
        self.image_path.write_bytes(b"\x89PNG-input")
        self.mask_path = self.dir / "mask.png"
        self.mask_path.write_bytes(b"\x00mask")
        self.requests = []

    def _run(self, argv, status=200, body=None):
        """Run main() with a mock transport and return (code, stdout, stderr)"""
        body = body if body is not None else {"image": "QQ==", "seed": 512, "cost": 0.002}

        def handler(request):
            self.requests.append(request)
            return httpx.Response(status, json=body)

        factory = functools.partial(AsyncGetImgClient, transport=httpx.MockTransport(handler))
        stdout, stderr = io.StringIO(), io.StringIO()

        with patch.dict(os.environ, CLEAN_ENV), \
                patch("getimg.cli.AsyncGetImgClient", factory), \
                contextlib.redirect_stdout(stdout), \
                contextlib.redirect_stderr(stderr):
            code = cli.main(argv)

        return code, stdout.getvalue(), stderr.getvalue()

    def _payload(self, index=0):
        return json.loads(self.requests[index].content)

    def test_t2i_success(self):
        """Test a successful run saves the image and exits 0"""
        output = self.dir / "out.png"
        code, out, err = self._run([
            "-m", "custom-lcm", "t2i", "-p", "sunset", "-w", "512", "-a", "512",
            "-s", "5", "-o", "png", "-O", str(output),
        ])

        self.assertEqual(code, 0, err)
        self.assertEqual(output.read_bytes(), b"A")
        self.assertIn("Generating image from text...", out)
        self.assertIn(str(output), out)

        payload = self._payload()
        self.assertEqual(payload["model"], "custom-lcm")
        self.assertNotIn("seed", payload)
        self.assertNotIn("negative_prompt", payload)
        self.assertEqual(self.requests[0].headers["authorization"], f"Bearer {API_KEY}")

    def test_edit_encodes_input_image(self):
        """Test edit sends the input file as base64 with the pinned model"""
        output = self.dir / "edited.png"
        code, out, err = self._run([
            "edit", "-p", "make it snow", "-i", str(self.image_path), "-s", "25",
            "-g", "7.5", "-e", "25", "-y", "1.5", "-o", "png", "-c", "ddim",
            "-n", "blurry", "-O", str(output),
        ])

        self.assertEqual(code, 0, err)
        payload = self._payload()
        self.assertEqual(base64.b64decode(payload["image"]), b"\x89PNG-input")
        self.assertEqual(payload["model"], "instruct-pix2pix")
        self.assertEqual(payload["negative_prompt"], "blurry")
        self.assertEqual(payload["image_guidance"], 1.5)
        self.assertEqual(self.requests[0].url.path, "/v1/stable-diffusion/instruct")

    def test_paint_sends_mask(self):
        """Test paint sends both images and the strength"""
        code, out, err = self._run([
            "paint", "-p", "neon", "-i", str(self.image_path), "-m", str(self.mask_path),
            "-w", "512", "-a", "512", "-s", "50", "-g", "10.0", "-e", "1", "-f", "1",
            "-c", "euler", "-o", "jpeg", "-O", str(self.dir / "painted.jpeg"),
        ])

        self.assertEqual(code, 0, err)
        payload = self._payload()
        self.assertEqual(base64.b64decode(payload["mask_image"]), b"\x00mask")
        self.assertEqual(payload["strength"], 1.0)
        self.assertEqual(payload["model"], "stable-diffusion-v1-5-inpainting")

    def test_i2i_and_cnet(self):
        """Test image-to-image and ControlNet reach their endpoints"""
        code, _, err = self._run([
            "i2i", "-p", "forest", "-i", str(self.image_path), "-s", "6", "-e", "512",
            "-f", "0.5", "-o", "jpeg", "-O", str(self.dir / "i2i.jpeg"),
        ])
        self.assertEqual(code, 0, err)

        code, _, err = self._run([
            "cnet", "-p", "landscape", "-i", str(self.image_path), "-r", "canny-1.1",
            "-f", "1.0", "-w", "512", "-a", "512", "-s", "25", "-g", "7.5", "-e", "512",
            "-c", "lms", "-o", "png", "-O", str(self.dir / "cnet.png"),
        ])
        self.assertEqual(code, 0, err)

        self.assertEqual(self.requests[0].url.path, "/v1/latent-consistency/image-to-image")
        self.assertEqual(self._payload(0)["strength"], 0.5)
        self.assertEqual(self.requests[1].url.path, "/v1/stable-diffusion/controlnet")
        self.assertEqual(self._payload(1)["controlnet"], "canny-1.1")
        self.assertNotIn("negative_prompt", self._payload(1))

    def test_file_io_runs_off_event_loop_thread(self):
        """Test input and output files are handled in worker threads"""
        threads = []

        def record_load(path):
            threads.append(threading.current_thread())
            return load_and_encode_image(path)

        def record_save(data, path):
            threads.append(threading.current_thread())
            return save_image(data, path)

        with patch("getimg.cli.load_and_encode_image", record_load), \
                patch("getimg.cli.save_image", record_save):
            code, out, err = self._run([
                "i2i", "-p", "forest", "-i", str(self.image_path), "-s", "6", "-e", "512",
                "-o", "png", "-O", str(self.dir / "i2i.png"),
            ])

        self.assertEqual(code, 0, err)
        self.assertEqual(len(threads), 2)
        for thread in threads:
            self.assertIsNot(thread, threading.main_thread())
        self.assertEqual((self.dir / "i2i.png").read_bytes(), b"A")

    def test_missing_input_image(self):
        """Test a missing input file fails with its path and makes no request"""
        missing = self.dir / "nope.png"
        code, out, err = self._run([
            "i2i", "-p", "forest", "-i", str(missing), "-s", "6", "-e", "512", "-o", "png",
        ])

        self.assertEqual(code, 1)
        self.assertIn(str(missing), err)
        self.assertEqual(self.requests, [])

    def test_unwritable_output(self):
        """Test an unwritable output path fails with that path"""
        output = self.dir / "no-such-dir" / "out.png"
        code, out, err = self._run([
            "t2i", "-p", "sunset", "-w", "512", "-a", "512", "-s", "5", "-o", "png",
            "-O", str(output),
        ])

        self.assertEqual(code, 1)
        self.assertIn(str(output), err)

    def test_service_error_reported(self):
        """Test an auth failure exits 1 and reports status and body without the key"""
        body = {"error": {"message": f"Bad token Bearer {API_KEY}"}}
        code, out, err = self._run([
            "t2i", "-p", "sunset", "-w", "512", "-a", "512", "-s", "5", "-o", "png",
            "-O", str(self.dir / "out.png"),
        ], status=401, body=body)

        self.assertEqual(code, 1)
        self.assertIn("401", err)
        self.assertIn("Bad token", err)
        self.assertNotIn(API_KEY, err)
        self.assertFalse((self.dir / "out.png").exists())

    def test_invalid_timeout_env(self):
        """Test a bad GETIMG_TIMEOUT is a usage error"""
        with patch.dict(os.environ, dict(CLEAN_ENV, GETIMG_TIMEOUT="later")), \
                contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["t2i", "-p", "x", "-w", "1", "-a", "1", "-s", "1", "-o", "png"])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == '__main__':
    unittest.main()
