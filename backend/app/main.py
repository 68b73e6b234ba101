"""Gradio web interface for Tap the Post."""

from __future__ import annotations

import atexit
import contextlib
import io
import logging
import os
import shutil
import sys
import tempfile
import traceback
import zipfile
from pathlib import Path

from .composition import build_preview
from .config import Config
from .enums import SessionState
from .exceptions import TapThePostError
from .logging_config import setup_logging
from .parser import decode_image
from .session import SliceSession
from .slicer import SliceEngine
from .validators import validate_file_path

logger = logging.getLogger("tapthepost.main")

# Optional Gradio import
try:
    import gradio as gr

    HAS_GRADIO = True
except ImportError:
    HAS_GRADIO = False
    logger.error("Gradio not installed. Run: pip install gradio")

# Temp directory management
_temp_dirs: list[str] = []


def _cleanup_temp_dirs() -> None:
    """Clean up temporary output directories."""
    for d in _temp_dirs:
        with contextlib.suppress(OSError):
            shutil.rmtree(d)
    _temp_dirs.clear()


atexit.register(_cleanup_temp_dirs)


def write_outputs(filenames: list[str], slices: list[bytes], out_dir: str) -> tuple[list[str], str]:
    """Write each slice and a ZIP of all of them into ``out_dir``.

    Returns:
        Tuple of (slice file paths, zip path).
    """
    paths = []
    zip_buffer = io.BytesIO()
    with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in zip(filenames, slices):
            path = Path(out_dir) / name
            path.write_bytes(data)
            paths.append(str(path))
            zf.writestr(name, data)

    zip_path = Path(out_dir) / "tap-the-post-segments.zip"
    zip_path.write_bytes(zip_buffer.getvalue())
    return paths, str(zip_path)


def create_interface(session: SliceSession | None = None) -> object:
    """Create Gradio interface for Tap the Post."""
    session = session or SliceSession(
        SliceEngine(logo_path=os.environ.get("TAPTHEPOST_LOGO") or Config.WATERMARK_LOGO_PATH)
    )

    with gr.Blocks(title="Tap the Post - 4-up slicer", theme=gr.themes.Soft()) as interface:
        gr.Markdown(
            f"""
        # Crop once, post seamlessly.

        Drop a single image and get four slices trimmed for the {Config.GAP_DISPLAY_PX}px
        gap, so your multi-image post stays flush.
        """
        )

        with gr.Row():
            with gr.Column(scale=1):
                file_input = gr.File(
                    label="Choose or drop an image",
                    file_types=["image"],
                    type="filepath",
                )
                slice_btn = gr.Button("Slice Image", variant="primary")
                reset_btn = gr.Button("Start over", size="sm")
                status = gr.Markdown("**Status:** Ready")

            with gr.Column(scale=1):
                preview_image = gr.Image(
                    label=f"Preview ({Config.GAP_DISPLAY_PX}px gap)", type="pil", height=500
                )

            with gr.Column(scale=1):
                gallery = gr.Gallery(label="Slices", columns=2, height=400, object_fit="contain")
                segment_files = gr.File(label="Slices", file_count="multiple")
                download_zip = gr.File(label="Download all 4 (ZIP)")

        def slice_upload(uploaded_file: str) -> tuple:
            if uploaded_file is None:
                return [], None, None, None, "Please upload an image"

            try:
                validate_file_path(uploaded_file)
                data = Path(uploaded_file).read_bytes()
            except (TapThePostError, OSError) as e:
                return [], None, None, None, f"Error: {e}"

            result = session.process(data)
            if result is None:
                if session.state is SessionState.FAILED:
                    return [], None, None, None, f"**Status:** {session.error}"
                return [], None, None, None, "**Status:** Superseded by a newer upload"

            try:
                images = [decode_image(b) for b in result.slices]
                preview = build_preview(images)

                _cleanup_temp_dirs()
                out_dir = tempfile.mkdtemp(prefix="tapthepost-")
                _temp_dirs.append(out_dir)
                paths, zip_path = write_outputs(result.filenames(), result.slices, out_dir)
            except (TapThePostError, OSError) as e:
                traceback.print_exc()
                return [], None, None, None, f"Error: {e}"

            gallery_items = [(img, name) for img, name in zip(images, result.filenames())]
            notes = "".join(f"\n\n_{w}_" for w in result.warnings)
            return (
                gallery_items,
                preview,
                paths,
                zip_path,
                f"**Status:** Sliced into heights {result.plan.heights}{notes}",
            )

        slice_btn.click(
            slice_upload,
            inputs=[file_input],
            outputs=[gallery, preview_image, segment_files, download_zip, status],
        )

        def start_over() -> tuple:
            session.reset()
            _cleanup_temp_dirs()
            return None, [], None, None, None, "**Status:** Ready"

        reset_btn.click(
            start_over,
            inputs=[],
            outputs=[file_input, gallery, preview_image, segment_files, download_zip, status],
        )

    return interface


def main() -> None:
    """Main entry point."""
    setup_logging(os.environ.get("TAPTHEPOST_LOG_LEVEL", "INFO"))

    logger.info("=" * 70)
    logger.info("TAP THE POST - 4-up gap-aware slicer")
    logger.info("=" * 70)

    if not HAS_GRADIO:
        logger.error("Gradio is required. Run: pip install gradio")
        sys.exit(1)

    logger.info("Starting web interface...")

    try:
        interface = create_interface()
        interface.launch(
            server_name="0.0.0.0",
            server_port=7860,
            share=False,
            inbrowser=True,
            show_error=True,
        )
    except Exception as e:
        logger.error("Failed to start: %s", e)
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
