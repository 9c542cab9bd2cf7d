"""Render HTML reports to PDF through a headless Chromium-family browser."""

import logging
import os
import shutil
import subprocess
import tempfile
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

BROWSER_CANDIDATES = ("chromium", "chromium-browser", "google-chrome", "google-chrome-stable", "chrome")


class PdfRenderError(RuntimeError):
    """Raised when no PDF could be produced."""


def find_browser() -> str | None:
    """Locate a headless-capable browser; ``PREFLIGHT_BROWSER`` wins when set."""
    configured = os.environ.get("PREFLIGHT_BROWSER")
    if configured:
        return configured
    for name in BROWSER_CANDIDATES:
        path = shutil.which(name)
        if path:
            return path
    return None


def render_pdf(html: str, output_path: Path, browser: str | None = None, timeout: int = 60) -> Path:
    """Print ``html`` to ``output_path`` as an A4 PDF.

    The browser writes next to the target and the result is renamed into
    place, so an existing file at ``output_path`` is only replaced by a
    freshly rendered one.

    Raises:
        PdfRenderError: no browser was found, the output location is not
            writable, or the browser failed, timed out or wrote nothing.
    """
    executable = browser or find_browser()
    if not executable:
        raise PdfRenderError("no headless browser found (set PREFLIGHT_BROWSER)")

    output_path = Path(output_path)
    pending = output_path.with_name(f".{output_path.stem}-{uuid.uuid4().hex}.pdf")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(prefix="preflight-pdf-") as tmp:
            source = Path(tmp) / "report.html"
            source.write_text(html, encoding="utf-8")
            command = [
                executable,
                "--headless",
                "--disable-gpu",
                "--no-sandbox",
                "--no-pdf-header-footer",
                f"--print-to-pdf={pending}",
                source.as_uri(),
            ]
            try:
                result = subprocess.run(command, capture_output=True, text=True, timeout=timeout)
            except subprocess.TimeoutExpired as e:
                raise PdfRenderError(f"browser timed out after {timeout}s") from e

        if result.returncode != 0:
            detail = (result.stderr or "").strip().splitlines()
            raise PdfRenderError(detail[-1] if detail else f"browser exited with {result.returncode}")
        if not pending.is_file() or pending.stat().st_size == 0:
            raise PdfRenderError("browser did not write a PDF")

        os.replace(pending, output_path)
    except OSError as e:
        raise PdfRenderError(str(e)) from e
    finally:
        if pending.exists():
            pending.unlink()

    logger.info("Wrote PDF report to %s", output_path)
    return output_path
