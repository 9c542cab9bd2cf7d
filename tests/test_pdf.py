"""Tests for headless-browser PDF rendering."""

import shutil

import pytest

from prompt_discipline.core.pdf import PdfRenderError, find_browser, render_pdf

HTML = "<!DOCTYPE html><html><body>report</body></html>"


def fake_browser(temp_dir, body):
    script = temp_dir / "fake-browser"
    script.write_text("#!/bin/sh\n" + body)
    script.chmod(0o755)
    return str(script)


@pytest.fixture
def writing_browser(temp_dir):
    return fake_browser(
        temp_dir,
        'for arg in "$@"; do\n'
        '  case "$arg" in --print-to-pdf=*) echo "%PDF-1.4" > "${arg#--print-to-pdf=}";; esac\n'
        "done\n",
    )


class TestRenderPdf:
    def test_writes_output(self, temp_dir, writing_browser):
        output = temp_dir / "out" / "report.pdf"

        assert render_pdf(HTML, output, browser=writing_browser) == output
        assert output.read_text().startswith("%PDF")
        assert [p.name for p in output.parent.iterdir()] == ["report.pdf"]

    def test_replaces_existing_report(self, temp_dir, writing_browser):
        output = temp_dir / "report.pdf"
        output.write_text("old")

        render_pdf(HTML, output, browser=writing_browser)

        assert output.read_text().startswith("%PDF")

    @pytest.mark.skipif(shutil.which("true") is None, reason="true not available")
    def test_browser_that_writes_nothing_fails_even_with_stale_file(self, temp_dir):
        output = temp_dir / "report.pdf"
        output.write_text("old")

        with pytest.raises(PdfRenderError, match="did not write"):
            render_pdf(HTML, output, browser=shutil.which("true"))

        assert output.read_text() == "old"

    def test_nonzero_exit_reports_stderr(self, temp_dir):
        browser = fake_browser(temp_dir, 'echo "boom" >&2\nexit 3\n')

        with pytest.raises(PdfRenderError, match="boom"):
            render_pdf(HTML, temp_dir / "report.pdf", browser=browser)

    def test_blocked_output_directory(self, temp_dir, writing_browser):
        (temp_dir / "afile").write_text("not a directory")

        with pytest.raises(PdfRenderError):
            render_pdf(HTML, temp_dir / "afile" / "report.pdf", browser=writing_browser)

    def test_missing_executable(self, temp_dir):
        with pytest.raises(PdfRenderError):
            render_pdf(HTML, temp_dir / "report.pdf", browser=str(temp_dir / "no-such-browser"))

    def test_no_browser_found(self, monkeypatch, temp_dir):
        monkeypatch.delenv("PREFLIGHT_BROWSER", raising=False)
        monkeypatch.setattr(shutil, "which", lambda name: None)

        assert find_browser() is None
        with pytest.raises(PdfRenderError, match="no headless browser"):
            render_pdf(HTML, temp_dir / "report.pdf")


def test_configured_browser_wins(monkeypatch):
    monkeypatch.setenv("PREFLIGHT_BROWSER", "/opt/chrome")

    assert find_browser() == "/opt/chrome"
