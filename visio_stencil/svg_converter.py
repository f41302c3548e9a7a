"""
Rasterize SVG files to PNG with Inkscape or rsvg-convert.
"""

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

TOOLS = ("inkscape", "rsvg-convert")


class SvgConverter:
    """Convert SVG images to PNG through an external command-line tool."""

    def __init__(self, tool: str = "auto", export_width: int = 256):
        """Initialize the converter.

        Args:
            tool: "inkscape", "rsvg-convert" or "auto" (first one found on PATH)
            export_width: Width of the exported PNG in pixels
        """
        self.export_width = export_width
        self.tool = self._resolve_tool(tool)

    @staticmethod
    def _resolve_tool(tool: str) -> str:
        if tool == "auto":
            for candidate in TOOLS:
                if shutil.which(candidate):
                    return candidate
            raise RuntimeError("No SVG converter found. Install Inkscape or rsvg-convert and add it to PATH.")
        if tool not in TOOLS:
            raise ValueError(f"Unknown converter {tool!r} (expected one of {', '.join(TOOLS)})")
        if not shutil.which(tool):
            raise RuntimeError(f"{tool} not found. Make sure it is installed and added to PATH.")
        return tool

    def build_command(self, svg_path, png_path) -> List[str]:
        if self.tool == "inkscape":
            return [
                "inkscape",
                str(svg_path),
                "--export-type=png",
                f"--export-filename={png_path}",
                f"--export-width={self.export_width}",
            ]
        return [
            "rsvg-convert",
            "-f", "png",
            "-w", str(self.export_width),
            "-o", str(png_path),
            str(svg_path),
        ]

    def convert(self, svg_path, png_path) -> Path:
        png_path = Path(png_path)
        png_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            subprocess.run(
                self.build_command(svg_path, png_path),
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise RuntimeError(f"{self.tool} failed on {svg_path}: {detail}")
        return png_path

    def convert_folder(self, folder, output_dir: Optional[str] = None) -> List[Path]:
        """Convert every SVG directly inside ``folder``.

        Args:
            folder: Directory holding the SVG files
            output_dir: Where PNGs go (defaults to ``folder/png``)

        Returns:
            Paths of the written PNG files, sorted by name
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise FileNotFoundError(f"SVG folder not found: {folder}")
        output_dir = Path(output_dir) if output_dir else folder / "png"

        converted = []
        for svg_path in sorted(folder.iterdir(), key=lambda p: p.name.lower()):
            if not svg_path.is_file() or svg_path.suffix.lower() != ".svg":
                continue
            png_path = self.convert(svg_path, output_dir / f"{svg_path.stem}.png")
            print(f"      Converted {svg_path.name} -> {png_path}")
            converted.append(png_path)
        return converted
