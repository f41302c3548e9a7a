"""
Build .vssx stencils from folders of images.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import StencilSettings
from .image_files import label_from_filename, list_images, unique_name
from .shape_builder import ShapeBuilder
from .svg_converter import SvgConverter
from .visio_session import VisioSession


@dataclass
class StencilReport:
    """Outcome of building one stencil."""
    output: Path
    masters: List[str] = field(default_factory=list)
    source_folder: Optional[Path] = None


class StencilBuilder:
    """Run the image -> master pipeline for one folder or a tree of folders."""

    def __init__(self, session: VisioSession, settings: Optional[StencilSettings] = None):
        self.session = session
        self.settings = settings or StencilSettings()
        self.connection_points = self.settings.connection_points()

    def _collect_images(self, folder: Path, png_dir: Optional[Path] = None) -> List[Path]:
        images = list_images(folder, self.settings.extensions)
        if not self.settings.convert_svg:
            return images

        converter = SvgConverter(self.settings.converter, self.settings.png_width)
        png_dir = png_dir or self.settings.png_dir or folder / "png"
        converted = {p.stem.lower(): p for p in converter.convert_folder(folder, png_dir)}

        # Converted PNGs stand in for their source SVGs
        merged = {}
        for image in images:
            merged[image.stem.lower()] = converted.get(image.stem.lower(), image)
        for stem, png in converted.items():
            merged.setdefault(stem, png)
        return sorted(merged.values(), key=lambda p: p.name.lower())

    def build(self, folder, output, scale_only: bool = False, append: bool = False,
              png_dir: Optional[Path] = None) -> StencilReport:
        """Create (or extend) one stencil from the images in ``folder``.

        Args:
            folder: Directory holding the images
            output: Target .vssx path
            scale_only: Skip connection points and label styling
            append: Add masters to the existing stencil at ``output``
            png_dir: Where converted PNGs go (overrides the configured directory)

        Returns:
            Report listing the created master names
        """
        folder = Path(folder)
        output = Path(output)

        images = self._collect_images(folder, png_dir)
        if not images:
            raise ValueError(f"No images with extensions {', '.join(self.settings.extensions)} in {folder}")
        print(f"      Found {len(images)} images in {folder}")

        if append:
            stencil = self.session.open_stencil(output)
        else:
            stencil = self.session.new_stencil(self.settings.stencil_template)

        report = StencilReport(output=output, source_folder=folder)
        try:
            taken = [master.Name for master in stencil.Masters]
            builder = ShapeBuilder(self.session.scratch_page(), self.settings, self.connection_points)

            for image in images:
                name = unique_name(label_from_filename(image, self.settings.label.case), taken)
                builder.build(stencil, image, name, scale_only=scale_only)
                taken.append(name)
                report.masters.append(name)
                print(f"      + {name} ({image.name})")

            report.output = self.session.save_document(stencil, output, overwrite=self.settings.overwrite)
        finally:
            self.session.close_document(stencil)

        return report

    def build_batch(self, root, output_dir, scale_only: bool = False) -> List[StencilReport]:
        """Create one stencil per immediate subfolder of ``root``.

        Subfolders without matching images are skipped.
        """
        root = Path(root)
        if not root.is_dir():
            raise FileNotFoundError(f"Root folder not found: {root}")
        output_dir = Path(output_dir)

        reports = []
        for folder in sorted((p for p in root.iterdir() if p.is_dir()), key=lambda p: p.name.lower()):
            if not list_images(folder, self.settings.extensions):
                print(f"Skipping {folder.name}: no images")
                continue
            print(f"\nStencil {folder.name}")
            png_dir = self.settings.png_dir / folder.name if self.settings.png_dir else None
            reports.append(self.build(
                folder,
                output_dir / f"{folder.name}.vssx",
                scale_only=scale_only,
                png_dir=png_dir,
            ))
        return reports
