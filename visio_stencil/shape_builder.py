"""
Turn an image file into a stencil master: import, scale, connect, label.
"""

from pathlib import Path
from typing import List, Sequence, Tuple

from .config import ConnectionPoint, LabelStyle, StencilSettings
from .image_files import fit_within

# ShapeSheet indices (numeric, to avoid typelib issues)
VIS_SECTION_CONNECTIONPTS = 7      # visSectionConnectionPts
VIS_TAG_CNNCTPT = 153              # visTagCnnctPt
VIS_CELL_X = 0                     # visCnnctX
VIS_CELL_Y = 1                     # visCnnctY

HORZ_ALIGN_CENTER = 1
CHAR_STYLE_BOLD = 1

# Text block pin formulas per label position: (TxtPinY, TxtLocPinY)
LABEL_POSITIONS = {
    "below": ("Height*0", "TxtHeight*1"),
    "above": ("Height*1", "TxtHeight*0"),
    "center": ("Height*0.5", "TxtHeight*0.5"),
}


class ShapeBuilder:
    """Apply the per-image steps to shapes imported on a scratch page."""

    def __init__(self, page, settings: StencilSettings, connection_points: Sequence[ConnectionPoint] = ()):
        self.page = page
        self.settings = settings
        self.connection_points = list(connection_points)

    def import_image(self, image_path):
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")
        return self.page.Import(str(image_path.resolve()))

    @staticmethod
    def scale_shape(shape, max_dimension: float) -> Tuple[float, float]:
        """Resize the shape so its longer side is ``max_dimension`` inches.

        Returns:
            The new (width, height) in inches
        """
        width = shape.CellsU("Width").ResultIU
        height = shape.CellsU("Height").ResultIU
        new_width, new_height = fit_within(width, height, max_dimension)
        shape.CellsU("Width").ResultIU = new_width
        shape.CellsU("Height").ResultIU = new_height
        shape.CellsU("LockAspect").FormulaU = "1"
        return new_width, new_height

    @staticmethod
    def add_connection_points(shape, points: Sequence[ConnectionPoint]) -> List[int]:
        """Add one named Connection Points row per definition.

        Rows are named so they can be referenced as ``Connections.<name>``.
        """
        if not points:
            return []
        if not shape.SectionExists(VIS_SECTION_CONNECTIONPTS, 0):
            shape.AddSection(VIS_SECTION_CONNECTIONPTS)

        rows = []
        for point in points:
            row = shape.AddNamedRow(VIS_SECTION_CONNECTIONPTS, point.name, VIS_TAG_CNNCTPT)
            x_formula, y_formula = point.formulas()
            shape.CellsSRC(VIS_SECTION_CONNECTIONPTS, row, VIS_CELL_X).FormulaU = x_formula
            shape.CellsSRC(VIS_SECTION_CONNECTIONPTS, row, VIS_CELL_Y).FormulaU = y_formula
            rows.append(row)
        return rows

    @staticmethod
    def style_label(shape, text: str, style: LabelStyle) -> None:
        shape.Text = text

        pin_y, loc_pin_y = LABEL_POSITIONS[style.position]
        formulas = {
            "TxtWidth": "MAX(TEXTWIDTH(TheText),Width)",
            "TxtHeight": "TEXTHEIGHT(TheText,TxtWidth)",
            "TxtPinX": "Width*0.5",
            "TxtPinY": pin_y,
            "TxtLocPinX": "TxtWidth*0.5",
            "TxtLocPinY": loc_pin_y,
            "TxtAngle": "0 deg",
            "Para.HorzAlign": str(HORZ_ALIGN_CENTER),
            "Char.Size": style.font_size,
            "Char.Color": style.color_formula(),
            "Char.Style": str(CHAR_STYLE_BOLD if style.bold else 0),
        }
        if style.font:
            formulas["Char.Font"] = f'FONT("{style.font}")'

        for cell, formula in formulas.items():
            shape.CellsU(cell).FormulaU = formula

    @staticmethod
    def add_master(stencil, shape, name: str):
        """Copy the shape into the stencil as a new master and drop the original."""
        master = stencil.Masters.Drop(shape, 0, 0)
        master.Name = name
        master.NameU = name
        shape.Delete()
        return master

    def build(self, stencil, image_path, name: str, scale_only: bool = False):
        """Run import, scaling and (unless ``scale_only``) connection points and label styling.

        Returns:
            The created master
        """
        shape = self.import_image(image_path)
        self.scale_shape(shape, self.settings.max_dimension)
        if not scale_only:
            self.add_connection_points(shape, self.connection_points)
            self.style_label(shape, name, self.settings.label)
        return self.add_master(stencil, shape, name)
