"""
Read masters and their connection points back out of a saved .vssx.
"""

import json
import posixpath
import zipfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List

from vsdx import VisioFile

NS = {
    'v': 'http://schemas.microsoft.com/office/visio/2012/main',
    'r': 'http://schemas.openxmlformats.org/officeDocument/2006/relationships',
    'pr': 'http://schemas.openxmlformats.org/package/2006/relationships',
}

MASTERS_XML = 'visio/masters/masters.xml'
MASTERS_RELS = 'visio/masters/_rels/masters.xml.rels'


class StencilInspector:
    """List the masters of a stencil file without starting Visio."""

    def __init__(self, stencil_path: str):
        """Initialize the inspector with a stencil file path.

        Args:
            stencil_path: Path to the .vssx file
        """
        self.stencil_path = Path(stencil_path)
        if not self.stencil_path.exists():
            raise FileNotFoundError(f"Stencil not found: {self.stencil_path}")

    def list_masters(self) -> List[Dict[str, Any]]:
        """List masters with their connection point names.

        Returns:
            List of dictionaries with id, name and connection_points
        """
        try:
            masters = self._masters_from_xml()
        except (zipfile.BadZipFile, KeyError, ET.ParseError) as e:
            print(f"Warning: Could not read masters directly from XML: {e}")
            masters = []

        if not masters:
            masters = self._masters_from_vsdx()
        return masters

    def _masters_from_xml(self) -> List[Dict[str, Any]]:
        masters = []
        with zipfile.ZipFile(self.stencil_path, 'r') as z:
            names = set(z.namelist())
            if MASTERS_XML not in names:
                return masters

            targets = {}
            if MASTERS_RELS in names:
                rels_root = ET.fromstring(z.read(MASTERS_RELS))
                for rel in rels_root.findall('pr:Relationship', NS):
                    targets[rel.get('Id')] = posixpath.normpath(
                        posixpath.join('visio/masters', rel.get('Target', ''))
                    )

            root = ET.fromstring(z.read(MASTERS_XML))
            for master in root.findall('v:Master', NS):
                name = master.get('NameU') or master.get('Name')
                master_id = master.get('ID')
                if not name or not master_id:
                    continue

                points = []
                rel = master.find('v:Rel', NS)
                part = targets.get(rel.get(f"{{{NS['r']}}}id")) if rel is not None else None
                if part and part in names:
                    points = self._connection_point_names(ET.fromstring(z.read(part)))

                masters.append({
                    "id": master_id,
                    "name": name,
                    "connection_points": points,
                })
        return masters

    @staticmethod
    def _connection_point_names(master_root: ET.Element) -> List[str]:
        """Names of the Connection section rows of the master's top-level shapes."""
        names = []
        for shape in master_root.findall('v:Shapes/v:Shape', NS):
            for section in shape.findall("v:Section[@N='Connection']", NS):
                for i, row in enumerate(section.findall('v:Row', NS), start=1):
                    names.append(row.get('N') or f"Row_{row.get('IX', i)}")
        return names

    def _masters_from_vsdx(self) -> List[Dict[str, Any]]:
        masters = []
        try:
            with VisioFile(str(self.stencil_path)) as visio_file:
                for page in visio_file.master_pages:
                    masters.append({
                        "id": page.page_id,
                        "name": page.name,
                        "connection_points": self._connection_point_names(page.xml.getroot()),
                    })
        except Exception as e:
            print(f"Warning: Could not read masters via vsdx lib: {e}")
        return masters

    def to_json(self, output_path: str) -> None:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump({"masters": self.list_masters()}, f, indent=2, ensure_ascii=False)
