"""
Thin wrapper around the Visio COM application.
"""

from pathlib import Path
from typing import Optional

# Visio automation constants (numeric, to avoid depending on a generated typelib)
VIS_MS_DEFAULT = 0          # visMSDefault
VIS_ADD_HIDDEN = 64         # visAddHidden
VIS_ADD_STENCIL = 1024      # visAddStencil
VIS_OPEN_DOCKED = 4         # visOpenDocked
VIS_OPEN_RW = 32            # visOpenRW
ALERT_RESPONSE_OK = 1       # IDOK, answers modal alerts without showing them


class VisioSession:
    """Own a Visio application handle and the scratch drawing used for imports."""

    def __init__(self, prog_id: str = "Visio.Application", visible: bool = False, application=None):
        """Initialize the session.

        Args:
            prog_id: COM ProgID to dispatch ("Visio.Application" or "Visio.InvisibleApp")
            visible: Show the Visio window while working
            application: Already dispatched application object; the session
                will not quit it on close
        """
        self.prog_id = prog_id
        self.visible = visible
        self.app = application
        self._owns_app = application is None
        self._scratch_doc = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def open(self):
        if self.app is None:
            import win32com.client

            print(f"Starting Visio ({self.prog_id})...")
            self.app = win32com.client.Dispatch(self.prog_id)
        self.app.Visible = self.visible
        self.app.AlertResponse = ALERT_RESPONSE_OK
        return self.app

    def close(self) -> None:
        if self._scratch_doc is not None:
            self.close_document(self._scratch_doc)
            self._scratch_doc = None
        if self.app is not None and self._owns_app:
            self.app.Quit()
            self.app = None

    def _require_app(self):
        if self.app is None:
            raise RuntimeError("Visio session is not open")
        return self.app

    def new_stencil(self, template: Optional[str] = None):
        """Create an untitled stencil document.

        Args:
            template: Optional blank .vssx used as the starting point
        """
        app = self._require_app()
        if template:
            template = Path(template)
            if not template.exists():
                raise FileNotFoundError(f"Stencil template not found: {template}")
            return app.Documents.Add(str(template.resolve()))
        return app.Documents.AddEx("", VIS_MS_DEFAULT, VIS_ADD_STENCIL)

    def open_stencil(self, path):
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Stencil not found: {path}")
        return self._require_app().Documents.OpenEx(str(path.resolve()), VIS_OPEN_RW | VIS_OPEN_DOCKED)

    def scratch_page(self):
        """First page of a hidden drawing that receives imported images."""
        if self._scratch_doc is None:
            self._scratch_doc = self._require_app().Documents.AddEx("", VIS_MS_DEFAULT, VIS_ADD_HIDDEN)
        return self._scratch_doc.Pages.Item(1)

    @staticmethod
    def save_document(doc, path, overwrite: bool = False) -> Path:
        """Save a document to ``path``.

        A document that already lives at ``path`` is saved in place. Any
        other existing file is replaced only when ``overwrite`` is set.
        """
        path = Path(path).resolve()
        current = getattr(doc, "FullName", "") or ""
        if current and Path(current).resolve() == path:
            doc.Save()
            return path

        if path.exists():
            if not overwrite:
                raise FileExistsError(f"Output already exists: {path} (use --overwrite)")
            path.unlink()
        path.parent.mkdir(parents=True, exist_ok=True)
        doc.SaveAs(str(path))
        return path

    @staticmethod
    def close_document(doc) -> None:
        # Mark as saved so Visio does not prompt about unsaved changes
        doc.Saved = True
        doc.Close()
