"""
Fake Visio COM objects shared by the tests.
"""
import pytest

from visio_stencil.config import ENV_FIELDS, ENV_PREFIX
from visio_stencil.visio_session import VIS_ADD_HIDDEN


class FakeCell:
    def __init__(self, result=0.0):
        self.FormulaU = None
        self.ResultIU = result


class FakeShape:
    def __init__(self, width=2.0, height=1.0):
        self.cells = {"Width": FakeCell(width), "Height": FakeCell(height)}
        self.sections = set()
        self.named_rows = []
        self.src_cells = {}
        self.Text = ""
        self.deleted = False

    def CellsU(self, name):
        return self.cells.setdefault(name, FakeCell())

    def SectionExists(self, section, exists_as_local):
        return section in self.sections

    def AddSection(self, section):
        self.sections.add(section)
        return section

    def AddNamedRow(self, section, name, tag):
        self.named_rows.append((section, name, tag))
        return len(self.named_rows) - 1

    def CellsSRC(self, section, row, column):
        return self.src_cells.setdefault((section, row, column), FakeCell())

    def Delete(self):
        self.deleted = True


class FakePage:
    def __init__(self, shape_size=(2.0, 1.0)):
        self.shape_size = shape_size
        self.imported = []
        self.fail_on = None

    def Import(self, path):
        if self.fail_on and path.endswith(self.fail_on):
            raise RuntimeError(f"import failed: {path}")
        shape = FakeShape(*self.shape_size)
        self.imported.append((path, shape))
        return shape


class FakePages:
    def __init__(self, page):
        self.page = page

    def Item(self, index):
        return self.page


class FakeMaster:
    def __init__(self, shape=None, name=""):
        self.shape = shape
        self.Name = name
        self.NameU = name


class FakeMasters:
    def __init__(self, names=()):
        self.items = [FakeMaster(name=n) for n in names]

    def Drop(self, obj, x, y):
        master = FakeMaster(obj)
        self.items.append(master)
        return master

    def __iter__(self):
        return iter(self.items)


class FakeDocument:
    def __init__(self, full_name="", masters=(), page=None):
        self.FullName = full_name
        self.Masters = FakeMasters(masters)
        self.Pages = FakePages(page)
        self.Saved = False
        self.closed = False
        self.saved_as = None
        self.saved_in_place = False

    def SaveAs(self, path):
        self.saved_as = path

    def Save(self):
        self.saved_in_place = True

    def Close(self):
        self.closed = True


class FakeDocuments:
    def __init__(self, page):
        self.page = page
        self.calls = []
        self.stencils = []
        self.drawings = []
        self.existing_masters = {}

    def AddEx(self, name, measurement, flags):
        self.calls.append(("AddEx", name, measurement, flags))
        if flags == VIS_ADD_HIDDEN:
            doc = FakeDocument(page=self.page)
            self.drawings.append(doc)
        else:
            doc = FakeDocument()
            self.stencils.append(doc)
        return doc

    def Add(self, template):
        self.calls.append(("Add", template))
        doc = FakeDocument()
        self.stencils.append(doc)
        return doc

    def OpenEx(self, path, flags):
        self.calls.append(("OpenEx", path, flags))
        doc = FakeDocument(full_name=path, masters=self.existing_masters.get(path, ()))
        self.stencils.append(doc)
        return doc


class FakeApp:
    def __init__(self, page=None):
        self.page = page or FakePage()
        self.Documents = FakeDocuments(self.page)
        self.Visible = True
        self.AlertResponse = 0
        self.quit = False

    def Quit(self):
        self.quit = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for suffix in ENV_FIELDS:
        monkeypatch.delenv(ENV_PREFIX + suffix, raising=False)


@pytest.fixture
def fake_app():
    return FakeApp()


@pytest.fixture
def image_folder(tmp_path):
    folder = tmp_path / "icons"
    folder.mkdir()
    for name in ("aws-lambda.svg", "router_core.png", "notes.txt"):
        (folder / name).write_text("x")
    return folder


@pytest.fixture
def points_file(tmp_path):
    path = tmp_path / "points.json"
    path.write_text(
        '{"connection_points": ['
        '{"name": "Top", "x": 0.5, "y": 1.0},'
        '{"name": "Bottom", "x": 0.5, "y": 0}'
        ']}',
        encoding="utf-8",
    )
    return path
