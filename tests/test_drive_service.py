import pytest

from services.drive_service import find_file_in_folder_by_name, make_uploader, upload_image


class FakeRequest:
    def __init__(self, result):
        self.result = result

    def execute(self):
        return self.result


class FakeFiles:
    def __init__(self, drive):
        self.drive = drive

    def list(self, **kwargs):
        self.drive.queries.append(kwargs["q"])
        return FakeRequest({"files": self.drive.existing})

    def create(self, **kwargs):
        self.drive.created.append(kwargs["body"])
        return FakeRequest({"id": "new-file"})

    def update(self, **kwargs):
        self.drive.updated.append(kwargs["fileId"])
        return FakeRequest({"id": kwargs["fileId"]})


class FakePermissions:
    def __init__(self, drive):
        self.drive = drive

    def create(self, **kwargs):
        self.drive.shared.append(kwargs["fileId"])
        return FakeRequest({"id": "perm"})


class FakeDrive:
    def __init__(self, existing=None):
        self.existing = existing or []
        self.queries = []
        self.created = []
        self.updated = []
        self.shared = []

    def files(self):
        return FakeFiles(self)

    def permissions(self):
        return FakePermissions(self)


def test_filename_quotes_are_escaped_in_query():
    drive = FakeDrive()

    find_file_in_folder_by_name(drive, "folder", "design-O'Neil-front.png")

    assert drive.queries == [
        "name = 'design-O\\'Neil-front.png' and 'folder' in parents and trashed = false"
    ]


def test_upload_creates_new_file_and_shares_it():
    drive = FakeDrive()

    url = upload_image(drive, "folder", "slip.png", "image/png", b"data")

    assert url == "https://drive.google.com/uc?id=new-file&export=view"
    assert drive.created == [{"name": "slip.png", "parents": ["folder"]}]
    assert drive.queries == []
    assert drive.shared == ["new-file"]


def test_overwrite_replaces_existing_file():
    drive = FakeDrive(existing=[{"id": "old-file", "name": "design-1-front.png"}])

    url = make_uploader(drive, "folder", overwrite=True)("design-1-front.png", "image/png", b"data")

    assert url == "https://drive.google.com/uc?id=old-file&export=view"
    assert drive.updated == ["old-file"]
    assert drive.created == []


def test_uploader_requires_folder():
    with pytest.raises(RuntimeError):
        make_uploader(FakeDrive(), "")
