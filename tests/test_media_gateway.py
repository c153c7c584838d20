from __future__ import annotations

import pytest
from azure.core.exceptions import ResourceExistsError, ServiceRequestError

from integration.media_gateway import MediaGateway
from services.errors import MediaUploadError

CONN = "DefaultEndpointsProtocol=https;AccountName=acct;AccountKey=a2V5;EndpointSuffix=core.windows.net"


class FakeShare:
    def __init__(self, down=False):
        self.down = down
        self.dirs = set()
        self.files = {}

    def get_directory_client(self, name):
        share = self

        class Dir:
            def create_directory(self):
                if name in share.dirs:
                    raise ResourceExistsError("exists")
                share.dirs.add(name)

        return Dir()

    def get_file_client(self, name):
        share = self

        class File:
            url = f"https://acct.file.core.windows.net/media/{name}"

            def upload_file(self, stream):
                if share.down:
                    raise ServiceRequestError("connection reset")
                share.files[name] = stream.read()

        return File()


@pytest.fixture
def gateway():
    gw = MediaGateway(share_name="media", connection_string=CONN, root="bar")
    gw.share = FakeShare()
    return gw


def test_needs_credentials():
    with pytest.raises(ValueError, match="connection string"):
        MediaGateway(share_name="media")
    with pytest.raises(ValueError, match="share name"):
        MediaGateway(share_name="", connection_string=CONN)


def test_account_url_is_enough():
    gw = MediaGateway(share_name="media", account_url="https://acct.file.core.windows.net?sv=2022&sig=x")
    assert gw.root == ""


def test_upload_files_under_resource_type(gateway, tmp_path):
    photo = tmp_path / "me.PNG"
    photo.write_bytes(b"img")

    url = gateway.upload(photo, dir_path="clients")

    (stored, data), = gateway.share.files.items()
    assert stored.startswith("bar/clients/png/") and stored.endswith(".png")
    assert data == b"img"
    assert url.endswith(stored)
    assert gateway.share.dirs == {"bar", "bar/clients", "bar/clients/png"}


def test_existing_directories_are_reused(gateway, tmp_path):
    photo = tmp_path / "me.jpg"
    photo.write_bytes(b"img")

    gateway.upload(photo, dir_path="clients")
    gateway.upload(photo, dir_path="clients")

    assert len(gateway.share.files) == 2


def test_share_errors_become_upload_errors(gateway, tmp_path):
    gateway.share.down = True
    photo = tmp_path / "me.png"
    photo.write_bytes(b"img")

    with pytest.raises(MediaUploadError, match="me.png"):
        gateway.upload(photo)
