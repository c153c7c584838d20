# integration/media_gateway.py
from __future__ import annotations
import io
import uuid
from pathlib import Path
from typing import Optional

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.fileshare import ShareServiceClient

from services.errors import MediaUploadError


class MediaGateway:
    """
    Stores uploaded media (client photos) on an Azure File Share and hands back
    the URL of the stored file.

    Either `connection_string` or `account_url` must be given; `account_url`
    may carry a SAS token, otherwise pass the account key as `credential`.
    """
    def __init__(
        self,
        *,
        share_name: str,
        connection_string: Optional[str] = None,
        account_url: Optional[str] = None,
        credential: Optional[str] = None,
        root: str = "",
    ):
        if not share_name:
            raise ValueError("MediaGateway: no share name configured")
        if connection_string:
            svc = ShareServiceClient.from_connection_string(connection_string)
        elif account_url:
            svc = ShareServiceClient(account_url=account_url, credential=credential or None)
        else:
            raise ValueError("MediaGateway: set a connection string or an account URL")
        self.share = svc.get_share_client(share_name)
        self.root = root.strip("/")

    def _mkdirs(self, directory: str):
        # the share API does not create parents
        current = ""
        for part in directory.split("/"):
            current = f"{current}/{part}" if current else part
            try:
                self.share.get_directory_client(current).create_directory()
            except ResourceExistsError:
                pass

    def upload_bytes(self, dir_path: str, filename: str, data: bytes) -> str:
        directory = "/".join(p for p in (self.root, dir_path.strip("/")) if p)
        if directory:
            self._mkdirs(directory)
        f = self.share.get_file_client(f"{directory}/{filename}" if directory else filename)
        f.upload_file(io.BytesIO(data))
        return f.url

    def upload(self, path: Path, *, resource_type: str = "auto", dir_path: str = "") -> str:
        """
        Upload a (temporary) local file. `resource_type` picks the sub-folder;
        "auto" derives it from the file suffix. Returns the stored file's URL.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if resource_type == "auto":
            resource_type = suffix.lstrip(".") or "raw"
        filename = f"{uuid.uuid4().hex}{suffix}"
        try:
            return self.upload_bytes(f"{dir_path}/{resource_type}".strip("/"), filename, path.read_bytes())
        except (AzureError, OSError) as e:
            raise MediaUploadError(f"upload of {path.name} failed: {e}") from e
