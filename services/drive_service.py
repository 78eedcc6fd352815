# services/drive_service.py
import io
import logging
from typing import Callable, Dict, List, Optional

from googleapiclient.discovery import Resource
from googleapiclient.http import MediaIoBaseUpload

logger = logging.getLogger(__name__)

ImageUploader = Callable[[str, str, bytes], str]


def _quote(value: str) -> str:
    # Drive query string literals escape backslash and single quote
    return value.replace("\\", "\\\\").replace("'", "\\'")


def find_file_in_folder_by_name(
    drive: Resource,
    folder_id: str,
    filename: str,
) -> Optional[Dict]:
    query = (
        f"name = '{_quote(filename)}' and "
        f"'{_quote(folder_id)}' in parents and "
        f"trashed = false"
    )

    resp = drive.files().list(
        q=query,
        fields="files(id, name)",
        pageSize=1,
    ).execute()

    files: List[Dict] = resp.get("files", [])
    return files[0] if files else None


def _media(mimetype: str, data: bytes) -> MediaIoBaseUpload:
    return MediaIoBaseUpload(io.BytesIO(data), mimetype=mimetype, resumable=False)


def public_url(drive: Resource, file_id: str) -> str:
    """
    Share the file with anyone holding the link and return a direct URL
    that Streamlit and Telegram can fetch.
    """
    drive.permissions().create(
        fileId=file_id,
        body={"type": "anyone", "role": "reader"},
        fields="id",
    ).execute()

    return f"https://drive.google.com/uc?id={file_id}&export=view"


def upload_image(
    drive: Resource,
    folder_id: str,
    filename: str,
    mimetype: str,
    data: bytes,
    overwrite: bool = False,
) -> str:
    """
    Upload an image into `folder_id` and return its public URL.

    With overwrite=True an existing file of the same name is replaced in
    place (design images keep their file id across edits).
    """
    existing = find_file_in_folder_by_name(drive, folder_id, filename) if overwrite else None

    if existing:
        file_id = existing["id"]
        drive.files().update(
            fileId=file_id,
            media_body=_media(mimetype, data),
        ).execute()
        logger.info('Replaced image "%s" (fileId=%s)', filename, file_id)
    else:
        created = drive.files().create(
            body={"name": filename, "parents": [folder_id]},
            media_body=_media(mimetype, data),
            fields="id",
        ).execute()
        file_id = created["id"]
        logger.info('Uploaded image "%s" as fileId=%s', filename, file_id)

    return public_url(drive, file_id)


def make_uploader(drive: Resource, folder_id: str, overwrite: bool = False) -> ImageUploader:
    """
    Bind a Drive folder into the (filename, mimetype, data) -> url callable
    the order and design services expect.
    """
    if not folder_id:
        raise RuntimeError("Drive folder id is not set in the environment")

    def upload(filename: str, mimetype: str, data: bytes) -> str:
        return upload_image(drive, folder_id, filename, mimetype, data, overwrite=overwrite)

    return upload
