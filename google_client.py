# google_client.py
from google.oauth2 import service_account
from googleapiclient.discovery import build

from config import Settings

SCOPES = [
    "https://www.googleapis.com/auth/drive.file",
]


def get_credentials(settings: Settings):
    """
    Service account credentials from the JSON key file named by
    GOOGLE_CREDENTIALS_JSON. The slip and design folders must be shared
    with the service account.
    """
    if not settings.google_credentials_json:
        raise RuntimeError("GOOGLE_CREDENTIALS_JSON is not set in the environment")

    return service_account.Credentials.from_service_account_file(
        settings.google_credentials_json,
        scopes=SCOPES,
    )


def get_drive_service(settings: Settings):
    creds = get_credentials(settings)
    return build("drive", "v3", credentials=creds, cache_discovery=False)
