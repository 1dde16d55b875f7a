"""Drive `files.list` query construction."""
from drive_relay.schemas import FOLDER_MIME_TYPE


def escape_query_value(value: str) -> str:
    # escape backslash first, then single quotes
    return (value or "").replace("\\", "\\\\").replace("'", "\\'")


def build_folder_query(parent_id: str, name: str) -> str:
    """Match a non-trashed folder named exactly `name` directly under `parent_id`."""
    return " and ".join([
        f"'{escape_query_value(parent_id)}' in parents",
        f"name = '{escape_query_value(name)}'",
        f"mimeType = '{FOLDER_MIME_TYPE}'",
        "trashed = false",
    ])
