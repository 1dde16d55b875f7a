from drive_relay.drive.client import DriveGateway, GoogleDriveClient
from drive_relay.drive.folders import SubfolderResolver

__all__ = ["DriveGateway", "GoogleDriveClient", "SubfolderResolver"]
