"""
Dependency wiring for the FastAPI app.

The app factory stores one instance of each collaborator on `app.state`;
these accessors hand them to route handlers.
"""
from fastapi import Request

from drive_relay.config.settings import Settings
from drive_relay.dispatcher import UploadDispatcher
from drive_relay.drive.folders import SubfolderResolver


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_resolver(request: Request) -> SubfolderResolver:
    return request.app.state.resolver


def get_dispatcher(request: Request) -> UploadDispatcher:
    return request.app.state.dispatcher
