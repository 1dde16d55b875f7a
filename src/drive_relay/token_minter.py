"""
One-shot OAuth consent flow that mints the relay's refresh token.

Starts a local listener on the registered redirect URI, opens the consent
page in the browser and exchanges the authorization code from the single
expected callback. The token set is printed and the listener shuts down.
"""
import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import click
import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from google_auth_oauthlib.flow import Flow

from drive_relay.config.settings import Settings
from drive_relay.drive.client import TOKEN_URI

logger = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
REDIRECT_PATH = "/oauth2callback"
# drive.file only lets the relay create and manage files it created itself
SCOPES = ["https://www.googleapis.com/auth/drive.file"]
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3000


def redirect_uri_for(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> str:
    """Must match a redirect URI registered on the OAuth client exactly."""
    return f"http://{host}:{port}{REDIRECT_PATH}"


def build_flow(settings: Settings, redirect_uri: str) -> Flow:
    client_config = {
        "web": {
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "auth_uri": AUTH_URI,
            "token_uri": TOKEN_URI,
            "redirect_uris": [redirect_uri],
        }
    }
    return Flow.from_client_config(client_config, scopes=SCOPES, redirect_uri=redirect_uri)


def authorization_url(flow: Flow) -> str:
    # offline + consent guarantees Google returns a refresh token
    url, _state = flow.authorization_url(access_type="offline", prompt="consent")
    return url


def format_tokens(token: Dict[str, Any]) -> str:
    shown = {
        key: token.get(key)
        for key in ("access_token", "refresh_token", "scope", "token_type", "expires_at")
        if token.get(key) is not None
    }
    return json.dumps(shown, indent=2, default=str)


class TokenMinter:
    """Holds the OAuth flow and the outcome of the single callback."""

    def __init__(self, flow: Flow, open_browser: bool = True):
        self.flow = flow
        self.open_browser = open_browser
        self.server: Optional[uvicorn.Server] = None
        self.exit_code: Optional[int] = None
        self.token: Optional[Dict[str, Any]] = None

    def announce(self) -> str:
        url = authorization_url(self.flow)
        click.echo(f"Open this URL in your browser to authorize:\n\n {url}\n")
        if self.open_browser:
            click.launch(url)
        return url

    async def exchange(self, code: str) -> Dict[str, Any]:
        # fetch_token blocks on the token endpoint
        self.token = await asyncio.to_thread(self.flow.fetch_token, code=code)
        return self.token

    def finish(self, exit_code: int) -> None:
        self.exit_code = exit_code
        if self.server is not None:
            self.server.should_exit = True


def create_callback_app(minter: TokenMinter) -> FastAPI:
    """Listener that serves the OAuth redirect exactly once."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        minter.announce()
        yield

    app = FastAPI(title="Drive Relay token minter", docs_url=None, redoc_url=None, lifespan=lifespan)

    @app.get(REDIRECT_PATH, response_class=PlainTextResponse)
    async def oauth2callback(code: Optional[str] = None, error: Optional[str] = None):
        if error or not code:
            message = f"Authorization failed: {error or 'no code in callback'}"
            logger.error(message)
            minter.finish(1)
            return PlainTextResponse(message, status_code=500)

        try:
            token = await minter.exchange(code)
        except Exception as e:
            logger.exception("Token exchange failed")
            minter.finish(1)
            return PlainTextResponse(str(e), status_code=500)

        click.echo("\n=== OAuth Tokens ===\n" + format_tokens(token) + "\n====================\n")
        if not token.get("refresh_token"):
            logger.warning("No refresh_token returned; revoke the app's access and run again")
        minter.finish(0)
        return "All set! Copy your refresh_token from the terminal and add it to .env"

    return app


def run_token_minter(
    settings: Settings,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    open_browser: bool = True,
) -> int:
    """Serve the callback until it has been handled; returns the exit status."""
    flow = build_flow(settings, redirect_uri_for(host, port))
    minter = TokenMinter(flow, open_browser=open_browser)
    server = uvicorn.Server(
        uvicorn.Config(create_callback_app(minter), host=host, port=port, log_level="warning")
    )
    minter.server = server
    server.run()
    return minter.exit_code if minter.exit_code is not None else 1
