"""
Drive relay.

A small FastAPI service that relays browser uploads into a Google Drive
folder using a pre-authorized refresh token, plus the CLI that mints that
token.
"""
