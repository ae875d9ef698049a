"""Bitwarden Integration Package.

- cli: bw CLI session handling and Send creation
"""

from integrations.bitwarden.cli import (
    BitwardenCliError,
    BitwardenSession,
    build_text_send,
    create_text_send,
)

__all__ = [
    "BitwardenCliError",
    "BitwardenSession",
    "build_text_send",
    "create_text_send",
]
