"""Bitwarden CLI settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class BitwardenSettings(IntegrationSettings):
    """Bitwarden CLI configuration.

    Environment Variables:
        BW_SESSION: Existing unlocked session key (``bw unlock --raw``)
        BW_PASSWORD: Master password used to unlock when no session is given
        BW_CLI_PATH: Path to the ``bw`` executable
        BW_SEND_DELETION_DAYS: Days until a created Send is deleted
        BW_SEND_MAX_ACCESS_COUNT: Times a Send can be opened
    """

    BW_SESSION: str = ""
    BW_PASSWORD: str = ""
    BW_CLI_PATH: str = "bw"
    BW_SEND_DELETION_DAYS: int = Field(default=7, ge=1, le=31)
    BW_SEND_MAX_ACCESS_COUNT: int = Field(default=1, ge=1)
