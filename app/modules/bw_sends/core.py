"""Create one Bitwarden Send per new account.

Reads the accounts produced by the user-creation step and turns each
password into a one-time Send link, so passwords never travel over chat.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional

from infrastructure.logging import get_module_logger
from integrations.bitwarden import BitwardenCliError, BitwardenSession, create_text_send

logger = get_module_logger()

INPUT_COLUMNS = ("username", "password")
OUTPUT_FIELDS = ("Username", "Email", "SendUrl", "Status", "Error")

STATUS_CREATED = "created"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"


@dataclass
class SendResult:
    username: str
    email: str
    send_url: str = ""
    status: str = ""
    error: str = ""

    def to_row(self) -> Dict[str, str]:
        data = asdict(self)
        return {
            "Username": data["username"],
            "Email": data["email"],
            "SendUrl": data["send_url"],
            "Status": data["status"],
            "Error": data["error"],
        }


def send_text_for(username: str, password: str) -> str:
    return f"Username: {username}\nPassword: {password}"


def create_sends(
    rows: Iterable[Dict[str, str]],
    session: Optional[BitwardenSession],
    deletion_days: int = 7,
    max_access_count: Optional[int] = 1,
    dry_run: bool = False,
) -> List[SendResult]:
    """Create a Send for every row that has a username and a password.

    A failing row is recorded and the batch continues.

    Args:
        rows: CSV rows with ``username``, ``password`` and optional ``email``
        session: Active BitwardenSession; may be None in dry-run mode
        deletion_days: Days until each Send is deleted
        max_access_count: Times each Send can be opened
        dry_run: Log the rows instead of creating Sends

    Returns:
        One SendResult per input row
    """
    results: List[SendResult] = []
    for row in rows:
        username = row.get("username", "")
        email = row.get("email", "")
        password = row.get("password", "")
        result = SendResult(username=username, email=email)
        results.append(result)

        if not username or not password:
            result.status = STATUS_SKIPPED
            result.error = "missing username or password"
            logger.warning("send_row_skipped", username=username, email=email)
            continue

        if dry_run:
            result.status = STATUS_SKIPPED
            result.error = "dry run"
            logger.info("dry_run_send", username=username, email=email)
            continue

        try:
            result.send_url = create_text_send(
                session,
                name=f"{username} credentials",
                text=send_text_for(username, password),
                deletion_days=deletion_days,
                max_access_count=max_access_count,
            )
        except BitwardenCliError as exc:
            result.status = STATUS_FAILED
            result.error = str(exc)
            logger.error("send_creation_failed", username=username, error=str(exc))
            continue
        except Exception as exc:
            result.status = STATUS_FAILED
            result.error = str(exc) or type(exc).__name__
            logger.error(
                "send_creation_error", username=username, error=str(exc), exc_info=True
            )
            continue

        result.status = STATUS_CREATED
        logger.info("send_created_for_user", username=username, email=email)

    return results
