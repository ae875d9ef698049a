"""Bitwarden CLI wrapper.

Runs the ``bw`` executable to create Sends (one-time secret links). A
``BitwardenSession`` owns the vault unlock for the duration of a ``with``
block: it reuses an existing session key when one is supplied, otherwise it
unlocks with the master password and locks the vault again on exit, whatever
happened inside the block.
"""

import base64
import json
import os
import subprocess
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from infrastructure.configuration import ConfigurationError
from infrastructure.logging import get_module_logger

logger = get_module_logger()

PASSWORD_ENV_VAR = "BW_PASSWORD"
SEND_TYPE_TEXT = 0


class BitwardenCliError(Exception):
    """The bw executable failed or returned unreadable output.

    Only the subcommand is included in the message; arguments can carry
    encoded secrets.
    """

    def __init__(self, command: str, returncode: Optional[int], stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"bw {command} failed"
        if returncode is not None:
            message = f"{message} with exit code {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class BitwardenSession:
    """Scoped access to an unlocked Bitwarden vault.

    Args:
        cli_path: Path to the bw executable
        session_key: Existing session key (BW_SESSION); never locked on exit
        password: Master password used to unlock when no session key is given
        runner: subprocess.run compatible callable (tests inject a fake)

    Example:
        with BitwardenSession(password=settings.bitwarden.BW_PASSWORD) as bw:
            url = create_text_send(bw, name="jdoe", text="s3cret")
    """

    def __init__(
        self,
        cli_path: str = "bw",
        session_key: Optional[str] = None,
        password: Optional[str] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.cli_path = cli_path
        self._session_key = session_key or None
        self._password = password or None
        self._runner = runner
        self._owns_unlock = False

    def __enter__(self) -> "BitwardenSession":
        if self._session_key:
            logger.info("bitwarden_session_reused")
            return self
        if not self._password:
            raise ConfigurationError(
                "BW_SESSION or BW_PASSWORD", "an unlocked session key or the master password"
            )
        env = {**os.environ, PASSWORD_ENV_VAR: self._password}
        self._session_key = self._execute(
            ["unlock", "--raw", "--passwordenv", PASSWORD_ENV_VAR], "unlock", env
        ).strip()
        if not self._session_key:
            raise BitwardenCliError("unlock", 0, "no session key returned")
        self._owns_unlock = True
        logger.info("bitwarden_vault_unlocked")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._owns_unlock:
            try:
                self._execute(["lock"], "lock", self._env())
                logger.info("bitwarden_vault_locked")
            except (BitwardenCliError, OSError) as lock_error:
                logger.warning("bitwarden_lock_failed", error=str(lock_error))
            finally:
                self._session_key = None
                self._owns_unlock = False
        return False

    def _env(self) -> dict:
        env = dict(os.environ)
        env.pop(PASSWORD_ENV_VAR, None)
        if self._session_key:
            env["BW_SESSION"] = self._session_key
        return env

    def _execute(self, args: List[str], command: str, env: dict) -> str:
        try:
            completed = self._runner(
                [self.cli_path, *args],
                capture_output=True,
                text=True,
                env=env,
                check=False,
            )
        except FileNotFoundError as exc:
            raise BitwardenCliError(command, None, f"{self.cli_path} not found") from exc
        except OSError as exc:
            raise BitwardenCliError(command, None, exc.strerror or type(exc).__name__) from exc
        if completed.returncode != 0:
            raise BitwardenCliError(command, completed.returncode, completed.stderr or "")
        return completed.stdout or ""

    def run(self, args: List[str], command: Optional[str] = None) -> str:
        """Run ``bw <args>`` inside the unlocked session and return stdout."""
        if not self._session_key:
            raise RuntimeError("BitwardenSession is not active; use it as a context manager")
        return self._execute(args, command or " ".join(args[:2]), self._env())


def build_text_send(
    name: str,
    text: str,
    deletion_days: int = 7,
    max_access_count: Optional[int] = 1,
    notes: Optional[str] = None,
    hidden: bool = True,
    now: Optional[datetime] = None,
) -> dict:
    """Build the JSON object accepted by ``bw send create``."""
    moment = now or datetime.now(timezone.utc)
    deletion_date = moment + timedelta(days=deletion_days)
    return {
        "object": "send",
        "name": name,
        "notes": notes,
        "type": SEND_TYPE_TEXT,
        "text": {"text": text, "hidden": hidden},
        "file": None,
        "maxAccessCount": max_access_count,
        "deletionDate": deletion_date.strftime("%Y-%m-%dT%H:%M:%S.000Z"),
        "expirationDate": None,
        "password": None,
        "disabled": False,
        "hideEmail": False,
    }


def create_text_send(
    session: BitwardenSession,
    name: str,
    text: str,
    deletion_days: int = 7,
    max_access_count: Optional[int] = 1,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Create a hidden text Send and return its access URL.

    Raises:
        BitwardenCliError: the CLI failed or returned no access URL
    """
    payload = build_text_send(
        name,
        text,
        deletion_days=deletion_days,
        max_access_count=max_access_count,
        notes=notes,
        now=now,
    )
    encoded = base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
    output = session.run(["send", "create", encoded], command="send create")
    try:
        created = json.loads(output)
    except ValueError as exc:
        raise BitwardenCliError("send create", 0, "output was not JSON") from exc

    access_url = created.get("accessUrl") if isinstance(created, dict) else None
    if not access_url:
        raise BitwardenCliError("send create", 0, "no accessUrl in output")
    logger.info("bitwarden_send_created", send_name=name, send_id=created.get("id"))
    return access_url
