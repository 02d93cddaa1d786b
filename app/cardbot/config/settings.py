"""Application settings -- reads from a ``.env`` file and the environment.

Values in the ``.env`` file win over process environment variables.  Each
setting also accepts the camelCase name used by Azure Bot Service app
settings (``MicrosoftAppId`` and friends).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..errors import StartupConfigurationError
from ..util.env_file import EnvFile

DEFAULT_PORT = 3978
DEFAULT_CARD_PATH = Path(__file__).resolve().parent.parent / "messaging" / "adaptive_card.json"

_TRUTHY = ("1", "true", "yes", "on")


class Settings:
    """Runtime configuration.

    Constructed once at startup and handed to :func:`create_app`; nothing in
    the package reads configuration from a global.
    """

    def __init__(self, dotenv: str | Path | None = None) -> None:
        self.env = EnvFile(dotenv or os.getenv("DOTENV_PATH") or ".env")
        self.reload()

    def reload(self) -> None:
        """Re-read the ``.env`` file and environment variables."""
        e = self._read

        self.app_id: str = e("MICROSOFT_APP_ID", "MicrosoftAppId")
        self.app_password: str = e("MICROSOFT_APP_PASSWORD", "MicrosoftAppPassword")
        self.app_tenant_id: str = e("MICROSOFT_APP_TENANT_ID", "MicrosoftAppTenantId")
        self.allow_anonymous: bool = e("ALLOW_ANONYMOUS").lower() in _TRUTHY

        self._raw_port = e("PORT")
        self.port: int = _parse_port(self._raw_port) or DEFAULT_PORT

        self.log_level: str = (e("LOG_LEVEL") or "INFO").upper()

        raw_card = e("CARD_TEMPLATE_PATH")
        self.card_template_path: Path = Path(raw_card) if raw_card else DEFAULT_CARD_PATH

    def validate(self) -> None:
        """Raise :class:`StartupConfigurationError` listing every problem found."""
        problems: list[str] = []

        if bool(self.app_id) != bool(self.app_password):
            missing = "MICROSOFT_APP_PASSWORD" if self.app_id else "MICROSOFT_APP_ID"
            problems.append(f"{missing} is not set")
        elif not self.app_id and not self.allow_anonymous:
            problems.append(
                "MICROSOFT_APP_ID and MICROSOFT_APP_PASSWORD are not set "
                "(set ALLOW_ANONYMOUS=1 to run against the local emulator)"
            )

        if self._raw_port and not 0 < (_parse_port(self._raw_port) or 0) < 65536:
            problems.append(f"PORT must be an integer between 1 and 65535, got {self._raw_port!r}")

        if not isinstance(logging.getLevelName(self.log_level), int):
            problems.append(f"LOG_LEVEL {self.log_level!r} is not a logging level")

        if problems:
            raise StartupConfigurationError("; ".join(problems))

    @property
    def masked_app_id(self) -> str:
        return (self.app_id[:12] + "...") if self.app_id else "(none)"

    # -- helpers -----------------------------------------------------------

    def _read(self, *keys: str) -> str:
        for key in keys:
            value = self.env.read(key) or os.getenv(key, "")
            if value:
                return value.strip()
        return ""


def _parse_port(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None
