"""Environment-driven configuration for requesters."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def _parse_apis(raw: str) -> tuple[tuple[str, str], ...]:
    """Parse ``name=url,name=url`` pairs. Duplicates are kept for registration to reject."""
    apis: list[tuple[str, str]] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, url = entry.partition("=")
        name, url = name.strip(), url.strip()
        if not sep or not name or not url:
            raise ValueError(
                f"APIREQUEST_APIS entries must look like name=url, got {entry!r}."
            )
        apis.append((name, url))
    return tuple(apis)


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    requester_name: str = "apirequest"
    api_timeout: float = 30.0
    apis: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting variables globally.
        """
        load_dotenv()

        requester_name = os.getenv("APIREQUEST_NAME", "").strip() or "apirequest"

        api_timeout_raw = os.getenv("API_TIMEOUT", "").strip() or "30"
        try:
            api_timeout = float(api_timeout_raw)
        except ValueError as exc:
            raise ValueError("API_TIMEOUT must be a numeric value.") from exc
        if api_timeout <= 0:
            raise ValueError("API_TIMEOUT must be greater than zero.")

        apis = _parse_apis(os.getenv("APIREQUEST_APIS", ""))

        return cls(
            requester_name=requester_name,
            api_timeout=api_timeout,
            apis=apis,
        )
