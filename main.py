"""Entry point: execute one request against an API configured in the environment."""

import json
import logging
import os
import sys
from typing import Any

from apirequest import ApiRequestError, DecodeError, ExecuteResult, Requester, Settings

USAGE = "usage: python main.py <api-name> <path> [METHOD]"


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Build a requester from Settings, run the request and print the decoded body."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) not in (2, 3):
        print(USAGE, file=sys.stderr)
        return 2
    api_name, path = args[0], args[1]
    method = args[2] if len(args) == 3 else "GET"

    _configure_logging()
    logger = logging.getLogger("apirequest")
    settings = Settings.load()
    requester = Requester.from_settings(settings)

    try:
        request = requester.new_request(api_name, method, path)
        result = requester.execute(request, dict[str, Any], dict[str, Any])
    except DecodeError as exc:
        if not exc.ok:
            logger.exception("Request to %s failed.", api_name)
            return 1
        if exc.body.strip():
            logger.warning("Response from %s is not a JSON object; printing null.", api_name)
        result = ExecuteResult(ok=True, status_code=exc.status_code)
    except ApiRequestError:
        logger.exception("Request to %s failed.", api_name)
        return 1
    finally:
        requester.transport.close()

    payload = result.data if result.ok else result.error
    print(json.dumps({"ok": result.ok, "status": result.status_code, "body": payload}, indent=2))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
