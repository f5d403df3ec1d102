"""
identity_gate.api.__main__

`python -m identity_gate.api`: serve the identity gate with uvicorn.

Missing or empty identity-provider settings are reported as one structured log
event and exit status 2 instead of a traceback.
"""

from __future__ import annotations

import uvicorn

from identity_gate.api.app import create_app
from identity_gate.errors import ConfigurationError
from identity_gate.observability.logging import get_logger
from identity_gate.settings import get_settings

EXIT_CONFIG_ERROR = 2

log = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    try:
        app = create_app(settings=settings)
    except ConfigurationError as e:
        # Logging is already configured: create_app sets it up before validating.
        log.error("startup.invalid_configuration", error=str(e))
        raise SystemExit(EXIT_CONFIG_ERROR) from e

    log.info(
        "startup.serving",
        host=settings.api_host,
        port=settings.api_port,
        domain=settings.auth_domain,
        verify_signature=settings.verify_signature,
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()
