# =============================================================================
# adapter_core/config.py  —  Startup Configuration
# =============================================================================
#
# Each adapter server needs a small fixed set of options, read ONCE before
# any tool is registered:
#
#   Server   Variable                         Required
#   -------  -------------------------------  --------
#   maps     GOOGLE_MAPS_API_KEY              yes
#   github   GITHUB_PERSONAL_ACCESS_TOKEN     yes
#   notion   NOTION_API_KEY                   yes
#   weather  NWS_USER_AGENT                   no
#   (all)    ADAPTER_DEBUG                    no  (true/false)
#   (all)    ADAPTER_HTTP_TIMEOUT             no  (seconds, default 30)
#
# A .env file in the working directory is loaded first (python-dotenv), so
# local development works without exporting anything.  A missing required
# credential raises ConfigError: that is a startup failure, never a
# per-invocation one.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from adapter_core.errors import ConfigError
from adapter_core.upstream import DEFAULT_TIMEOUT

DEFAULT_USER_AGENT = "api-tool-adapters-weather/1.0.0 (https://github.com/api-tool-adapters)"

# server name → environment variable holding its credential (None = no credential)
CREDENTIAL_VARS: dict[str, str | None] = {
    "weather": None,
    "maps": "GOOGLE_MAPS_API_KEY",
    "github": "GITHUB_PERSONAL_ACCESS_TOKEN",
    "notion": "NOTION_API_KEY",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class AdapterConfig:
    server: str
    credential: str | None = None
    debug: bool = False
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


def load_config(server: str, environ: Mapping[str, str] | None = None) -> AdapterConfig:
    """Build the configuration for ``server``.

    ``environ`` defaults to the process environment after loading ``.env``;
    tests pass a plain dict instead.
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    if server not in CREDENTIAL_VARS:
        known = ", ".join(CREDENTIAL_VARS)
        raise ConfigError(f"Unknown server '{server}'. Choose one of: {known}")

    credential = None
    var = CREDENTIAL_VARS[server]
    if var is not None:
        credential = environ.get(var, "").strip()
        if not credential:
            raise ConfigError(f"Missing required configuration: {var} must be set for the {server} server")

    return AdapterConfig(
        server=server,
        credential=credential,
        debug=_parse_bool("ADAPTER_DEBUG", environ.get("ADAPTER_DEBUG", "")),
        timeout=_parse_timeout(environ.get("ADAPTER_HTTP_TIMEOUT")),
        user_agent=environ.get("NWS_USER_AGENT") or DEFAULT_USER_AGENT,
    )


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be true or false, got '{raw}'")


def _parse_timeout(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"ADAPTER_HTTP_TIMEOUT must be a number of seconds, got '{raw}'") from None
    if timeout <= 0:
        raise ConfigError("ADAPTER_HTTP_TIMEOUT must be greater than zero")
    return timeout
