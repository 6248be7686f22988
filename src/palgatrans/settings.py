"""Global settings for palgatrans.

Known protocols, the ART-DECOR server and run defaults. The server can be
overridden with the PALGATRANS_DECOR_SERVER environment variable.
"""

from __future__ import annotations

import os

DEFAULT_SERVER = "https://decor.nictiz.nl/services/"
SERVER_ENV_VAR = "PALGATRANS_DECOR_SERVER"

# Protocol display name -> ART-DECOR project prefix
PROTOCOLS: dict[str, str] = {
    "Colonbiopt": "ppcolbio-",
    "ColonRectumcarcinoom": "ppcolcar-",
    "inherit_test": "s2nki-",
}

DEFAULT_PROTOCOL = "Colonbiopt"
DEFAULT_LANGUAGE = "nl-NL"

HOUSEKEEPING_PREFIX = "housekeeping"

# Column holding the protocol version a row was recorded under
PROTOCOL_VERSION_COLUMN = "depvenr"

# PALGA exports are Latin-1 encoded
DEFAULT_ENCODING = "ISO-8859-1"

OUTPUT_SUFFIX = "_out.txt"


def get_server() -> str:
    """Return the ART-DECOR services base URL, always ending in '/'."""
    server = os.environ.get(SERVER_ENV_VAR) or DEFAULT_SERVER
    if not server.endswith("/"):
        server += "/"
    return server


def get_protocol_prefix(protocol_name: str) -> str | None:
    """Return the ART-DECOR prefix for a protocol name, or None if unknown."""
    return PROTOCOLS.get(protocol_name)


def list_protocols() -> list[str]:
    return sorted(PROTOCOLS)
