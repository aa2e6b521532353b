"""
Decoding rules for startup record files.

One dialect only: comma separated, double-quote quoting, doubled quotes as
escapes. No delimiter sniffing.
"""

import os
from typing import Optional

DELIMITER = ","
QUOTE = '"'

ALLOWED_SUFFIX = ".csv"

# shown by the table view when a record has no value for a column
MISSING_PLACEHOLDER = "-"


def strict_from_env(value: Optional[str]) -> bool:
    """Only an explicit "1", "true" or "yes" turns strict headers on."""
    return (value or "").strip().lower() in ("1", "true", "yes")


# reject headers whose key forms collide instead of letting the last one win
STRICT_HEADERS = strict_from_env(os.getenv("STARTUP_CSV_STRICT_HEADERS"))
