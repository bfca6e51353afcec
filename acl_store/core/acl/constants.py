"""Rule-language separators and sentinel strings.

Rule text format:
    - Rules are separated by a line break
    - Scopes within a rule are separated by ":"
    - A scope and its permission list are separated by "-"
    - Permissions within a list are separated by "|"

Example:
    public:private-read|write
    fd0389bf928e4fa4a70696ab85552f11-execute
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "NIL_ACL_REPR",
    "PERMISSION_DELIMITER",
    "PERMISSION_SEPARATOR",
    "RULE_SEPARATOR",
    "SCOPE_DELIMITER",
    "SCOPE_SEPARATOR",
    "UNKNOWN_PERMISSION_STR",
    "UNKNOWN_SCOPE_STR",
]

# =============================================================================
# Rule language
# =============================================================================

RULE_SEPARATOR: Final[str] = "\n"

# Splits a rule into scope segments
SCOPE_DELIMITER: Final[str] = ":"

# Splits a scope segment into [scope, permission...]
PERMISSION_DELIMITER: Final[str] = "-"

# =============================================================================
# Codecs
# =============================================================================

PERMISSION_SEPARATOR: Final[str] = "|"
SCOPE_SEPARATOR: Final[str] = ":"

UNKNOWN_PERMISSION_STR: Final[str] = "unknown"
UNKNOWN_SCOPE_STR: Final[str] = "unknownScope"

# Rendered in place of a missing store
NIL_ACL_REPR: Final[str] = "[nil]"
