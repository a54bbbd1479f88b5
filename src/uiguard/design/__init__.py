"""Design tokens and the token/icon compliance checkers."""

from uiguard.design.colors import (
    COLOR_PROPERTIES,
    find_colors,
    is_hardcoded_color,
    nearest_color_token,
    parse_color,
    suggest_color_token,
)
from uiguard.design.icon_compliance import (
    EMOJI_ICON_MAP,
    IconChecker,
    IconComplianceResult,
    IconWarning,
    check_icon_compliance,
    detect_emojis,
)
from uiguard.design.token_compliance import (
    TokenChecker,
    TokenComplianceResult,
    TokenIssue,
    TokenIssueKind,
    check_token_compliance,
)
from uiguard.design.tokens import default_tokens, load_tokens

__all__ = [
    "COLOR_PROPERTIES",
    "EMOJI_ICON_MAP",
    "IconChecker",
    "IconComplianceResult",
    "IconWarning",
    "TokenChecker",
    "TokenComplianceResult",
    "TokenIssue",
    "TokenIssueKind",
    "check_icon_compliance",
    "check_token_compliance",
    "default_tokens",
    "detect_emojis",
    "find_colors",
    "is_hardcoded_color",
    "load_tokens",
    "nearest_color_token",
    "parse_color",
    "suggest_color_token",
]
