from __future__ import annotations

import re

EMAIL_REGEX = re.compile(
    r'(([^<>()\[\].,;:\s@"]+(\.[^<>()\[\].,;:\s@"]+)*)|(".+"))'
    r'@(([^<>()\[\].,;:\s@"]+\.)+[^<>()\[\\.,;:\s@"]{2,})',
    re.IGNORECASE,
)


def validate_email(email: object) -> bool:
    return EMAIL_REGEX.fullmatch(str(email)) is not None
