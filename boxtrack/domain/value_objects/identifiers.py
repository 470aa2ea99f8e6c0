"""Short identifier format profiles."""

import re
import secrets
import string
from dataclasses import dataclass, field

from boxtrack.domain.enums import IdentifierKind

ALPHANUMERIC = string.ascii_letters + string.digits
UPPER_ALPHANUMERIC = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class IdentifierProfile:
    """Format of one identifier kind: constant prefix followed by a random body"""

    kind: IdentifierKind
    length: int
    alphabet: str
    prefix: str = ""
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError("Identifier length must be positive")
        body = "[" + re.escape(self.alphabet) + "]"
        object.__setattr__(
            self, "pattern", re.compile(rf"^{re.escape(self.prefix)}{body}{{{self.length}}}$")
        )

    def draw(self) -> str:
        """Draw a candidate from a cryptographically secure source"""
        return self.prefix + "".join(secrets.choice(self.alphabet) for _ in range(self.length))

    def matches(self, value: str) -> bool:
        return bool(self.pattern.match(value))


def container_profile(length: int = 10) -> IdentifierProfile:
    return IdentifierProfile(IdentifierKind.CONTAINER, length, ALPHANUMERIC)


def code_profile(prefix: str = "QR-", length: int = 6) -> IdentifierProfile:
    return IdentifierProfile(IdentifierKind.CODE, length, UPPER_ALPHANUMERIC, prefix)
