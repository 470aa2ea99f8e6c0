"""Application services."""

from boxtrack.application.services.authorization_gate import \
    RoleAuthorizationGate
from boxtrack.application.services.identifier_minter import (
    IdentifierMinter, build_identifier_minter)

__all__ = ["IdentifierMinter", "RoleAuthorizationGate", "build_identifier_minter"]
