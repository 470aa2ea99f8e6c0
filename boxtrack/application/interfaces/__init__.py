"""Application layer ports."""

from boxtrack.application.interfaces.services import (IAuthorizationGate,
                                                       IIdentifierMinter)

__all__ = ["IAuthorizationGate", "IIdentifierMinter"]
