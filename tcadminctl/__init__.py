from .client import TCAdminClient
from .models import ConnectionConfig, RemoteDocument, RemoteResult
from .parser import check_response, parse_document
from .exceptions import (
    TCAdminError,
    TCAdminEnvironmentError,
    TCAdminConfigurationError,
    TCAdminTransportError,
    TCAdminResponseFormatError,
    TCAdminOperationError,
)

__all__ = [
    "TCAdminClient",
    "ConnectionConfig",
    "RemoteDocument",
    "RemoteResult",
    "check_response",
    "parse_document",
    "TCAdminError",
    "TCAdminEnvironmentError",
    "TCAdminConfigurationError",
    "TCAdminTransportError",
    "TCAdminResponseFormatError",
    "TCAdminOperationError",
]
