from .client import AsyncSocrataClient, SocrataClient
from .config_types import ClientConfig, ClientSettings
from .dispatch import RECORD_FORMATS, library_version
from .errors import InvalidArgument, SocrataClientError, TransportFailure
from .query import Query

__version__ = library_version()

__all__ = [
    "AsyncSocrataClient",
    "ClientConfig",
    "ClientSettings",
    "InvalidArgument",
    "Query",
    "RECORD_FORMATS",
    "SocrataClient",
    "SocrataClientError",
    "TransportFailure",
]
