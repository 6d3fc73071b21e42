from .json_rpc import (
    MalformedResponse,
    PhpactorError,
    ServiceUnavailable,
    decode_rpc_response,
    encode_rpc_request,
)
from .phpactor_client import PhpactorClient
from .types import Suggestion

__all__ = [
    "MalformedResponse",
    "PhpactorClient",
    "PhpactorError",
    "ServiceUnavailable",
    "Suggestion",
    "decode_rpc_response",
    "encode_rpc_request",
]
