"""String helpers for gRPC method names and secret values."""

from __future__ import annotations

UNKNOWN = "unknown"


def split_method_and_package(full_method_name: str) -> tuple[str, str]:
    """Split a gRPC ``package.Service/Method`` name into its two halves.

    Returns ``("", "")`` when the name holds no ``/``. An empty half
    becomes ``"unknown"``.
    """
    index = full_method_name.rfind("/")
    if index < 0:
        return "", ""
    package_and_service = full_method_name[:index] or UNKNOWN
    method_name = full_method_name[index + 1:] or UNKNOWN
    return package_and_service, method_name


def obfuscate(text: str, edges_length: int) -> str:
    """Hide the middle of ``text``, keeping ``edges_length`` characters at each end.

    Text too short to keep a middle at least ``edges_length`` long is
    replaced entirely by ``edges_length`` asterisks.
    """
    mask = "*" * edges_length
    if len(text) > edges_length * 3:
        return text[:edges_length] + mask + text[len(text) - edges_length:]
    return mask