"""Rich embeds for image references in Python-Markdown."""

from .classifier import classify
from .entity import Classification, Enclave, Provider, build_enclave
from .errors import EnclaveError, RenderError, UrlParseError
from .extension import EnclaveExtension, makeExtension
from .renderers import render
from .size import normalize_size

__all__ = [
    "Classification",
    "Enclave",
    "EnclaveError",
    "EnclaveExtension",
    "Provider",
    "RenderError",
    "UrlParseError",
    "build_enclave",
    "classify",
    "makeExtension",
    "normalize_size",
    "render",
]
