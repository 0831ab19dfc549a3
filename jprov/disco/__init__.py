"""foojay Disco catalog: package lookup, download, verification and extraction."""

from .client import CACHE_TIMEOUT, Disco, filter_packages
from .errors import (
    ChecksumMismatch,
    DiscoError,
    ExtractionFailed,
    NetworkFailure,
    NotFound,
    Offline,
    UnsafeArchive,
    UnsupportedArchive,
)
from .extract import Extractor
from .hashing import HashFunction
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .model import DownloadInfo, Links, Package, PackageInfo, sort_packages

__all__ = [
    # client
    "CACHE_TIMEOUT",
    "Disco",
    "filter_packages",
    # errors
    "ChecksumMismatch",
    "DiscoError",
    "ExtractionFailed",
    "NetworkFailure",
    "NotFound",
    "Offline",
    "UnsafeArchive",
    "UnsupportedArchive",
    # extract
    "Extractor",
    # hashing
    "HashFunction",
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # model
    "DownloadInfo",
    "Links",
    "Package",
    "PackageInfo",
    "sort_packages",
]
