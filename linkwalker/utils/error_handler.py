import asyncio
import time
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Dict, List, Optional, Any
from collections import defaultdict
import aiohttp

logger = logging.getLogger(__name__)


class LinkCheckError(Exception):
    """Base class for errors raised by the link checker"""


class SkipPolicyError(LinkCheckError):
    """The user supplied skip predicate raised while deciding on a link"""

    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Skip predicate failed for {url}: {cause!r}")
        self.url = url
        self.cause = cause


class ServerStartError(LinkCheckError):
    """The local static server could not be started"""


class ErrorType(Enum):
    """Classification of different error types"""
    NETWORK_TIMEOUT = "network_timeout"
    CONNECTION_ERROR = "connection_error"
    INVALID_URL = "invalid_url"
    HTTP_CLIENT_ERROR = "http_client_error"  # 4xx
    HTTP_SERVER_ERROR = "http_server_error"  # 5xx
    UNKNOWN_ERROR = "unknown_error"


@dataclass(frozen=True)
class ResolutionError:
    """A link whose text could not be turned into a URL"""
    link: str
    message: str

    def __str__(self):
        return f"Cannot resolve {self.link!r}: {self.message}"


@dataclass(frozen=True)
class FetchFailure:
    """A liveness check that never produced an HTTP response"""
    url: str
    error_type: ErrorType
    message: str

    def __str__(self):
        return f"{self.error_type.value}: {self.message}"


@dataclass
class ErrorInfo:
    """Information about an error occurrence"""
    url: str
    error_type: ErrorType
    status_code: Optional[int]
    message: str
    timestamp: float


class ErrorHandler:
    """Error classification and bookkeeping for broken links"""

    def __init__(self):
        self.error_history: List[ErrorInfo] = []

    def classify_error(self, error: Optional[BaseException] = None,
                       status_code: Optional[int] = None) -> ErrorType:
        """Classify an error into appropriate error type"""
        if isinstance(error, asyncio.TimeoutError):
            return ErrorType.NETWORK_TIMEOUT
        elif isinstance(error, aiohttp.InvalidURL):
            return ErrorType.INVALID_URL
        elif isinstance(error, (aiohttp.ClientConnectorError, aiohttp.ServerDisconnectedError)):
            return ErrorType.CONNECTION_ERROR
        elif status_code:
            if 400 <= status_code < 500:
                return ErrorType.HTTP_CLIENT_ERROR
            elif 500 <= status_code < 600:
                return ErrorType.HTTP_SERVER_ERROR
        elif isinstance(error, aiohttp.ClientError):
            return ErrorType.CONNECTION_ERROR

        return ErrorType.UNKNOWN_ERROR

    def failure_from_exception(self, url: str, error: BaseException) -> FetchFailure:
        """Turn a transport exception into a FetchFailure and remember it"""
        error_type = self.classify_error(error)
        message = str(error) or type(error).__name__
        self.record(url, error_type, None, message)
        return FetchFailure(url=url, error_type=error_type, message=message)

    def record(self, url: str, error_type: ErrorType, status_code: Optional[int], message: str):
        self.error_history.append(ErrorInfo(
            url=url,
            error_type=error_type,
            status_code=status_code,
            message=message,
            timestamp=time.time()
        ))
        logger.debug(f"{url} failed: {error_type.value} - {message}")

    def record_status(self, url: str, status_code: int):
        """Remember an HTTP error status"""
        self.record(url, self.classify_error(status_code=status_code), status_code,
                    f"HTTP {status_code}")

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of all errors encountered"""
        if not self.error_history:
            return {"total_errors": 0}

        error_counts = defaultdict(int)
        for error in self.error_history:
            error_counts[error.error_type.value] += 1

        return {
            "total_errors": len(self.error_history),
            "failed_urls": len({e.url for e in self.error_history}),
            "error_types": dict(error_counts),
        }

    def get_failed_urls(self) -> List[str]:
        """Get list of URLs that failed, in the order they failed"""
        return list(dict.fromkeys(e.url for e in self.error_history))
