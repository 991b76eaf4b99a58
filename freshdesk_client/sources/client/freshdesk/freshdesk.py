import base64
import logging
import os
from typing import Any, Optional

import httpx  # type: ignore
from aiolimiter import AsyncLimiter
from pydantic import BaseModel, ValidationError, field_validator  # type: ignore

from freshdesk_client.exceptions.freshdesk_exceptions import FreshDeskConfigurationError
from freshdesk_client.sources.client.http.http_client import HTTPClient
from freshdesk_client.sources.client.iclient import IClient

API_PREFIX = "/api/v2"
DEFAULT_MAX_REQUESTS_PER_MINUTE = 100
DEFAULT_RATE_LIMIT_SLACK = 100

logger = logging.getLogger(__name__)


def build_rate_limiter(max_requests_per_minute: int, slack: int = DEFAULT_RATE_LIMIT_SLACK) -> AsyncLimiter:
    """Token bucket holding `slack` permits, refilled at the per-minute budget.

    Up to `slack` requests may go out back to back; after that callers wait
    for the steady rate. acquire() waits, it never rejects.
    """
    capacity = max(slack, 1)
    return AsyncLimiter(max_rate=capacity, time_period=capacity * 60.0 / max_requests_per_minute)


class FreshDeskRESTClientViaBasicAuth(HTTPClient):
    """FreshDesk REST client via Basic authentication

    Every request carries `Authorization: Basic base64(user:password)`.
    With an API key, the key is the user and 'X' the password.

    Args:
        base_url: Root URL of the helpdesk (e.g. 'https://company.freshdesk.com')
        user: Basic auth user, or the API key
        password: Basic auth password
        max_requests_per_minute: Steady budget of the rate limiter
        rate_limit_slack: Burst allowance of the rate limiter
        timeout: Request timeout in seconds
        transport: Optional httpx transport
    """

    def __init__(
        self,
        base_url: str,
        user: str,
        password: str = "X",
        max_requests_per_minute: int = DEFAULT_MAX_REQUESTS_PER_MINUTE,
        rate_limit_slack: int = DEFAULT_RATE_LIMIT_SLACK,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        credentials = f"{user}:{password}"
        encoded_credentials = base64.b64encode(credentials.encode()).decode()

        super().__init__(encoded_credentials, "Basic", timeout=timeout, transport=transport)
        self.root_url = base_url.rstrip("/")
        self.base_url = f"{self.root_url}{API_PREFIX}"
        self.user = user
        self.rate_limiter = build_rate_limiter(max_requests_per_minute, rate_limit_slack)

    def get_base_url(self) -> str:
        """Get the base URL, including the /api/v2 prefix"""
        return self.base_url

    def get_root_url(self) -> str:
        """Get the helpdesk root URL"""
        return self.root_url

    async def throttle(self) -> None:
        """Wait for one rate limiter permit"""
        await self.rate_limiter.acquire()


class FreshDeskBasicAuthConfig(BaseModel):
    """Configuration for FreshDesk REST client via Basic authentication

    Args:
        base_url: Root URL of the helpdesk, with protocol
        user: Basic auth user, or the API key
        password: Basic auth password (default: 'X', the API key convention)
        max_requests_per_minute: Steady budget of the rate limiter
        rate_limit_slack: Burst allowance of the rate limiter
        timeout: Request timeout in seconds
    """
    base_url: str
    user: str
    password: str = "X"
    max_requests_per_minute: int = DEFAULT_MAX_REQUESTS_PER_MINUTE
    rate_limit_slack: int = DEFAULT_RATE_LIMIT_SLACK
    timeout: float = 30.0

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base_url and strip any trailing slash or API prefix"""
        if not v or not v.strip():
            raise ValueError("base_url cannot be empty or None")
        v = v.strip()
        if not v.startswith(('http://', 'https://')):
            raise ValueError("base_url must include protocol (http:// or https://)")
        v = v.rstrip("/")
        if v.endswith(API_PREFIX):
            v = v[:-len(API_PREFIX)]
        return v

    @field_validator('user')
    @classmethod
    def validate_user(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("user cannot be empty or None")
        return v

    @field_validator('max_requests_per_minute')
    @classmethod
    def validate_max_requests_per_minute(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_requests_per_minute must be positive")
        return v

    @field_validator('rate_limit_slack')
    @classmethod
    def validate_rate_limit_slack(cls, v: int) -> int:
        if v < 0:
            raise ValueError("rate_limit_slack cannot be negative")
        return v

    def create_client(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> FreshDeskRESTClientViaBasicAuth:
        """Create FreshDesk REST client"""
        return FreshDeskRESTClientViaBasicAuth(
            base_url=self.base_url,
            user=self.user,
            password=self.password,
            max_requests_per_minute=self.max_requests_per_minute,
            rate_limit_slack=self.rate_limit_slack,
            timeout=self.timeout,
            transport=transport,
        )

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary, without secrets"""
        return {
            'base_url': self.base_url,
            'max_requests_per_minute': self.max_requests_per_minute,
            'rate_limit_slack': self.rate_limit_slack,
            'timeout': self.timeout,
            'has_credentials': bool(self.user),
        }

    @classmethod
    def from_env(cls) -> "FreshDeskBasicAuthConfig":
        """
        Load configuration from FRESHDESK_* environment variables.

        Raises:
            FreshDeskConfigurationError: a variable is missing or invalid
        """
        try:
            return cls(
                base_url=os.getenv("FRESHDESK_BASE_URL", ""),
                user=os.getenv("FRESHDESK_USER", ""),
                password=os.getenv("FRESHDESK_PASSWORD", "X"),
                max_requests_per_minute=int(os.getenv("FRESHDESK_MAX_REQUESTS_PER_MINUTE", str(DEFAULT_MAX_REQUESTS_PER_MINUTE))),
                rate_limit_slack=int(os.getenv("FRESHDESK_RATE_LIMIT_SLACK", str(DEFAULT_RATE_LIMIT_SLACK))),
                timeout=float(os.getenv("FRESHDESK_TIMEOUT", "30")),
            )
        except (ValidationError, ValueError) as e:
            raise FreshDeskConfigurationError(f"Invalid FreshDesk environment configuration: {e}") from e


class FreshDeskApiKeyConfig(BaseModel):
    """Configuration for FreshDesk REST client via API Key

    Args:
        domain: The FreshDesk domain (e.g., 'company.freshdesk.com')
        api_key: The API key for authentication
        max_requests_per_minute: Steady budget of the rate limiter
    """
    domain: str
    api_key: str
    max_requests_per_minute: int = DEFAULT_MAX_REQUESTS_PER_MINUTE

    @field_validator('domain')
    @classmethod
    def validate_domain(cls, v: str) -> str:
        """Validate domain field"""
        if not v or not v.strip():
            raise ValueError("domain cannot be empty or None")

        # Validate domain format - should not include protocol
        if v.startswith(('http://', 'https://')):
            raise ValueError("domain should not include protocol (http:// or https://)")

        return v

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate api_key field"""
        if not v or not v.strip():
            raise ValueError("api_key cannot be empty or None")

        return v

    def to_basic_auth_config(self) -> FreshDeskBasicAuthConfig:
        return FreshDeskBasicAuthConfig(
            base_url=f"https://{self.domain}",
            user=self.api_key,
            password="X",
            max_requests_per_minute=self.max_requests_per_minute,
        )

    def create_client(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> FreshDeskRESTClientViaBasicAuth:
        """Create FreshDesk REST client"""
        return self.to_basic_auth_config().create_client(transport=transport)


class FreshDeskClient(IClient):
    """Builder class for FreshDesk clients

    Each instance owns its own credentials and rate limiter; any number of
    independently configured instances can coexist.
    """

    def __init__(self, client: FreshDeskRESTClientViaBasicAuth) -> None:
        """Initialize with a FreshDesk client object"""
        self.client = client

    def get_client(self) -> FreshDeskRESTClientViaBasicAuth:
        """Return the FreshDesk REST client object"""
        return self.client

    def get_base_url(self) -> str:
        """Get the base URL"""
        return self.client.get_base_url()

    async def close(self) -> None:
        await self.client.close()

    @classmethod
    def build_with_config(
        cls,
        config: FreshDeskBasicAuthConfig | FreshDeskApiKeyConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "FreshDeskClient":
        """Build FreshDeskClient with configuration

        Args:
            config: FreshDeskBasicAuthConfig or FreshDeskApiKeyConfig instance
            transport: Optional httpx transport
        Returns:
            FreshDeskClient instance
        """
        return cls(config.create_client(transport=transport))

    @classmethod
    def build_with_basic_auth(
        cls,
        base_url: str,
        user: str,
        password: str,
        max_requests_per_minute: int = DEFAULT_MAX_REQUESTS_PER_MINUTE,
        **kwargs: Any,
    ) -> "FreshDeskClient":
        """Build FreshDeskClient from a base URL and a credential pair

        Raises:
            FreshDeskConfigurationError: the arguments do not validate
        """
        transport = kwargs.pop("transport", None)
        try:
            config = FreshDeskBasicAuthConfig(
                base_url=base_url,
                user=user,
                password=password,
                max_requests_per_minute=max_requests_per_minute,
                **kwargs,
            )
        except ValidationError as e:
            raise FreshDeskConfigurationError(f"Invalid FreshDesk configuration: {e}") from e
        return cls.build_with_config(config, transport=transport)

    @classmethod
    def build_with_api_key(
        cls,
        domain: str,
        api_key: str,
        max_requests_per_minute: int = DEFAULT_MAX_REQUESTS_PER_MINUTE,
    ) -> "FreshDeskClient":
        """Build FreshDeskClient with API key directly

        Args:
            domain: The FreshDesk domain (e.g., 'company.freshdesk.com')
            api_key: The API key for authentication
            max_requests_per_minute: Steady budget of the rate limiter

        Returns:
            FreshDeskClient: Configured client instance
        """
        try:
            config = FreshDeskApiKeyConfig(
                domain=domain,
                api_key=api_key,
                max_requests_per_minute=max_requests_per_minute,
            )
        except ValidationError as e:
            raise FreshDeskConfigurationError(f"Invalid FreshDesk configuration: {e}") from e
        return cls.build_with_config(config)

    @classmethod
    def build_from_env(cls) -> "FreshDeskClient":
        """Build FreshDeskClient from FRESHDESK_* environment variables"""
        config = FreshDeskBasicAuthConfig.from_env()
        logger.debug(f"Building FreshDesk client from environment: {config.to_dict()}")
        return cls.build_with_config(config)
