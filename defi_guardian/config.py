"""Runtime configuration for DeFi Guardian."""

import os
from dataclasses import dataclass, field
from enum import Enum


class UpstreamService(str, Enum):
    """Internal analytics services queried for a report."""

    LENDING = "lending"
    YIELD = "yield"
    LP = "lp"
    PERPS = "perps"
    ARBITRAGE = "arbitrage"
    PORTFOLIO = "portfolio"


DEFAULT_SERVICE_URLS: dict[UpstreamService, str] = {
    UpstreamService.LENDING: "https://lending-liquidation-sentinel-production.up.railway.app/api/internal/lending-liquidation-sentinel",
    UpstreamService.YIELD: "https://yield-pool-watcher-production.up.railway.app/api/internal/yield-pool-watcher",
    UpstreamService.LP: "https://lp-impermanent-loss-estimator-production-62b5.up.railway.app/api/internal/lp-impermanent-loss-estimator",
    UpstreamService.PERPS: "https://perps-funding-pulse-production.up.railway.app/api/internal/perps-funding-pulse",
    UpstreamService.ARBITRAGE: "https://cross-dex-arbitrage-production.up.railway.app/api/internal/cross-dex-arbitrage",
    UpstreamService.PORTFOLIO: "https://portfolio-scanner-production.up.railway.app/api/internal/portfolio-scanner",
}

DEFAULT_TIMEOUT = 10.0


class ConfigError(Exception):
    """Invalid or missing configuration."""

    pass


@dataclass
class GuardianConfig:
    """Configuration for upstream service access."""

    api_key: str
    service_urls: dict[UpstreamService, str] = field(
        default_factory=lambda: dict(DEFAULT_SERVICE_URLS)
    )
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = 1

    @classmethod
    def from_env(cls) -> "GuardianConfig":
        """
        Create config from environment variables.

        INTERNAL_API_KEY is required; there is no fallback credential.
        Service endpoints can be overridden with GUARDIAN_<SERVICE>_URL.
        """
        api_key = os.getenv("INTERNAL_API_KEY", "").strip()
        if not api_key:
            raise ConfigError("INTERNAL_API_KEY environment variable is required")

        service_urls = {
            service: os.getenv(f"GUARDIAN_{service.name}_URL") or url
            for service, url in DEFAULT_SERVICE_URLS.items()
        }

        try:
            timeout = float(os.getenv("GUARDIAN_UPSTREAM_TIMEOUT", DEFAULT_TIMEOUT))
            max_attempts = int(os.getenv("GUARDIAN_UPSTREAM_MAX_ATTEMPTS", "1"))
        except ValueError as e:
            raise ConfigError(f"Invalid upstream setting: {e}")

        if timeout <= 0:
            raise ConfigError("GUARDIAN_UPSTREAM_TIMEOUT must be positive")
        if max_attempts < 1:
            raise ConfigError("GUARDIAN_UPSTREAM_MAX_ATTEMPTS must be at least 1")

        return cls(
            api_key=api_key,
            service_urls=service_urls,
            timeout=timeout,
            max_attempts=max_attempts,
        )
