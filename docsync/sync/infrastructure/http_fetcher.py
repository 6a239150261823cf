import asyncio
from dataclasses import dataclass
from urllib.parse import urljoin

import aiohttp

from docsync.config.logger_config import logger
from docsync.config.settings import USER_AGENT
from docsync.sync.domain.errors import (
    MalformedResponseError,
    NotFoundError,
    RateLimitedError,
    TooManyRedirectsError,
    TransportExhaustedError,
    UnexpectedStatusError,
)


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 5
    base_delay_seconds: float = 1.0
    timeout_seconds: float = 60.0

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        return attempt * self.base_delay_seconds


LISTING_RETRY_POLICY = RetryPolicy(max_retries=5, base_delay_seconds=5.0, timeout_seconds=45.0)
DOWNLOAD_RETRY_POLICY = RetryPolicy(max_retries=5, base_delay_seconds=1.0, timeout_seconds=60.0)

MAX_REDIRECTS = 5


class _Redirect(Exception):
    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


class RetryingFetcher:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        auth_token: str | None = None,
        policy: RetryPolicy | None = None,
        user_agent: str = USER_AGENT,
        max_redirects: int = MAX_REDIRECTS,
    ) -> None:
        self.session = session
        self.auth_token = auth_token
        self.policy = policy or DOWNLOAD_RETRY_POLICY
        self.user_agent = user_agent
        self.max_redirects = max_redirects

    def _headers(self, accept: str | None) -> dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if accept:
            headers["Accept"] = accept
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    async def fetch_text(
        self,
        url: str,
        *,
        accept: str | None = None,
        policy: RetryPolicy | None = None,
    ) -> str:
        """
        GET `url` and return the body text.

        404 and 403 fail at once. Redirects are re-issued against their target
        with a fresh retry budget. Everything else is retried per `policy`.
        """
        policy = policy or self.policy
        current_url = url
        for _ in range(self.max_redirects + 1):
            try:
                return await self._fetch_with_retries(current_url, accept, policy)
            except _Redirect as redirect:
                current_url = urljoin(current_url, redirect.location)
                logger.info("Following redirect to {}", current_url)
        raise TooManyRedirectsError(f"More than {self.max_redirects} redirects", url)

    async def _fetch_with_retries(self, url: str, accept: str | None, policy: RetryPolicy) -> str:
        timeout = aiohttp.ClientTimeout(total=policy.timeout_seconds)
        last_error: BaseException | None = None
        for attempt in range(1, policy.max_attempts + 1):
            try:
                async with self.session.get(
                    url,
                    headers=self._headers(accept),
                    timeout=timeout,
                    allow_redirects=False,
                ) as resp:
                    if resp.status == 200:
                        try:
                            return await resp.text()
                        except UnicodeDecodeError as exc:
                            raise MalformedResponseError(f"Response from {url} is not valid text: {exc}") from exc
                    if resp.status == 404:
                        raise NotFoundError(f"Not found (404): {url}", url)
                    if resp.status == 403:
                        raise RateLimitedError(f"Access forbidden (403): {url}", url)
                    location = resp.headers.get("Location")
                    if 300 <= resp.status < 400 and location:
                        raise _Redirect(location)
                    raise UnexpectedStatusError(resp.status, resp.reason, url)
            except (UnexpectedStatusError, aiohttp.ClientError, asyncio.TimeoutError) as exc:
                last_error = exc
                if attempt == policy.max_attempts:
                    break
                wait_time = policy.delay_for(attempt)
                logger.warning(
                    "Request to {} failed ({}). Attempt {}/{}, retrying in {}s...",
                    url,
                    type(exc).__name__,
                    attempt,
                    policy.max_attempts,
                    wait_time,
                )
                await asyncio.sleep(wait_time)

        logger.error("Failed after {} attempts: {} ({})", policy.max_attempts, url, last_error)
        raise TransportExhaustedError(url, policy.max_attempts, last_error)
