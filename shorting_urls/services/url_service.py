"""
URL Shortening Service

This service handles the core business logic for URL shortening:
- Validating long URLs and custom codes
- Generating unique random short codes with a bounded retry loop
- Resolving short codes and counting clicks
- Exposing per-code statistics and the full listing

Design Decisions:
- Random codes from an unambiguous alphabet (no 0/O, 1/l/I look-alikes)
- Uniqueness is checked before insert and enforced by the store's unique
  index; an insert conflict on a generated code just costs one attempt
- Clicks are counted before the redirect is returned, outside any
  transaction shared with the lookup
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, List, Optional

from shorting_urls.core.exceptions import (
    DuplicateCodeError,
    GenerationExhaustedError,
    InvalidShortCodeError,
    InvalidURLError,
    ShortCodeConflictError,
)
from shorting_urls.core.validators import is_valid_url, short_code_problem
from shorting_urls.db.models import Url
from shorting_urls.db.repository import UrlRepository

logger = logging.getLogger(__name__)

SHORT_CODE_ALPHABET = "23456789abcdefghijkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ"
DEFAULT_CODE_LENGTH = 8
DEFAULT_MAX_ATTEMPTS = 5


def generate_short_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    Generate a random short code.

    Args:
        length: Number of characters (default: 8)

    Returns:
        A code of exactly `length` characters from SHORT_CODE_ALPHABET
    """
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of a successful shorten request."""
    short_url: str
    long_url: str
    short_code: str


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Depends only on the UrlRepository contract, so any store implementation
    (SQL, in-memory, mock) can be plugged in at wiring time.
    """

    def __init__(
        self,
        repository: UrlRepository,
        base_url: str,
        code_length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        code_generator: Optional[Callable[[int], str]] = None,
    ):
        """
        Initialize the URL shortening service.

        Args:
            repository: URL store
            base_url: Prefix of every returned short URL (e.g. https://sho.rt)
            code_length: Length of generated codes
            max_attempts: Generated candidates tried before giving up
            code_generator: Replaces generate_short_code (tests)
        """
        self.repository = repository
        self.base_url = base_url.rstrip("/")
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.code_generator = code_generator or generate_short_code

    def build_short_url(self, short_code: str) -> str:
        return f"{self.base_url}/{short_code}"

    async def create_short_url(
        self,
        long_url: str,
        custom_code: Optional[str] = None
    ) -> ShortenResult:
        """
        Create a new short URL.

        Args:
            long_url: The long URL to shorten, stored exactly as given
            custom_code: Optional caller-chosen short code

        Returns:
            ShortenResult with short_url, long_url and short_code

        Raises:
            InvalidURLError: If URL format is invalid
            InvalidShortCodeError: If custom_code cannot be used as a path segment
            DuplicateCodeError: If custom_code is already taken
            GenerationExhaustedError: If every generated candidate collided
            DatabaseError: If database operation fails
        """
        if not is_valid_url(long_url):
            raise InvalidURLError(
                long_url,
                reason="Invalid URL format. URL must use http:// or https:// and have a host"
            )

        if custom_code:
            url = await self._create_with_custom_code(long_url, custom_code)
        else:
            url = await self._create_with_generated_code(long_url)

        logger.info(f"Created short code '{url.short_code}' for {url.long_url}")
        return ShortenResult(
            short_url=self.build_short_url(url.short_code),
            long_url=url.long_url,
            short_code=url.short_code,
        )

    async def _create_with_custom_code(self, long_url: str, custom_code: str) -> Url:
        problem = short_code_problem(custom_code)
        if problem:
            raise InvalidShortCodeError(custom_code, reason=problem)

        if await self.repository.find_by_short_code(custom_code):
            raise DuplicateCodeError(custom_code)

        try:
            return await self.repository.create(long_url, custom_code)
        except ShortCodeConflictError as e:
            # Another request claimed the code between the check and the insert
            logger.warning(f"Custom code '{custom_code}' was taken concurrently")
            raise DuplicateCodeError(custom_code) from e

    async def _create_with_generated_code(self, long_url: str) -> Url:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.code_generator(self.code_length)

            if await self.repository.find_by_short_code(candidate):
                logger.debug(f"Generated code '{candidate}' collided (attempt {attempt})")
                continue

            try:
                return await self.repository.create(long_url, candidate)
            except ShortCodeConflictError:
                logger.debug(f"Generated code '{candidate}' lost an insert race (attempt {attempt})")

        logger.error(f"Short code generation exhausted after {self.max_attempts} attempts")
        raise GenerationExhaustedError(self.max_attempts)

    async def resolve(self, short_code: str) -> Optional[str]:
        """
        Get the long URL for a redirect and count the click.

        Args:
            short_code: The short code to look up

        Returns:
            The stored long URL, or None if the code is unknown (nothing is
            mutated in that case)
        """
        url = await self.repository.find_by_short_code(short_code)
        if not url:
            return None

        await self.repository.increment_clicks(short_code)
        return url.long_url

    async def get_stats(self, short_code: str) -> Optional[Url]:
        """Get the stored record for a short code without mutating it."""
        return await self.repository.find_by_short_code(short_code)

    async def list_all(self) -> List[Url]:
        """All short URLs, newest first."""
        return await self.repository.find_all()
