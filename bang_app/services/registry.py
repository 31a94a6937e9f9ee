import logging
from typing import Optional

from bang_app.config import settings
from bang_app.exceptions import (
    DeletionFailure,
    GenerationFailure,
    InvalidUrl,
    LookupFailure,
    MissingKey,
    MissingParameter,
    MissingSlug,
    NotFound,
    PersistenceFailure,
    RandomSourceError,
    StoreError,
    Unauthorized,
)
from bang_app.hits.strategies import HitScheduler
from bang_app.models.record import RedirectRecord
from bang_app.schemas.link import CreatedLink
from bang_app.services.generator import generate_admin_key, generate_slug
from bang_app.services.validation import is_missing_slug, is_valid_url
from bang_app.storage.codec import (
    CLICKS_INDEX,
    TARGET_INDEX,
    decode_clicks,
    decode_record,
    encode_record,
)
from bang_app.storage.strategies import RecordStore


logger = logging.getLogger(__name__)


class RedirectRegistry:
    """
    Redirect registry with dependency injection for the store and hit scheduler.

    Owns the slug -> (target URL, admin key, click count) mapping:
    - Store and scheduler are injected (not created internally)
    - No in-process state: everything lives in the store
    - Every error leaves as a RegistryError subclass

    Per-slug lifecycle: absent -> active -> deleted (== absent).
    """

    def __init__(
        self,
        store: RecordStore,
        hits: HitScheduler,
        max_retries: Optional[int] = None
    ):
        """
        Initialize registry with dependencies.

        Args:
            store: Record store strategy (Redis in production, in-memory in tests)
            hits: Hit scheduler strategy (runs click counter increments)
            max_retries: Slug generation attempts before giving up on collisions
        """
        self.store = store
        self.hits = hits
        self.max_retries = max_retries if max_retries is not None else settings.max_retries

    async def create(self, url: Optional[str]) -> CreatedLink:
        """Register a new redirect.

        Process:
        1. Validate the target URL
        2. Generate a slug that is not taken yet (retry on collision)
        3. Generate the admin key
        4. Persist [url, key, "0"]

        The admin key leaves the registry only here.
        """
        if not url:
            raise MissingParameter()
        if not is_valid_url(url):
            raise InvalidUrl()

        try:
            slug = await self._free_slug()
            key = generate_admin_key()
        except RandomSourceError as e:
            logger.error("Random source failure: %s", e)
            raise GenerationFailure() from e

        record = RedirectRecord(target_url=url, admin_key=key, clicks=0)
        try:
            await self.store.rpush(slug, *encode_record(record))
        except StoreError as e:
            logger.exception("Failed to persist redirect %s", slug)
            raise PersistenceFailure() from e

        logger.info("Registered redirect %s", slug)
        return CreatedLink(slug=slug, key=key)

    async def _free_slug(self) -> str:
        """Draw slugs until one is unused.

        Note: exists-then-push is two commands, so two creates drawing the same
        slug at the same instant can still collide. With 62^5 slugs that window
        is accepted.
        """
        for attempt in range(self.max_retries):
            slug = generate_slug()
            try:
                taken = await self.store.exists(slug)
            except StoreError as e:
                logger.exception("Failed to check slug availability")
                raise PersistenceFailure() from e
            if not taken:
                return slug
            logger.warning("Slug collision on attempt %d", attempt + 1)

        raise GenerationFailure(
            f"could not generate a unique slug after {self.max_retries} attempts"
        )

    async def resolve(self, slug: Optional[str]) -> str:
        """
        Get the redirect target for a slug and count the click.

        The increment is handed to the hit scheduler and never delays or
        fails the redirect itself.
        """
        if is_missing_slug(slug):
            raise MissingSlug()

        try:
            target = await self.store.lindex(slug, TARGET_INDEX)
        except StoreError as e:
            logger.exception("Failed to read redirect %s", slug)
            raise NotFound() from e

        if not target:
            raise NotFound()

        await self.hits.schedule(slug, lambda: self.increment_clicks(slug))
        return target

    async def increment_clicks(self, slug: str) -> None:
        """
        Read-modify-write of the click counter.

        No transaction: concurrent resolves of one slug may lose increments.
        Counters are informational, so that is accepted.

        Legacy two-element records get the counter appended instead.
        """
        raw = await self.store.lindex(slug, CLICKS_INDEX)
        if raw is None:
            await self.store.rpushx(slug, "1")
            return
        await self.store.lset(slug, CLICKS_INDEX, str(decode_clicks(raw) + 1))

    async def stats(self, slug: Optional[str], key: Optional[str]) -> str:
        """
        Get the click counter for a slug, as a decimal string.

        Fails closed: an unknown slug is reported the same way as a wrong key,
        so stats never reveals whether a slug exists.
        """
        if is_missing_slug(slug):
            raise MissingSlug()
        if not key:
            raise MissingKey()

        record = await self._load(slug, LookupFailure)
        if record is None or not record.key_matches(key):
            raise Unauthorized()

        return str(record.clicks)

    async def delete(self, slug: Optional[str], key: Optional[str]) -> None:
        """Remove a redirect entirely, given its admin key"""
        if is_missing_slug(slug):
            raise MissingSlug()
        if not key:
            raise MissingKey()

        record = await self._load(slug, DeletionFailure)
        if record is None:
            raise NotFound()
        if not record.key_matches(key):
            raise Unauthorized()

        try:
            await self.store.delete(slug)
        except StoreError as e:
            logger.exception("Failed to delete redirect %s", slug)
            raise DeletionFailure() from e

        logger.info("Deleted redirect %s", slug)

    async def _load(self, slug: str, failure) -> Optional[RedirectRecord]:
        try:
            elements = await self.store.lrange(slug, 0, -1)
        except StoreError as e:
            logger.exception("Failed to read redirect %s", slug)
            raise failure() from e
        return decode_record(elements)
