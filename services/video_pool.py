"""
Persisted pool of stock videos backing the watch endpoint.

The provider is rate limited, so videos are fetched in bulk with a few
generic search terms, stored once, and then handed out by catalog id:
the same movie id always maps to the same video while the pool is unchanged.
"""

import logging
import threading
import time
from concurrent.futures import Future

from dao import video_pool_dao
from services.pexels import PexelsClient

logger = logging.getLogger(__name__)

DEFAULT_QUERIES = ("cinematic", "movie", "film", "trailer")


class VideoPool:

    def __init__(self, store, provider, min_size=50, max_size=500, evict_margin=50,
                 queries=DEFAULT_QUERIES, per_page=30, query_delay=2.0,
                 sleep=time.sleep, app=None):
        self.store = store
        self.provider = provider
        self.min_size = min_size
        self.max_size = max_size
        self.evict_margin = evict_margin
        self.queries = list(queries)
        self.per_page = per_page
        self.query_delay = query_delay
        self.sleep = sleep
        self.app = app

        self._lock = threading.Lock()
        self._pending = None

    def select_video(self, catalog_id: int):
        """Pooled video for a catalog id, or None when the pool is unavailable."""
        videos = self.store.all_ordered()
        if not videos:
            self.initialize_pool()
            videos = self.store.all_ordered()
            if not videos:
                logger.warning("Video pool empty after initialization")
                return None
        elif len(videos) < self.min_size:
            self.initialize_in_background()

        return videos[catalog_id % len(videos)]

    def initialize_pool(self) -> int:
        """
        Fills the pool up to `min_size`. Concurrent callers share one run and
        get its result. Returns the pool size afterwards.
        """
        with self._lock:
            pending = self._pending
            runner = pending is None
            if runner:
                pending = self._pending = Future()

        if not runner:
            return pending.result()

        count = 0
        try:
            count = self._fill()
        except Exception:
            logger.exception("Error initializing video pool")
            count = self._safe_count()
        finally:
            with self._lock:
                self._pending = None
            if not pending.done():
                pending.set_result(count)
        return count

    def _fill(self) -> int:
        size = self.store.count()
        # another run may have filled it already
        if size >= self.min_size:
            return size

        logger.info("Initializing video pool (current: %d, target: %d)", size, self.min_size)
        for i, query in enumerate(self.queries):
            if size >= self.min_size:
                break
            if i > 0 and self.query_delay:
                self.sleep(self.query_delay)

            try:
                response = self.provider.search(query, per_page=self.per_page)
            except Exception as e:
                logger.warning('Failed to fetch videos for query "%s": %s', query, e)
                continue

            for video in (response or {}).get("videos") or []:
                if size >= self.min_size:
                    break
                _, created = self.store.add_if_absent(video)
                if created:
                    size += 1

        final_count = self.store.count()
        logger.info("Video pool initialized: %d videos available", final_count)
        return final_count

    def _safe_count(self) -> int:
        try:
            return self.store.count()
        except Exception:
            logger.exception("Could not count video pool")
            return 0

    def initialize_in_background(self):
        """
        Fire-and-forget top-up; errors end up in the log only. Returns the
        started thread, or None when a fill is already running.
        """
        with self._lock:
            if self._pending is not None:
                return None
        app = self.app

        def run():
            try:
                if app is not None:
                    with app.app_context():
                        self.initialize_pool()
                else:
                    self.initialize_pool()
            except Exception:
                logger.exception("Background video pool initialization failed")

        thread = threading.Thread(target=run, name="video-pool-init", daemon=True)
        thread.start()
        return thread

    def refresh_pool(self) -> int:
        """Evicts the oldest videos once the pool is full, then tops it up. Returns net added."""
        current = self.store.count()
        if current >= self.max_size:
            to_remove = current - self.max_size + self.evict_margin
            self.store.delete_oldest(to_remove)

        before = self.store.count()
        self.initialize_pool()
        after = self.store.count()
        return after - before


def init_video_pool(app, store=None, provider=None) -> VideoPool:
    pool = VideoPool(
        store=store or video_pool_dao,
        provider=provider or PexelsClient.from_config(app.config),
        min_size=app.config.get("VIDEO_POOL_MIN_SIZE", 50),
        max_size=app.config.get("VIDEO_POOL_MAX_SIZE", 500),
        evict_margin=app.config.get("VIDEO_POOL_EVICT_MARGIN", 50),
        queries=app.config.get("VIDEO_POOL_QUERIES", DEFAULT_QUERIES),
        per_page=app.config.get("VIDEO_POOL_PER_PAGE", 30),
        query_delay=app.config.get("VIDEO_POOL_QUERY_DELAY_SECONDS", 2),
        app=app,
    )
    app.extensions["video_pool"] = pool
    return pool
