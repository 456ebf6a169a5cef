# storefront/services/lock_service.py
import uuid
from contextlib import contextmanager

import redis
from tenacity import RetryError

from storefront.domain.errors import Unexpected
from storefront.utils.retry import poll_until_true, redis_retry
from storefront.utils.settings import CART_LOCK_TTL_SECONDS, CART_LOCK_WAIT_SECONDS, REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nikt nie wcisnie sie miedzy GET a DEL
#wiec zwalnia tylko ten kto zalozyl blokade (token)


class LockService:
    """
    -blokada jednej linii koszyka (user, produkt)
    -zwalnianie blokady tylko przez wlasciciela tokenu
    -czekanie na cudza blokade z limitem czasu
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = CART_LOCK_TTL_SECONDS,
        wait: float = CART_LOCK_WAIT_SECONDS,
    ):
        if client is None:
            client = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.redis = client
        self.ttl = ttl
        self.wait = wait

    @staticmethod
    def cart_line_key(user_id: int, product_id: int) -> str:
        return f"cart:{user_id}:product:{product_id}:lock"

    @redis_retry()
    def try_acquire(self, key: str, token: str, ttl: int) -> bool:
        #SET key token NX EX ttl
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    def acquire(self, key: str, token: str) -> bool:
        @poll_until_true(timeout=self.wait)
        def _attempt():
            return self.try_acquire(key, token, self.ttl)

        try:
            return _attempt()
        except RetryError:
            return False

    @contextmanager
    def cart_line(self, user_id: int, product_id: int):
        key = self.cart_line_key(user_id, product_id)
        token = uuid.uuid4().hex

        logger.debug(f"Acquire lock {key}")
        try:
            acquired = self.acquire(key, token)
        except redis.RedisError as e:
            logger.exception(f"Redis niedostepny przy blokadzie {key}")
            raise Unexpected("Lock service unavailable") from e

        if not acquired:
            logger.warning(f"Linia koszyka {key} zajeta dluzej niz {self.wait}s")
            raise Unexpected("Cart line is busy, try again")

        try:
            yield
        finally:
            try:
                released = self.release(key, token)
            except redis.RedisError as e:
                # blokada i tak wygasnie po TTL
                logger.warning(f"Failed to release lock {key}: {e}")
            else:
                if not released:
                    logger.warning(f"Lock {key} wygasl przed zwolnieniem")
