# tutoring/db/gateway.py
"""
Raw-SQL access for the attendance scanning path.

``QueryGateway.execute(sql, args)`` runs one statement with positional ``?``
parameters and returns the rows as plain dicts. Each call is retried a fixed
number of times with linear backoff and a per-attempt timeout. A circuit
breaker stops calls for a cooldown window after too many failures, so a dead
database fails fast instead of stalling every scan.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    pass


class DatabaseUnavailable(GatewayError):
    """Circuit breaker is open."""


class QueryFailed(GatewayError):
    """All attempts failed."""


@dataclass
class QueryResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0
    last_row_id: Optional[int] = None


class CircuitBreaker:
    def __init__(self, threshold: int = 5, cooldown_seconds: float = 30.0,
                 clock: Callable[[], float] = time.monotonic):
        self.threshold = threshold
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self.failures = 0
        self.is_open = False
        self.last_failure_at = 0.0

    def allow(self) -> bool:
        if not self.is_open:
            return True
        if self._clock() - self.last_failure_at > self.cooldown_seconds:
            self.is_open = False
            self.failures = 0
            logger.info("🔄 Circuit breaker closed after cooldown")
            return True
        return False

    def record_success(self) -> None:
        self.failures = max(0, self.failures - 1)
        if self.failures == 0:
            self.is_open = False

    def record_failure(self) -> None:
        self.failures += 1
        self.last_failure_at = self._clock()
        if self.failures >= self.threshold and not self.is_open:
            self.is_open = True
            logger.warning(f"🚫 Circuit breaker opened after {self.failures} failures")


class QueryGateway:
    def __init__(
        self,
        engine: Engine,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 5.0,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.engine = engine
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.breaker = breaker or CircuitBreaker()

    def _run(self, sql: str, args: Sequence[Any]) -> QueryResult:
        with self.engine.begin() as conn:
            result = conn.exec_driver_sql(sql, tuple(args))
            if result.returns_rows:
                rows = [dict(row) for row in result.mappings().all()]
                return QueryResult(rows=rows, rowcount=len(rows))
            return QueryResult(rowcount=result.rowcount, last_row_id=result.lastrowid)

    async def execute(self, sql: str, args: Sequence[Any] = (),
                      description: str = "Database query") -> QueryResult:
        if not self.breaker.allow():
            raise DatabaseUnavailable("Circuit breaker is open - database temporarily unavailable")

        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                logger.debug(f"🔍 {description} (attempt {attempt}/{self.max_retries})")
                result = await asyncio.wait_for(
                    asyncio.to_thread(self._run, sql, args), timeout=self.timeout
                )
                self.breaker.record_success()
                return result
            except asyncio.TimeoutError as e:
                last_error = e
                logger.warning(f"⏱️ {description} attempt {attempt} timed out after {self.timeout}s")
            except Exception as e:
                last_error = e
                logger.warning(f"⚠️ {description} attempt {attempt} failed: {e}")

            self.breaker.record_failure()
            if attempt < self.max_retries:
                delay = self.retry_delay * attempt
                logger.info(f"⏳ Retrying {description} in {delay}s")
                await asyncio.sleep(delay)

        logger.error(f"❌ {description} failed after {self.max_retries} attempts")
        raise QueryFailed(f"{description} failed: {last_error or 'unknown error'}")
