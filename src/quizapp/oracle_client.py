"""Async client for the answer oracle."""
import asyncio
import logging
from typing import Optional

import httpx

from .config import settings
from .exceptions import (
    MalformedResponse,
    OracleRejected,
    OracleTimeout,
    OracleUnavailable,
)

logger = logging.getLogger(__name__)

CORRECT_ANSWER_PATH = "/api/get-correct-answer"


class OracleClient:
    """Looks up correct answers by question id. Never sends the user's selection."""

    def __init__(
        self,
        base_url: str = settings.ORACLE_URL,
        timeout: float = settings.ORACLE_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Oracle host, e.g. http://localhost:3000
            timeout: Seconds before a lookup fails with OracleTimeout
            transport: Alternative httpx transport (mock or in-process app)
        """
        self.base_url = base_url
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def get_correct_answer(self, question_id: int) -> str:
        try:
            # httpx bounds each phase; wait_for bounds the whole exchange.
            response = await asyncio.wait_for(
                self._client.post(CORRECT_ANSWER_PATH, json={"question_id": question_id}),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise OracleTimeout(f"Oracle did not answer within {self.timeout}s") from e
        except httpx.TimeoutException as e:
            raise OracleTimeout(f"Oracle did not answer in time: {e}") from e
        except httpx.HTTPError as e:
            raise OracleUnavailable(f"Oracle unreachable: {e}") from e

        if not response.is_success:
            raise OracleRejected(response.status_code, _error_message(response))

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Oracle returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("correct_answer"), str):
            raise MalformedResponse(f"Unexpected oracle payload: {data!r}")

        logger.debug(f"Oracle answered question {question_id}")
        return data["correct_answer"]

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> "OracleClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return None
