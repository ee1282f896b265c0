import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from codeitout.config import Config, logger
from codeitout.data.schemas import JudgeResult, SubmissionUnit
from codeitout.errors import (
    JudgeProtocolException,
    JudgeTimeoutException,
    JudgeUnavailableException,
)

judge_logger = logger.getChild("judge")

RESULT_FIELDS = "token,stdout,stderr,status,compile_output,message,time,memory"


def chunked(items: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class JudgeClient:
    """
    Client for the Judge0 batch API.

    Submissions are sent in sub-batches of at most ``batch_size`` units and
    polled until every token reaches a terminal status. ``sleep`` and
    ``clock`` are injectable so callers can drive polling without real delays.
    """

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        batch_size: int = 20,
        poll_interval: float = 1.0,
        poll_timeout: float = 60.0,
        request_timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.base_url = base_url.rstrip("/")
        self.headers = {"X-Auth-Token": auth_token} if auth_token else {}
        self.batch_size = batch_size
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.request_timeout = request_timeout
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_config(cls, config=Config) -> "JudgeClient":
        return cls(
            base_url=config.JUDGE0_API_URL,
            auth_token=config.JUDGE0_AUTH_TOKEN,
            batch_size=config.JUDGE0_BATCH_SIZE,
            poll_interval=config.JUDGE0_POLL_INTERVAL,
            poll_timeout=config.JUDGE0_POLL_TIMEOUT,
            request_timeout=config.JUDGE0_REQUEST_TIMEOUT,
        )

    @property
    def http_client(self) -> httpx.AsyncClient:
        # One pooled client for all chunks and poll rounds
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.request_timeout)
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def submit_batch(self, units: Sequence[SubmissionUnit]) -> List[str]:
        """Submit all units and return one token per unit, in input order."""
        if not units:
            return []

        chunks = list(chunked(units, self.batch_size))
        judge_logger.info(
            f"Submitting {len(units)} units to Judge0 in {len(chunks)} batch(es)"
        )
        token_chunks = await asyncio.gather(
            *(self._submit_chunk(chunk) for chunk in chunks)
        )
        return [token for chunk_tokens in token_chunks for token in chunk_tokens]

    async def poll_batch_results(self, tokens: Sequence[str]) -> List[JudgeResult]:
        """Poll until every token is terminal. Results keep the order of ``tokens``."""
        if not tokens:
            return []

        results: List[Optional[JudgeResult]] = [None] * len(tokens)
        pending = list(range(len(tokens)))
        deadline = self._clock() + self.poll_timeout
        attempt = 0

        while True:
            attempt += 1
            fetched = await self._fetch_results([tokens[i] for i in pending])

            still_pending = []
            for index, result in zip(pending, fetched):
                if result.is_terminal:
                    results[index] = result
                else:
                    still_pending.append(index)
            pending = still_pending

            if not pending:
                judge_logger.info(
                    f"All {len(tokens)} submissions finished after {attempt} poll(s)"
                )
                return results

            if self._clock() >= deadline:
                judge_logger.error(
                    f"Judge0 polling timed out with {len(pending)}/{len(tokens)} "
                    f"submissions unfinished"
                )
                raise JudgeTimeoutException(
                    detail=f"Timed out after {self.poll_timeout}s waiting for "
                    f"{len(pending)} judge result(s)"
                )

            judge_logger.debug(
                f"{len(pending)} submissions still running, retrying in "
                f"{self.poll_interval}s"
            )
            await self._sleep(self.poll_interval)

    async def _submit_chunk(self, units: Sequence[SubmissionUnit]) -> List[str]:
        payload = {"submissions": [unit.model_dump() for unit in units]}
        data = await self._request(
            "POST",
            "/submissions/batch",
            params={"base64_encoded": "false"},
            json=payload,
        )

        if not isinstance(data, list) or len(data) != len(units):
            raise JudgeProtocolException(
                detail=f"Expected {len(units)} submission tokens from Judge0"
            )

        tokens = []
        for entry in data:
            token = entry.get("token") if isinstance(entry, dict) else None
            if not token:
                raise JudgeProtocolException(
                    detail=f"Judge0 rejected a submission: {entry}"
                )
            tokens.append(token)
        return tokens

    async def _fetch_results(self, tokens: Sequence[str]) -> List[JudgeResult]:
        chunks = await asyncio.gather(
            *(self._fetch_chunk(chunk) for chunk in chunked(tokens, self.batch_size))
        )
        return [result for chunk_results in chunks for result in chunk_results]

    async def _fetch_chunk(self, tokens: Sequence[str]) -> List[JudgeResult]:
        data = await self._request(
            "GET",
            "/submissions/batch",
            params={
                "tokens": ",".join(tokens),
                "base64_encoded": "false",
                "fields": RESULT_FIELDS,
            },
        )

        submissions = data.get("submissions") if isinstance(data, dict) else None
        if not isinstance(submissions, list) or len(submissions) != len(tokens):
            raise JudgeProtocolException(
                detail=f"Expected {len(tokens)} submission results from Judge0"
            )

        by_token: Dict[str, JudgeResult] = {}
        for entry in submissions:
            try:
                result = JudgeResult.model_validate(entry)
            except ValidationError as e:
                raise JudgeProtocolException(
                    detail=f"Malformed submission result from Judge0: {entry}"
                ) from e
            by_token[result.token] = result

        try:
            return [by_token[token] for token in tokens]
        except KeyError as e:
            raise JudgeProtocolException(
                detail=f"Judge0 did not return a result for token {e.args[0]}"
            ) from e

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.request(
                method, url, headers=self.headers, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            judge_logger.error(f"Judge0 HTTP error on {method} {path}: {e}")
            raise JudgeUnavailableException(detail=f"Judge0 error: {str(e)}") from e

        try:
            return response.json()
        except ValueError as e:
            judge_logger.error(f"Judge0 returned invalid JSON on {method} {path}")
            raise JudgeProtocolException(
                detail="Judge0 returned a response that is not valid JSON"
            ) from e


judge_client = JudgeClient.from_config(Config)


def get_judge_client() -> JudgeClient:
    return judge_client
