"""HTTP client for the storage daemon's IPFS-style API."""

import asyncio
import json
import uuid
from pathlib import Path
from typing import Optional, Union

import httpx
from pydantic import ValidationError

from common.logging_config import get_logger
from horizon.config import Configuration
from horizon.exceptions import StorageServiceError, StorageUnavailableError
from horizon.schemas import (
    AddResponse,
    KeygenResponse,
    ListKeysResponse,
    PublishResponse,
    RemoveKeyResponse,
    RenameKeyResponse,
    ResolveResponse,
    ServiceErrorResponse,
)
from horizon.storage_api import StorageAPI

logger = get_logger(__name__)

# Gateway failures in front of the daemon; the daemon itself answers 500 with an error body.
RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})


class IPFSClient(StorageAPI):
    """Async HTTP client for the storage daemon with retry logic and error handling."""

    def __init__(self, config: Configuration, session: Optional[httpx.AsyncClient] = None):
        """
        Initialize storage client.

        Args:
            config: Configuration instance
            session: Optional preconfigured httpx.AsyncClient (testing)
        """
        self.config = config
        self.session = session or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout
        )
        logger.info(f"Initialized IPFSClient [base_url={config.api_url}]")

    async def close(self) -> None:
        await self.session.aclose()

    async def _request_with_retry(
        self,
        endpoint: str,
        max_retries: Optional[int] = None,
        read_only: bool = False,
        **kwargs
    ) -> httpx.Response:
        """
        POST to an API endpoint, retrying on failures that never reached the daemon.

        Connection failures and gateway errors (502/503/504 without a daemon
        error body) are retried for every endpoint. Timeouts are retried only
        for read-only endpoints, since the daemon may have already applied
        the request. Daemon error bodies are raised at once: the daemon
        reports ordinary failures such as unresolvable names as HTTP 500.

        Args:
            endpoint: API endpoint path (e.g. "/key/list")
            max_retries: Max retry attempts (uses config default if None)
            read_only: Whether the request can be repeated after a timeout
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            Successful HTTP response

        Raises:
            StorageServiceError: If the daemon answers with an error
            StorageUnavailableError: If the daemon cannot be reached
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        request_id = str(uuid.uuid4())
        last_exception = None

        logger.debug(f"Making request: POST {endpoint} [request_id={request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = await self.session.post(endpoint, **kwargs)
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                unsent = isinstance(e, (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout))
                if attempt < max_retries and (unsent or read_only):
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"POST {endpoint} error={type(e).__name__}, retrying in {delay}s [request_id={request_id}]"
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error(
                    f"Network error (not retried): POST {endpoint} error={type(e).__name__} {e} "
                    f"[request_id={request_id}]"
                )
                break

            logger.debug(
                f"Response received: POST {endpoint} status={response.status_code} [request_id={request_id}]"
            )

            if (
                response.status_code in RETRYABLE_STATUS_CODES
                and self._parse_service_error(response) is None
                and attempt < max_retries
            ):
                delay = backoff ** attempt
                logger.warning(
                    f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                    f"POST {endpoint} status={response.status_code}, retrying in {delay}s [request_id={request_id}]"
                )
                await asyncio.sleep(delay)
                continue

            if response.status_code >= 400:
                raise self._error_from_response(response)

            return response

        if isinstance(last_exception, httpx.TimeoutException):
            raise StorageUnavailableError("Request timed out. Is the horizon daemon overloaded?") from last_exception
        raise StorageUnavailableError("Cannot connect to the storage daemon. Is it running?") from last_exception

    def _error_from_response(self, response: httpx.Response) -> StorageServiceError:
        """
        Map an error response to a StorageServiceError.

        Args:
            response: HTTP response object

        Returns:
            Exception describing the failure
        """
        error = self._parse_service_error(response)
        if error is not None:
            message, code = error.message, error.code
        else:
            message, code = response.text or 'Unknown error', None

        logger.warning(f"Storage daemon error: status={response.status_code} message={message}")
        return StorageServiceError(message, status_code=response.status_code, code=code)

    @staticmethod
    def _parse_service_error(response: httpx.Response) -> Optional[ServiceErrorResponse]:
        try:
            return ServiceErrorResponse.model_validate_json(response.content)
        except ValidationError:
            return None

    @staticmethod
    def _last_json_line(response: httpx.Response) -> str:
        # Streaming endpoints return one JSON object per line.
        lines = [line for line in response.text.splitlines() if line.strip()]
        return lines[-1] if lines else "{}"

    async def add_blob(self, content: Union[bytes, Path], name: Optional[str] = None) -> AddResponse:
        if isinstance(content, Path):
            name = name or content.name
            logger.info(f"Adding file to storage: {content}")
            content = await asyncio.to_thread(content.read_bytes)
        else:
            name = name or "blob"
            logger.info(f"Adding {len(content)} bytes to storage as {name}")

        response = await self._request_with_retry('/add', files={'file': (name, content)})
        result = AddResponse.model_validate_json(self._last_json_line(response))
        logger.info(f"Added {result.name} to storage with hash {result.hash}, size {result.size}")
        return result

    async def fetch_blob(self, address: str) -> bytes:
        logger.info(f"Fetching object from storage: {address}")
        response = await self._request_with_retry('/cat', read_only=True, params={'arg': address})
        logger.info(f"Fetch of {address} returned {len(response.content)} bytes")
        return response.content

    async def generate_keypair(self, name: str, algorithm: str, size: int) -> KeygenResponse:
        logger.info(f"Generating key {name} of type {algorithm}, size {size}")
        response = await self._request_with_retry(
            '/key/gen',
            params={'arg': name, 'type': algorithm, 'size': size}
        )
        result = KeygenResponse.model_validate_json(response.content)
        logger.info(f"Generated key {name} with ID {result.id}")
        return result

    async def list_keypairs(self) -> ListKeysResponse:
        logger.info("Listing keypairs")
        response = await self._request_with_retry('/key/list', read_only=True)
        result = ListKeysResponse.model_validate_json(response.content)
        logger.info(f"Found keypairs: {', '.join(f'{k.name}: {k.id}' for k in result.keys)}")
        return result

    async def remove_keypair(self, name: str) -> RemoveKeyResponse:
        logger.info(f"Removing key {name}")
        response = await self._request_with_retry('/key/rm', params={'arg': name})
        result = RemoveKeyResponse.model_validate_json(response.content)
        logger.info(f"Removed key {name}")
        return result

    async def rename_keypair(self, name: str, new_name: str) -> RenameKeyResponse:
        logger.info(f"Renaming key {name} to {new_name}")
        response = await self._request_with_retry(
            '/key/rename',
            params=[('arg', name), ('arg', new_name)]
        )
        result = RenameKeyResponse.model_validate_json(response.content)
        logger.info(f"Renamed key {result.was} to {result.now}")
        return result

    async def publish_pointer(self, address: str, keypair_name: Optional[str] = None) -> PublishResponse:
        logger.info(f"Publishing {address} under key {keypair_name or '[node own peer id]'}")
        params = {'arg': address}
        if keypair_name is not None:
            params['key'] = keypair_name
        response = await self._request_with_retry('/name/publish', params=params)
        result = PublishResponse.model_validate_json(response.content)
        logger.info(f"Published {result.value} under name {result.name}")
        return result

    async def resolve_pointer(self, name: str, recursive: Optional[bool] = None) -> ResolveResponse:
        logger.info(f"Resolving name {name}")
        params = {'arg': name}
        if recursive is not None:
            params['recursive'] = json.dumps(recursive)
        response = await self._request_with_retry('/name/resolve', read_only=True, params=params)
        result = ResolveResponse.model_validate_json(response.content)
        logger.info(f"Resolved name {name} to path {result.path}")
        return result
