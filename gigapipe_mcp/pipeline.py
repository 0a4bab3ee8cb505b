"""
Tool call dispatch.

QueryDispatcher runs one tool call through the request pipeline:
resolve config -> build request -> execute -> validate response.
Each call is independent; the only shared state is the executor's
connection pool.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .codec import normalize
from .config import BackendConfig, resolve_config
from .errors import GigapipeError, UnknownOperationError
from .executor import HTTPExecutor
from .operations import OPERATIONS, OperationSpec
from .request_builder import build_request
from .utils import truncate_string


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolOutcome:
    """Result of a tool call as handed to the protocol layer."""

    text: str
    is_error: bool = False


class QueryDispatcher:
    def __init__(
        self,
        executor: HTTPExecutor,
        config_provider: Callable[[], BackendConfig] = resolve_config,
        operations: Mapping[str, OperationSpec] | None = None,
    ):
        """
        Args:
            executor: Executor used for every upstream request.
            config_provider: Called once per tool call. The default re-reads
                the environment each time; pass a constant provider to pin
                one configuration for the process lifetime.
            operations: Operation table. Defaults to the bundled manifest.
        """
        self.executor = executor
        self.config_provider = config_provider
        self.operations = OPERATIONS if operations is None else operations

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None) -> str:
        """Run a tool call and return the upstream JSON text.

        Raises:
            GigapipeError: For unknown tools, missing arguments, transport
                failures, non-200 responses and undecodable bodies.
        """
        spec = self.operations.get(name)
        if spec is None:
            raise UnknownOperationError(name)

        config = self.config_provider()
        request = build_request(spec, arguments or {}, config)
        logger.debug(f"{name}: {request.method} {request.url}")

        body = await self.executor.execute(request)
        return normalize(body)

    async def invoke(self, name: str, arguments: Mapping[str, Any] | None) -> ToolOutcome:
        """Run a tool call, turning pipeline failures into an error outcome."""
        try:
            text = await self.dispatch(name, arguments)
        except GigapipeError as e:
            logger.warning(f"Tool {name} failed: {e}")
            return ToolOutcome(text=str(e), is_error=True)

        logger.debug(f"{name} returned {len(text)} chars: {truncate_string(text, 200)}")
        return ToolOutcome(text=text)
