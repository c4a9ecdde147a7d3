"""Request workflow shared by every front end.

`process` turns one request (token, filter, optional complete/skip
instructions) into everything a page needs to show the next task. The
presentation layer renders the ProcessResult; nothing here produces markup.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, tzinfo

from .adapters.memory_store import MemoryStore
from .adapters.sqlite_store import SqliteStore
from .adapters.todoist_api import TodoistAdapter
from .adapters.unsplash_api import UnsplashAdapter
from .config import Config, load_config
from .core.images import Image
from .core.tasks import Task
from .core.time import now as tz_now
from .core.time import resolve_timezone
from .errors import MissingParameterError, SingleTaskError
from .ports import ImageSource, TaskSource
from .task_cache import TaskCache, make_cache_key

logger = logging.getLogger(__name__)

APP_TITLE = "SingleTask"
TITLE_MAX_LENGTH = 20


@dataclass(frozen=True)
class Link:
    name: str
    href: str


def get_nav() -> list[Link]:
    return [Link(name=APP_TITLE, href="/")]


@dataclass
class AppContext:
    """Handle passed explicitly to every workflow: config plus wired adapters."""

    config: Config
    cache: TaskCache
    tasks: TaskSource
    images: ImageSource


def build_context(config: Config | None = None) -> AppContext:
    """Wire adapters from configuration."""
    config = config or load_config()
    store = SqliteStore(config.cache_path) if config.cache_path else MemoryStore()
    return AppContext(
        config=config,
        cache=TaskCache(store),
        tasks=TodoistAdapter(base_url=config.todoist_url, timeout=config.request_timeout),
        images=UnsplashAdapter(
            api_key=config.unsplash_api_key if config.live_images else None,
            timeout=config.request_timeout,
        ),
    )


@dataclass
class ProcessRequest:
    token: str
    filter: str
    timezone: str | None = None
    complete_task_id: str | None = None
    skip_task_id: str | None = None

    @property
    def cache_key(self) -> str:
        return make_cache_key(self.token, self.filter)

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "ProcessRequest":
        """Build a request from query parameters; token and filter are required."""
        for required in ("token", "filter"):
            if not params.get(required):
                raise MissingParameterError(required)
        return cls(
            token=params["token"],
            filter=params["filter"],
            timezone=params.get("timezone") or None,
            complete_task_id=params.get("complete_task_id") or None,
            skip_task_id=params.get("skip_task_id") or None,
        )


@dataclass
class ProcessResult:
    """Everything the presentation layer needs for one page."""

    title: str
    navigation: list[Link]
    tasks: list[Task]
    filter: str
    image: Image
    completion_error: SingleTaskError | None = None
    timezone: tzinfo | None = field(default=None, repr=False)

    @property
    def no_task(self) -> bool:
        return not self.tasks

    @property
    def next_task(self) -> Task | None:
        return self.tasks[0] if self.tasks else None


async def complete_and_read(
    context: AppContext,
    request: ProcessRequest,
    tz: tzinfo,
    now: datetime,
) -> tuple[list[Task], SingleTaskError | None]:
    """
    Run the completion call and the cache read concurrently, then join both.

    The page never proceeds while a completion for the same task is still in
    flight. A failed completion is logged and returned alongside the task
    list; a failed read is raised.
    """

    async def fetch() -> list[Task]:
        return await context.tasks.list_by_filter(request.token, request.filter, tz)

    read = context.cache.read_through(
        request.cache_key,
        fetch,
        now,
        completing_id=request.complete_task_id,
        skip_id=request.skip_task_id,
    )
    if request.complete_task_id is None:
        return await read, None

    completion = asyncio.create_task(context.tasks.complete(request.token, request.complete_task_id))
    reading = asyncio.create_task(read)
    completed, tasks = await asyncio.gather(completion, reading, return_exceptions=True)

    completion_error = None
    if isinstance(completed, SingleTaskError):
        logger.error(f"Completing task {request.complete_task_id} failed: {completed}")
        completion_error = completed
    elif isinstance(completed, BaseException):
        logger.error(f"Completing task {request.complete_task_id} failed: {completed!r}")
        completion_error = SingleTaskError("complete_task", repr(completed))

    if isinstance(tasks, BaseException):
        raise tasks
    return tasks, completion_error


async def resolve_request_timezone(context: AppContext, request: ProcessRequest) -> tzinfo:
    """Explicit timezone from the request, else the account's cached timezone."""
    if request.timezone:
        return resolve_timezone(request.timezone)
    return await context.cache.cached_timezone(
        request.cache_key, lambda: context.tasks.fetch_timezone(request.token)
    )


async def process(
    context: AppContext,
    request: ProcessRequest,
    now: datetime | None = None,
) -> ProcessResult:
    """Produce the next-task page data for one request."""
    tz = await resolve_request_timezone(context, request)
    now = now or tz_now(tz)
    image = await context.images.random_image()
    tasks, completion_error = await complete_and_read(context, request, tz, now)

    return ProcessResult(
        title=request.filter[:TITLE_MAX_LENGTH],
        navigation=get_nav(),
        tasks=tasks,
        filter=request.filter,
        image=image,
        completion_error=completion_error,
        timezone=tz,
    )


def process_params(
    params: Mapping[str, str],
    config: Config | None = None,
    context: AppContext | None = None,
) -> ProcessResult:
    """
    Synchronous entry point: parse parameters and run `process` on a new event loop.

    Without `context` a fresh one is built per call, so an in-memory cache
    (empty `cache_path`) never outlives the call. Pass the same context to
    every call to share the cache between them.
    """
    request = ProcessRequest.from_params(params)
    context = context or build_context(config)
    return asyncio.run(process(context, request))

