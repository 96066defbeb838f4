"""Dependency container wiring for the gateway."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from story_gateway.adapters.file_token_store import FileTokenStore
from story_gateway.adapters.http_transport import HttpxTransport
from story_gateway.adapters.supabase_token_store import SupabaseTokenStore
from story_gateway.app_logging import configure_logging
from story_gateway.config import Settings, normalize_base_url
from story_gateway.services.dispatcher import (
    BackgroundRunner,
    CallbackDispatcher,
    LoopDispatcher,
)
from story_gateway.services.gateway import StoryGateway
from story_gateway.services.session import SessionStore, TokenStore
from story_gateway.services.stories import StoryClient


@dataclass
class AppContainer:
    """Holds gateway-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    transport: HttpxTransport
    story_client: StoryClient
    runner: BackgroundRunner
    gateway: StoryGateway
    close_resources: Callable[[], Awaitable[None]]


def build_token_store(settings: Settings) -> TokenStore:
    """Pick the durable token store configured for this environment."""
    if settings.uses_supabase_token_store:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseTokenStore(client=client, owner_id=settings.token_owner_id)
    return FileTokenStore(settings.token_path)


def default_dispatcher() -> CallbackDispatcher:
    """Deliver callbacks on the event loop that is building the container."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError as exc:
        raise RuntimeError(
            "build_container needs a running event loop or an explicit dispatcher"
        ) from exc
    return LoopDispatcher(loop)


def build_container(
    settings: Settings | None = None,
    dispatcher: CallbackDispatcher | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_dispatcher = dispatcher or default_dispatcher()
    configure_logging()
    resolved_settings = settings or Settings()
    session_store = SessionStore(build_token_store(resolved_settings))
    session_store.restore()
    transport = HttpxTransport.create(
        base_url=normalize_base_url(resolved_settings.custom_story_backend),
        connect_timeout=resolved_settings.connect_timeout_seconds,
        read_timeout=resolved_settings.read_timeout_seconds,
        write_timeout=resolved_settings.write_timeout_seconds,
    )
    story_client = StoryClient(transport=transport, session_store=session_store)
    runner = BackgroundRunner().start()
    gateway = StoryGateway(
        client=story_client,
        runner=runner,
        dispatcher=resolved_dispatcher,
    )

    async def close_resources() -> None:
        if runner.running:
            await asyncio.wrap_future(runner.submit(transport.close()))
            runner.stop()
        else:
            await transport.close()

    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        transport=transport,
        story_client=story_client,
        runner=runner,
        gateway=gateway,
        close_resources=close_resources,
    )
