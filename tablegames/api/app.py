from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from tablegames import __version__
from tablegames.api.routes import router
from tablegames.config import Settings, load_settings
from tablegames.registry import load_modes
from tablegames.runtime.auth import TokenAuthenticator
from tablegames.runtime.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the HTTP app. Settings are read at startup unless given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        resolved = settings or load_settings()
        registry = load_modes(resolved.modes)
        registry.freeze()
        app.state.registry = registry
        app.state.dispatcher = Dispatcher(registry, TokenAuthenticator(resolved.build_principals()))
        logger.info("serving game modes: %s", ", ".join(registry.list_modes()) or "(none)")
        try:
            yield
        finally:
            registry.teardown()

    app = FastAPI(title="tablegames", version=__version__, lifespan=lifespan)
    app.include_router(router)
    return app


app = create_app()
