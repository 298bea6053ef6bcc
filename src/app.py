"""Storefront FastAPI application.

Serves the cart and checkout over HTTP for a local front end. The storefront
is built once at startup; its settings come from the environment.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ValidationError

from ordering.api.routes import cart_router, checkout_router
from ordering.domain import ordering
from shared.utils.logging import configure_logging
from storefront import Storefront


def create_app(storefront: Storefront | None = None, sync: bool = True) -> FastAPI:
    """Build the app around ``storefront`` (a new one from the environment if omitted).

    With ``sync`` enabled, a background task reloads the cart whenever another
    writer changes the shared storage.
    """

    async def synchronize():
        with ordering.domain_context():
            await app.state.storefront.synchronizer.run()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        task = asyncio.create_task(synchronize()) if sync else None
        yield
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    app = FastAPI(
        title="Storefront API",
        description="Shopping cart and checkout for the marketplace",
        lifespan=lifespan,
    )
    app.state.storefront = storefront or Storefront()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the ordering domain context for each request."""
        with ordering.domain_context():
            response = await call_next(request)
        return response

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": exc.messages})

    @app.exception_handler(InvalidOperationError)
    async def invalid_operation_handler(request: Request, exc: InvalidOperationError):
        return JSONResponse(status_code=409, content={"error": str(exc)})

    app.include_router(cart_router)
    app.include_router(checkout_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "cart_items": app.state.storefront.cart.item_count})

    return app


app = create_app()
