import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from billed.core.logging import configure_logging, get_logger
from billed.infrastructure import HttpStoreClient, configure_store_client
from billed.routes import new_bill

logger = get_logger(__name__)


def create_app() -> FastAPI:
    configure_logging()

    client: HttpStoreClient | None = None
    api_url = os.getenv("BILLED_API_URL")
    if api_url:
        timeout = float(os.getenv("BILLED_API_TIMEOUT") or 30)
        client = HttpStoreClient(api_url, token=os.getenv("BILLED_API_TOKEN") or None, timeout=timeout)
        configure_store_client(client)
        logger.info("Using remote store at %s", api_url)
    else:
        logger.info("BILLED_API_URL not set; using the in-memory store")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Close the remote store connection pool on shutdown."""
        yield
        if client is not None:
            await client.aclose()

    app = FastAPI(title="Billed Expense Reports API", version="0.1.0", lifespan=lifespan)

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(new_bill.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Billed Expense Reports API",
                "docs": "/docs",
                "new_bill": "/api/new-bill",
            }
        )

    return app


app = create_app()
