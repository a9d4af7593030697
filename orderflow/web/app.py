"""
Application FastAPI d'OrderFlow.

Initialise l'API JSON avec le Container DI et monte les routes.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from .. import __version__
from ..container import Container, close_gateways, seed_stub_inventory
from ..infrastructure.persistence.repositories import SQLModelProductRepository
from .routes.inventory import router as inventory_router
from .routes.orders import router as orders_router
from .routes.users import router as users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise le Container DI au démarrage et le ferme à l'arrêt."""
    container = Container()
    container.database.init()
    with container.session() as session:
        seeded = seed_stub_inventory(
            container.inventory_gateway(), SQLModelProductRepository(session)
        )
    if seeded:
        logger.info(f"Stock simule initialise pour {seeded} produit(s)")
    app.state.container = container
    yield
    await close_gateways(container)
    container.session_store().close()
    container.shutdown_resources()


app = FastAPI(title="OrderFlow", version=__version__, lifespan=lifespan)


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


# Routes
app.include_router(users_router)
app.include_router(orders_router)
app.include_router(inventory_router)
