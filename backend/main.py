import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware

from core.auth import fastapi_users, auth_backend
from core.config import settings
from core.errors import register_exception_handlers
from db.database import create_db_and_tables
from routers.inbound_orders import router as inbound_orders_router
from routers.inventory import router as inventory_router
from routers.outbound_orders import router as outbound_orders_router
from routers.warehouses import router as warehouses_router
from schemas.users import UserRead, UserCreate, UserUpdate

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Fruit Warehouse API",
    description="Inventory ledger, inbound/outbound confirmation and expiration alerts",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# Authentication routes (fastapi-users)
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"],)
app.include_router(fastapi_users.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])

# Warehouse routes
app.include_router(warehouses_router, prefix="/warehouse", tags=["warehouses"])
app.include_router(inventory_router, prefix="/warehouse", tags=["inventory"])
app.include_router(inbound_orders_router, prefix="/warehouse", tags=["inbound-orders"])
app.include_router(outbound_orders_router, prefix="/warehouse", tags=["outbound-orders"])


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
