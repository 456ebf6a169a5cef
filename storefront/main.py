# storefront/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from storefront.api.routers import carts, health, orders, products, users
from storefront.data.database import Base, init_db
from storefront.domain.errors import InvalidRequest, StorefrontError, Unexpected
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Inicjalizacja bazy danych...")
    try:
        init_db()
    except Exception:
        logger.exception("Nie udalo sie utworzyc tabel")
        raise
    logger.info(f"Tabele: {list(Base.metadata.tables.keys())}")
    yield


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # bledne body/parametry -> ten sam format co InvalidRequest z serwisow
    error = InvalidRequest("Invalid request")
    detail = error.to_dict()
    detail["errors"] = jsonable_encoder(exc.errors())
    return JSONResponse(status_code=error.status_code, content={"detail": detail})


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    # blad bazy poza atomic() -> UNEXPECTED
    logger.exception(f"Blad bazy podczas {request.method} {request.url.path}")
    error = Unexpected("Store failure")
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_dict()})


async def domain_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})


def create_app(with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan if with_lifespan else None,
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(StorefrontError, domain_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
