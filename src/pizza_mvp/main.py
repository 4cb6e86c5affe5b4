import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import health
from pizza_mvp.api.routes.checkout import router as checkout_router
from pizza_mvp.api.routes.locations import router as locations_router
from pizza_mvp.config import settings
from pizza_mvp.services.errors import CheckoutError

logger = logging.getLogger("pizza_mvp")

app = FastAPI(title="Pizza MVP")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем роуты
app.include_router(health.router)
app.include_router(locations_router)
app.include_router(checkout_router)


@app.exception_handler(CheckoutError)
async def checkout_error_handler(request: Request, exc: CheckoutError):
    # детали остаются в логе, клиенту уходит только вид ошибки и безопасный текст
    logger.info("%s %s failed: %s (%s)", request.method, request.url.path, exc.kind.value, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind.value, "message": exc.message},
    )


@app.on_event("startup")
async def on_startup():
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("🚀 Application started")


@app.on_event("shutdown")
async def on_shutdown():
    logger.info("🛑 Application stopped")
