# kgms/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import RedirectResponse

from kgms.core.config import settings
from kgms.core.errors import GraphAPIError
from kgms.core.log import configure_logging
from kgms.routers import edges, meta, nodes
from kgms.routers.meta import AVAILABLE_ENDPOINTS
from kgms.routers.responses import fail
from kgms.services.neo4j_client import close_driver, init_driver

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("kgms")

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# missing connection settings abort startup
@app.on_event("startup")
def _on_startup():
    init_driver()


@app.on_event("shutdown")
def _on_shutdown():
    close_driver()


# ---- error shaping ----------------------------------------------------------

@app.exception_handler(GraphAPIError)
async def graph_api_error_handler(request: Request, exc: GraphAPIError):
    logger.warning("%s %s -> %d: %s", request.method, request.url.path,
                   exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=fail(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    logger.warning("%s %s -> 400: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content=fail("Invalid request: " + "; ".join(errors), errors=errors),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and request.url.path.startswith("/api"):
        return JSONResponse(
            status_code=404,
            content=fail(
                "API endpoint not found",
                requestedUrl=request.url.path,
                availableEndpoints=AVAILABLE_ENDPOINTS,
            ),
        )
    return JSONResponse(status_code=exc.status_code, content=fail(str(exc.detail)))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = f"{type(exc).__name__}: {exc}" if settings.is_development else None
    return JSONResponse(status_code=500, content=fail("Internal server error", error=detail))


# include routers
app.include_router(meta.router)
app.include_router(nodes.router)
app.include_router(edges.router)


# handy root redirect
@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse("/docs")
