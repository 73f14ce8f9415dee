import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from carpool_console.config import settings
from carpool_console.core.exceptions import (
    ApiRequestError,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from carpool_console.routes import (
    account_pool_routes,
    ai_account_routes,
    budget_routes,
    department_member_routes,
    department_routes,
    enterprise_routes,
    invite_routes,
    monitoring_routes,
    oauth_routes,
    permission_routes,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,  # Disable in production
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
cors_origins = settings.cors_origins_list
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Exception handlers
@app.exception_handler(UnauthorizedException)
async def unauthorized_exception_handler(request: Request, exc: UnauthorizedException):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request: Request, exc: NotFoundException):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(ForbiddenException)
async def forbidden_exception_handler(request: Request, exc: ForbiddenException):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


@app.exception_handler(ValidationException)
async def validation_exception_handler(request: Request, exc: ValidationException):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(ApiRequestError)
async def api_request_error_handler(request: Request, exc: ApiRequestError):
    # upstream 4xx passes through; network errors and upstream 5xx are a bad gateway
    if exc.status_code is not None and 400 <= exc.status_code < 500:
        status_code = exc.status_code
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "platform": settings.PLATFORM_API_URL,
        "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
    }


# Include routers
ENTERPRISE_PREFIX = "/api/console/enterprises"
app.include_router(enterprise_routes.router, prefix=ENTERPRISE_PREFIX, tags=["Enterprises"])
app.include_router(department_routes.router, prefix=ENTERPRISE_PREFIX, tags=["Departments"])
app.include_router(department_member_routes.router, prefix=ENTERPRISE_PREFIX, tags=["Department Members"])
app.include_router(account_pool_routes.router, prefix=ENTERPRISE_PREFIX, tags=["Account Pools"])
app.include_router(ai_account_routes.router, prefix=ENTERPRISE_PREFIX, tags=["AI Accounts"])
app.include_router(budget_routes.router, prefix=ENTERPRISE_PREFIX, tags=["Budget"])
app.include_router(permission_routes.router, prefix=ENTERPRISE_PREFIX, tags=["Permissions"])
app.include_router(monitoring_routes.router, prefix=ENTERPRISE_PREFIX, tags=["Monitoring"])
app.include_router(invite_routes.router, prefix=ENTERPRISE_PREFIX, tags=["Invites"])
app.include_router(oauth_routes.router, prefix=ENTERPRISE_PREFIX, tags=["OAuth"])
