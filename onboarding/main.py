import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from onboarding.config.settings import settings
from onboarding.core.errors import error_body
from onboarding.core.rate_limit import limiter
from onboarding.database.supabase_client import supabase_configured
from onboarding.modules.auth import routes as auth_routes
from onboarding.modules.users import routes as users_routes
from onboarding.modules.verification import routes as verification_routes
from onboarding.modules.notifications import routes as notifications_routes
from onboarding.modules.checklists import routes as checklists_routes
from onboarding.modules.tickets import routes as tickets_routes
from onboarding.modules.performance import routes as performance_routes
from onboarding.modules.events import routes as events_routes
from onboarding.modules.store import routes as store_routes
from onboarding.modules.landing import routes as landing_routes
from onboarding.modules.forms import routes as forms_routes
from onboarding.modules.worklogs import routes as worklogs_routes
from onboarding.modules.content import routes as content_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version or "0.1.0",
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in err["loc"] if part != "body"), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    return JSONResponse(status_code=500, content={"error": "Internal server error", "details": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"Referrer-Policy", b"strict-origin-when-cross-origin"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api")
app.include_router(users_routes.router, prefix="/api")
app.include_router(verification_routes.router, prefix="/api")
app.include_router(notifications_routes.router, prefix="/api")
app.include_router(checklists_routes.router, prefix="/api")
app.include_router(tickets_routes.router, prefix="/api")
app.include_router(performance_routes.router, prefix="/api")
app.include_router(events_routes.router, prefix="/api")
app.include_router(store_routes.router, prefix="/api")
app.include_router(landing_routes.router, prefix="/api")
app.include_router(forms_routes.router, prefix="/api")
app.include_router(forms_routes.public_router, prefix="/api")
app.include_router(worklogs_routes.router, prefix="/api")
app.include_router(content_routes.router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info(f"Application startup ({settings.environment})")
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY is not set. Verification emails will not be sent.")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness check: configuration needed to reach the hosted database is present."""
    if not supabase_configured():
        return JSONResponse(status_code=503, content={"status": "not ready", "error": "Supabase is not configured"})
    return {"status": "ready"}


@app.get("/api/version")
async def version():
    return {"name": settings.app_name, "version": settings.app_version or "0.1.0", "environment": settings.environment}
