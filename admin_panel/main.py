import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.datastructures import MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from admin_panel.config.settings import settings
from admin_panel.core.dependencies import NotAuthenticated
from admin_panel.core.layout import page_context, navigation
from admin_panel.core.rate_limit import limiter
from admin_panel.core.templating import templates, BASE_DIR
from admin_panel.modules.auth import routes as auth_routes
from admin_panel.modules.dashboard import routes as dashboard_routes
from admin_panel.modules.users import routes as users_routes
from admin_panel.modules.tips import routes as tips_routes
from admin_panel.modules.ads import routes as ads_routes
from admin_panel.modules.notifications import routes as notifications_routes
from admin_panel.modules.admins import routes as admins_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def render_error(request: Request, status_code: int, detail: str):
    if "session" in request.scope:
        context = page_context(request, "Something went wrong", status_code=status_code, detail=detail)
    else:
        context = {
            "request": request,
            "title": "Something went wrong",
            "nav_items": navigation(request.url.path),
            "messages": [],
            "status_code": status_code,
            "detail": detail,
        }
    return templates.TemplateResponse(request, "error.html", context, status_code=status_code)


@app.exception_handler(NotAuthenticated)
async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
    return RedirectResponse("/", status_code=303)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return render_error(request, exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return render_error(request, 422, "The request could not be understood.")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return render_error(request, 500, "Internal server error")
    return render_error(request, 500, str(exc))


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "same-origin",
}


class SecurityHeadersMiddleware:
    """Adds SECURITY_HEADERS to every HTTP response that does not set them itself."""

    def __init__(self, app, headers=None):
        self.app = app
        self.headers = headers or SECURITY_HEADERS

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                for name, value in self.headers.items():
                    headers.setdefault(name, value)
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie="admin_session",
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.is_production,
)

app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

# Include screen routes
app.include_router(dashboard_routes.router)
app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(tips_routes.router)
app.include_router(ads_routes.router)
app.include_router(notifications_routes.router)
app.include_router(admins_routes.router)


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")
    if settings.session_secret == "change-me" and settings.is_production:
        logger.warning("SESSION_SECRET is the default value; set a real secret in production")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: extend here with a Supabase check if needed."""
    return {"status": "ready"}
