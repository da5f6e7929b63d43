import logging
import os

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse

from .routers.statements import router as statements_router
from .exceptions import StatementError, UpstreamTimeout, UpstreamUnavailable
from .models import Base
from .database import engine

# ---------- logging ----------
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("ownerportal")

app = FastAPI(title="Owner Portal statements API")

app.include_router(statements_router)


@app.on_event("startup")
def ensure_tables():
    Base.metadata.create_all(bind=engine)


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}


# Everything is JSON: {"detail": ...}
@app.exception_handler(HTTPException)
async def json_http_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


# Domain errors that escape a router (none should) still map to a sane status
@app.exception_handler(StatementError)
async def statement_error_handler(request: Request, exc: StatementError):
    if isinstance(exc, UpstreamTimeout):
        code = 504
    elif isinstance(exc, UpstreamUnavailable):
        code = 502
    else:
        code = 400
    log.error("Unhandled statement error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})
