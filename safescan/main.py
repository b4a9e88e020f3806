# SafeScan API: employee medical profiles and emergency QR codes
import logging
import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from safescan import __version__
from safescan.config import HOST, PORT, BASE_URL, APP_ENV, LOG_LEVEL, LOG_FILE, MAX_BODY_BYTES
from safescan.db import init_db
from safescan.errors import register_error_handlers, error_response
from safescan.routes import auth, employees, health

# Configure logging with detailed format
handlers = [logging.StreamHandler(sys.stdout)]
if LOG_FILE:
    handlers.append(logging.FileHandler(LOG_FILE))
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers,
)
logger = logging.getLogger("safescan")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-XSS-Protection": "0",
}

app = FastAPI(
    title="Emergency Medical QR System API",
    version=__version__,
    description="Employee medical profiles exposed to emergency responders through QR codes",
)

# Only the configured frontend may call the API from a browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=[BASE_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


@app.middleware("http")
async def limit_body_size(request: Request, call_next):
    length = request.headers.get("content-length")
    if length and length.isdigit() and int(length) > MAX_BODY_BYTES:
        logger.warning("%s %s -> 413 body of %s bytes", request.method, request.url.path, length)
        return error_response(413, "Request body too large")
    return await call_next(request)


register_error_handlers(app)


@app.on_event("startup")
def startup():
    init_db()
    logger.info("SafeScan API started (environment=%s)", APP_ENV)


# Include API routers
app.include_router(auth.router)
app.include_router(employees.router)
app.include_router(health.router)


if __name__ == "__main__":
    logger.info(f"Emergency Medical QR System server running on port {PORT}")
    logger.info(f"Frontend URL: {BASE_URL}")
    uvicorn.run(app, host=HOST, port=PORT)
