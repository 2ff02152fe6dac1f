"""
PC Spec API -- FastAPI application entry point.
AI PC build advisor backend: requirement + hardware table in, component list out.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import config
from src.errors import SpecGenerationError
from src.routes import generate
from src.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logging. The service holds no connections between requests."""
    logger.info("PC Spec API starting up...")
    if not config.gemini_api_key():
        logger.warning("GEMINI_API_KEY is not set -- /api/generate will answer NO_API_KEY_CONFIGURED")
    logger.info(f"PC Spec API ready (model={config.GEMINI_MODEL}).")
    yield
    logger.info("PC Spec API stopped.")


app = FastAPI(
    title="PC Spec API",
    description="AI PC build advisor -- turns a free-text requirement into a compatible 8-component build list.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in config.CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(generate.router, prefix="/api", tags=["generate"])

# Only this route gets the custom 405 body
GENERATE_PATH = "/api/generate"


@app.get("/health")
async def health():
    """Health check. Reports whether the Gemini key is configured."""
    return {
        "status": "ok",
        "service": "pc-spec-api",
        "version": "0.1.0",
        "dependencies": {
            "gemini": "configured" if config.gemini_api_key() else "missing",
        },
    }


@app.exception_handler(SpecGenerationError)
async def spec_generation_error_handler(request: Request, exc: SpecGenerationError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405 and request.url.path == GENERATE_PATH:
        return JSONResponse(
            status_code=405,
            content={"message": "Method Not Allowed, please use POST."},
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal server error",
            "errorCode": "INTERNAL_ERROR",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=config.DEBUG,
    )
