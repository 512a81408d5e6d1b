import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routes.scenario import router as scenario_router
from .services import is_openai_available

load_dotenv()

SERVICE_NAME = "ai-scenario-architect"
VERSION = "0.1.0"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    mode = "OpenAI + rules fallback" if is_openai_available() else "rules only (OPENAI_API_KEY not set)"
    print(f"🚀 Starting AI Scenario Architect v{VERSION}")
    print(f"   Blueprint source: {mode}")
    yield
    print("Shutting down AI Scenario Architect")


app = FastAPI(
    title="AI Scenario Architect",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(scenario_router)


@app.get("/", tags=["General"])
async def root():
    """Service description and endpoint index."""
    return {
        "name": "AI Scenario Architect",
        "version": VERSION,
        "docs": "/docs",
        "endpoints": {
            "generate": "POST /scenario/generate",
            "fallback": "POST /scenario/fallback",
            "export": "POST /scenario/export",
            "options": "GET /scenario/options",
        },
    }


@app.get("/health", tags=["General"])
async def health():
    return {"status": "healthy", "service": SERVICE_NAME, "version": VERSION}


@app.exception_handler(Exception)
async def unhandled_error(request, exc):
    detail = str(exc) if os.getenv("DEBUG", "false").lower() == "true" else "An unexpected error occurred"
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "detail": detail},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "false").lower() == "true",
    )
