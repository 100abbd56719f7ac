from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import sqlalchemy
from loguru import logger

from taskboard.api.error_handlers import register_error_handlers
from taskboard.api.routes import auth, invitations, projects, tasks, users
from taskboard.core.config import settings
from taskboard.db.session import engine
from taskboard.models import base

app = FastAPI(
    title="Taskboard API",
    description="Projects, invitations and kanban tasks",
    version="0.1.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API routes
app.include_router(auth.router, prefix=settings.API_V1_STR)
app.include_router(users.router, prefix=settings.API_V1_STR)
app.include_router(projects.router, prefix=settings.API_V1_STR)
app.include_router(invitations.router, prefix=settings.API_V1_STR)
app.include_router(tasks.router, prefix=settings.API_V1_STR)


@app.on_event("startup")
async def startup_event():
    # Create database tables if they don't exist
    try:
        logger.info("Connecting to database")
        async with engine.begin() as conn:
            logger.info("Creating database tables if they don't exist...")
            await conn.run_sync(base.Base.metadata.create_all)
            logger.info("Database setup completed successfully")
    except sqlalchemy.exc.OperationalError as e:
        logger.error(f"Database connection error: {str(e)}")
        logger.warning(
            "Application will continue to run, but database functionality will be limited."
        )


@app.get("/api/health", tags=["Health"])
async def health_check():
    # Basic health check endpoint
    try:
        async with engine.begin() as conn:
            await conn.execute(sqlalchemy.text("SELECT 1"))
            db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return JSONResponse(
        {
            "status": "ok",
            "database": db_status,
            "version": "0.1.0",
            "environment": settings.ENVIRONMENT,
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
