import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tripquest.routers import itinerary, personas
from tripquest.config import settings, cloud_config

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Initialize FastAPI app
app = FastAPI(
    title="TripQuest API",
    version="0.1.0",
    description="Persona-driven, budget-aware itinerary generation API"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins if not cloud_config.IS_CLOUD_RUN else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(itinerary.router, prefix="/api/v1")
app.include_router(personas.router, prefix="/api/v1")

@app.get("/health")
def health_check():
    """Health check endpoint for Cloud Run and monitoring"""
    return {
        "status": "ok",
        "message": "TripQuest API is running",
        "environment": "cloud-run" if cloud_config.IS_CLOUD_RUN else "local",
        "project_id": cloud_config.PROJECT_ID if cloud_config.IS_CLOUD_RUN else "local"
    }

@app.get("/")
def root():
    """Root endpoint with API information"""
    return {
        "name": "TripQuest API",
        "version": "0.1.0",
        "docs_url": "/docs",
        "health_url": "/health"
    }

# For Cloud Run, the port is set via environment variable
if __name__ == "__main__":
    import uvicorn
    port = cloud_config.PORT if cloud_config.IS_CLOUD_RUN else 8080
    uvicorn.run(app, host="0.0.0.0", port=port)
