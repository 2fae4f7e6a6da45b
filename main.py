import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Settings
from coach_sim.router import router as simulation_router

logging.basicConfig(level=getattr(logging, Settings.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

# Start the FastAPI application
app = FastAPI(
    title="Coach Simulation Service",
    description="In-memory training/recovery simulation and research confidence scoring.",
    version="1.0.0"
)

# CORS (frontend connection)
# In production, restrict allow_origins to the frontend domain only.
origins = [
    "http://localhost",
    "http://localhost:3000",  # React/Next.js default port
    "http://localhost:5173",  # Vite default port
    "http://localhost:8080",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(simulation_router)


@app.get("/")
async def health_check():
    """
    Service health check
    """
    return {
        "status": "healthy",
        "service": "Coach Simulation Service",
        "version": "1.0.0"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
