from fastapi import FastAPI
from thetawatch.core.config import settings
from thetawatch.api.api import api_router

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Conjunction suggestion adjustment based on the theta stability of risk trends.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

@app.get("/")
def read_root():
    return {"message": "Welcome to ThetaWatch API", "status": "active", "version": "1.0.0"}

@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(api_router, prefix=settings.API_V1_STR)
