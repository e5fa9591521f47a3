from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from truthlens.api.claim_api import router as claim_router
from truthlens.api.proxy_api import router as proxy_router
from truthlens.core.config import FRONTEND_URL, BACKEND_HOST, BACKEND_PORT

app = FastAPI(title="TruthLens")

# Configure CORS - Allow both local development and the configured frontend
allowed_origins = [
    FRONTEND_URL,  # From .env file
    "http://localhost:3000",  # Local development
]

# Remove duplicates and None values
allowed_origins = list(filter(None, set(allowed_origins)))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(claim_router, prefix="/api/claims", tags=["Fact Checking"])
app.include_router(proxy_router, prefix="/api/proxy", tags=["Proxy"])

@app.get("/")
async def root():
    return {"message": "TruthLens API is running. Use /api/claims/analyze endpoint."}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=BACKEND_HOST, port=BACKEND_PORT)
