from fastapi import FastAPI
from cafe_map.routes.cafes_route import router as cafes_router

app = FastAPI(title="Cafe Map")
app.include_router(cafes_router)

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to Cafe Map API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "cafes": "/cafes",
            "statuses": "/cafes/statuses",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "Cafe Map"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cafe_map.main:app", host="0.0.0.0", port=8000, reload=True)
