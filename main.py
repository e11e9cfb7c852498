import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError

import database
from errors import YouPowerError
from routes import action, community, cooperative, household, user
from seed import ensure_seed_data

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("youpower")

app = FastAPI(title="YouPower API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (action, community, cooperative, household, user):
    app.include_router(module.router)


# -------------------------------------------------------------------
# Error mapping
# -------------------------------------------------------------------
@app.exception_handler(YouPowerError)
async def youpower_error(request: Request, exc: YouPowerError):
    logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(DuplicateKeyError)
async def duplicate_key(request: Request, exc: DuplicateKeyError):
    resource = request.url.path.split("/")[2] if request.url.path.startswith("/api/") else "Document"
    return JSONResponse(status_code=409, content={"detail": f"{resource.capitalize()} already exists"})


@app.exception_handler(database.DatabaseUnavailable)
async def database_unavailable(request: Request, exc: database.DatabaseUnavailable):
    logger.error("database not configured, set DATABASE_URL and DATABASE_NAME")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# -------------------------------------------------------------------
# Startup
# -------------------------------------------------------------------
@app.on_event("startup")
def startup_event():
    if database.db is None:
        logger.warning("DATABASE_URL/DATABASE_NAME not set, running without a database")
        return
    database.ensure_indexes()
    if os.getenv("SEED_ON_STARTUP") == "1":
        ensure_seed_data()


@app.get("/")
def root():
    return {"app": "YouPower API", "status": "ok"}


@app.head("/")
def root_head():
    # Explicit HEAD route for health checks
    return {}


# -------------------------------------------------------------------
# Health
# -------------------------------------------------------------------
@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": None,
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": []
    }
    db = database.db
    if db is not None:
        response["database"] = "✅ Available"
        response["database_name"] = db.name
        response["connection_status"] = "Connected"
        try:
            response["collections"] = db.list_collection_names()[:10]
            response["database"] = "✅ Connected & Working"
        except Exception as e:
            logger.exception("database health check failed")
            response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"
    else:
        response["database"] = "⚠️  Available but not initialized"

    response["database_url"] = "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set"
    response["database_name"] = "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set"
    return response


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
