from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from protoplan.core.config import settings
from protoplan.core.logging_config import configure_logging
from protoplan.core.storage import PUBLIC_MOUNT, storage_root

# initialize DB tables
from protoplan.core.db import init_db

# routers
from protoplan.api.auth import router as auth_router
from protoplan.api.projects import router as projects_router
from protoplan.api.screens import router as screens_router
from protoplan.api.workflow import router as workflow_router

app = FastAPI(title="protoplan")


@app.on_event("startup")
def on_startup():
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    init_db()

# Allow the frontend dev server to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(projects_router, prefix="/projects", tags=["projects"])
app.include_router(workflow_router, prefix="/projects", tags=["workflow"])
app.include_router(screens_router, prefix="/screens", tags=["screens"])

# Uploaded images are served back through their public URLs
app.mount(PUBLIC_MOUNT, StaticFiles(directory=storage_root()), name="storage")


@app.get("/health")
def health():
    return {"status": "ok"}
