from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from dotenv import load_dotenv

from match_engine.routes import router as match_engine_router

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logging.info("🚀 Match Engine starting")

app = FastAPI(title="Match Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(match_engine_router)


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}
