import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from streamviz.api.routers import charts, elevations, pages, transects
from streamviz.config import get_settings, log_level
from streamviz.errors import DataSourceError

logging.basicConfig(
    level=log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("streamviz")

app = FastAPI(title="Stream Transects Visualizer API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DataSourceError)
async def data_source_error_handler(request: Request, exc: DataSourceError):
    # ファイル読込・パース失敗は 500 + 人が読めるメッセージ（リトライなし）
    logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.get("/health")
def health():
    return {"ok": True}


app.include_router(elevations.router, prefix="/api",           tags=["elevations"])
app.include_router(transects.router,  prefix="/api/transects", tags=["transects"])
app.include_router(charts.router,     prefix="/charts",        tags=["charts"])
app.include_router(pages.router,                               tags=["pages"])

# /data を静的配信（GeoJSON を地図から直接読む用）
_data_dir = get_settings().data_dir
if _data_dir.exists():
    app.mount("/data", StaticFiles(directory=str(_data_dir)), name="data")
else:
    logger.warning("data directory %s not found; /data is not served", _data_dir)
