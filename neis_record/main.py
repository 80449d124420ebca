# neis_record/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from neis_record.core.logging import configure_logging
from neis_record.core.settings import settings, settings_summary, validate_required_settings
from neis_record.middleware.error_handler import setup_exception_handlers
from neis_record.middleware.request_context import HDR_OUT, RequestContextMiddleware

# 라우터들 ...
from neis_record.routes.keywords import router as keywords_router
from neis_record.routes.observations import router as observations_router
from neis_record.routes.records import router as records_router

logger = logging.getLogger("neis_record.main")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.SERVICE_NAME, version="1.0.0")

    # ---------- 미들웨어 ----------
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[HDR_OUT, "Content-Disposition"],
        max_age=600,
    )

    # ---------- 예외 핸들러 ----------
    setup_exception_handlers(app)

    # ---------- 라우터 등록 ----------
    app.include_router(keywords_router)
    app.include_router(observations_router)
    app.include_router(records_router)

    # ---------- 헬스 체크 ----------
    @app.get("/api/health")
    def health_check():
        return {"message": "OK", "env": settings.ENV}

    return app


# ---------- 앱 초기화 ----------
configure_logging(settings.LOG_LEVEL)

missing = validate_required_settings()
if missing:
    # 요청별 apiKey 로도 동작하므로 경고만
    logger.warning("settings_missing", extra={"missing": missing})
logger.info("app_configured", extra=settings_summary())

app = create_app()
