# intervium/main.py

# ------------------------
# 환경 변수 로드
# ------------------------
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

# ------------------------
# FastAPI, CORS 미들웨어 import
# ------------------------
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from intervium.config import settings
from intervium.db.base import init_db
from intervium.errors import InterviumError, ValidationFailure
from intervium.logging_config import setup_logging
from intervium.services.catalog import load_catalog

# ------------------------
# 라우터 import
# ------------------------
from intervium.routers import characters as characters_router
from intervium.routers import interviews as interviews_router
from intervium.routers import professions as professions_router

logger = setup_logging(settings.log_level)


# ------------------------
# 1) 앱 시작 시 카탈로그 로드 / 테이블 생성
# ------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.catalog = load_catalog(settings.catalog_dir, settings.popular_badge)
    if settings.auto_create_tables:
        init_db()
    logger.info(
        "%s API started env=%s version=%s",
        settings.app_name,
        settings.app_env,
        settings.api_version,
    )
    yield


app = FastAPI(title=f"{settings.app_name} API", lifespan=lifespan)

# ------------------------
# 2) CORS 미들웨어 추가
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,  # 쿠키 안 쓰면 False
    allow_methods=["*"],
    allow_headers=["*"],
)


# development 환경에서만 요청 로그
@app.middleware("http")
async def log_requests(request: Request, call_next):
    if settings.is_development:
        logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# ------------------------
# 3) 에러 응답 통일 {"success": false, "code", "message", "detail"}
# ------------------------
@app.exception_handler(InterviumError)
async def handle_intervium_error(request: Request, exc: InterviumError):
    if exc.status_code >= 500:
        logger.error("[ERROR] %s %s -> %s", request.method, request.url.path, exc.kind.value)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "invalid_request_body") if errors else "invalid_request_body"
    err = ValidationFailure(message, detail=[
        {"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors
    ])
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    message = "endpoint_not_found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": message})


# ------------------------
# 4) 라우터 등록
# ------------------------
app.include_router(professions_router.router)
app.include_router(characters_router.router)
app.include_router(interviews_router.router)


# ------------------------
# 5) Root 엔드포인트 (health check)
# ------------------------
@app.get("/")
def root():
    return {
        "success": True,
        "message": f"{settings.app_name} API is running",
        "version": settings.api_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
