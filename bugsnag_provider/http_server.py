"""
HTTP 接口 - 供声明式引擎调用 Bugsnag Provider

启动方式:
    python -m bugsnag_provider.http_server

API 端点:
    GET  /health
    GET  /schema
    POST /configure                           请求体: {"config": {...}}
    POST /resources/{type_name}/{operation}   请求体: {"id": "...", "values": {...}}
    POST /data-sources/{type_name}/read       请求体: {"values": {...}}
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from bugsnag_provider import __version__
from bugsnag_provider.core.config import Settings, get_settings
from bugsnag_provider.core.resource_data import ResourceData
from bugsnag_provider.providers.bugsnag.provider import Provider, new_provider
from bugsnag_provider.schemas.diagnostic import Diagnostic, has_error

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

RESOURCE_OPERATIONS = ("create", "read", "update", "delete")
WRITE_OPERATIONS = ("create", "update")


def setup_logging(settings: Settings) -> None:
    """
    配置日志：Stderr + 可选文件

    uvicorn 的 logger 复用同一组 handler，避免输出到 stdout。
    """
    formatter = logging.Formatter(LOG_FORMAT)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    handlers: List[logging.Handler] = [stderr_handler]

    if settings.LOG_FILE:
        file_handler = logging.FileHandler(settings.LOG_FILE, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=settings.LOG_LEVEL.upper(), handlers=handlers, force=True)

    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        logger_obj = logging.getLogger(logger_name)
        logger_obj.handlers = handlers
        logger_obj.propagate = False  # 防止双重打印

    logger.info("Logging configured: level=%s, file=%s", settings.LOG_LEVEL, settings.LOG_FILE)


class ConfigureRequest(BaseModel):
    config: Dict[str, Any] = Field(default_factory=dict)


class ConfigureResponse(BaseModel):
    success: bool
    diagnostics: List[Diagnostic] = Field(default_factory=list)


class OperationRequest(BaseModel):
    """资源/数据源操作请求：当前 id 与字段值"""

    id: str = ""
    values: Dict[str, Any] = Field(default_factory=dict)


class OperationResponse(BaseModel):
    success: bool
    id: str = ""
    state: Dict[str, Any] = Field(default_factory=dict)
    diagnostics: List[Diagnostic] = Field(default_factory=list)


def _get_provider(request: Request) -> Provider:
    return request.app.state.provider


def _require_configured(provider: Provider) -> None:
    if not provider.configured:
        raise HTTPException(status_code=409, detail="provider is not configured")


def _build_data(
    schema, body: OperationRequest, check_required: bool = True
) -> ResourceData:
    """
    构建本地记录，在任何远端调用之前校验字段类型与必填字段

    资源的 read / delete 只依赖 id，不校验必填字段。
    """
    try:
        data = ResourceData(schema, body.values, id=body.id)
    except (KeyError, TypeError) as e:
        logger.warning("Invalid values: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    missing = data.missing_required() if check_required else []
    if missing:
        logger.warning("Missing required fields: %s", missing)
        raise HTTPException(status_code=400, detail=f"缺少必填字段: {missing}")
    return data


def _respond(data: ResourceData, diags: List[Diagnostic]) -> OperationResponse:
    return OperationResponse(
        success=not has_error(diags),
        id=data.id,
        state=data.state(),
        diagnostics=diags,
    )


def create_app(provider: Optional[Provider] = None) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        provider: 预先构建的 Provider；不传时按当前版本新建
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        logger.info("Starting Bugsnag provider %s", app.state.provider.version)
        yield
        await app.state.provider.close()
        logger.info("Bugsnag provider stopped")

    app = FastAPI(
        title="Bugsnag Provider",
        description="将 Bugsnag 项目作为声明式基础设施资源管理",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.provider = provider or new_provider(__version__)

    @app.get("/health")
    async def health_check(request: Request):
        """健康检查接口"""
        return {
            "status": "healthy",
            "service": "bugsnag-provider",
            "configured": _get_provider(request).configured,
        }

    @app.get("/schema")
    async def describe_schema(request: Request):
        return _get_provider(request).describe()

    @app.post("/configure", response_model=ConfigureResponse)
    async def configure(body: ConfigureRequest, request: Request):
        diags = await _get_provider(request).configure(body.config)
        return ConfigureResponse(success=not has_error(diags), diagnostics=diags)

    @app.post(
        "/resources/{type_name}/{operation}", response_model=OperationResponse
    )
    async def resource_operation(
        type_name: str, operation: str, body: OperationRequest, request: Request
    ):
        provider = _get_provider(request)
        _require_configured(provider)

        resource = provider.resources.get(type_name)
        if resource is None:
            raise HTTPException(
                status_code=404,
                detail=f"不支持的资源: {type_name}。支持的资源: {list(provider.resources)}",
            )
        if operation not in RESOURCE_OPERATIONS:
            raise HTTPException(
                status_code=404,
                detail=f"不支持的操作: {operation}。支持的操作: {list(RESOURCE_OPERATIONS)}",
            )

        data = _build_data(
            resource.schema, body, check_required=operation in WRITE_OPERATIONS
        )
        logger.info("Resource %s %s: id=%s", type_name, operation, data.id)
        diags = await getattr(resource, operation)(data)
        return _respond(data, diags)

    @app.post("/data-sources/{type_name}/read", response_model=OperationResponse)
    async def data_source_read(type_name: str, body: OperationRequest, request: Request):
        provider = _get_provider(request)
        _require_configured(provider)

        data_source = provider.data_sources.get(type_name)
        if data_source is None:
            raise HTTPException(
                status_code=404,
                detail=f"不支持的数据源: {type_name}。支持的数据源: {list(provider.data_sources)}",
            )

        data = _build_data(data_source.schema, body)
        logger.info("Data source %s read", type_name)
        diags = await data_source.read(data)
        return _respond(data, diags)

    return app


def main():
    """启动 Provider HTTP 服务"""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting Bugsnag provider on http://%s:%d",
        settings.PROVIDER_HOST,
        settings.PROVIDER_PORT,
    )

    # log_config=None 让 uvicorn 继承上面配置好的 logging
    uvicorn.run(
        create_app(new_provider(__version__, settings)),
        host=settings.PROVIDER_HOST,
        port=settings.PROVIDER_PORT,
        reload=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
