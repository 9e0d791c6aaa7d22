"""
FastAPI 应用主入口
"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path

# 将项目根目录添加到 python path，以便直接运行 main.py 时能找到 app 模块
sys.path.append(str(Path(__file__).resolve().parent.parent))

import structlog
from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from prometheus_client import make_asgi_app

from app.api.error_handlers import register_error_handlers
from app.cache.redis_client import redis_client
from app.config import get_settings
from app.observability.logging_config import setup_logging
from app.observability.metrics_middleware import MetricsMiddleware
from app.observability.request_logger import RequestLoggerMiddleware

settings = get_settings()

# 初始化日志（在 import 时就生效）
setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """应用生命周期：启动时预检 Redis，关闭时释放连接池"""
    log.info("应用启动", env=settings.ENV, app=settings.APP_NAME)

    # ── Warm-up：Fail Fast，Redis 不可用时拒绝启动 ──
    await redis_client.ping()
    log.info("Redis 连接正常")

    yield

    # 关闭 Redis 连接池
    await redis_client.aclose()
    log.info("应用关闭，资源已释放")


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# ── 中间件（后注册的在外层） ──
# RequestLogger 必须在最外层：trace_id 设置在根协程上下文中，ServerErrorMiddleware 的 500 处理器才能读到
app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MINIMUM_SIZE)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestLoggerMiddleware)

# ── 异常处理 ──
register_error_handlers(app)

# ── Prometheus 指标端点 ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── 路由注册 ──
from app.api.health import router as health_router
from app.api.todos import router as todos_router

app.include_router(health_router)
app.include_router(todos_router)

# ── 静态资源（htmx / pico.css），挂在路由之后，API 路径优先 ──
if Path(settings.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR), name="static")


if __name__ == "__main__":
    import uvicorn
    # 允许直接运行 python app/main.py 启动服务
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.APP_PORT, reload=settings.ENV != "production")
