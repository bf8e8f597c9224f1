"""
HanReader FastAPI 服务

提供分词、注音、部件拆分的 RESTful API 接口
"""

import os
import time
import uuid
from typing import List, Literal, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from hanreader.engine import (
    AnnotatedWord,
    EngineConfig,
    ReaderEngine,
    RadicalDecomposition,
    create_engine,
    get_api_logger,
)

# 初始化日志
logger = get_api_logger()

MAX_TEXT_LENGTH = int(os.getenv("HANREADER_MAX_TEXT_LENGTH", "20000"))


# ===== 请求/响应模型 =====

class TextRequest(BaseModel):
    """文本请求"""
    text: str = Field(..., description="原文", max_length=MAX_TEXT_LENGTH)


class SegmentRequest(TextRequest):
    unique: bool = Field(False, description="是否去重")


class VocabularyRequest(TextRequest):
    include_radicals: bool = False
    radical_level: int = Field(1, ge=1, le=3)


class ClearCacheRequest(BaseModel):
    scope: Literal["all", "content"] = "content"


class EntryItem(BaseModel):
    simplified: str
    traditional: str
    pinyin: str
    english: List[str]


class ComponentItem(BaseModel):
    radical: str
    pinyin: Optional[str] = None
    meaning: Optional[str] = None


class RadicalItem(BaseModel):
    character: str
    components: List[ComponentItem]
    level: int


class WordItem(BaseModel):
    word: str
    pinyin: str
    english: Optional[str] = None
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    radicals: Optional[List[RadicalItem]] = None


class SpanItem(BaseModel):
    text: str
    start_index: int
    end_index: int


class LookupResponse(BaseModel):
    word: str
    pinyin: str
    english: Optional[str] = None
    status: str
    entries: List[EntryItem]


class SegmentResponse(BaseModel):
    tokens: List[str]
    status: str


class AnnotateResponse(BaseModel):
    words: List[WordItem]
    gaps: List[SpanItem]
    status: str = "ok"


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str
    version: str


def _radical_item(r: RadicalDecomposition) -> RadicalItem:
    return RadicalItem(
        character=r.character,
        components=[ComponentItem(radical=c.radical, pinyin=c.pinyin, meaning=c.meaning) for c in r.components],
        level=r.level,
    )


def _word_item(w: AnnotatedWord) -> WordItem:
    return WordItem(
        word=w.word,
        pinyin=w.pinyin,
        english=w.english,
        start_index=w.start_index,
        end_index=w.end_index,
        radicals=[_radical_item(r) for r in w.radicals] if w.radicals is not None else None,
    )


# ===== 全局引擎实例 =====
engine: Optional[ReaderEngine] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    global engine

    logger.info("=" * 50)
    logger.info("HanReader API 服务启动")
    logger.info("正在初始化阅读引擎...")

    engine = create_engine(EngineConfig.from_env())

    logger.info(f"阅读引擎初始化完成: 词典 {len(engine.index):,} 条")
    logger.info("=" * 50)

    yield

    logger.info("正在关闭阅读引擎...")
    engine = None
    logger.info("HanReader API 服务已停止")


# ===== FastAPI 应用 =====
app = FastAPI(
    title="HanReader API",
    description="中文文本分词与注音引擎 API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===== 请求日志中间件 =====

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """记录所有请求的详细日志"""
    request_id = str(uuid.uuid4())[:8]
    start_time = time.perf_counter()

    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"[{request_id}] --> {request.method} {request.url.path} | IP: {client_ip}")

    try:
        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code
        log_level = "info" if status_code < 400 else "warning" if status_code < 500 else "error"
        getattr(logger, log_level)(f"[{request_id}] <-- {status_code} | {elapsed_ms:.2f}ms")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        return response

    except Exception as e:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"[{request_id}] <-- ERROR | {elapsed_ms:.2f}ms | {type(e).__name__}: {e}")
        raise


def _require_engine() -> ReaderEngine:
    if engine is None:
        logger.error("引擎未就绪，拒绝请求")
        raise HTTPException(status_code=503, detail="引擎未就绪")
    return engine


# ===== API 路由 =====

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """健康检查"""
    from hanreader import __version__
    return HealthResponse(
        status="healthy" if engine else "not_ready",
        version=__version__,
    )


@app.get("/lookup/{word}", response_model=LookupResponse)
async def lookup_word(word: str):
    """查询单词的全部词条及合并后的注音"""
    eng = _require_engine()
    data = eng.annotate(word)
    return LookupResponse(
        word=word,
        pinyin=data.pinyin,
        english=data.english,
        status=data.status.value,
        entries=[
            EntryItem(simplified=e.simplified, traditional=e.traditional, pinyin=e.pinyin, english=list(e.english))
            for e in eng.lookup(word)
        ],
    )


@app.post("/segment", response_model=SegmentResponse)
async def segment_text(request: SegmentRequest):
    """分词"""
    eng = _require_engine()
    result = eng.segment_sequence_result(request.text)
    tokens = eng.segment(request.text) if request.unique else list(result.tokens)
    return SegmentResponse(tokens=tokens, status=result.status.value)


@app.post("/annotate", response_model=AnnotateResponse)
async def annotate_text(request: TextRequest):
    """注音并返回位置信息"""
    eng = _require_engine()
    result = eng.annotate_with_positions(request.text)
    logger.debug(f"注音: {len(request.text)} 字符 -> {len(result.words)} 词, {len(result.gaps)} 间隙")
    return AnnotateResponse(
        words=[_word_item(w) for w in result.words],
        gaps=[SpanItem(text=g.text, start_index=g.start_index, end_index=g.end_index) for g in result.gaps],
        status=result.status.value,
    )


@app.post("/vocabulary", response_model=List[WordItem])
async def build_vocabulary(request: VocabularyRequest):
    """生成词汇表"""
    eng = _require_engine()
    words = eng.vocabulary(request.text, request.include_radicals, request.radical_level)
    return [_word_item(w) for w in words]


@app.get("/radicals/{character}", response_model=RadicalItem)
async def decompose_character(character: str, level: int = Query(1, ge=1, le=3)):
    """单字部件拆分"""
    eng = _require_engine()
    if len(character) != 1:
        raise HTTPException(status_code=400, detail="只能拆分单个汉字")
    result = eng.decompose_radicals(character, level)
    if result is None:
        raise HTTPException(status_code=404, detail=f"无可用拆分: {character}")
    return _radical_item(result)


@app.post("/cache/clear")
async def clear_cache(request: ClearCacheRequest):
    """清空缓存（content 保留单词缓存）"""
    eng = _require_engine()
    if request.scope == "all":
        eng.clear_all_caches()
    else:
        eng.clear_content_caches()
    logger.info(f"缓存已清空: scope={request.scope}")
    return {"cleared": request.scope}


@app.get("/stats")
async def get_stats():
    """获取引擎统计信息"""
    eng = _require_engine()
    return eng.get_stats()


# ===== 启动入口 =====

def main():
    import uvicorn

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "3000"))
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    logger.info(f"启动 HanReader API 服务: http://{host}:{port}")
    logger.info(f"API 文档: http://{host}:{port}/docs")

    uvicorn.run(
        "hanreader.api.server:app",
        host=host,
        port=port,
        reload=False,
        workers=1,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
