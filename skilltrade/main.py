# skilltrade/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skilltrade.api import message, realtime, review, session, skill, swap, user_skill, users
from skilltrade.config import settings
from skilltrade.database import Base, engine
from skilltrade.exceptions import SkillTradeError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("skilltrade")

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="SkillTrade API", debug=settings.DEBUG)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error rendering
@app.exception_handler(SkillTradeError)
async def skilltrade_error_handler(request: Request, exc: SkillTradeError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"kind": "validation_error", "detail": detail or "Invalid request"},
    )


# API routers
app.include_router(users.router)         # /auth/user, /profile, /stats, /availability
app.include_router(skill.router)         # /skills/*
app.include_router(user_skill.router)    # /user-skills/*
app.include_router(swap.router)          # /swaps/*, /swap-matches
app.include_router(session.router)       # /sessions/*
app.include_router(message.router)       # /messages/*
app.include_router(review.router)        # /reviews/*, /rating/*
app.include_router(realtime.router)      # websocket


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "SkillTrade API is running",
        "version": "0.1.0",
    }
