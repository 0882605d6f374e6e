from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Annotated, Optional
from contextlib import asynccontextmanager
import uuid
import logging
import time

from devicedesk.core.settings import settings
from devicedesk.core.logging import setup_logging
from devicedesk.core.observability import TraceManager
from devicedesk.core.guardrails import Guardrails
from devicedesk.core.errors import InvalidActionError, WorkflowError
from devicedesk.core.models import UserProfile, WorkflowState
from devicedesk.api.schemas import ChatRequest, ActionRequest, SelectDeviceRequest, ConversationResponse
from devicedesk.api.deps import get_current_user, get_session_registry, get_chat_graph
from devicedesk.services.sessions import SessionRegistry, SessionNotFound
from devicedesk.workflow.engine import WorkflowEngine

# Setup
setup_logging()
logger = logging.getLogger(__name__)

CurrentUser = Annotated[UserProfile, Depends(get_current_user)]
Registry = Annotated[SessionRegistry, Depends(get_session_registry)]

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield

    # Shutdown
    if get_session_registry.cache_info().currsize:
        await get_session_registry().backend.close()

app = FastAPI(title="Device Self-Service Assistant", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.env == "development" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware for Trace ID
@app.middleware("http")
async def add_trace_id(request: Request, call_next):
    trace_id = request.headers.get("X-Trace-Id", str(uuid.uuid4()))
    TraceManager.set_trace_id(trace_id)
    request.state.trace_id = trace_id

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    response.headers["X-Trace-Id"] = trace_id
    TraceManager.info(f"Request: {request.method} {request.url.path}", status=response.status_code, duration_ms=duration*1000)
    return response

# Error mapping
@app.exception_handler(SessionNotFound)
async def session_not_found_handler(request: Request, exc: SessionNotFound):
    return JSONResponse(status_code=404, content={"detail": "Session not found", "error_type": "SessionNotFound"})

@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    status_code = 400 if isinstance(exc, InvalidActionError) else 409
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "error_type": type(exc).__name__})

def _conversation(engine: WorkflowEngine, request: Request, status: str = "ok", provider_used: Optional[str] = None) -> ConversationResponse:
    return ConversationResponse(
        session_id=engine.session_id,
        status=status,
        workflow_state=engine.state,
        active_action=engine.active_action,
        is_loading_devices=engine.is_loading_devices,
        messages=list(engine.messages),
        provider_used=provider_used,
        trace_id=request.state.trace_id
    )

# Routes
@app.get("/health")
async def health_check():
    return {"status": "healthy", "env": settings.env}

@app.post("/session/start", response_model=ConversationResponse)
async def start_session(request: Request, current_user: CurrentUser, registry: Registry):
    engine = registry.start(current_user)
    return _conversation(engine, request)

@app.post("/session/end")
async def end_session(session_id: str, current_user: CurrentUser, registry: Registry):
    registry.end(session_id, current_user)
    return {"status": "ok", "message": "Session ended"}

@app.get("/conversation/{session_id}", response_model=ConversationResponse)
async def get_conversation(session_id: str, request: Request, current_user: CurrentUser, registry: Registry):
    return _conversation(registry.get(session_id, current_user), request)

@app.post("/chat", response_model=ConversationResponse)
async def chat_endpoint(
    chat_request: ChatRequest,
    request: Request,
    current_user: CurrentUser,
    registry: Registry,
    chat_graph: Annotated[object, Depends(get_chat_graph)]
):
    engine = registry.get(chat_request.session_id, current_user)
    logger.info(f"Received chat request from user {current_user.id} (session: {chat_request.session_id})")

    # Guardrails Input Check
    is_safe, violation = Guardrails.validate_input(chat_request.message)
    if not is_safe:
        if chat_request.message.strip():
            engine.record_user_message(chat_request.message)
        engine.reply(violation)
        return _conversation(engine, request, status="error", provider_used="guardrail")

    engine.record_user_message(chat_request.message)

    try:
        final_state = await chat_graph.ainvoke({"engine": engine, "utterance": chat_request.message})
    except Exception as e:
        logger.error(f"Chat endpoint error: {e}", exc_info=True)
        engine.reply("An internal error occurred. Please try again.")
        return _conversation(engine, request, status="error", provider_used="system")

    return _conversation(engine, request, provider_used=final_state.get("provider_used"))

@app.post("/actions", response_model=ConversationResponse)
async def start_quick_action(action_request: ActionRequest, request: Request, current_user: CurrentUser, registry: Registry):
    engine = registry.get(action_request.session_id, current_user)
    await engine.start_action(action_request.action, action_request.message)
    return _conversation(engine, request, provider_used="quick_action")

@app.post("/devices/select", response_model=ConversationResponse)
async def select_device(select_request: SelectDeviceRequest, request: Request, current_user: CurrentUser, registry: Registry):
    engine = registry.get(select_request.session_id, current_user)
    if engine.state != WorkflowState.AWAITING_SELECTION:
        raise HTTPException(status_code=409, detail="No device selection is pending for this session.")

    device = engine.find_device(select_request.device_id)
    if device is None:
        raise HTTPException(status_code=404, detail=f"Device '{select_request.device_id}' is not in the presented list.")

    await engine.select_device(device)
    return _conversation(engine, request)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
