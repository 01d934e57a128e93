# g6pd_agent/main.py
"""
Core FastAPI application, including middleware, endpoints, and audit logging.
"""
import logging
import hashlib
import time
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Local module imports
from . import config, guardrails, models, schemas
from .errors import InvalidInputError
from .service import ClassificationService

load_dotenv()

# --- App Setup ---
app = FastAPI(title="G6PD Safety Agent", version="1.0.0")
config.start_config_reloader()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cfg()["server"]["cors_allow_origins"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

@app.exception_handler(InvalidInputError)
def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"error": str(exc)})

# --- Logging ---
logging.basicConfig(level=logging.INFO)
audit_log = logging.getLogger("audit")

def audit_event(kind: str, payload: dict):
    """Logs an audit event if enabled."""
    if not config.get_cfg()["guardrails"]["audit_log"]:
        return
    payload = dict(payload)
    if "text" in payload:
        payload["text_sha256"] = hashlib.sha256(payload["text"].encode()).hexdigest()
        del payload["text"]
    payload["ts"] = int(time.time())
    audit_log.info({"event": kind, **payload})

# --- Dependencies ---
def get_service() -> ClassificationService:
    """Builds a service from the current config; credentials come from the environment."""
    cfg = config.get_cfg()
    invoker = models.build_invoker(config.model_settings(cfg), config.get_api_key(cfg))
    return ClassificationService(invoker)

# --- Endpoints ---
@app.get("/health")
def health():
    """Health check endpoint. Reports the configured model without calling it."""
    cfg = config.get_cfg()
    settings = config.model_settings(cfg)
    return {
        "status": "ok",
        "provider": settings["provider"],
        "model": settings["id"],
        "credentials": bool(config.get_api_key(cfg)),
    }

@app.post(
    "/api/check-safety",
    response_model=schemas.ClassificationVerdict,
    responses={400: {"model": schemas.ErrorResponse}},
)
def check_safety(req: schemas.CheckRequest, service: ClassificationService = Depends(get_service)):
    """Classifies one food, medication or product for G6PD safety."""
    try:
        text = guardrails.validate_input(req.input)
    except InvalidInputError:
        audit_event("rejected", {"text": req.input or ""})
        raise

    outcome = service.classify_with_outcome(text)
    audit_event("check", {
        "text": text,
        "safety": outcome.verdict.safety,
        "severity": outcome.verdict.severity,
        "fallback": outcome.fallback,
    })
    return outcome.verdict

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
