from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from adapters import AdapterError
from env import get_debounce_ms, get_default_brand, get_log_level
from headers import BRANDS, COMMON_HEADERS, header_style, render_common_headers
from observability import ObservabilityStore
from pipeline import InputError, run_clean
from rules import build_rule_table

logging.basicConfig(level=getattr(logging, get_log_level(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Terms HTML Cleaner")
app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_methods=["*"],
	allow_headers=["*"],
)


class CleanHtmlRequest(BaseModel):
	html: Optional[str] = None
	headers: Optional[List[str]] = None


class CleanHtmlResponse(BaseModel):
	cleaned: str
	formatted: str


class ErrorResponse(BaseModel):
	error: str
	stage: Optional[str] = None
	cleaned: Optional[str] = None


class HeadersResponse(BaseModel):
	brand: str
	style: str
	headers: List[str]
	rendered: List[str]


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
	body: Dict[str, Any] = {"error": message}
	body.update({k: v for k, v in extra.items() if v is not None})
	return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(RequestValidationError)
def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
	errors = exc.errors()
	first = errors[0] if errors else {}
	loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
	message = f"Invalid request: {loc}: {first.get('msg', 'validation failed')}" if loc else "Invalid request"
	if request.url.path == "/api/clean-html":
		ObservabilityStore().record_event(event="clean_html", status="error", stage="input", error=message)
	return _error(400, message)


@app.post(
	"/api/clean-html",
	response_model=CleanHtmlResponse,
	responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def clean_html_endpoint(req: CleanHtmlRequest) -> Any:
	store = ObservabilityStore()
	header_count = len(req.headers or [])
	try:
		result = run_clean(req.html, req.headers)
	except InputError as exc:
		store.record_event(event="clean_html", status="error", stage="input", error=str(exc))
		return _error(400, str(exc))
	except AdapterError as exc:
		logger.warning("clean_html %s failure: %s", exc.stage, exc)
		store.record_event(event="clean_html", status="error", level="WARNING", stage=exc.stage, error=str(exc))
		return _error(500, str(exc), stage=exc.stage, cleaned=exc.cleaned)
	except Exception as exc:
		logger.exception("clean_html failed")
		store.record_event(event="clean_html", status="error", level="ERROR", stage="pipeline", error=str(exc))
		return _error(500, str(exc) or "Failed to clean HTML")
	store.record_event(event="clean_html", status="success", headers=header_count, **result.counts)
	return CleanHtmlResponse(cleaned=result.cleaned, formatted=result.formatted)


@app.get("/headers", response_model=HeadersResponse)
def list_headers(brand: Optional[str] = None) -> HeadersResponse:
	b = (brand or "").strip().upper() or get_default_brand()
	return HeadersResponse(
		brand=b,
		style=header_style(b),
		headers=list(COMMON_HEADERS),
		rendered=render_common_headers(b),
	)


@app.get("/brands")
def list_brands() -> Dict[str, Any]:
	return {"brands": list(BRANDS), "default": get_default_brand()}


@app.get("/rules")
def list_rules(headers: Optional[List[str]] = Query(default=None)) -> Dict[str, Any]:
	table = build_rule_table(headers)
	return {
		"rules": [
			{"index": i, "name": r.name, "category": r.category, "pattern": r.pattern.pattern}
			for i, r in enumerate(table)
		]
	}


@app.get("/config")
def client_config() -> Dict[str, Any]:
	return {"debounce_ms": get_debounce_ms(), "default_brand": get_default_brand()}


@app.get("/events")
def list_events(limit: int = Query(default=100, ge=1, le=1000)) -> Dict[str, Any]:
	return {"events": ObservabilityStore().list_events(limit=limit)}


@app.get("/metrics")
def metrics(hours: int = Query(default=24, ge=0)) -> Dict[str, Any]:
	store = ObservabilityStore()
	summary = store.summarize(hours=hours)
	summary["counters"] = store.read_counters()
	return summary
