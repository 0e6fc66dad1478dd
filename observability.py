"""
ObservabilityStore: audit trail for clean requests.
- Append-only JSONL event log per namespace
- Counters updated on every event, summaries computed on demand

Read-outs are exposed by the API (`/events`, `/metrics`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging
import threading

from env import get_observability_root as _get_observability_root

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "clean-html"

# Serializes the read-modify-write of counters.json
_COUNTERS_LOCK = threading.Lock()


def _utc_now_iso() -> str:
	return datetime.now(tz=timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_iso_z(ts: str) -> Optional[datetime]:
	if not ts or not isinstance(ts, str):
		return None
	raw = ts.strip()
	if not raw:
		return None
	try:
		if raw.endswith("Z"):
			raw = raw[:-1] + "+00:00"
		dt = datetime.fromisoformat(raw)
		if dt.tzinfo is None:
			dt = dt.replace(tzinfo=timezone.utc)
		return dt.astimezone(timezone.utc)
	except ValueError:
		return None


@dataclass
class ObservabilityStore:
	root: Path = None  # type: ignore[assignment]

	def __post_init__(self) -> None:
		if self.root is None:
			self.root = _get_observability_root()

	def _namespace_dir(self, namespace: str) -> Path:
		if not namespace:
			raise ValueError("namespace is required")
		return self.root / namespace

	def _events_path(self, namespace: str) -> Path:
		return self._namespace_dir(namespace) / "events.jsonl"

	def _counters_path(self, namespace: str) -> Path:
		return self._namespace_dir(namespace) / "counters.json"

	def record_event(self, *, event: str, namespace: str = DEFAULT_NAMESPACE, status: str = "success", level: str = "INFO", **fields: Any) -> Dict[str, Any]:
		nd = self._namespace_dir(namespace)
		nd.mkdir(parents=True, exist_ok=True)

		payload: Dict[str, Any] = {
			"timestamp": _utc_now_iso(),
			"namespace": namespace,
			"event": str(event),
			"status": str(status),
			"level": str(level),
		}
		payload.update(fields)

		with self._events_path(namespace).open("a", encoding="utf-8") as fh:
			fh.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")

		self.increment(namespace=namespace, key=f"event:{event}")
		self.increment(namespace=namespace, key=f"status:{status}")
		self.increment(namespace=namespace, key=f"event_status:{event}:{status}")
		return payload

	def read_counters(self, *, namespace: str = DEFAULT_NAMESPACE) -> Dict[str, int]:
		path = self._counters_path(namespace)
		counters: Dict[str, int] = {}
		if not path.exists():
			return counters
		try:
			raw = json.loads(path.read_text(encoding="utf-8"))
		except ValueError:
			logger.warning("counters file unreadable, starting over: %s", path)
			return counters
		if isinstance(raw, dict):
			for k, v in raw.items():
				if isinstance(k, str) and isinstance(v, int):
					counters[k] = v
		return counters

	def increment(self, *, key: str, namespace: str = DEFAULT_NAMESPACE, amount: int = 1) -> None:
		nd = self._namespace_dir(namespace)
		nd.mkdir(parents=True, exist_ok=True)
		with _COUNTERS_LOCK:
			counters = self.read_counters(namespace=namespace)
			counters[key] = int(counters.get(key, 0)) + int(amount)
			self._counters_path(namespace).write_text(json.dumps(counters, ensure_ascii=False, sort_keys=True, indent=2), encoding="utf-8")

	def list_events(self, *, namespace: str = DEFAULT_NAMESPACE, limit: int = 100) -> List[Dict[str, Any]]:
		if limit <= 0:
			return []
		p = self._events_path(namespace)
		if not p.exists():
			return []
		lines = p.read_text(encoding="utf-8").splitlines()
		# last N, newest first
		out: List[Dict[str, Any]] = []
		for line in reversed(lines[-limit:]):
			line = line.strip()
			if not line:
				continue
			try:
				obj = json.loads(line)
			except ValueError:
				continue
			if isinstance(obj, dict):
				out.append(obj)
		return out

	def summarize(self, *, namespace: str = DEFAULT_NAMESPACE, hours: int = 24) -> Dict[str, Any]:
		now = datetime.now(tz=timezone.utc)
		since = now - timedelta(hours=int(hours)) if int(hours) > 0 else None

		filtered: List[Dict[str, Any]] = []
		for e in self.list_events(namespace=namespace, limit=10_000):
			ts = _parse_iso_z(str(e.get("timestamp", "")))
			if ts is None:
				continue
			if since is None or ts >= since:
				filtered.append(e)

		counts_by_event: Dict[str, int] = {}
		counts_by_status: Dict[str, int] = {}
		counts_by_stage: Dict[str, int] = {}
		for e in filtered:
			ev = str(e.get("event", ""))
			st = str(e.get("status", ""))
			counts_by_event[ev] = counts_by_event.get(ev, 0) + 1
			counts_by_status[st] = counts_by_status.get(st, 0) + 1
			stage = e.get("stage")
			if st == "error" and stage:
				counts_by_stage[str(stage)] = counts_by_stage.get(str(stage), 0) + 1

		alerts: List[Dict[str, Any]] = []
		format_failures = counts_by_stage.get("format", 0)
		if format_failures > 0:
			alerts.append({"type": "format_failure", "count": format_failures, "severity": "medium"})
		sanitize_failures = counts_by_stage.get("sanitize", 0)
		if sanitize_failures > 0:
			alerts.append({"type": "sanitize_failure", "count": sanitize_failures, "severity": "high"})

		return {
			"namespace": namespace,
			"window_hours": int(hours),
			"event_count": len(filtered),
			"counts_by_event": counts_by_event,
			"counts_by_status": counts_by_status,
			"errors_by_stage": counts_by_stage,
			"alerts": alerts,
		}
