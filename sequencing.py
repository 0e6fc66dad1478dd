"""Last-input-wins bookkeeping for overlapping clean requests.

An interactive editor can have several clean-and-format calls in flight. Each
input gets a ticket from `submit`; when a call finishes the caller offers its
result with `complete`. A result is kept only if no result for a newer input
has been kept already, so the order in which calls finish never matters.
Nothing is cancelled: stale results are simply rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import threading

from env import get_debounce_ms


@dataclass
class CleanSequencer:
	debounce_ms: int = None  # type: ignore[assignment]
	_next_ticket: int = field(default=0, init=False, repr=False)
	_accepted_ticket: int = field(default=0, init=False, repr=False)
	_accepted: Any = field(default=None, init=False, repr=False)
	_inputs: Dict[int, str] = field(default_factory=dict, init=False, repr=False)
	_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

	def __post_init__(self) -> None:
		if self.debounce_ms is None:
			self.debounce_ms = get_debounce_ms()

	def submit(self, html: str) -> int:
		"""Register a new input and return its ticket (1, 2, 3, ...)."""
		with self._lock:
			self._next_ticket += 1
			ticket = self._next_ticket
			self._inputs[ticket] = html
			return ticket

	def input_for(self, ticket: int) -> Optional[str]:
		with self._lock:
			return self._inputs.get(ticket)

	def is_stale(self, ticket: int) -> bool:
		"""True when a newer input than `ticket` has been submitted."""
		with self._lock:
			return ticket < self._next_ticket

	def complete(self, ticket: int, result: Any) -> bool:
		"""Offer the result for `ticket`; returns whether it was kept."""
		with self._lock:
			if ticket <= 0 or ticket > self._next_ticket:
				raise ValueError(f"unknown ticket: {ticket}")
			self._inputs.pop(ticket, None)
			if ticket <= self._accepted_ticket:
				return False
			self._accepted_ticket = ticket
			self._accepted = result
			for old in [t for t in self._inputs if t < ticket]:
				self._inputs.pop(old, None)
			return True

	def latest(self) -> Optional[Tuple[int, Any]]:
		with self._lock:
			if self._accepted_ticket == 0:
				return None
			return self._accepted_ticket, self._accepted
