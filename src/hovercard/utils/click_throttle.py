from __future__ import annotations

from dataclasses import dataclass, field
from time import monotonic
from typing import Callable, Dict


@dataclass(slots=True)
class ClickThrottle:
	"""Filters repeated clicks on the same target.

	A toggle that fires twice within ``min_interval`` would add and then
	immediately remove the resource, so the second click is dropped.
	"""

	min_interval: float = 0.3
	clock: Callable[[], float] | None = field(default=None, repr=False)

	_clock: Callable[[], float] = field(init=False, repr=False)
	_last_click: Dict[int, float] = field(init=False, repr=False)
	_min_interval: float = field(init=False, repr=False)

	def __post_init__(self) -> None:
		self._clock = self.clock or monotonic
		self._last_click = {}
		self._min_interval = max(0.0, float(self.min_interval))

	def allow(self, target: int) -> bool:
		now = self._clock()
		last = self._last_click.get(target)
		if last is not None and (now - last) < self._min_interval:
			return False
		self._last_click[target] = now
		return True
