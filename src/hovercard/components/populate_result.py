"""Outcome of a popup population: either an error message or a body."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from hovercard.components.popup_body import PopupBody


@dataclass(frozen=True, slots=True)
class PopulateError:
    message: str
    kind: Literal["error"] = "error"


@dataclass(frozen=True, slots=True)
class PopulateContent:
    body: PopupBody
    kind: Literal["content"] = "content"


PopulateResult = Union[PopulateError, PopulateContent]
