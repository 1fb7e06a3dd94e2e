"""Normalized outcome of a backend call.

Every backend client translates its own payload into one of these three
shapes, so nothing above the client layer looks at raw JSON.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Text:
    body: str


@dataclass(frozen=True)
class RequiresConfirmation:
    reasons: tuple = ()


@dataclass(frozen=True)
class Failure:
    message: str


BackendResult = Union[Text, RequiresConfirmation, Failure]
