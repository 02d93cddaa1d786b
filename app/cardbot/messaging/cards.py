"""Adaptive Card template -- loaded once, shared read-only by every turn."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal

from botbuilder.schema import Attachment
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import StartupConfigurationError

logger = logging.getLogger(__name__)

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"


class AdaptiveCardDocument(BaseModel):
    """Top-level shape every Adaptive Card must have.  Other keys pass through."""

    model_config = ConfigDict(extra="allow")

    type: Literal["AdaptiveCard"]
    version: str
    body: list[dict[str, Any]] = Field(description="Card elements rendered top to bottom.")


@dataclass(frozen=True, slots=True)
class CardTemplate:
    """Immutable card document.

    *content* is frozen all the way down (mappings become
    ``MappingProxyType``, lists become tuples); use :meth:`to_dict` to get a
    mutable copy.
    """

    content: Mapping[str, Any]
    source: str = field(default="", compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = "") -> CardTemplate:
        return cls(content=_freeze(data), source=source)

    def to_dict(self) -> dict[str, Any]:
        return _thaw(self.content)


def load_card_template(path: Path) -> CardTemplate:
    """Parse and validate the card at *path*.

    Any problem is fatal: there is no fallback rendering, so the process must
    not start with a broken card.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StartupConfigurationError(f"Cannot read card template {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StartupConfigurationError(f"Card template {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise StartupConfigurationError(f"Card template {path} must be a JSON object")

    try:
        AdaptiveCardDocument.model_validate(data)
    except ValidationError as exc:
        raise StartupConfigurationError(
            f"Card template {path} is not a valid Adaptive Card: {exc}"
        ) from exc

    logger.info("Loaded card template %s (%d body elements)", path, len(data["body"]))
    return CardTemplate.from_dict(data, source=str(path))


# -- attachment builders ---------------------------------------------------


def card_attachment(card: CardTemplate) -> Attachment:
    return Attachment(content_type=ADAPTIVE_CARD_CONTENT_TYPE, content=card.to_dict())


def attachment_to_dict(att: Attachment) -> dict:
    return {"contentType": att.content_type, "content": att.content}


# -- freezing --------------------------------------------------------------


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value
