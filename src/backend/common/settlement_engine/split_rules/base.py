from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from ..errors import SplitValidationError
from .context import SplitContext


class SplitRule(ABC):
    method_id: str
    method_title: str
    description: str = ""
    # Who absorbs the cents lost to rounding: "first_participant", "first_listed" or "none".
    residual_policy: str = "none"
    params_model: Type[BaseModel]

    invalid_params_error: Type[SplitValidationError] = SplitValidationError
    invalid_params_message: str = "Invalid split parameters."

    def __init__(self):
        if not getattr(self, "method_id", None):
            raise ValueError("Split rule must define method_id")

    def parse_params(self, raw: Optional[Mapping[str, Any]]) -> BaseModel:
        try:
            return self.params_model.model_validate(raw or {})
        except ValidationError as exc:
            raise self.invalid_params_error(self.invalid_params_message) from exc

    @abstractmethod
    def split(self, ctx: SplitContext, params: Any) -> Dict[Any, Decimal]:  # pragma: no cover
        raise NotImplementedError
