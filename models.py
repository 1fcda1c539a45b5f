from typing import Optional, Dict, Any, Type

from pydantic import BaseModel, ConfigDict, Field


class _Step(BaseModel):
    # Planner output may carry extra keys; they are left alone.
    model_config = ConfigDict(extra="allow")

    action: str


class GotoStep(_Step):
    url: str = Field(min_length=1)


class TypeStep(_Step):
    selector: str = Field(min_length=1)
    text: str
    delay: Optional[int] = Field(default=None, ge=0)


class ClickStep(_Step):
    selector: str = Field(min_length=1)


class FindAndClickTextStep(_Step):
    text: str = Field(min_length=1)


class WaitStep(_Step):
    time: Optional[int] = Field(default=None, ge=0)


STEP_MODELS: Dict[str, Type[_Step]] = {
    "goto": GotoStep,
    "type": TypeStep,
    "click": ClickStep,
    "findAndClickText": FindAndClickTextStep,
    "wait": WaitStep,
}


def validate_step(step: Dict[str, Any]) -> None:
    """Raise pydantic.ValidationError if a known-kind step misses or mistypes a field.

    Unknown kinds are not checked; the executor skips them at run time.
    """
    action = step.get("action")
    model = STEP_MODELS.get(action) if isinstance(action, str) else None
    if model is not None:
        model.model_validate(step)
