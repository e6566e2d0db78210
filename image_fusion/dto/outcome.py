# File: image_fusion/dto/outcome.py
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class Idle(BaseModel):
    kind: Literal["idle"] = "idle"


class Loading(BaseModel):
    kind: Literal["loading"] = "loading"


class Success(BaseModel):
    kind: Literal["success"] = "success"
    image_data_url: str


class Failure(BaseModel):
    kind: Literal["failure"] = "failure"
    message: str


# Exactly one of these is active per session; there are no separate
# is_loading / error / image flags that could disagree.
RequestOutcome = Annotated[
    Union[Idle, Loading, Success, Failure],
    Field(discriminator="kind"),
]
