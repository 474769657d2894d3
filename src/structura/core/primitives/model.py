# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable models for deal inputs, parameters and results. Analysis runs
    never mutate a model in place; derived copies go through `revalidate`.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Immutable; derived copies go through revalidate
        extra="forbid",
    )

    def revalidate(self, **updates: Any) -> "Model":
        """
        Return a copy with `updates` applied, running full validation.

        Unlike `model_copy(update=...)`, which skips validators, this rebuilds
        the model from its dumped fields so that every constraint and model
        validator runs against the updated values.
        """
        data: Dict[str, Any] = self.model_dump()
        data.update(updates)
        return type(self).model_validate(data)
