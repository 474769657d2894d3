# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Constrained numeric aliases shared by input and result models."""

from pydantic import Field
from typing_extensions import Annotated

PositiveFloat = Annotated[float, Field(ge=0)]
PositiveInt = Annotated[int, Field(ge=0)]
StrictlyPositiveFloat = Annotated[float, Field(gt=0)]
Percentage = Annotated[float, Field(ge=0, le=100)]
GrowthPercentage = Annotated[float, Field(gt=-100, le=100)]
