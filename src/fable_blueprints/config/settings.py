from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SignalWeights(BaseModel):
    """Evidence weight contributed by each signal source.

    Attributes:
        enum: explicit finite option list on a component property
        arg_type: option list declared on the story group's argTypes
        story: scalar produced by a per-story args override
        boolean: unlocked boolean component property
        hint: component-declared permutation hint
        default: base-arg value folded into an already known axis
    """

    enum: float = Field(1.0, ge=0, le=1)
    arg_type: float = Field(0.7, ge=0, le=1)
    story: float = Field(0.4, ge=0, le=1)
    boolean: float = Field(0.3, ge=0, le=1)
    hint: float = Field(0.9, ge=0, le=1)
    default: float = Field(0.2, ge=0, le=1)

    model_config = ConfigDict(frozen=True)


class BlueprintSettings(BaseModel):
    """Budget and weighting knobs for blueprint analysis."""

    max_axes: int = Field(4, ge=1)
    max_cases: int = Field(48, ge=1)
    weights: SignalWeights = Field(default_factory=SignalWeights)

    model_config = ConfigDict(frozen=True)


DEFAULT_SETTINGS = BlueprintSettings()
