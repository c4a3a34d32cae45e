"""Pydantic model for user-supplied scenario parameters (CLI, JSON, YAML)."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ScenarioModel(BaseModel):
    """
    One simulation request. Use model_validate(dict) on raw input (config
    keys, snake_case or the web form's camelCase); use to_scenario_dict()
    to get the config-style dict for the runner.
    """

    model_config = ConfigDict(extra="forbid")

    simulation_time: float = Field(
        default=480.0,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("T", "simulation_time", "simulationTime"),
    )
    arrival_rate: float = Field(
        default=0.2,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("lambda", "arrival_rate", "arrivalRate"),
    )
    service_rate: float = Field(
        default=0.1,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("mu", "service_rate", "serviceRate"),
    )
    number_of_doctors: int = Field(
        default=2,
        gt=0,
        validation_alias=AliasChoices("n_servers", "number_of_doctors", "numberOfDoctors"),
    )

    @property
    def offered_load(self) -> float:
        return self.arrival_rate / (self.number_of_doctors * self.service_rate)

    def to_scenario_dict(self) -> dict[str, Any]:
        return {
            "T": self.simulation_time,
            "lambda": self.arrival_rate,
            "mu": self.service_rate,
            "n_servers": self.number_of_doctors,
        }


def scenario_json_schema() -> dict[str, Any]:
    """JSON schema for request payloads."""
    return ScenarioModel.model_json_schema()
