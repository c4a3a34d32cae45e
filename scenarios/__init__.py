"""Scenario parameters: schema, validation, and pydantic model."""

from scenarios.schema import validate_scenario, SCENARIO_SCHEMA, scenario_to_engine_kwargs
from scenarios.models import ScenarioModel, scenario_json_schema

__all__ = [
    "validate_scenario",
    "SCENARIO_SCHEMA",
    "scenario_to_engine_kwargs",
    "ScenarioModel",
    "scenario_json_schema",
]
