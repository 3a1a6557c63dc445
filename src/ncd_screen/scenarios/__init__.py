"""Scenarios module.

This module provides the built-in library of reference screening profiles.
"""

from ncd_screen.scenarios.library import SCENARIOS, Scenario, get_scenario, list_scenarios

__all__ = ["get_scenario", "list_scenarios", "Scenario", "SCENARIOS"]
