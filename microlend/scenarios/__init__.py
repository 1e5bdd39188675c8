"""Scenarios for generating realistic demo books."""

from microlend.scenarios.demo_book import DemoBookScenario

__all__ = ["DemoBookScenario"]
