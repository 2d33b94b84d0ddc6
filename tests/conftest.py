"""Shared test fixtures"""
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.treatments import Factor, generate_treatments


@pytest.fixture
def two_factors():
    """Factor A with 2 levels and factor B with 3 levels"""
    return [
        Factor("A", ["a1", "a2"]),
        Factor("B", ["b1", "b2", "b3"]),
    ]


@pytest.fixture
def treatments_with_controls(two_factors):
    """6 factorial treatments followed by 2 controls"""
    return generate_treatments(two_factors, ["CTRL", "Blank"])


@pytest.fixture
def control_treatments():
    """Treatments without factor levels"""
    return generate_treatments([], ["C1", "C2", "C3"])
