"""
Demo data shaped like a decode result, for showing the UI before any upload.
"""

from __future__ import annotations

from typing import Any, Dict

from .decode import header_key

SAMPLE_HEADERS = [
    "Name",
    "Industry",
    "Stage",
    "Funding",
    "Location",
    "Employees",
    "Description",
    "Valuation",
    "Founder",
]

SAMPLE_ROWS = [
    [
        "TechFlow AI",
        "Artificial Intelligence",
        "Series A",
        "$5.2M",
        "San Francisco, CA",
        "25",
        "AI-powered workflow automation for enterprises",
        "$25M",
        "Sarah Chen",
    ],
    [
        "GreenEnergy Solutions",
        "Clean Tech",
        "Seed",
        "$2.1M",
        "Austin, TX",
        "12",
        "Solar panel optimization using machine learning",
        "$12M",
        "Michael Rodriguez",
    ],
    [
        "HealthTracker Pro",
        "Healthcare",
        "Series B",
        "$15.8M",
        "Boston, MA",
        "67",
        "Personalized health monitoring and analytics platform",
        "$80M",
        "Dr. Emily Watson",
    ],
]


def sample_result() -> Dict[str, Any]:
    """A fresh copy of the sample data every call; callers may mutate it."""
    keys = [header_key(h) for h in SAMPLE_HEADERS]
    records = [
        {"id": str(i), "values": dict(zip(keys, row))}
        for i, row in enumerate(SAMPLE_ROWS, start=1)
    ]
    return {"headers": list(SAMPLE_HEADERS), "keys": keys, "records": records}
