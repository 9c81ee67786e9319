from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))


@pytest.fixture
def cashflow_records() -> List[Dict[str, Any]]:
    """Small OMO cashflow sample in the shape the data source serves."""
    return [
        {"date": "2024-01-03", "OMO": 120.5, "T-Repo": 40, "T-Bill": None},
        {"date": "2024-01-01", "OMO": 100, "T-Repo": 55, "T-Bill": 10},
        {"date": "2024-01-02", "OMO": -20, "T-Repo": 30, "T-Bill": 12.25},
        {"date": "2023-12-29", "OMO": 80, "T-Repo": 30, "T-Bill": 7},
    ]
