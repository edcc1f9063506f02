"""
Pytest Configuration and Fixtures

This module provides:
- Marker registration for the engine's test areas
- A per-run results file grouped by test module, listing what each area guards
- Shared fixtures for all tests
"""

import pytest
import importlib
import sys
from collections import defaultdict
from datetime import datetime
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import test configuration
from tests.test_config import (
    CONFIG, EXPECTED, TEST_CATEGORIES,
    get_sample_batch,
)


MARKERS = {
    "config_validation": "Configuration validation tests",
    "scoring": "Relevance and decision scoring tests",
    "selection": "Diversity selection and metrics tests",
    "pipeline_orchestration": "Pipeline execution and isolation tests",
    "report_correctness": "Report output validation tests",
    "cli_behavior": "CLI interface tests",
}


# =============================================================================
# RESULTS FILE
# =============================================================================

RESULTS_DIR = PROJECT_ROOT / CONFIG["test_output_dir"]

# test module area -> [(test name, outcome, failure text)]
_results: dict[str, list[tuple[str, str, str]]] = defaultdict(list)
_started_at = datetime.now()


def _area(nodeid: str) -> str:
    """tests/test_selector.py::TestX::test_y -> "selector"."""
    return Path(nodeid.split("::")[0]).stem.replace("test_", "", 1)


def pytest_configure(config):
    """Register custom markers."""
    for name, description in MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {description}")


def pytest_runtest_logreport(report):
    """Record the outcome of each test call."""
    if report.when == "call":
        name = report.nodeid.split("::")[-1]
        _results[_area(report.nodeid)].append((name, report.outcome, report.longreprtext))


def pytest_sessionfinish(session, exitstatus):
    """Write the results file when anything ran."""
    if not _results:
        return

    RESULTS_DIR.mkdir(exist_ok=True)
    filepath = RESULTS_DIR / f"test_results_{_started_at.strftime('%Y%m%d_%H%M%S')}.txt"
    filepath.write_text(format_results(), encoding="utf-8")
    print(f"\n📄 Test results saved to: {filepath}")


def format_results() -> str:
    """
    Render results per engine area.

    Each area lists what it guards against, so a failing area reads as the
    behavior at risk rather than a bare test name.
    """
    total = sum(len(r) for r in _results.values())
    passed = sum(1 for r in _results.values() for _, outcome, _ in r if outcome == "passed")

    lines = [
        "TREND RELEVANCE ENGINE - TEST RESULTS",
        f"Run: {_started_at.strftime('%Y-%m-%d %H:%M:%S')} | {passed}/{total} passed",
        "",
    ]

    for area in sorted(_results):
        results = _results[area]
        info = TEST_CATEGORIES.get(area, {"name": area, "description": "", "protects_against": []})
        area_passed = sum(1 for _, outcome, _ in results if outcome == "passed")

        lines.append(f"[{info['name']}] {area_passed}/{len(results)} passed - {info['description']}")
        for risk in info["protects_against"]:
            lines.append(f"  guards: {risk}")
        for name, outcome, message in results:
            if outcome == "failed":
                lines.append(f"  ✗ {name}")
                lines.extend(f"      {line}" for line in message.splitlines()[-5:])
        lines.append("")

    return "\n".join(lines)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def sample_batch():
    """Provide a complete batch data dict (trends and organizations)."""
    return get_sample_batch()


@pytest.fixture
def batch_file(tmp_path, sample_batch):
    """Write the sample batch to a JSON file and return its path."""
    import json

    path = tmp_path / "batch.json"
    path.write_text(json.dumps(sample_batch), encoding="utf-8")
    return path


@pytest.fixture
def expected_values():
    """Provide access to expected values."""
    return EXPECTED


@pytest.fixture
def temp_output_dir(tmp_path):
    """Provide a temporary output directory."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def reload_config():
    """
    Reload the config module under patched environment variables.

    The module is reloaded again after the test so patched values do not
    leak into other tests.
    """
    import relevance_engine.config.config as config_module

    def _reload():
        return importlib.reload(config_module)

    yield _reload
    importlib.reload(config_module)
