"""Pytest configuration and fixtures for form logic tests."""
import copy
import json
import pytest
from form_logic.conditions import ConditionalLogic
from form_logic.config import ConfigManager
from form_logic.sample_templates import HVAC_INSPECTION_TEMPLATE
from form_logic.schemas import load_template


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer FORM_LOGIC_* settings out of the tests."""
    for key in ('LOG_LEVEL', 'LOG_COLORS', 'STRICT_CONDITIONS', 'MAX_RULE_DEPTH', 'MAX_CONDITIONS'):
        monkeypatch.delenv(f'FORM_LOGIC_{key}', raising=False)


@pytest.fixture
def logic():
    """A shared stateless evaluator."""
    return ConditionalLogic()


@pytest.fixture
def config():
    return ConfigManager()


@pytest.fixture
def template_data():
    """A fresh copy of the HVAC inspection template dict."""
    return copy.deepcopy(HVAC_INSPECTION_TEMPLATE)


@pytest.fixture
def template(template_data):
    return load_template(template_data)


@pytest.fixture
def template_file(tmp_path, template_data):
    """The HVAC inspection template written to a JSON file."""
    path = tmp_path / 'hvac.json'
    path.write_text(json.dumps(template_data))
    return path


@pytest.fixture
def write_json(tmp_path):
    """Write an object to a JSON file under tmp_path and return its path."""
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path
    return _write
