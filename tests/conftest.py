"""
Pytest fixtures for Socrate tests.
"""

import json
import pytest
from unittest.mock import AsyncMock

from socrate.core.prompt.builder import PromptBuilder
from socrate.session.state import SessionState


@pytest.fixture
def mock_gateway():
    """Mock model gateway that returns canned text."""
    mock = AsyncMock()
    mock.proxy_url = None

    def set_response(response):
        """Set the reply; dicts are serialized to JSON text."""
        if isinstance(response, dict):
            response = json.dumps(response)
        mock.generate.return_value = response

    mock.generate.return_value = json.dumps({
        "response": "Tell me more.",
        "identified_problems": [],
        "needs_more_exploration": True,
    })
    mock.set_response = set_response

    return mock


@pytest.fixture
def prompt_builder(tmp_path):
    """Prompt builder that never picks up override files."""
    return PromptBuilder({"prompts_dir": str(tmp_path / "no-prompts")})


@pytest.fixture
def state():
    """Fresh session state."""
    return SessionState(session_id="test-session")
