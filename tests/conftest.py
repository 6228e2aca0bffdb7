"""Root conftest — shared fixtures."""

import os

# Plain text output in assertions
os.environ["NO_COLOR"] = "1"
os.environ.pop("FORCE_COLOR", None)

import pytest

from project_tracker.models import Store
from project_tracker.repository import Repository


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "tracker"


@pytest.fixture
def repo():
    return Repository(Store())


@pytest.fixture
def website(repo):
    """Repository holding project 1 "Website" with tasks 1 and 2."""
    pid = repo.add_project("Website")
    repo.add_task(pid, "Design mockups")
    repo.add_task(pid, "Write copy")
    return repo
