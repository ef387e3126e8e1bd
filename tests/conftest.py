import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.create_sample_tables import make_settings


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path / "out")
