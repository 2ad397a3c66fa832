import io

import pytest

from revbisect import log


@pytest.fixture(autouse=True)
def logger():
    """every test starts with a fresh logger writing to a buffer"""
    stream = io.StringIO()
    log.init_logger(debug=True, allow_color=False, output=stream)
    return stream


@pytest.fixture
def outdir(tmp_path):
    return str(tmp_path)
