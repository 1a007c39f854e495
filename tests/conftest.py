import os
import socket

import pytest
from hypothesis import settings


settings.register_profile("default", max_examples=100, deadline=None)
settings.register_profile("ci", max_examples=500, deadline=None)
settings.register_profile("dev", max_examples=10, deadline=None)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


@pytest.fixture
def socket_files():
    """A connected couple of (writer, reader) file objects on top of a socket pair."""
    a, b = socket.socketpair()
    wfile = a.makefile('wb')
    rfile = b.makefile('rb')

    yield wfile, rfile

    wfile.close()
    rfile.close()
    a.close()
    b.close()
