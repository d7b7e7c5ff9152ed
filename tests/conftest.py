import pytest

from helpers import rgba_bytes


@pytest.fixture
def checkerboard():
    red = (255, 0, 0, 255)
    blue = (0, 0, 255, 128)
    colors = [red if (x + y) % 2 else blue for y in range(4) for x in range(4)]
    return rgba_bytes(colors), 4, 4
