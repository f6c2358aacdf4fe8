from collections.abc import Generator

import pytest

from mrarray.config import config


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None, None, None]:
    config.reset()
    yield
    config.reset()


@pytest.fixture(params=["float32", "float64", "complex64", "complex128", "int32"])
def dtype(request: pytest.FixtureRequest) -> str:
    return request.param
