import pytest

from bitfieldarray import FieldArray


def pytest_addoption(parser):
    parser.addoption(
        "--run-large",
        action="store_true",
        help="Run tests that build arrays with tens of millions of slots",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "large: tests that allocate arrays with tens of millions of slots",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-large"):
        return
    skip = pytest.mark.skip(reason="need --run-large option to run")
    for item in items:
        if "large" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def scenario():
    """Width-4 array: slot 2=15, slots 3, 7 and 8=6, slot 1000 set then cleared."""
    fa = FieldArray(4)
    fa.set(2, 15)
    fa.set(3, 5)
    fa.set(3, 6)
    fa.set(7, 6)
    fa.set(8, 6)
    fa.set(1000, 5)
    fa.clear(1000)
    return fa


@pytest.fixture(params=[1, 2, 3, 8, 31])
def field_width(request):
    """A spread of field widths including both supported extremes."""
    return request.param
