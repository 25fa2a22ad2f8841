import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--suite", default="all", choices=["toil", "nontoil", "all"], help="test suite to run"
    )

def pytest_configure(config):
    config.addinivalue_line("markers", "toil: runs a toil workflow on the single machine batch system")

def pytest_collection_modifyitems(config, items):
    suite = config.getoption("--suite")
    if suite == "all":
        # Don't skip any tests
        return
    skip = pytest.mark.skip(reason="skipping non-selected suite")
    for item in items:
        if suite != "toil" and "toil" in item.keywords:
            item.add_marker(skip)
        if suite == "toil" and "toil" not in item.keywords:
            item.add_marker(skip)
