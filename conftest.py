"""Configures pytest further."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip exhaustive sweeps")


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--skip-slow"):
        return
    skip = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)
