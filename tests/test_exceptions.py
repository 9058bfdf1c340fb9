#!/usr/bin/env python3
"""
Tests for terrastl exceptions module.

This module contains unit tests for the exception hierarchy defined in the
library and the CLI.
"""

import pytest

from terrastl.exceptions import (
    TerraSTLException,
    GridError,
    InvalidGridShapeError,
    EmptyGridError,
    MeshGenerationError,
    CapacityExceededError,
    STLFormatError
)
from terrastl.cli.exceptions import TerraSTLCliException, InputError, FileError


class TestTerraSTLExceptions:
    """Test cases for terrastl exception classes."""

    def test_base_exception(self):
        """Test that TerraSTLException can be raised and caught properly."""
        error_msg = "Base terrastl exception"
        with pytest.raises(TerraSTLException) as excinfo:
            raise TerraSTLException(error_msg)

        assert str(excinfo.value) == error_msg
        assert isinstance(excinfo.value, Exception)

    @pytest.mark.parametrize("exc_class, parent", [
        (GridError, TerraSTLException),
        (InvalidGridShapeError, GridError),
        (EmptyGridError, GridError),
        (MeshGenerationError, TerraSTLException),
        (CapacityExceededError, MeshGenerationError),
        (STLFormatError, TerraSTLException),
    ])
    def test_hierarchy(self, exc_class, parent):
        """Each library error is catchable through its parent class."""
        with pytest.raises(parent):
            raise exc_class("boom")

    def test_capacity_error_is_not_grid_error(self):
        assert not issubclass(CapacityExceededError, GridError)


class TestCliExceptions:
    """Test cases for CLI exception classes."""

    @pytest.mark.parametrize("exc_class", [InputError, FileError])
    def test_cli_errors_share_base(self, exc_class):
        with pytest.raises(TerraSTLCliException) as excinfo:
            raise exc_class("bad input")
        assert str(excinfo.value) == "bad input"

    def test_cli_errors_are_separate_from_library_errors(self):
        assert not issubclass(FileError, TerraSTLException)
