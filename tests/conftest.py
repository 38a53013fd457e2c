"""
Global pytest configuration and fixtures.
"""

import logging

import pytest

from typeshape.registry import SchemaRegistry
from typeshape.types import Types


@pytest.fixture
def user_spec():
    """Object specification with one constraint per field."""
    return Types.object(
        {
            "name": Types.string().with_constraints(min_length=1),
            "age": Types.integer().with_constraints(gt=0),
        }
    )


@pytest.fixture
def tree_registry():
    """Frozen registry holding a self-referential tree schema."""
    registry = SchemaRegistry(
        {
            "Tree": Types.object(
                {
                    "value": Types.integer(),
                    "children": Types.array(Types.ref("Tree")).with_default([]),
                }
            )
        }
    )
    return registry.freeze()


@pytest.fixture(autouse=True)
def reset_typeshape_logging():
    """Keep CLI logging configuration from leaking between tests."""
    logger = logging.getLogger("typeshape")
    root_logger = logging.getLogger()
    level, root_level = logger.level, root_logger.level
    handlers = root_logger.handlers[:]
    yield
    logger.setLevel(level)
    root_logger.setLevel(root_level)
    root_logger.handlers[:] = handlers
