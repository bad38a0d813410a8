"""
Shared fixtures: in memory meta db, eager celery and cuboid catalogs.
"""

import os

os.environ.setdefault("CUBE_FOREST_DATABASE_URI", "sqlite://")
os.environ.setdefault("CUBE_FOREST_CELERY_BROKER", "memory://")
os.environ.setdefault("CUBE_FOREST_CELERY_BACKEND", "cache+memory://")
os.environ.setdefault("CUBE_FOREST_CELERY_EAGER", "1")
os.environ.setdefault("CUBE_FOREST_LOG_LEVEL", "INFO")

import pytest

from app import app as flask_app
from engine.entity import IndexEntity, group_layouts
from utils.orm import db

A, B, C, D = 1, 2, 3, 4
ABCD, ABC, ABD, AB, A_ONLY = 1, 2, 3, 4, 5


@pytest.fixture
def app_ctx():
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app_ctx):
    return app_ctx.test_client()


@pytest.fixture
def cuboid_factory():
    """Build a catalog from (index id, dimension ids) pairs, one layout per cuboid with id index_id * 10 + 1."""

    def make(pairs, measures=(100,), cube_id="cube-1"):
        entities = []
        for index_id, dimensions in pairs:
            entity = IndexEntity(index_id, dimensions, measures, cube_id=cube_id)
            entity.add_layout(index_id * 10 + 1)
            entities.append(entity)
        return group_layouts(entities)

    return make


@pytest.fixture
def abcd_cuboids(cuboid_factory):
    """ABCD, ABC, ABD, AB and A, derivation is the dimension superset relation."""
    return cuboid_factory([
        (ABCD, [A, B, C, D]),
        (ABC, [A, B, C]),
        (ABD, [A, B, D]),
        (AB, [A, B]),
        (A_ONLY, [A]),
    ])