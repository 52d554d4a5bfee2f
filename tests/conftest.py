import pytest

from catalog import create_app
from catalog.extensions import db
from catalog.models import Category, seed_categories


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "SECRET_KEY": "test",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def seeded_app(app):
    seed_categories()
    return app


@pytest.fixture
def client(seeded_app):
    return seeded_app.test_client()


@pytest.fixture
def category_id(seeded_app):
    def _lookup(name):
        return Category.query.filter_by(name=name).one().id

    return _lookup


@pytest.fixture
def chain():
    """A -> B -> C, deliberately out of order."""
    return [
        {"id": "C", "name": "C", "parentId": "B", "enabled": True},
        {"id": "A", "name": "A", "parentId": None, "enabled": True},
        {"id": "B", "name": "B", "parentId": "A", "enabled": False},
    ]
