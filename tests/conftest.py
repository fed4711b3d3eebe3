import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.users import User
from models.category import Category
from models.product import Product
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token

# One in-memory database shared by the test session and the app threads
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _make_user(db, email, role):
    user = User(email=email, password_hash=get_password_hash("secret123"), role=role,
                first_name="Test", last_name=role.title())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    return _make_user(db_session, "admin@fashionarena.pk", "admin")


@pytest.fixture
def cashier_user(db_session):
    return _make_user(db_session, "cashier@fashionarena.pk", "cashier")


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token({"sub": admin_user.email, "role": admin_user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def cashier_headers(cashier_user):
    token = create_access_token({"sub": cashier_user.email, "role": cashier_user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def category(db_session):
    cat = Category(name="Shirts", description="Casual and formal shirts")
    db_session.add(cat)
    db_session.commit()
    db_session.refresh(cat)
    return cat


@pytest.fixture
def products(db_session, category):
    items = [
        Product(name="Linen Shirt", category_id=category.id, code="100001", price=500, stock=20),
        Product(name="Denim Jeans", category_id=category.id, code="100002", price=1500, stock=10),
        Product(name="Cotton Scarf", category_id=category.id, code="100003", price=250, stock=5),
    ]
    db_session.add_all(items)
    db_session.commit()
    for p in items:
        db_session.refresh(p)
    return items
