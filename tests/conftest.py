"""
Pytest configuration and fixtures for the ordering core tests.
"""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cafe_shared.config.constants import RoleName, UnitOfMeasure
from cafe_ordering.models import (
    Base, Category, Customer, Ingredient, Product, Role, User,
)


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    # Create all tables
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def other_session(db_session):
    """A second session on the same database, for concurrent-writer scenarios."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# Transient objects (no database)
# =============================================================================


@pytest.fixture
def coffee():
    """Active product priced 4.50 with no stock tracking."""
    return Product(name="Flat White", price=Decimal("4.50"))


@pytest.fixture
def milk():
    return Ingredient(
        name="Milk",
        is_allergen=True,
        allergen_type="dairy",
        is_vegetarian=True,
        is_vegan=False,
        is_gluten_free=True,
        stock_level=Decimal("10"),
        unit_of_measure=UnitOfMeasure.LITER,
    )


@pytest.fixture
def oat_milk():
    return Ingredient(
        name="Oat Milk",
        is_allergen=False,
        is_vegetarian=True,
        is_vegan=True,
        is_gluten_free=False,
        stock_level=Decimal("5"),
        unit_of_measure=UnitOfMeasure.LITER,
    )


# =============================================================================
# Seed data (persisted)
# =============================================================================


@pytest.fixture
def seed_category(db_session):
    """Create a root category."""
    category = Category(name="Hot Drinks", display_order=1)
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def seed_product(db_session, seed_category):
    """Create a 4.50 product in the Hot Drinks category."""
    product = Product(
        name="Flat White",
        price=Decimal("4.50"),
        category_id=seed_category.id,
        stock_level=20,
        reorder_threshold=5,
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture
def seed_ingredient(db_session):
    ingredient = Ingredient(
        name="Espresso Beans",
        stock_level=Decimal("1000"),
        reorder_threshold=Decimal("200"),
        unit_of_measure=UnitOfMeasure.GRAM,
        cost_per_unit=Decimal("0.03"),
    )
    db_session.add(ingredient)
    db_session.commit()
    db_session.refresh(ingredient)
    return ingredient


@pytest.fixture
def seed_customer(db_session):
    """Create a customer enrolled in the loyalty program."""
    customer = Customer(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone_number="+441234567890",
    )
    db_session.add(customer)
    db_session.flush()
    customer.enroll_in_loyalty_program()
    db_session.commit()
    db_session.refresh(customer)
    return customer


@pytest.fixture
def seed_staff_user(db_session):
    """Create an active user with the staff and manager roles."""
    staff = Role(name=RoleName.STAFF, description="Counter staff")
    manager = Role(name=RoleName.MANAGER, description="Shift manager")
    user = User(
        username="barista",
        email="barista@cafe.test",
        password_hash="$2b$12$hash",
        first_name="Bea",
        last_name="Rista",
    )
    user.add_role(staff)
    user.add_role(manager)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user
