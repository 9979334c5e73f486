"""SQLAlchemy models for envelopes database."""

from datetime import date, datetime, UTC
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Owner(Base):
    """Budget owner model."""

    __tablename__ = "owners"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="owner", cascade="all, delete-orphan")
    category_groups = relationship(
        "CategoryGroup", back_populates="owner", cascade="all, delete-orphan"
    )


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    name = Column(String, nullable=False)
    on_budget = Column(Boolean, default=True, nullable=False)
    start_balance = Column(BigInteger, default=0, nullable=False)
    opened_on = Column(Date, default=date.today, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_owner_account_name"),)

    # Relationships
    owner = relationship("Owner", back_populates="accounts")
    transactions = relationship("Transaction", back_populates="account", cascade="all, delete-orphan")


class CategoryGroup(Base):
    """Category group model."""

    __tablename__ = "category_groups"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_hidden = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    owner = relationship("Owner", back_populates="category_groups")
    categories = relationship("Category", back_populates="group")


class Category(Base):
    """Budget category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    group_id = Column(Integer, ForeignKey("category_groups.id"), nullable=False)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_hidden = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    group = relationship("CategoryGroup", back_populates="categories")
    transactions = relationship("Transaction", back_populates="category")
    target = relationship(
        "CategoryTarget", back_populates="category", uselist=False, cascade="all, delete-orphan"
    )


class Transaction(Base):
    """Transaction model. Amounts are signed cents."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(BigInteger, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    cleared = Column(Boolean, default=False, nullable=False)
    payee = Column(String, nullable=True)
    memo = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")


class MonthlyAssignment(Base):
    """Assigned amount per category and month ("YYYY-MM")."""

    __tablename__ = "monthly_assignments"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    month = Column(String(7), nullable=False)
    assigned = Column(BigInteger, default=0, nullable=False)
    version = Column(Integer, default=1, nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # One row per category and month
    __table_args__ = (UniqueConstraint("category_id", "month", name="uq_category_month"),)


class CategoryTarget(Base):
    """Funding target model, at most one per category."""

    __tablename__ = "category_targets"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), unique=True, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(BigInteger, nullable=False)
    day_of_month = Column(Integer, nullable=True)
    target_month = Column(String(7), nullable=True)
    refill_type = Column(String, default="refill", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    category = relationship("Category", back_populates="target")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
