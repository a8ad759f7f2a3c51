"""
Wallit Users — User SQLAlchemy Model
=====================================

What:  ORM model for the `users` table.
Who:   Used by UserService for inserts and lookups, and by Alembic.

Table Design:
    - id: auto-incrementing integer primary key
    - firstname, lastname, email: required strings
    - password: bcrypt hash only, never the plaintext
    - uq_users_email: unique index backing the application-level duplicate
      check on lower(email), so concurrent registrations cannot both insert
      the same address in different letter case
"""

from sqlalchemy import Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from wallit.database import Base


class User(Base):
    """
    A registered user account.

    Lifecycle:
        Created by registration; never updated or deleted. Read by
        authentication and email/id lookups.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    firstname: Mapped[str] = mapped_column(String(255), nullable=False)
    lastname: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    # bcrypt output is 60 characters
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        # password deliberately left out
        return f"<User(id={self.id}, email='{self.email}')>"


# Case-insensitive: Jane@x.io and jane@x.io are the same account
Index("uq_users_email", func.lower(User.email), unique=True)
