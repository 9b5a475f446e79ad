"""
Users API: User SQLAlchemy Model
==================================

What:  ORM model representing the `users` table.
How:   Created with metadata.create_all at startup (CREATE TABLE IF NOT EXISTS
       semantics); there is no migration tooling.

Table:
    users(id INT AUTO_INCREMENT PRIMARY KEY, name VARCHAR(255), email VARCHAR(255))

    - id is assigned by the store and never reused or reassigned
    - name and email are nullable with no format or uniqueness checks
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from users_api.database import Base


class User(Base):
    """
    A single user row.

    Lifecycle:
        1. Inserted by POST /users (store assigns id)
        2. Overwritten in place by PUT /users/{id}
        3. Removed permanently by DELETE /users/{id}
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r}, email={self.email!r})>"
