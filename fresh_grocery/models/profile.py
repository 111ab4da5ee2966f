"""Customer profile and role models."""

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fresh_grocery.extensions import db
from fresh_grocery.models.base import TimestampMixin, enum_column


class AppRole(str, Enum):
    ADMIN = "admin"
    USER = "user"
    RIDER = "rider"


# Highest first; used to pick the role shown for a user
ROLE_PRECEDENCE = (AppRole.ADMIN, AppRole.RIDER, AppRole.USER)


class Profile(TimestampMixin, db.Model):  # type: ignore[name-defined]
    """A user known to the storefront, keyed by the identity provider's subject."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(sa.String(200), nullable=True)
    phone: Mapped[str | None] = mapped_column(sa.String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    roles: Mapped[list["UserRole"]] = relationship(
        back_populates="profile",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def role_names(self) -> set[str]:
        return {user_role.role.value for user_role in self.roles}

    @property
    def primary_role(self) -> AppRole:
        names = self.role_names
        for role in ROLE_PRECEDENCE:
            if role.value in names:
                return role
        return AppRole.USER

    def __repr__(self) -> str:
        return f"<Profile id={self.id!r} email={self.email!r}>"


class UserRole(db.Model):  # type: ignore[name-defined]
    __tablename__ = "user_roles"
    __table_args__ = (sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        sa.String(64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[AppRole] = mapped_column(enum_column(AppRole), nullable=False, default=AppRole.USER)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )

    profile: Mapped[Profile] = relationship(back_populates="roles")

    def __repr__(self) -> str:
        return f"<UserRole user_id={self.user_id!r} role={self.role.value}>"
