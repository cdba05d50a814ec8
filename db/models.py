"""SQLAlchemy ORM models for partners, clients, profit records and payments."""

from typing import Any

from sqlalchemy import ForeignKey, MetaData, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from db.enums import ClientAppStatus

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=convention)

    def to_dict(self) -> dict[str, Any]:
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


class ClientPartners(Base):
    __tablename__ = "client_partners"

    id: Mapped[str] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(nullable=False)
    default_split_partner: Mapped[float] = mapped_column(nullable=False, default=0.25)
    default_split_owner: Mapped[float] = mapped_column(nullable=False, default=0.75)
    contact_info: Mapped[str | None] = mapped_column()
    notes: Mapped[str | None] = mapped_column()
    created_at: Mapped[str] = mapped_column(nullable=False)

    assignments = relationship(
        "ClientPartnerAssignments",
        back_populates="partner",
        cascade="all, delete-orphan",
        order_by="ClientPartnerAssignments.assigned_at",
    )
    payments = relationship(
        "PartnerPayments",
        back_populates="partner",
        cascade="all, delete-orphan",
        order_by="PartnerPayments.paid_at",
    )
    app_splits = relationship(
        "PartnerAppSplits",
        back_populates="partner",
        cascade="all, delete-orphan",
    )


class Clients(Base):
    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(nullable=False)
    surname: Mapped[str | None] = mapped_column()
    invited_by_partner_id: Mapped[str | None] = mapped_column(
        ForeignKey("client_partners.id", ondelete="SET NULL"),
    )
    created_at: Mapped[str] = mapped_column(nullable=False)

    apps = relationship(
        "ClientApps",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="ClientApps.created_at",
    )

    @property
    def display_name(self) -> str:
        full: str = f"{self.name or ''} {self.surname or ''}".strip()
        return full or "Unknown"


class ClientApps(Base):
    __tablename__ = "client_apps"

    id: Mapped[str] = mapped_column(primary_key=True)
    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
    )
    app_id: Mapped[str | None] = mapped_column()
    status: Mapped[str] = mapped_column(nullable=False, default=ClientAppStatus.REQUESTED.value)
    profit_us: Mapped[float | None] = mapped_column()
    created_at: Mapped[str | None] = mapped_column()
    completed_at: Mapped[str | None] = mapped_column()

    client = relationship("Clients", back_populates="apps")


class ClientPartnerAssignments(Base):
    __tablename__ = "client_partner_assignments"

    id: Mapped[str] = mapped_column(primary_key=True)
    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
    )
    partner_id: Mapped[str] = mapped_column(
        ForeignKey("client_partners.id", ondelete="CASCADE"),
        nullable=False,
    )
    split_partner_override: Mapped[float | None] = mapped_column()
    split_owner_override: Mapped[float | None] = mapped_column()
    notes: Mapped[str | None] = mapped_column()
    assigned_at: Mapped[str] = mapped_column(nullable=False)

    __table_args__ = (UniqueConstraint("client_id"),)

    partner = relationship("ClientPartners", back_populates="assignments")
    client = relationship("Clients")


class PartnerPayments(Base):
    __tablename__ = "partner_payments"

    id: Mapped[str] = mapped_column(primary_key=True)
    partner_id: Mapped[str] = mapped_column(
        ForeignKey("client_partners.id", ondelete="CASCADE"),
        nullable=False,
    )
    amount: Mapped[float] = mapped_column(nullable=False)
    note: Mapped[str | None] = mapped_column()
    paid_at: Mapped[str] = mapped_column(nullable=False)

    partner = relationship("ClientPartners", back_populates="payments")


class PartnerAppSplits(Base):
    __tablename__ = "partner_app_splits"

    id: Mapped[str] = mapped_column(primary_key=True)
    partner_id: Mapped[str] = mapped_column(
        ForeignKey("client_partners.id", ondelete="CASCADE"),
        nullable=False,
    )
    app_id: Mapped[str] = mapped_column(nullable=False)
    split_partner: Mapped[float] = mapped_column(nullable=False)
    split_owner: Mapped[float] = mapped_column(nullable=False)
    notes: Mapped[str | None] = mapped_column()

    __table_args__ = (UniqueConstraint("partner_id", "app_id"),)

    partner = relationship("ClientPartners", back_populates="app_splits")
