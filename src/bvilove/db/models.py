from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.bvilove.db.connection import Base, engine
from src.bvilove.profile.values import Gender, GenderFilter, ImageKind, LocationFilter


class User(Base):
    __tablename__ = 'users'

    # id чата в Telegram
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(16))
    gender: Mapped[Gender] = mapped_column(Enum(Gender, name='gender'))
    gender_filter: Mapped[GenderFilter] = mapped_column(Enum(GenderFilter, name='gender_filter'))
    about: Mapped[str] = mapped_column(Text)
    active: Mapped[bool] = mapped_column(Boolean(), default=True, nullable=False)
    last_activity: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    graduation_year: Mapped[int] = mapped_column(SmallInteger())
    grade_up_filter: Mapped[int] = mapped_column(SmallInteger(), default=1)
    grade_down_filter: Mapped[int] = mapped_column(SmallInteger(), default=1)
    subjects: Mapped[int] = mapped_column(Integer(), default=0)
    subjects_filter: Mapped[int] = mapped_column(Integer(), default=0)
    dating_purpose: Mapped[int] = mapped_column(SmallInteger())
    city: Mapped[Optional[int]] = mapped_column(Integer(), nullable=True)
    location_filter: Mapped[LocationFilter] = mapped_column(Enum(LocationFilter, name='location_filter'))

    images: Mapped[list['Image']] = relationship(
        back_populates='user',
        cascade='all, delete-orphan',
        passive_deletes=True,
        order_by='Image.id',
    )

    __table_args__ = (Index('ix_users_active_graduation_year', 'active', 'graduation_year'),)

    def __repr__(self) -> str:
        return f'User id: {self.id}, name: {self.name}'


class Image(Base):
    __tablename__ = 'images'

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('users.id', ondelete='CASCADE'), index=True)
    file_id: Mapped[str] = mapped_column(String(200))
    kind: Mapped[ImageKind] = mapped_column(Enum(ImageKind, name='image_kind'))

    user: Mapped['User'] = relationship(back_populates='images')


class Dating(Base):
    __tablename__ = 'datings'

    id: Mapped[int] = mapped_column(primary_key=True)
    initiator_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('users.id', ondelete='CASCADE'), index=True)
    partner_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('users.id', ondelete='CASCADE'), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    initiator_reaction: Mapped[Optional[bool]] = mapped_column(Boolean(), nullable=True)
    partner_reaction: Mapped[Optional[bool]] = mapped_column(Boolean(), nullable=True)
    initiator_msg_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    __table_args__ = (Index('ix_datings_created_at', 'created_at'),)

    @property
    def is_mutual(self) -> bool:
        return bool(self.initiator_reaction and self.partner_reaction)

    def __repr__(self) -> str:
        return f'Dating id: {self.id}, {self.initiator_id} -> {self.partner_id}'


async def create_db_and_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
