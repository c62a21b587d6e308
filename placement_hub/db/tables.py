"""
Snapshot tables.

One row per aggregate. `load_order` records store order, so a load
lists rows in the order they were saved. Cross-aggregate links are stored as ids only;
the loader turns them back into live references.
"""

from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class StudentRow(Base):
    __tablename__ = "students"

    student_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    load_order: Mapped[int] = mapped_column(Integer, default=0)
    name: Mapped[str] = mapped_column(String(200))
    major: Mapped[str] = mapped_column(String(200))
    year_of_study: Mapped[int] = mapped_column(Integer)
    email: Mapped[str] = mapped_column(String(200), default="")


class CompanyRepRow(Base):
    __tablename__ = "company_reps"

    rep_id: Mapped[str] = mapped_column(String(200), primary_key=True)
    load_order: Mapped[int] = mapped_column(Integer, default=0)
    name: Mapped[str] = mapped_column(String(200))
    company_name: Mapped[str] = mapped_column(String(200), index=True)
    department: Mapped[str] = mapped_column(String(200))
    position: Mapped[str] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(200))
    approved: Mapped[bool] = mapped_column(Boolean, default=False)
    rejection_reason: Mapped[str] = mapped_column(Text, default="")


class StaffRow(Base):
    __tablename__ = "career_center_staff"

    staff_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    load_order: Mapped[int] = mapped_column(Integer, default=0)
    name: Mapped[str] = mapped_column(String(200))
    department: Mapped[str] = mapped_column(String(200), default="")
    email: Mapped[str] = mapped_column(String(200), default="")


class InternshipRow(Base):
    __tablename__ = "internships"

    internship_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    load_order: Mapped[int] = mapped_column(Integer, default=0)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)
    level: Mapped[str] = mapped_column(String(16))
    preferred_major: Mapped[str] = mapped_column(String(200))
    open_date: Mapped[date] = mapped_column(Date)
    close_date: Mapped[date] = mapped_column(Date)
    company_name: Mapped[str] = mapped_column(String(200), index=True)
    max_slots: Mapped[int] = mapped_column(Integer)
    confirmed_slots: Mapped[int] = mapped_column(Integer, default=0)
    visible: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(16), index=True)


class ApplicationRow(Base):
    __tablename__ = "applications"

    application_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    load_order: Mapped[int] = mapped_column(Integer, default=0)
    student_id: Mapped[str] = mapped_column(String(64), index=True)
    internship_id: Mapped[str] = mapped_column(String(32), index=True)
    applied_on: Mapped[date] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(16))
    student_accepted: Mapped[bool] = mapped_column(Boolean, default=False)


class WithdrawalRequestRow(Base):
    __tablename__ = "withdrawal_requests"

    request_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    load_order: Mapped[int] = mapped_column(Integer, default=0)
    application_id: Mapped[str] = mapped_column(String(32), index=True)
    requested_by: Mapped[str] = mapped_column(String(64))
    requested_on: Mapped[date] = mapped_column(Date)
    reason: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(16))
    processed_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    processed_on: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    staff_note: Mapped[str] = mapped_column(Text, default="")


class IdSequenceRow(Base):
    __tablename__ = "id_sequences"

    prefix: Mapped[str] = mapped_column(String(16), primary_key=True)
    next_value: Mapped[int] = mapped_column(Integer)
