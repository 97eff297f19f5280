"""Schema creation and demo seed data."""
from __future__ import annotations

import logging
from datetime import date

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import end_of_day_jakarta, start_of_day_jakarta
from ..common.money import hpp_value
from ..core.enums import Role
from .extensions import db
from .models import FinanceWeekRow, ProductB2BRow, ProductRow, UserRow

logger = logging.getLogger(__name__)

PASSWORD_METHOD = "pbkdf2:sha512:150000"

DEMO_PRODUCTS = [
    ("HOK-L", "Hokkaido Large", 85000, 0.35),
    ("HOK-R", "Hokkaido Regular", 55000, 0.35),
    ("BRW", "Brownies", 12000, 0.4),
]

DEMO_B2B_PRODUCTS = [
    ("WS-HOK", "Hokkaido Wholesale", 60000, 0.45),
]


def init_schema() -> list[str]:
    """Create missing tables; returns table names."""
    db.create_all()
    return sorted(db.metadata.tables.keys())


def _upsert_user(username: str, name: str, password: str, role: Role, base_salary: int) -> None:
    row = UserRow.query.filter_by(username=username).first()
    password_hash = generate_password_hash(password, method=PASSWORD_METHOD)
    if row:
        row.name = name
        row.role = role.value
        row.password_hash = password_hash
    else:
        db.session.add(
            UserRow(username=username, name=name, role=role.value, password_hash=password_hash, base_salary=base_salary)
        )


def seed_demo_data() -> None:
    """Idempotent demo data: a few products, two users and the current finance week."""
    for code, name, price, pct in DEMO_PRODUCTS:
        if not ProductRow.query.filter_by(code=code).first():
            db.session.add(ProductRow(code=code, name=name, price=price, hpp_pct=pct, hpp_value=hpp_value(price, pct)))

    for code, name, price, pct in DEMO_B2B_PRODUCTS:
        if not ProductB2BRow.query.filter_by(code=code).first():
            db.session.add(ProductB2BRow(code=code, name=name, price=price, hpp_pct=pct, hpp_value=hpp_value(price, pct)))

    _upsert_user("admin", "Admin Demo", "admin123", Role.ADMIN, 5_000_000)
    _upsert_user("sales", "Sales Demo", "sales123", Role.SALES, 3_500_000)

    today = date.today()
    week_name = f"Demo {today.isocalendar()[0]}-W{today.isocalendar()[1]:02d}"
    if not FinanceWeekRow.query.filter_by(name=week_name).first():
        monday = date.fromordinal(today.toordinal() - today.weekday())
        sunday = date.fromordinal(monday.toordinal() + 6)
        db.session.add(
            FinanceWeekRow(
                name=week_name,
                month=monday.month,
                year=monday.year,
                start_date=start_of_day_jakarta(monday),
                end_date=end_of_day_jakarta(sunday),
            )
        )

    db.session.commit()
    logger.info("demo seed ready")
