"""ORM tables (Flask-SQLAlchemy).

Timestamps are naive UTC. Amounts are integer Rupiah.
"""
from __future__ import annotations

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_WORK_END_MINUTES, DEFAULT_WORK_START_MINUTES
from .extensions import db


class UserRow(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=False)
    role = db.Column(db.String(20), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    base_salary = db.Column(db.Integer, nullable=False, default=0)
    work_start_minutes = db.Column(db.Integer, nullable=False, default=DEFAULT_WORK_START_MINUTES)
    work_end_minutes = db.Column(db.Integer, nullable=False, default=DEFAULT_WORK_END_MINUTES)
    overtime_hourly_rate = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class ProductRow(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(40), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=False)
    price = db.Column(db.Integer, nullable=False, default=0)
    hpp_pct = db.Column(db.Float, nullable=False, default=0)
    hpp_value = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class ProductB2BRow(db.Model):
    __tablename__ = "products_b2b"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(40), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=False)
    price = db.Column(db.Integer, nullable=False, default=0)
    hpp_pct = db.Column(db.Float, nullable=True)
    hpp_value = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class InventoryRow(db.Model):
    __tablename__ = "inventory"

    id = db.Column(db.Integer, primary_key=True)
    barcode = db.Column(db.String(80), unique=True, nullable=False)
    location = db.Column(db.String(20), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    status = db.Column(db.String(10), nullable=False, default="READY", index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)
    updated_at = db.Column(db.DateTime, nullable=False, default=now_utc, onupdate=now_utc)

    product = db.relationship("ProductRow", lazy="joined")


class SaleRow(db.Model):
    __tablename__ = "sales"

    id = db.Column(db.Integer, primary_key=True)
    outlet = db.Column(db.String(40), nullable=False)
    customer = db.Column(db.String(120), nullable=True)
    status = db.Column(db.String(40), nullable=True)
    order_date = db.Column(db.DateTime, nullable=False, default=now_utc, index=True)
    location = db.Column(db.String(20), nullable=False)
    discount = db.Column(db.Float, nullable=True)
    est_payout = db.Column(db.Integer, nullable=True)
    act_payout = db.Column(db.Integer, nullable=True)
    ship_date = db.Column(db.DateTime, nullable=True)
    actual_received = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)

    items = db.relationship(
        "SaleItemRow", backref="sale", lazy="selectin", cascade="all, delete-orphan", order_by="SaleItemRow.id"
    )


class SaleItemRow(db.Model):
    __tablename__ = "sale_items"

    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    barcode = db.Column(db.String(80), nullable=False)
    price = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(40), nullable=True)

    product = db.relationship("ProductRow", lazy="joined")


class OrderRow(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    outlet = db.Column(db.String(40), nullable=False)
    customer = db.Column(db.String(120), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="PAID")
    order_date = db.Column(db.DateTime, nullable=False, default=now_utc, index=True)
    delivery_date = db.Column(db.DateTime, nullable=True)
    location = db.Column(db.String(20), nullable=False)
    discount = db.Column(db.Float, nullable=True)
    ongkir_plan = db.Column(db.Integer, nullable=False, default=0)
    self_pickup = db.Column(db.Boolean, nullable=False, default=False)
    total_amount = db.Column(db.Integer, nullable=False, default=0)
    act_payout = db.Column(db.Integer, nullable=True)
    note = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)

    items = db.relationship(
        "OrderItemRow", backref="order", lazy="selectin", cascade="all, delete-orphan", order_by="OrderItemRow.id"
    )
    deliveries = db.relationship("DeliveryRow", backref="order", lazy="selectin")


class OrderItemRow(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Integer, nullable=False)

    product = db.relationship("ProductRow", lazy="joined")


class DeliveryRow(db.Model):
    __tablename__ = "deliveries"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    delivery_date = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.String(20), nullable=False, default="pending")
    ongkir_plan = db.Column(db.Integer, nullable=False, default=0)
    ongkir_actual = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)

    items = db.relationship(
        "DeliveryItemRow", backref="delivery", lazy="selectin", cascade="all, delete-orphan", order_by="DeliveryItemRow.id"
    )


class DeliveryItemRow(db.Model):
    __tablename__ = "delivery_items"

    id = db.Column(db.Integer, primary_key=True)
    delivery_id = db.Column(db.Integer, db.ForeignKey("deliveries.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    barcode = db.Column(db.String(80), nullable=False)
    price = db.Column(db.Integer, nullable=False, default=0)


class OrderB2BRow(db.Model):
    __tablename__ = "orders_b2b"

    id = db.Column(db.Integer, primary_key=True)
    outlet = db.Column(db.String(20), nullable=False)
    customer = db.Column(db.String(120), nullable=True)
    order_date = db.Column(db.DateTime, nullable=False, index=True)
    location = db.Column(db.String(20), nullable=False)
    discount = db.Column(db.Float, nullable=True)
    status = db.Column(db.String(20), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    total_amount = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)

    items = db.relationship(
        "OrderB2BItemRow", backref="order", lazy="selectin", cascade="all, delete-orphan", order_by="OrderB2BItemRow.id"
    )


class OrderB2BItemRow(db.Model):
    __tablename__ = "order_b2b_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders_b2b.id"), nullable=False, index=True)
    source = db.Column(db.String(10), nullable=False)
    product_b2b_id = db.Column(db.Integer, db.ForeignKey("products_b2b.id"), nullable=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=True)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Integer, nullable=False, default=0)
    barcodes = db.Column(db.JSON, nullable=True)


class FinanceWeekRow(db.Model):
    __tablename__ = "finance_weeks"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class FinancePeriodRow(db.Model):
    __tablename__ = "finance_periods"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    week_id = db.Column(db.Integer, db.ForeignKey("finance_weeks.id"), nullable=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)
    updated_at = db.Column(db.DateTime, nullable=False, default=now_utc, onupdate=now_utc)

    week = db.relationship("FinanceWeekRow", lazy="joined")
    plans = db.relationship(
        "FinancePlanEntryRow", lazy="selectin", cascade="all, delete-orphan", order_by="FinancePlanEntryRow.category"
    )
    actuals = db.relationship(
        "FinanceActualEntryRow", lazy="selectin", cascade="all, delete-orphan", order_by="FinanceActualEntryRow.category"
    )
    payments = db.relationship(
        "DebtPaymentRow", lazy="selectin", cascade="all, delete-orphan", order_by="DebtPaymentRow.term"
    )


class FinancePlanEntryRow(db.Model):
    __tablename__ = "finance_plan_entries"

    id = db.Column(db.Integer, primary_key=True)
    period_id = db.Column(db.Integer, db.ForeignKey("finance_periods.id"), nullable=False, index=True)
    category = db.Column(db.String(20), nullable=False)
    amount = db.Column(db.Integer, nullable=False, default=0)
    data = db.Column(db.JSON, nullable=True)


class FinanceActualEntryRow(db.Model):
    __tablename__ = "finance_actual_entries"

    id = db.Column(db.Integer, primary_key=True)
    period_id = db.Column(db.Integer, db.ForeignKey("finance_periods.id"), nullable=False, index=True)
    category = db.Column(db.String(20), nullable=False)
    amount = db.Column(db.Integer, nullable=False, default=0)
    data = db.Column(db.JSON, nullable=True)


class DebtPaymentRow(db.Model):
    __tablename__ = "debt_payments"

    id = db.Column(db.Integer, primary_key=True)
    period_id = db.Column(db.Integer, db.ForeignKey("finance_periods.id"), nullable=False, index=True)
    term = db.Column(db.Integer, nullable=False)
    amount = db.Column(db.Integer, nullable=False)
    paid_at = db.Column(db.DateTime, nullable=False, default=now_utc)
    note = db.Column(db.Text, nullable=True)


class AttendanceRow(db.Model):
    __tablename__ = "attendance"
    __table_args__ = (db.UniqueConstraint("user_id", "work_date", name="uq_attendance_user_day"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    work_date = db.Column(db.Date, nullable=False)
    clock_in = db.Column(db.DateTime, nullable=False)
    clock_out = db.Column(db.DateTime, nullable=True)


class OvertimeRequestRow(db.Model):
    __tablename__ = "overtime_requests"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    start = db.Column(db.DateTime, nullable=False)
    end = db.Column(db.DateTime, nullable=False)
    minutes = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(10), nullable=False, default="PENDING")
    approved_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)

    user = db.relationship("UserRow", foreign_keys=[user_id], lazy="joined")


class UserBonusRow(db.Model):
    __tablename__ = "user_bonuses"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    amount = db.Column(db.Integer, nullable=False)
    note = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class ManualPenaltyRow(db.Model):
    __tablename__ = "manual_penalties"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    month = db.Column(db.String(7), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class PayrollSnapshotRow(db.Model):
    __tablename__ = "payroll_snapshots"
    __table_args__ = (db.UniqueConstraint("user_id", "month", name="uq_payroll_user_month"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    month = db.Column(db.String(7), nullable=False)
    base_salary = db.Column(db.Integer, nullable=False)
    hourly_rate = db.Column(db.Float, nullable=False)
    penalty_rate = db.Column(db.Float, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class IngredientRow(db.Model):
    __tablename__ = "ingredients"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=False)
    unit = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class PlanProductRow(db.Model):
    __tablename__ = "plan_products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)


class RecipeItemRow(db.Model):
    __tablename__ = "recipe_items"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("plan_products.id"), nullable=False, index=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey("ingredients.id"), nullable=False)
    amount_per_kg = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(20), nullable=False)

    ingredient = db.relationship("IngredientRow", lazy="joined")
