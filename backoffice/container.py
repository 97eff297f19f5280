from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .attendance.service import AttendanceService
from .attendance.sql_attendance_repository import SqlAttendanceRepository
from .b2b.service import B2BOrderService
from .b2b.sql_b2b_order_repository import SqlB2BOrderRepository
from .core.constants import DEFAULT_DB_RETRIES, DEFAULT_DB_RETRY_DELAY_SECONDS
from .database.session import reset_session, transaction, with_retry
from .deliveries.service import DeliveryService
from .deliveries.sql_delivery_repository import SqlDeliveryRepository
from .finance.service import FinanceService
from .finance.sql_finance_repository import SqlFinanceRepository
from .inventory.service import InventoryService
from .inventory.sql_inventory_repository import SqlInventoryRepository
from .orders.service import OrderService
from .orders.sql_order_repository import SqlOrderRepository
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import BonusService, OvertimeService, PayrollService, PenaltyService
from .payroll.sql_payroll_repository import (
    SqlBonusRepository,
    SqlOvertimeRepository,
    SqlPenaltyRepository,
    SqlSnapshotRepository,
)
from .planning.service import PlanningService
from .planning.sql_planning_repository import (
    SqlIngredientRepository,
    SqlPlanProductRepository,
    SqlRecipeRepository,
)
from .products.service import ProductB2BService, ProductService
from .products.sql_product_repository import SqlProductB2BRepository, SqlProductRepository
from .reports.service import ReportService
from .sales.service import SaleService
from .sales.sql_sale_repository import SqlSaleRepository
from .users.service import AuthService, BootstrapAdmin, UserService
from .users.sql_user_repository import SqlUserRepository

T = TypeVar("T")


@dataclass(frozen=True)
class Container:
    users_repo: SqlUserRepository
    products_repo: SqlProductRepository
    products_b2b_repo: SqlProductB2BRepository
    inventory_repo: SqlInventoryRepository
    sales_repo: SqlSaleRepository
    orders_repo: SqlOrderRepository
    deliveries_repo: SqlDeliveryRepository
    b2b_orders_repo: SqlB2BOrderRepository
    finance_repo: SqlFinanceRepository
    attendance_repo: SqlAttendanceRepository
    overtime_repo: SqlOvertimeRepository

    auth_service: AuthService
    user_service: UserService
    product_service: ProductService
    product_b2b_service: ProductB2BService
    inventory_service: InventoryService
    sale_service: SaleService
    order_service: OrderService
    delivery_service: DeliveryService
    b2b_order_service: B2BOrderService
    finance_service: FinanceService
    attendance_service: AttendanceService
    overtime_service: OvertimeService
    bonus_service: BonusService
    penalty_service: PenaltyService
    payroll_service: PayrollService
    planning_service: PlanningService
    report_service: ReportService

    db_retries: int = DEFAULT_DB_RETRIES
    db_retry_delay: float = DEFAULT_DB_RETRY_DELAY_SECONDS

    def run(self, route_name: str, fn: Callable[[], T]) -> T:
        return with_retry(
            fn, retries=self.db_retries, route_name=route_name, delay=self.db_retry_delay, on_retry=reset_session
        )


def build_container(
    *,
    bootstrap_admin: Optional[BootstrapAdmin] = None,
    default_user_password: str = "password123",
    db_retries: int = DEFAULT_DB_RETRIES,
    db_retry_delay: float = DEFAULT_DB_RETRY_DELAY_SECONDS,
) -> Container:
    users_repo = SqlUserRepository()
    products_repo = SqlProductRepository()
    products_b2b_repo = SqlProductB2BRepository()
    inventory_repo = SqlInventoryRepository()
    sales_repo = SqlSaleRepository()
    orders_repo = SqlOrderRepository()
    deliveries_repo = SqlDeliveryRepository()
    b2b_orders_repo = SqlB2BOrderRepository()
    finance_repo = SqlFinanceRepository()
    attendance_repo = SqlAttendanceRepository()
    overtime_repo = SqlOvertimeRepository()
    bonus_repo = SqlBonusRepository()
    penalty_repo = SqlPenaltyRepository()
    snapshot_repo = SqlSnapshotRepository()

    calculator = StandardPayrollCalculator()

    return Container(
        users_repo=users_repo,
        products_repo=products_repo,
        products_b2b_repo=products_b2b_repo,
        inventory_repo=inventory_repo,
        sales_repo=sales_repo,
        orders_repo=orders_repo,
        deliveries_repo=deliveries_repo,
        b2b_orders_repo=b2b_orders_repo,
        finance_repo=finance_repo,
        attendance_repo=attendance_repo,
        overtime_repo=overtime_repo,
        auth_service=AuthService(users_repo, bootstrap_admin=bootstrap_admin, transaction=transaction),
        user_service=UserService(users_repo, default_password=default_user_password, transaction=transaction),
        product_service=ProductService(products_repo, sales_repo, transaction=transaction),
        product_b2b_service=ProductB2BService(products_b2b_repo, transaction=transaction),
        inventory_service=InventoryService(inventory_repo, products_repo, transaction=transaction),
        sale_service=SaleService(sales_repo, inventory_repo, products_repo, transaction=transaction),
        order_service=OrderService(orders_repo, products_repo, transaction=transaction),
        delivery_service=DeliveryService(deliveries_repo, orders_repo, inventory_repo, transaction=transaction),
        b2b_order_service=B2BOrderService(
            b2b_orders_repo, products_b2b_repo, products_repo, inventory_repo, transaction=transaction
        ),
        finance_service=FinanceService(finance_repo, sales_repo, orders_repo, products_repo, transaction=transaction),
        attendance_service=AttendanceService(
            attendance_repo, users_repo, overtime_repo, calculator=calculator, transaction=transaction
        ),
        overtime_service=OvertimeService(overtime_repo, users_repo, transaction=transaction),
        bonus_service=BonusService(bonus_repo, users_repo, transaction=transaction),
        penalty_service=PenaltyService(penalty_repo, users_repo, transaction=transaction),
        payroll_service=PayrollService(
            users_repo,
            attendance_repo,
            overtime_repo,
            bonus_repo,
            penalty_repo,
            snapshot_repo,
            calculator=calculator,
            transaction=transaction,
        ),
        planning_service=PlanningService(
            SqlIngredientRepository(), SqlPlanProductRepository(), SqlRecipeRepository(), transaction=transaction
        ),
        report_service=ReportService(sales_repo, inventory_repo, products_repo, b2b_orders_repo),
        db_retries=db_retries,
        db_retry_delay=db_retry_delay,
    )
