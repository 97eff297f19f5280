"""In-memory repositories shared by the service tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from backoffice.attendance.model import AttendanceRecord
from backoffice.core.enums import InventoryStatus, Location, OvertimeStatus, Role
from backoffice.deliveries.model import Delivery, DeliveryItem, NewDelivery, NewDeliveryItem
from backoffice.inventory.model import InventoryItem, NewInventoryItem
from backoffice.orders.model import DeliveryRef, NewOrderItem, Order, OrderDraft, OrderItem
from backoffice.payroll.model import ManualPenalty, OvertimeRequest, PayrollSnapshot, UserBonus
from backoffice.products.model import Product
from backoffice.sales.model import NewSale, NewSaleItem, Sale, SaleFilter, SaleItem
from backoffice.users.model import PayrollSettings, User


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self.by_id: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.username == username), None)

    def list_all(self) -> Sequence[User]:
        return sorted(self.by_id.values(), key=lambda u: u.user_id)

    def create_user(self, *, username: str, name: str, role: Role, password_hash: str) -> User:
        user = User(user_id=len(self.by_id) + 1, username=username, name=name, role=role, password_hash=password_hash)
        self.by_id[user.user_id] = user
        return user

    def update_password(self, user_id: int, password_hash: str) -> bool:
        if user_id not in self.by_id:
            return False
        self.by_id[user_id] = replace(self.by_id[user_id], password_hash=password_hash)
        return True

    def update_payroll_settings(self, user_id: int, settings: PayrollSettings) -> bool:
        user = self.by_id.get(user_id)
        if not user:
            return False
        self.by_id[user_id] = replace(
            user,
            base_salary=settings.base_salary if settings.base_salary is not None else user.base_salary,
            overtime_hourly_rate=None if settings.clear_overtime_rate else (
                settings.overtime_hourly_rate if settings.overtime_hourly_rate is not None else user.overtime_hourly_rate
            ),
        )
        return True


class InMemoryProducts:
    def __init__(self, products: Iterable[Product] = ()):
        self.by_id: dict[int, Product] = {p.product_id: p for p in products}
        self.referenced: set[int] = set()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        return self.by_id.get(product_id)

    def get_by_code(self, code: str) -> Optional[Product]:
        return next((p for p in self.by_id.values() if p.code == code), None)

    def get_many(self, product_ids: Iterable[int]) -> dict[int, Product]:
        return {pid: self.by_id[pid] for pid in product_ids if pid in self.by_id}

    def list_all(self) -> Sequence[Product]:
        return list(self.by_id.values())

    def create(self, *, code: str, name: str, price: int, hpp_pct: float, hpp_value: int) -> Product:
        product = Product(max(self.by_id, default=0) + 1, code, name, price, hpp_pct, hpp_value)
        self.by_id[product.product_id] = product
        return product

    def update(self, product_id: int, *, name: str, price: int, hpp_pct: float, hpp_value: int) -> Product:
        self.by_id[product_id] = replace(
            self.by_id[product_id], name=name, price=price, hpp_pct=hpp_pct, hpp_value=hpp_value
        )
        return self.by_id[product_id]

    def delete(self, product_id: int) -> bool:
        return self.by_id.pop(product_id, None) is not None

    def is_referenced(self, product_id: int) -> bool:
        return product_id in self.referenced


class InMemoryInventory:
    def __init__(self):
        self.items: dict[str, InventoryItem] = {}
        self._next_id = 1

    def add(self, barcode: str, location: Location, product_id: int, status: InventoryStatus = InventoryStatus.READY):
        item = InventoryItem(self._next_id, barcode, location, product_id, status)
        self._next_id += 1
        self.items[barcode] = item
        return item

    def get_by_barcode(self, barcode: str) -> Optional[InventoryItem]:
        return self.items.get(barcode)

    def get_many(self, barcodes: Iterable[str]) -> dict[str, InventoryItem]:
        return {b: self.items[b] for b in barcodes if b in self.items}

    def create_many(self, items: Sequence[NewInventoryItem]) -> list[InventoryItem]:
        return [self.add(i.barcode, i.location, i.product_id, i.status) for i in items]

    def delete(self, barcode: str) -> bool:
        return self.items.pop(barcode, None) is not None

    def set_status(self, barcodes: Iterable[str], status: InventoryStatus) -> int:
        n = 0
        for b in barcodes:
            if b in self.items:
                self.items[b] = replace(self.items[b], status=status)
                n += 1
        return n

    def move(self, barcode: str, location: Location) -> Optional[InventoryItem]:
        if barcode not in self.items:
            return None
        self.items[barcode] = replace(self.items[barcode], location=location)
        return self.items[barcode]

    def ready_counts(self) -> list[tuple[Location, int, int]]:
        counts: dict[tuple[Location, int], int] = {}
        for i in self.items.values():
            if i.status == InventoryStatus.READY:
                counts[(i.location, i.product_id)] = counts.get((i.location, i.product_id), 0) + 1
        return [(loc, pid, n) for (loc, pid), n in counts.items()]

    def status_counts(self) -> list[tuple[Location, int, InventoryStatus, int]]:
        counts: dict[tuple[Location, int, InventoryStatus], int] = {}
        for i in self.items.values():
            key = (i.location, i.product_id, i.status)
            counts[key] = counts.get(key, 0) + 1
        return [(loc, pid, st, n) for (loc, pid, st), n in counts.items()]

    def _ready(self, product_id: int, location: Location) -> list[InventoryItem]:
        return sorted(
            (
                i
                for i in self.items.values()
                if i.product_id == product_id and i.location == location and i.status == InventoryStatus.READY
            ),
            key=lambda i: i.item_id,
        )

    def count_ready(self, product_id: int, location: Location) -> int:
        return len(self._ready(product_id, location))

    def oldest_ready(self, product_id: int, location: Location, limit: int) -> list[InventoryItem]:
        return self._ready(product_id, location)[:limit]

    def delete_ready(self, product_id: int, location: Location) -> int:
        doomed = [i.barcode for i in self._ready(product_id, location)]
        for b in doomed:
            del self.items[b]
        return len(doomed)


class InMemoryOrders:
    def __init__(self, products: InMemoryProducts):
        self._products = products
        self.by_id: dict[int, Order] = {}
        self._next_id = 1
        self._next_item_id = 1

    def _items(self, items: Sequence[NewOrderItem]) -> tuple[OrderItem, ...]:
        out = []
        for i in items:
            product = self._products.get_by_id(i.product_id)
            out.append(
                OrderItem(
                    self._next_item_id,
                    i.product_id,
                    i.quantity,
                    i.price,
                    product.code if product else None,
                    product.name if product else None,
                )
            )
            self._next_item_id += 1
        return tuple(out)

    @staticmethod
    def _header(draft: OrderDraft) -> dict:
        return dict(
            outlet=draft.outlet,
            customer=draft.customer,
            status=draft.status,
            order_date=draft.order_date,
            location=draft.location,
            total_amount=draft.total_amount,
            delivery_date=draft.delivery_date,
            discount=draft.discount,
            ongkir_plan=draft.ongkir_plan,
            self_pickup=draft.self_pickup,
            act_payout=draft.act_payout,
            note=draft.note,
        )

    def get(self, order_id: int) -> Optional[Order]:
        return self.by_id.get(order_id)

    def search(self, flt, page):
        rows = sorted(self.by_id.values(), key=lambda o: o.order_id, reverse=True)
        return rows[page.offset : page.offset + page.limit], len(rows)

    def pending(self, *, location, search, page):
        rows = [o for o in self.by_id.values() if not o.deliveries and (location is None or o.location == location)]
        if search:
            rows = [o for o in rows if search.lower() in o.customer.lower() or search.lower() in o.outlet.lower()]
        rows.sort(key=lambda o: (o.delivery_date is None, o.delivery_date or datetime.min, o.order_date, o.order_id))
        return rows[page.offset : page.offset + page.limit], len(rows)

    def list_between(self, start: datetime, end: datetime) -> Sequence[Order]:
        return [o for o in self.by_id.values() if start <= o.order_date <= end]

    def create(self, draft: OrderDraft, items: Sequence[NewOrderItem]) -> Order:
        order = Order(order_id=self._next_id, items=self._items(items), **self._header(draft))
        self._next_id += 1
        self.by_id[order.order_id] = order
        return order

    def replace(self, order_id: int, draft: OrderDraft, items: Sequence[NewOrderItem]) -> Order:
        self.by_id[order_id] = replace(self.by_id[order_id], items=self._items(items), **self._header(draft))
        return self.by_id[order_id]

    def delete(self, order_id: int) -> bool:
        return self.by_id.pop(order_id, None) is not None

    def _update_item(self, item_id: int, quantity: Optional[int]) -> None:
        for oid, order in self.by_id.items():
            if any(i.item_id == item_id for i in order.items):
                items = tuple(
                    i if i.item_id != item_id else replace(i, quantity=quantity)
                    for i in order.items
                    if quantity is not None or i.item_id != item_id
                )
                self.by_id[oid] = replace(order, items=items)

    def set_item_quantity(self, item_id: int, quantity: int) -> None:
        self._update_item(item_id, quantity)

    def delete_item(self, item_id: int) -> None:
        self._update_item(item_id, None)

    def set_total(self, order_id: int, total_amount: int) -> None:
        self.by_id[order_id] = replace(self.by_id[order_id], total_amount=total_amount)

    def attach_delivery(self, order_id: int, ref: Optional[DeliveryRef]) -> None:
        order = self.by_id[order_id]
        self.by_id[order_id] = replace(order, deliveries=(ref,) if ref else ())


class InMemoryDeliveries:
    def __init__(self, orders: InMemoryOrders):
        self._orders = orders
        self.by_id: dict[int, Delivery] = {}
        self._next_id = 1

    def get(self, delivery_id: int) -> Optional[Delivery]:
        return self.by_id.get(delivery_id)

    def search(self, *, location, search, page):
        rows = sorted(self.by_id.values(), key=lambda d: d.delivery_id, reverse=True)
        if location is not None:
            rows = [d for d in rows if d.location == location]
        return rows[page.offset : page.offset + page.limit], len(rows)

    def create(self, delivery: NewDelivery, items: Sequence[NewDeliveryItem]) -> Delivery:
        order = self._orders.get(delivery.order_id)
        created = Delivery(
            delivery_id=self._next_id,
            order_id=delivery.order_id,
            status=delivery.status,
            delivery_date=delivery.delivery_date,
            ongkir_plan=delivery.ongkir_plan,
            ongkir_actual=delivery.ongkir_actual,
            items=tuple(DeliveryItem(n, i.product_id, i.barcode, i.price) for n, i in enumerate(items, start=1)),
            outlet=order.outlet,
            customer=order.customer,
            location=order.location,
        )
        self._next_id += 1
        self.by_id[created.delivery_id] = created
        self._orders.attach_delivery(
            order.order_id,
            DeliveryRef(created.delivery_id, created.status.value, created.ongkir_actual, created.ongkir_plan),
        )
        return created

    def delete(self, delivery_id: int) -> bool:
        delivery = self.by_id.pop(delivery_id, None)
        if delivery is None:
            return False
        self._orders.attach_delivery(delivery.order_id, None)
        return True


class InMemoryAttendance:
    def __init__(self):
        self.by_id: dict[int, AttendanceRecord] = {}

    def get(self, record_id: int) -> Optional[AttendanceRecord]:
        return self.by_id.get(record_id)

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.by_id.values() if r.user_id == user_id and r.work_date == work_date), None)

    def latest_open(self, user_id: int) -> Optional[AttendanceRecord]:
        open_ = [r for r in self.by_id.values() if r.user_id == user_id and r.is_open]
        return max(open_, key=lambda r: r.clock_in, default=None)

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in: datetime) -> AttendanceRecord:
        record = AttendanceRecord(len(self.by_id) + 1, user_id, work_date, clock_in, None)
        self.by_id[record.record_id] = record
        return record

    def set_clock_out(self, record_id: int, clock_out: datetime) -> AttendanceRecord:
        self.by_id[record_id] = replace(self.by_id[record_id], clock_out=clock_out)
        return self.by_id[record_id]

    def list_between(self, start: date, end: date, *, user_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        rows = [
            r
            for r in self.by_id.values()
            if start <= r.work_date < end and (user_id is None or r.user_id == user_id)
        ]
        return sorted(rows, key=lambda r: r.clock_in)


class InMemoryOvertime:
    def __init__(self):
        self.by_id: dict[int, OvertimeRequest] = {}

    def get(self, request_id: int) -> Optional[OvertimeRequest]:
        return self.by_id.get(request_id)

    def create(self, *, user_id: int, start: datetime, end: datetime, minutes: int, reason: Optional[str]) -> OvertimeRequest:
        item = OvertimeRequest(len(self.by_id) + 1, user_id, start, end, minutes, OvertimeStatus.PENDING, reason)
        self.by_id[item.request_id] = item
        return item

    def list_between(self, start, end, *, user_id=None, status=None) -> Sequence[OvertimeRequest]:
        return [
            o
            for o in sorted(self.by_id.values(), key=lambda o: o.start)
            if start <= o.start < end
            and (user_id is None or o.user_id == user_id)
            and (status is None or o.status == status)
        ]

    def decide(self, request_id: int, *, status, approved_by_id, approved_at) -> OvertimeRequest:
        self.by_id[request_id] = replace(
            self.by_id[request_id], status=status, approved_by_id=approved_by_id, approved_at=approved_at
        )
        return self.by_id[request_id]


class InMemoryBonuses:
    def __init__(self):
        self.by_id: dict[int, UserBonus] = {}

    def get(self, bonus_id: int) -> Optional[UserBonus]:
        return self.by_id.get(bonus_id)

    def search(self, *, user_id=None, year=None, month=None) -> Sequence[UserBonus]:
        return [
            b
            for b in self.by_id.values()
            if (user_id is None or b.user_id == user_id)
            and (year is None or b.year == year)
            and (month is None or b.month == month)
        ]

    def create(self, *, user_id: int, year: int, month: int, amount: int, note: Optional[str]) -> UserBonus:
        bonus = UserBonus(len(self.by_id) + 1, user_id, year, month, amount, note)
        self.by_id[bonus.bonus_id] = bonus
        return bonus

    def update(self, bonus_id: int, *, user_id: int, year: int, month: int, amount: int, note: Optional[str]) -> UserBonus:
        self.by_id[bonus_id] = UserBonus(bonus_id, user_id, year, month, amount, note)
        return self.by_id[bonus_id]

    def delete(self, bonus_id: int) -> bool:
        return self.by_id.pop(bonus_id, None) is not None


class InMemoryPenalties:
    def __init__(self):
        self.by_id: dict[int, ManualPenalty] = {}

    def search(self, *, month: str, user_id: Optional[int] = None) -> Sequence[ManualPenalty]:
        return [p for p in self.by_id.values() if p.month == month and (user_id is None or p.user_id == user_id)]

    def create(self, *, user_id: int, month: str, amount: int, reason: Optional[str]) -> ManualPenalty:
        penalty = ManualPenalty(len(self.by_id) + 1, user_id, month, amount, reason)
        self.by_id[penalty.penalty_id] = penalty
        return penalty

    def delete(self, penalty_id: int) -> bool:
        return self.by_id.pop(penalty_id, None) is not None


class InMemorySnapshots:
    def __init__(self):
        self.rows: dict[tuple[str, int], PayrollSnapshot] = {}

    def for_month(self, month: str) -> dict[int, PayrollSnapshot]:
        return {uid: s for (m, uid), s in self.rows.items() if m == month}

    def create_many(self, snapshots: Iterable[PayrollSnapshot]) -> None:
        for s in snapshots:
            self.rows[(s.month, s.user_id)] = s


class InMemorySales:
    def __init__(self):
        self.by_id: dict[int, Sale] = {}
        self._next_item_id = 1

    def _matches(self, sale: Sale, flt: SaleFilter) -> bool:
        return (
            (flt.start is None or sale.order_date >= flt.start)
            and (flt.end is None or sale.order_date <= flt.end)
            and (flt.outlet is None or sale.outlet == flt.outlet)
            and (flt.location is None or sale.location == flt.location)
        )

    def get(self, sale_id: int) -> Optional[Sale]:
        return self.by_id.get(sale_id)

    def list_matching(self, flt: SaleFilter) -> Sequence[Sale]:
        return [s for s in sorted(self.by_id.values(), key=lambda s: s.sale_id, reverse=True) if self._matches(s, flt)]

    def search(self, flt: SaleFilter, page):
        rows = list(self.list_matching(flt))
        return rows[page.offset : page.offset + page.limit], len(rows)

    def list_between(self, start: datetime, end: datetime) -> Sequence[Sale]:
        return self.list_matching(SaleFilter(start=start, end=end))

    def create(self, sale: NewSale) -> Sale:
        created = Sale(
            sale_id=len(self.by_id) + 1,
            outlet=sale.outlet,
            location=sale.location,
            order_date=sale.order_date,
            customer=sale.customer,
            status=sale.status,
            ship_date=sale.ship_date,
            discount=sale.discount,
            est_payout=sale.est_payout,
            act_payout=sale.act_payout,
        )
        self.by_id[created.sale_id] = created
        return created

    def update(self, sale_id: int, fields: dict) -> Optional[Sale]:
        if sale_id not in self.by_id:
            return None
        self.by_id[sale_id] = replace(self.by_id[sale_id], **fields)
        return self.by_id[sale_id]

    def delete(self, sale_id: int) -> bool:
        return self.by_id.pop(sale_id, None) is not None

    def add_items(self, sale_id: int, items: Sequence[NewSaleItem]) -> list[SaleItem]:
        created = []
        for i in items:
            created.append(SaleItem(self._next_item_id, sale_id, i.product_id, i.barcode, i.price, i.status))
            self._next_item_id += 1
        sale = self.by_id[sale_id]
        self.by_id[sale_id] = replace(sale, items=sale.items + tuple(created))
        return created

    def get_item(self, item_id: int) -> Optional[SaleItem]:
        return next((i for s in self.by_id.values() for i in s.items if i.item_id == item_id), None)

    def update_item(self, item_id: int, *, status: Optional[str], price: Optional[int]) -> Optional[SaleItem]:
        item = self.get_item(item_id)
        if not item:
            return None
        updated = replace(
            item,
            status=status if status is not None else item.status,
            price=price if price is not None else item.price,
        )
        sale = self.by_id[item.sale_id]
        self.by_id[sale.sale_id] = replace(sale, items=tuple(updated if i.item_id == item_id else i for i in sale.items))
        return updated

    def delete_item(self, item_id: int) -> bool:
        item = self.get_item(item_id)
        if not item:
            return False
        sale = self.by_id[item.sale_id]
        self.by_id[sale.sale_id] = replace(sale, items=tuple(i for i in sale.items if i.item_id != item_id))
        return True

    def reprice_product_items(self, product_id: int, price: int) -> list[int]:
        touched = []
        for sale in list(self.by_id.values()):
            if any(i.product_id == product_id for i in sale.items):
                self.by_id[sale.sale_id] = replace(
                    sale,
                    items=tuple(replace(i, price=price) if i.product_id == product_id else i for i in sale.items),
                )
                touched.append(sale.sale_id)
        return touched

    def recompute_est_payout(self, sale_id: int) -> int:
        sale = self.by_id[sale_id]
        self.by_id[sale_id] = replace(sale, est_payout=sale.items_total)
        return sale.items_total
