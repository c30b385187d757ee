from typing import Any, Iterable, List, Optional, Protocol

from asyncpg import Connection

from src.infra.database import DatabaseManager
from src.shared.models.enums import OrderStatus
from src.shared.models.order_dto import OrderDTO, OrderItemDTO
from src.shared.errors import NotFoundError, ValidationError
from src.common.logger import log_debug

ORDER_COLUMNS = "id, restaurant_id, user_email, status, total_cents, created_at"
ITEM_COLUMNS = "id, order_id, name, price_cents, qty"

INSERT_ORDER_SQL = f"""
    INSERT INTO orders (restaurant_id, user_email, status, total_cents)
    VALUES ($1, $2, $3, $4)
    RETURNING {ORDER_COLUMNS}
"""
INSERT_ITEM_SQL = """
    INSERT INTO order_items (order_id, name, price_cents, qty)
    VALUES ($1, $2, $3, $4)
"""
SELECT_ORDER_SQL = f"SELECT {ORDER_COLUMNS} FROM orders WHERE id = $1"
SELECT_ITEMS_SQL = f"SELECT {ITEM_COLUMNS} FROM order_items WHERE order_id = $1 ORDER BY id"


class PricedItem(Protocol):
    name: str
    price_cents: int
    qty: int


def calculate_total(items: Iterable[PricedItem]) -> int:
    """Sum of unit price x quantity, in minor currency units."""
    return sum(item.price_cents * item.qty for item in items)


def _affected_rows(status: str) -> int:
    # asyncpg returns the command tag, e.g. "UPDATE 1"
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class OrderRepository:
    """Orders and their line items in Postgres. Mutations run in one transaction each."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    async def create_order(
        self,
        restaurant_id: int,
        owner: Optional[str],
        items: List[PricedItem],
    ) -> OrderDTO:
        """Inserts the order and all its items atomically, returns the stored order."""
        if not restaurant_id:
            raise ValidationError("restaurant_id is required")
        if not items:
            raise ValidationError("items must not be empty")

        total = calculate_total(items)
        async with self.db.transaction() as connection:
            row = await connection.fetchrow(
                INSERT_ORDER_SQL, restaurant_id, owner, OrderStatus.NEW.value, total
            )
            await self._insert_items(connection, row["id"], items)

        await log_debug(f"Заказ {row['id']} сохранён ({len(items)} поз., {total})")
        return self._row_to_order(row)

    async def get_order(self, order_id: int) -> Optional[OrderDTO]:
        row = await self.db.fetchrow(SELECT_ORDER_SQL, order_id)
        return self._row_to_order(row) if row else None

    async def list_orders_by_owner(self, owner: Optional[str], limit: int = 50) -> List[OrderDTO]:
        """Most recent first."""
        query = f"""
            SELECT {ORDER_COLUMNS} FROM orders
            WHERE user_email = $1
            ORDER BY created_at DESC, id DESC
            LIMIT $2
        """
        rows = await self.db.fetch(query, owner, limit)
        return [self._row_to_order(row) for row in rows]

    async def list_recent_orders(self, limit: int = 50) -> List[OrderDTO]:
        query = f"""
            SELECT {ORDER_COLUMNS} FROM orders
            ORDER BY created_at DESC, id DESC
            LIMIT $1
        """
        rows = await self.db.fetch(query, limit)
        return [self._row_to_order(row) for row in rows]

    async def list_order_items(self, order_id: int) -> List[OrderItemDTO]:
        rows = await self.db.fetch(SELECT_ITEMS_SQL, order_id)
        return [self._row_to_item(row) for row in rows]

    async def update_status(self, order_id: int, status: OrderStatus) -> None:
        result = await self.db.execute(
            "UPDATE orders SET status = $1 WHERE id = $2",
            OrderStatus(status).value,
            order_id,
        )
        if _affected_rows(result) == 0:
            raise NotFoundError("Order not found")

    async def duplicate_order(self, order_id: int, owner: Optional[str]) -> OrderDTO:
        """
        Copies the items of an existing order into a brand-new NEW order
        with a freshly computed total.
        """
        async with self.db.transaction() as connection:
            source = await connection.fetchrow(SELECT_ORDER_SQL, order_id)
            if source is None:
                raise NotFoundError("Order not found")

            item_rows = await connection.fetch(SELECT_ITEMS_SQL, order_id)
            items = [self._row_to_item(r) for r in item_rows]
            total = calculate_total(items)

            row = await connection.fetchrow(
                INSERT_ORDER_SQL, source["restaurant_id"], owner, OrderStatus.NEW.value, total
            )
            await self._insert_items(connection, row["id"], items)

        await log_debug(f"Заказ {order_id} повторён как {row['id']}")
        return self._row_to_order(row)

    async def _insert_items(
        self, connection: Connection, order_id: int, items: List[PricedItem]
    ) -> None:
        if not items:
            return
        await connection.executemany(
            INSERT_ITEM_SQL,
            [(order_id, item.name, item.price_cents, item.qty) for item in items],
        )

    def _row_to_order(self, row: Any) -> OrderDTO:
        data = dict(row)
        return OrderDTO(
            id=data["id"],
            restaurant_id=data["restaurant_id"],
            user_email=data.get("user_email"),
            status=data["status"],
            total_cents=data.get("total_cents") or 0,
            created_at=data["created_at"],
        )

    def _row_to_item(self, row: Any) -> OrderItemDTO:
        data = dict(row)
        return OrderItemDTO(
            id=data["id"],
            order_id=data["order_id"],
            name=data["name"],
            price_cents=data["price_cents"],
            qty=data["qty"],
        )
