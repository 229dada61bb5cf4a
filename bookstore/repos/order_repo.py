# bookstore/repos/order_repo.py
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from bookstore.data.models.order import OrderModel
from bookstore.data.models.order_item import OrderItemModel
from bookstore.utils.paging import Sort

SORT_COLUMNS = {
    "createdAt": OrderModel.created_at,
    "totalAmount": OrderModel.total_amount,
    "status": OrderModel.status,
}


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        return item

    def get_user_order(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id, OrderModel.user_id == user_id)
        ).scalar_one_or_none()

    def count_user_orders(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(OrderModel).where(OrderModel.user_id == user_id)
        ).scalar_one()

    def list_user_orders(self, user_id: int, sort: Sort, offset: int, limit: int) -> List[OrderModel]:
        column = SORT_COLUMNS[sort.field]
        order = column.desc() if sort.descending else column.asc()
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(order, OrderModel.id.desc())
                .offset(offset)
                .limit(limit)
            ).scalars().all()
        )
