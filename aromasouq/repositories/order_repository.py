from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from aromasouq.models.order import Order as OrderModel
from aromasouq.models.order import OrderItem as OrderItemModel
from aromasouq.models.order import OrderStatus
from aromasouq.models.product import Product as ProductModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.order import Order, OrderFilter


class OrderRepository(BaseRepository[OrderModel, Order]):
    def __init__(self, db: Session):
        super().__init__(OrderModel, Order, db)

    def create_with_items(self, items: List[dict], commit: bool = True, **fields) -> Order:
        order = OrderModel(**fields)
        order.items = [OrderItemModel(**item) for item in items]
        self.db.add(order)
        self._finish(commit)
        return self._to_schema(order)

    def get_for_update(self, order_id: str) -> Optional[Order]:
        row = (
            self.db.query(OrderModel)
            .filter(OrderModel.id == order_id)
            .with_for_update()
            .first()
        )
        return self._to_schema(row)

    def get_by_number(self, order_number: str) -> Optional[Order]:
        return self.get_by_field("order_number", order_number)

    def search(
        self, filters: OrderFilter, page: int, limit: int
    ) -> Tuple[List[Order], int]:
        query = self.db.query(OrderModel)
        if filters.user_id:
            query = query.filter(OrderModel.user_id == filters.user_id)
        if filters.order_status is not None:
            query = query.filter(OrderModel.order_status == filters.order_status)
        return self.paginate(query.order_by(OrderModel.created_at.desc()), page, limit)

    def _vendor_orders_query(self, vendor_id: str):
        return (
            self.db.query(OrderModel)
            .join(OrderItemModel, OrderItemModel.order_id == OrderModel.id)
            .join(ProductModel, ProductModel.id == OrderItemModel.product_id)
            .filter(ProductModel.vendor_id == vendor_id)
            .distinct()
        )

    def search_for_vendor(
        self, vendor_id: str, order_status: Optional[OrderStatus], page: int, limit: int
    ) -> Tuple[List[Order], int]:
        query = self._vendor_orders_query(vendor_id)
        if order_status is not None:
            query = query.filter(OrderModel.order_status == order_status)
        return self.paginate(query.order_by(OrderModel.created_at.desc()), page, limit)

    def vendor_product_ids(self, order_id: str, vendor_id: str) -> List[str]:
        rows = (
            self.db.query(OrderItemModel.product_id)
            .join(ProductModel, ProductModel.id == OrderItemModel.product_id)
            .filter(OrderItemModel.order_id == order_id, ProductModel.vendor_id == vendor_id)
            .all()
        )
        return [product_id for (product_id,) in rows]

    def has_delivered_purchase(self, user_id: str, product_id: str) -> bool:
        return (
            self.db.query(OrderItemModel.id)
            .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
            .filter(
                OrderModel.user_id == user_id,
                OrderModel.order_status == OrderStatus.DELIVERED,
                OrderItemModel.product_id == product_id,
            )
            .first()
            is not None
        )
