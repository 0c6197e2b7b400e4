# shop_admin/services/order_service.py
import logging
from typing import Dict, Optional, Any, Union
from ..models.order import Order, OrderStatus
from ..config import Config
from .api_client import ApiClient
from .order_status_policy import is_status_allowed

class TransitionNotAllowed(ValueError):
    """The chosen status is not offered for this order"""

class OrderService:
    def __init__(self, api: ApiClient):
        self.api = api
        self.logger = logging.getLogger(__name__)

    async def get_orders(self, token: str, page: int = 1, limit: Optional[int] = None,
                         status: Optional[str] = None, search: Optional[str] = None,
                         **filters) -> Dict[str, Any]:
        """Paginated order list, newest first"""
        params = {
            'page': page,
            'limit': limit or Config.PAGE_SIZE,
            'sort_by': 'creation_at',
            'sort_order': 'DESC',
            'status': status,
            'search': search,
            **filters
        }
        response = await self.api.get('/api/order/list', token, params=params)
        pagination = response.get('pagination') or {}
        orders = [Order.model_validate(order) for order in response.get('orders') or []]
        return {
            'orders': orders,
            'page': pagination.get('page', page),
            'total': pagination.get('total', len(orders)),
            'pages': pagination.get('pages', 1)
        }

    async def get_orders_by_date(self, token: str, date: str, page: int = 1,
                                 limit: Optional[int] = None,
                                 status: Optional[str] = None) -> Dict[str, Any]:
        """Orders placed on a single day"""
        params = {
            'date': date,
            'page': page,
            'limit': limit or Config.PAGE_SIZE,
            'status': status
        }
        response = await self.api.get('/api/order/by-date', token, params=params)
        orders = [Order.model_validate(order) for order in response.get('orders') or []]
        # by-date returns the whole day in one page
        return {
            'orders': orders,
            'page': page,
            'total': len(orders),
            'pages': 1
        }

    async def get_order(self, token: str, order_id: Union[int, str]) -> Order:
        """Fetch one order with its items and payment details"""
        response = await self.api.get(f'/api/order/details/{order_id}', token)
        return Order.model_validate(response['order'])

    async def get_order_statistics(self, token: str, start_date: str,
                                   end_date: str) -> Dict[str, Any]:
        """Order counts and revenue between two dates (YYYY-MM-DD)"""
        response = await self.api.get(
            '/api/order/statistics',
            token,
            params={'start_date': start_date, 'end_date': end_date}
        )
        return response.get('statistics') or response.get('data') or {}

    async def update_order_status(self, token: str, order: Order,
                                  status: Union[OrderStatus, str]) -> Order:
        """Ask the backend to move ``order`` to ``status``.

        Only the chosen status is sent. The returned copy carries whatever
        status the backend echoes; ``order`` itself is left untouched, also
        when the call fails.
        """
        if not is_status_allowed(order.status, order.payment_status, status):
            raise TransitionNotAllowed(
                f"Order #{order.order_id} cannot move from {_label(order.status)} "
                f"to {_label(status)}"
            )

        requested = status.value if isinstance(status, OrderStatus) else str(status).strip().lower()
        response = await self.api.put(
            f'/api/order/status/{order.order_id}',
            token,
            json={'status': requested}
        )

        echoed = (response.get('order') or {}).get('status') or response.get('status')
        if echoed is None:
            echoed = requested
        elif str(echoed).lower() != requested:
            self.logger.warning(
                f"Backend set order #{order.order_id} to {echoed} instead of {requested}"
            )
        self.logger.info(f"Order #{order.order_id}: {_label(order.status)} -> {echoed}")
        return Order.model_validate({**order.model_dump(), 'status': echoed})

def _label(status: Any) -> str:
    return status.value if isinstance(status, OrderStatus) else str(status)