# shop_admin/services/customer_service.py
from typing import Dict, Optional, Any, Union
from ..models.customer import Customer, AccountStatus
from ..config import Config
from ..utils.validators import validate_customer, validate_status_reason
from .api_client import ApiClient

class CustomerService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_customers(self, token: str, page: int = 1, limit: Optional[int] = None,
                            **filters) -> Dict[str, Any]:
        """Paginated customer list"""
        params = {'page': page, 'limit': limit or Config.PAGE_SIZE, **filters}
        response = await self.api.get('/api/customers', token, params=params)
        pagination = response.get('pagination') or {}
        customers = [Customer.model_validate(c) for c in response.get('customers') or []]
        return {
            'customers': customers,
            'page': pagination.get('page', page),
            'total': pagination.get('total', len(customers)),
            'pages': pagination.get('pages', 1)
        }

    async def get_customer(self, token: str, customer_id: Union[int, str]) -> Customer:
        """Customer details"""
        response = await self.api.get(f'/api/customers/{customer_id}', token)
        return Customer.model_validate(response['customer'])

    async def update_customer(self, token: str, customer_id: Union[int, str],
                              customer_data: Dict[str, Any]) -> Dict[str, Any]:
        """Update the customer profile"""
        validate_customer(customer_data)
        return await self.api.put(f'/api/customers/{customer_id}', token, json=customer_data)

    async def change_status(self, token: str, customer_id: Union[int, str],
                            status: AccountStatus, reason: Optional[str] = None) -> Dict[str, Any]:
        """Activate, suspend or ban a customer account"""
        status = AccountStatus(status)
        validate_status_reason(status.value, reason)
        return await self.api.patch(
            f'/api/customers/{customer_id}/status',
            token,
            json={'status': status.value, 'reason': reason or ''}
        )

    async def delete_customer(self, token: str, customer_id: Union[int, str]) -> Dict[str, Any]:
        """Delete a customer account"""
        return await self.api.delete(f'/api/customers/{customer_id}', token)
