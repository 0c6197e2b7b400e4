# shop_admin/services/product_service.py
from typing import Dict, Optional, Any, Union
from ..models.product import Product
from ..config import Config
from ..utils.validators import validate_product
from .api_client import ApiClient

class ProductService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_products(self, token: str, page: int = 1, limit: Optional[int] = None,
                           **filters) -> Dict[str, Any]:
        """Paginated product list"""
        params = {'page': page, 'limit': limit or Config.PAGE_SIZE, **filters}
        response = await self.api.get('/api/product/list', token, params=params)
        pagination = response.get('pagination') or {}
        products = [Product.model_validate(p) for p in response.get('products') or []]
        return {
            'products': products,
            'page': pagination.get('page', page),
            'total': pagination.get('total', len(products)),
            'pages': pagination.get('pages', 1)
        }

    async def get_product(self, token: str, product_id: Union[int, str]) -> Product:
        """Product details"""
        response = await self.api.get(f'/api/product/details/{product_id}', token)
        return Product.model_validate(response['product'])

    async def get_product_for_edit(self, token: str, product_id: Union[int, str]) -> Dict[str, Any]:
        """Raw product form data"""
        response = await self.api.get(f'/api/product/edit/{product_id}', token)
        return response.get('product') or {}

    async def add_product(self, token: str, product_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a product"""
        validate_product(product_data)
        return await self.api.post('/api/product/add', token, json=product_data)

    async def update_product(self, token: str, product_id: Union[int, str],
                             product_data: Dict[str, Any]) -> Dict[str, Any]:
        """Update a product"""
        validate_product(product_data)
        return await self.api.put(f'/api/product/update/{product_id}', token, json=product_data)

    async def delete_product(self, token: str, product_id: Union[int, str]) -> Dict[str, Any]:
        return await self.api.delete(f'/api/product/{product_id}', token)

    async def delete_product_image(self, token: str, image_id: Union[int, str]) -> Dict[str, Any]:
        return await self.api.delete(f'/api/product/image/{image_id}', token)
