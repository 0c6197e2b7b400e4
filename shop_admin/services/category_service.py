# shop_admin/services/category_service.py
from typing import List, Dict, Any, Union
from ..models.category import Category
from ..utils.validators import ValidationError
from .api_client import ApiClient

class CategoryService:
    """Category tree management"""
    
    def __init__(self, api: ApiClient):
        self.api = api

    @staticmethod
    def _categories(response: Dict[str, Any]) -> List[Category]:
        items = response.get('categories') or response.get('subcategories') or []
        return [Category.model_validate(item) for item in items]

    async def get_categories(self, token: str) -> List[Category]:
        """Top-level categories"""
        response = await self.api.get('/api/categories', token)
        return self._categories(response)

    async def get_all_subcategories(self, token: str) -> List[Category]:
        """Every subcategory regardless of parent"""
        response = await self.api.get('/api/categories/subcategories', token)
        return self._categories(response)

    async def get_subcategories(self, token: str, parent_id: int) -> List[Category]:
        """Subcategories of one parent"""
        response = await self.api.get(f'/api/categories/{parent_id}/subcategories', token)
        return self._categories(response)

    async def create_category(self, token: str, name: str,
                              description: str = None) -> Dict[str, Any]:
        """Add a top-level category"""
        if not name or not name.strip():
            raise ValidationError({'name': 'Category name is required'})
        return await self.api.post(
            '/api/categories',
            token,
            json={'name': name.strip(), 'description': description}
        )

    async def create_subcategory(self, token: str, parent_id: int, name: str,
                                 description: str = None) -> Dict[str, Any]:
        """Add a subcategory below ``parent_id``"""
        if not name or not name.strip():
            raise ValidationError({'name': 'Subcategory name is required'})
        return await self.api.post(
            '/api/categories/subcategory',
            token,
            json={
                'name': name.strip(),
                'description': description,
                'parent_category_id': parent_id
            }
        )

    async def delete_category(self, token: str, category_id: Union[int, str]) -> Dict[str, Any]:
        return await self.api.delete(f'/api/categories/{category_id}', token)

    async def delete_subcategory(self, token: str, subcategory_id: Union[int, str]) -> Dict[str, Any]:
        return await self.api.delete(f'/api/categories/subcategory/{subcategory_id}', token)
