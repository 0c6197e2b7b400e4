# shop_admin/services/auth_service.py
import logging
from .api_client import ApiClient, ApiError
from ..utils.validators import ValidationError, is_valid_email

class AuthService:
    """Admin login against the backend"""

    def __init__(self, api: ApiClient):
        self.api = api
        self.logger = logging.getLogger(__name__)

    async def login(self, email: str, password: str) -> str:
        """Exchange admin credentials for a backend token"""
        if not is_valid_email(email):
            raise ValidationError({'email': 'Email is invalid'})
        if not password:
            raise ValidationError({'password': 'Password is required'})

        response = await self.api.post(
            '/api/users/admin',
            json={'email': email, 'password': password}
        )
        token = response.get('token')
        if not token:
            raise ApiError("Backend did not return a token", payload=response)

        self.logger.info(f"Admin {email} logged in")
        return token
