# tests/test_services.py
from datetime import date
from decimal import Decimal

import pytest

from shop_admin.models.customer import AccountStatus
from shop_admin.models.kol import PayoutStatus
from shop_admin.models.review import ReviewStatus
from shop_admin.services.api_client import ApiError
from shop_admin.services.auth_service import AuthService
from shop_admin.services.category_service import CategoryService
from shop_admin.services.customer_service import CustomerService
from shop_admin.services.dashboard_service import DashboardService
from shop_admin.services.kol_service import KOLService
from shop_admin.services.kol_tier_service import KOLTierService
from shop_admin.services.payout_service import PayoutService
from shop_admin.services.product_service import ProductService
from shop_admin.services.review_service import ReviewService
from shop_admin.utils.validators import ValidationError
from .conftest import TOKEN

class TestAuthService:
    async def test_login_returns_token(self, api):
        api.responses[('POST', '/api/users/admin')] = {'token': 'abc'}

        token = await AuthService(api).login('admin@shop.com', 'secret')

        assert token == 'abc'
        assert api.last.json == {'email': 'admin@shop.com', 'password': 'secret'}
        assert api.last.token is None

    async def test_login_validates_before_calling(self, api):
        with pytest.raises(ValidationError):
            await AuthService(api).login('admin', 'secret')
        with pytest.raises(ValidationError):
            await AuthService(api).login('admin@shop.com', '')
        assert api.calls == []

    async def test_login_without_token(self, api):
        api.responses[('POST', '/api/users/admin')] = {'success': True}
        with pytest.raises(ApiError):
            await AuthService(api).login('admin@shop.com', 'secret')

class TestCustomerService:
    async def test_list(self, api):
        api.responses[('GET', '/api/customers')] = {
            'customers': [{'user_id': 1, 'username': 'jane', 'email': 'jane@shop.com', 'status': 'banned'}],
            'pagination': {'total': 1, 'pages': 1}
        }

        result = await CustomerService(api).get_customers(TOKEN, search='jane')

        assert api.last.params['search'] == 'jane'
        assert result['customers'][0].status is AccountStatus.BANNED
        assert result['page'] == 1

    async def test_change_status_requires_reason(self, api):
        service = CustomerService(api)
        with pytest.raises(ValidationError):
            await service.change_status(TOKEN, 1, AccountStatus.SUSPENDED)
        assert api.calls == []

        await service.change_status(TOKEN, 1, 'suspended', 'fraud')
        assert (api.last.method, api.last.path) == ('PATCH', '/api/customers/1/status')
        assert api.last.json == {'status': 'suspended', 'reason': 'fraud'}

    async def test_update_and_delete(self, api):
        service = CustomerService(api)
        data = {'username': 'jane', 'email': 'jane@shop.com', 'status': 'active'}

        await service.update_customer(TOKEN, 1, data)
        assert (api.last.method, api.last.json) == ('PUT', data)

        await service.delete_customer(TOKEN, 1)
        assert (api.last.method, api.last.path) == ('DELETE', '/api/customers/1')

class TestProductService:
    async def test_details(self, api):
        api.responses[('GET', '/api/product/details/3')] = {'product': {
            'product_id': 3,
            'name': 'Shirt',
            'inventory': [{'size': 'S', 'price': '10', 'quantity': 2}, {'size': 'M', 'price': '12', 'quantity': 1}]
        }}

        product = await ProductService(api).get_product(TOKEN, 3)

        assert product.stock == 3
        assert product.min_price == Decimal('10')

    async def test_add_validates(self, api):
        with pytest.raises(ValidationError):
            await ProductService(api).add_product(TOKEN, {'name': 'Shirt'})
        assert api.calls == []

    async def test_delete_image(self, api):
        await ProductService(api).delete_product_image(TOKEN, 9)
        assert (api.last.method, api.last.path) == ('DELETE', '/api/product/image/9')

class TestCategoryService:
    async def test_subcategories_key(self, api):
        api.responses[('GET', '/api/categories/4/subcategories')] = {
            'subcategories': [{'category_id': 8, 'name': 'Shoes', 'parent_category_id': 4}]
        }

        subcategories = await CategoryService(api).get_subcategories(TOKEN, 4)

        assert [c.name for c in subcategories] == ['Shoes']
        assert not subcategories[0].is_parent

    async def test_create_subcategory(self, api):
        await CategoryService(api).create_subcategory(TOKEN, 4, '  Boots ')
        assert api.last.json == {'name': 'Boots', 'description': None, 'parent_category_id': 4}

    async def test_blank_name(self, api):
        with pytest.raises(ValidationError):
            await CategoryService(api).create_category(TOKEN, '   ')

class TestKOLServices:
    async def test_reject_application_needs_reason(self, api):
        service = KOLService(api)
        with pytest.raises(ValidationError):
            await service.reject_application(TOKEN, 5, '')

        await service.reject_application(TOKEN, 5, 'Too few followers')
        assert api.last.path == '/api/kols/applications/5/reject'
        assert api.last.json == {'reason': 'Too few followers'}

    async def test_approve_application_with_tier(self, api):
        await KOLService(api).approve_application(TOKEN, 5, tier_id=2)
        assert api.last.json == {'tier_id': 2}

    async def test_update_kol_status(self, api):
        await KOLService(api).update_kol_status(TOKEN, 3, AccountStatus.ACTIVE)
        assert (api.last.method, api.last.path) == ('PUT', '/api/kols/3/status')
        assert api.last.json == {'status': 'active', 'reason': ''}

    async def test_create_tier_converts_form_values(self, api):
        await KOLTierService(api).create_tier(TOKEN, {
            'tier_name': ' Gold ', 'commission_rate': '12.5', 'min_successful_purchases': '10'
        })
        assert api.last.path == '/api/kol-tiers/create'
        assert api.last.json == {
            'tier_name': 'Gold', 'commission_rate': 12.5,
            'min_successful_purchases': 10, 'description': ''
        }

    async def test_invalid_tier_is_not_sent(self, api):
        with pytest.raises(ValidationError):
            await KOLTierService(api).update_tier(TOKEN, 1, {
                'tier_name': 'Gold', 'commission_rate': 150, 'min_successful_purchases': 1
            })
        assert api.calls == []

class TestPayoutService:
    async def test_list_and_status(self, api):
        api.responses[('GET', '/api/kol-payouts/')] = {
            'payouts': [{'payout_id': 1, 'kol_id': 3, 'amount': '50.00', 'payment_status': 'processing'}]
        }
        service = PayoutService(api)

        result = await service.get_payouts(TOKEN, status='processing')
        assert result['payouts'][0].payment_status is PayoutStatus.PROCESSING

        await service.update_payout_status(TOKEN, 1, 'completed', notes='wire 123')
        assert api.last.json == {'payment_status': 'completed', 'notes': 'wire 123'}

    async def test_export_defaults_to_csv(self, api):
        await PayoutService(api).export_payout_report(TOKEN)
        assert api.last.params == {'format': 'csv'}
        assert api.last.raw is True

class TestReviewService:
    async def test_reject_sends_reason(self, api):
        await ReviewService(api).update_review_status(TOKEN, 4, ReviewStatus.REJECTED, 'Offensive')
        assert api.last.json == {'status': 'rejected', 'rejection_reason': 'Offensive'}

    async def test_reject_without_reason(self, api):
        with pytest.raises(ValidationError):
            await ReviewService(api).update_review_status(TOKEN, 4, 'rejected')

    async def test_cannot_reset_to_pending(self, api):
        with pytest.raises(ValueError):
            await ReviewService(api).update_review_status(TOKEN, 4, 'pending')

class TestDashboardService:
    def test_ranges_are_iso_dates(self, api):
        service = DashboardService(api)
        start, end = service.weekly_range()
        assert (date.fromisoformat(end) - date.fromisoformat(start)).days == 7

        start, end = service.monthly_range()
        assert start.endswith('-01')
        assert service.daily_range()[0] == service.daily_range()[1]

    async def test_refresh_fetches_every_panel(self, api):
        api.responses[('GET', '/api/dashboard/stats')] = {'data': {'total_orders': 4}}

        data = await DashboardService(api).refresh_dashboard(TOKEN, '2024-05-01', '2024-05-07')

        assert data['stats'] == {'data': {'total_orders': 4}}
        assert sorted(call.path for call in api.calls) == [
            '/api/dashboard/customer-stats',
            '/api/dashboard/kol-performance',
            '/api/dashboard/revenue',
            '/api/dashboard/stats',
            '/api/dashboard/top-products',
        ]
        assert all(call.params['start_date'] == '2024-05-01' for call in api.calls)

class TestReadEndpoints:
    async def test_category_and_product_reads(self, api):
        api.responses[('GET', '/api/categories/subcategories')] = {
            'categories': [{'category_id': 8, 'name': 'Shoes', 'parent_category_id': 4}]
        }
        api.responses[('GET', '/api/product/edit/3')] = {'product': {'name': 'Shirt'}}

        assert len(await CategoryService(api).get_all_subcategories(TOKEN)) == 1
        assert await ProductService(api).get_product_for_edit(TOKEN, 3) == {'name': 'Shirt'}

    async def test_kol_reads(self, api):
        api.responses[('GET', '/api/kol-tiers/2')] = {
            'tier': {'tier_id': 2, 'tier_name': 'Silver', 'commission_rate': '7.5'}
        }
        api.responses[('GET', '/api/kols/applications/9')] = {
            'application': {'application_id': 9, 'status': 'approved'}
        }

        tier = await KOLTierService(api).get_tier(TOKEN, 2)
        application = await KOLService(api).get_application(TOKEN, 9)

        assert tier.commission_rate == Decimal('7.5')
        assert application.status.value == 'approved'

    async def test_eligible_and_generate(self, api):
        api.responses[('GET', '/api/kol-payouts/eligible')] = {'eligible': [{'kol_id': 3, 'amount': 40}]}
        service = PayoutService(api)

        eligible = await service.get_eligible_payouts(TOKEN)
        await service.generate_payouts(TOKEN, eligible)

        assert api.last.json == {'payout_data': [{'kol_id': 3, 'amount': 40}]}

    async def test_review_statistics_and_dashboard_export(self, api):
        api.responses[('GET', '/api/reviews/statistics')] = {'statistics': {'pending': 2}}

        assert await ReviewService(api).get_review_statistics(TOKEN) == {'pending': 2}

        await DashboardService(api).export_data(TOKEN, '2024-05-01', '2024-05-31', format='xlsx')
        assert api.last.raw is True
        assert api.last.params['format'] == 'xlsx'
