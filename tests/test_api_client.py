# tests/test_api_client.py
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from shop_admin.models.order import OrderStatus
from shop_admin.services.api_client import ApiClient, ApiError, clean_params

async def order_details(request):
    if request.headers.get('token') != 'good-token':
        return web.json_response({'message': 'Invalid token'}, status=401)
    return web.json_response({'success': True, 'order': {'order_id': request.match_info['id']}})

async def order_list(request):
    return web.json_response({'success': True, 'query': dict(request.query)})

async def update_status(request):
    body = await request.json()
    if body.get('status') == 'returned':
        return web.json_response({'success': False, 'message': 'Order was never delivered'})
    return web.json_response({'success': True, 'order': {'status': body['status']}})

async def broken(request):
    return web.Response(text='upstream exploded', status=502)

async def export(request):
    return web.Response(body=b'id,amount\n1,10\n', content_type='text/csv')

@pytest_asyncio.fixture
async def client():
    app = web.Application()
    app.router.add_get('/api/order/details/{id}', order_details)
    app.router.add_get('/api/order/list', order_list)
    app.router.add_put('/api/order/status/{id}', update_status)
    app.router.add_get('/api/broken', broken)
    app.router.add_get('/api/export', export)

    server = test_utils.TestServer(app)
    await server.start_server()
    api = ApiClient(base_url=str(server.make_url('')))
    await api.connect()
    yield api
    await api.close()
    await server.close()

def test_clean_params():
    assert clean_params({
        'page': 2, 'status': OrderStatus.SHIPPED, 'search': '', 'kol_id': None, 'paid': True
    }) == {'page': '2', 'status': 'shipped', 'paid': 'true'}

async def test_token_is_sent_in_header(client):
    body = await client.get('/api/order/details/5', 'good-token')
    assert body['order'] == {'order_id': '5'}

async def test_http_errors_carry_status_and_message(client):
    with pytest.raises(ApiError) as exc:
        await client.get('/api/order/details/5', 'bad-token')
    assert exc.value.status == 401
    assert exc.value.message == 'Invalid token'

async def test_success_false_is_an_error(client):
    with pytest.raises(ApiError) as exc:
        await client.put('/api/order/status/5', 'good-token', json={'status': 'returned'})
    assert exc.value.message == 'Order was never delivered'
    assert exc.value.status == 200

async def test_json_body_and_query(client):
    body = await client.put('/api/order/status/5', 'good-token', json={'status': 'shipped'})
    assert body['order']['status'] == 'shipped'

    body = await client.get('/api/order/list', 'good-token', params={'page': 1, 'status': None})
    assert body['query'] == {'page': '1'}

async def test_plain_text_error_body(client):
    with pytest.raises(ApiError) as exc:
        await client.get('/api/broken')
    assert exc.value.status == 502
    assert exc.value.message == 'upstream exploded'

async def test_raw_download(client):
    assert await client.get('/api/export', 'good-token', raw=True) == b'id,amount\n1,10\n'

async def test_unreachable_backend():
    api = ApiClient(base_url='http://127.0.0.1:1')
    try:
        with pytest.raises(ApiError) as exc:
            await api.get('/api/order/list')
        assert exc.value.status is None
    finally:
        await api.close()
