import json

import httpx
import pytest

from neonflow.services.insight_service import insight_service


@pytest.fixture
def stocked(make_item):
    make_item('INV-1', name='Quantum Processor', quantity=250, price=1200)
    make_item('INV-2', name='Neural Link Interface', quantity=4, price=80, status='Low Stock')
    make_item('INV-3', name='Plasma Power Core', quantity=0, price=15, status='Out of Stock')


@pytest.fixture
def ai_backend(app, monkeypatch):
    """Configured AI endpoint answered by an httpx MockTransport"""
    replies = {}
    requests = []

    def handler(request):
        requests.append(request)
        body = json.loads(request.content)
        if 'timeout' in replies:
            raise httpx.ReadTimeout('too slow', request=request)
        content = replies['json'] if body.get('response_format') else replies['text']
        return httpx.Response(200, json={'choices': [{'message': {'content': content}}]})

    app.config['AI_API_KEY'] = 'sk-test-0123456789'
    monkeypatch.setattr(insight_service, '_http_client', httpx.Client(transport=httpx.MockTransport(handler)))
    return replies, requests


class TestLocalFallback:

    def test_health_report(self, staff_client, stocked):
        body = staff_client.get('/api/insights/health').get_json()
        assert body['ai'] is False
        assert body['analysis'].startswith('## Inventory Health (local analysis)')
        assert '- Plasma Power Core: 0 units' in body['analysis']
        assert '- Quantum Processor: 250 units' in body['analysis']

    def test_restock_plan(self, staff_client, stocked):
        body = staff_client.get('/api/insights/restock').get_json()
        assert body['critical'] == 2
        plan = {entry['item']: entry['suggestion'] for entry in body['plan']}
        assert set(plan) == {'Neural Link Interface', 'Plasma Power Core'}
        assert plan['Neural Link Interface'].startswith('Only 4 left')

    def test_empty_inventory(self, staff_client):
        body = staff_client.get('/api/insights/health').get_json()
        assert body['analysis'] == 'Inventory is empty. Add items to get an AI analysis.'
        assert staff_client.get('/api/insights/restock').get_json()['plan'] == []

    def test_fallback_disabled(self, app, staff_client, stocked):
        app.config['AI_FALLBACK'] = False
        assert 'not configured' in staff_client.get('/api/insights/health').get_json()['analysis']
        assert staff_client.get('/api/insights/restock').get_json()['plan'] == []


class TestRemoteModel:

    def test_health_uses_chat_completions(self, staff_client, stocked, ai_backend):
        replies, requests = ai_backend
        replies['text'] = '## Health\nAll good.'

        body = staff_client.get('/api/insights/health').get_json()
        assert body['ai'] is True
        assert body['analysis'] == '## Health\nAll good.'
        assert requests[0].url.path == '/v1/chat/completions'
        assert requests[0].headers['Authorization'] == 'Bearer sk-test-0123456789'
        assert 'Quantum Processor' in json.loads(requests[0].content)['messages'][0]['content']

    def test_health_timeout_is_reported(self, staff_client, stocked, ai_backend):
        replies, _ = ai_backend
        replies['timeout'] = True
        body = staff_client.get('/api/insights/health').get_json()
        assert body['analysis'].startswith('Analysis timed out')

    def test_restock_plan_parsed(self, staff_client, stocked, ai_backend):
        replies, requests = ai_backend
        replies['json'] = json.dumps({'plan': [
            {'item': 'Plasma Power Core', 'suggestion': 'Order 40 units'},
            {'item': 'broken entry'},
        ]})
        plan = staff_client.get('/api/insights/restock').get_json()['plan']
        assert plan == [{'item': 'Plasma Power Core', 'suggestion': 'Order 40 units'}]
        sent = json.loads(requests[0].content)
        assert sent['response_format'] == {'type': 'json_object'}

    def test_restock_failure_gives_empty_plan(self, staff_client, stocked, ai_backend):
        replies, _ = ai_backend
        replies['json'] = 'not json at all'
        assert staff_client.get('/api/insights/restock').get_json()['plan'] == []

    @pytest.mark.parametrize('reply', ['null', '{"plan": null}', '{"plan": 5}', '"plan"', '[1, 2]'])
    def test_restock_reply_without_plan_list(self, staff_client, stocked, ai_backend, reply):
        replies, _ = ai_backend
        replies['json'] = reply
        response = staff_client.get('/api/insights/restock')
        assert response.status_code == 200
        assert response.get_json()['plan'] == []
