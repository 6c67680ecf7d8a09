import pytest

from neonflow.services.playlist_service import extract_video_id


@pytest.mark.parametrize('url, expected', [
    ('https://www.youtube.com/watch?v=dQw4w9WgXcQ', 'dQw4w9WgXcQ'),
    ('https://youtu.be/dQw4w9WgXcQ', 'dQw4w9WgXcQ'),
    ('https://www.youtube.com/embed/dQw4w9WgXcQ?autoplay=1', 'dQw4w9WgXcQ'),
    ('https://www.youtube.com/v/dQw4w9WgXcQ', 'dQw4w9WgXcQ'),
    ('https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ', 'dQw4w9WgXcQ'),
    ('https://www.youtube.com/watch?v=short', None),
    ('https://vimeo.com/123456', None),
    ('', None),
    (None, None),
])
def test_extract_video_id(url, expected):
    assert extract_video_id(url) == expected


class TestPlaylistApi:

    def test_add_list_remove(self, staff_client):
        response = staff_client.post('/api/playlist', json={'url': 'https://youtu.be/dQw4w9WgXcQ'})
        assert response.status_code == 201
        item = response.get_json()['item']
        assert item['video_id'] == 'dQw4w9WgXcQ'
        assert item['title'] == 'Video dQw4w9WgXcQ'

        assert [i['id'] for i in staff_client.get('/api/playlist').get_json()] == [item['id']]
        assert staff_client.delete(f"/api/playlist/{item['id']}").status_code == 200
        assert staff_client.get('/api/playlist').get_json() == []

    def test_invalid_url(self, staff_client):
        response = staff_client.post('/api/playlist', json={'url': 'https://example.com/video'})
        assert response.status_code == 400
        assert 'url' in response.get_json()['errors']

    def test_remove_unknown(self, staff_client):
        assert staff_client.delete('/api/playlist/pl-404').status_code == 404
