import pytest

from drawphone.config import parse_origins


@pytest.mark.parametrize('raw, expected', [
    ('', '*'),
    ('*', '*'),
    ('http://localhost:3000', ['http://localhost:3000']),
    ('http://localhost:3000, https://example.app ,', ['http://localhost:3000', 'https://example.app']),
])
def test_parse_origins(raw, expected):
    assert parse_origins(raw) == expected


def test_app_applies_config(flask_app):
    runtime = flask_app.extensions['drawphone']
    assert runtime.coordinator.min_players == 2
    assert runtime.coordinator.default_max_rounds == 3
    assert runtime.coordinator.store is runtime.store
