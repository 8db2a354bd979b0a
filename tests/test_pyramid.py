"""Tests for the pyramid integration."""

import pytest
from pyramid import testing
from pyramid.events import BeforeRender
from pyramid.request import Request, apply_request_extensions

from score.assets import PipelineSession, WriteError
from score.assets.pyramid import init, writeerror


@pytest.fixture
def config():
    config = testing.setUp()
    yield config
    testing.tearDown()


@pytest.fixture
def assets(config, base_dir):
    assets = init({'base_dir': str(base_dir)}, config)
    config.commit()
    return assets


def make_request(config, url='http://example.com/'):
    request = Request.blank('/', base_url=url)
    request.registry = config.registry
    apply_request_extensions(request)
    return request


class TestPyramid:

    def test_session_per_request(self, config, assets):
        first = make_request(config)
        second = make_request(config)
        assert isinstance(first.minified, PipelineSession)
        assert first.minified is first.minified
        assert first.minified is not second.minified

    def test_site_url(self, config, assets):
        request = make_request(config, 'https://example.com/')
        request.minified.add_asset('/css/a.css')
        assert 'href="https://example.com' in request.minified.css_tags()

    def test_renderer_globals(self, config, assets):
        request = make_request(config)
        event = BeforeRender({'request': request})
        config.registry.notify(event)
        assert event['minified'] is request.minified
        assert event['assets'] is request.minified
        for name in ('add_asset', 'css_tags', 'js_tags', 'css_and_js_tags',
                     'js_and_css_tags'):
            assert callable(event[name])
        event['add_asset']('/js/b.js')
        assert event['js_tags']().startswith('<script')

    def test_render_without_request(self, config, assets):
        event = BeforeRender({})
        config.registry.notify(event)
        assert 'css_tags' not in event

    def test_minified_name(self, config, base_dir):
        init({'base_dir': str(base_dir), 'minified_name': 'pipeline'},
             config)
        config.commit()
        request = make_request(config)
        assert isinstance(request.pipeline, PipelineSession)

    def test_includeme(self, base_dir):
        config = testing.setUp(settings={
            'assets.base_dir': str(base_dir),
            'assets.bundle': 'true',
        })
        try:
            config.include('score.assets.pyramid')
            config.commit()
            assert config.registry.score_assets.bundle
        finally:
            testing.tearDown()

    def test_write_error_view(self):
        request = testing.DummyRequest()
        response = writeerror(WriteError('/tmp/x', OSError('denied')),
                              request)
        assert response.status_int == 500
