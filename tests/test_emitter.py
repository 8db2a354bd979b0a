"""Tests for tag rendering."""

import re

import pytest

from score.assets import AssetKind, AssetRegistry, TagEmitter, WriteError
from score.assets.minify import PassThrough
from score.assets.resolver import Resolver


@pytest.fixture
def registry():
    return AssetRegistry()


@pytest.fixture
def emitter(registry, resolver):
    return TagEmitter(registry, resolver)


def urls(markup):
    return re.findall(r'(?:href|src)="([^"]+)"', markup)


class TestEmit:

    def test_scenario(self, registry, emitter, resolver):
        registry.register('/css/a.css')
        registry.register('/js/b.js')
        style = resolver.resolve(registry.list('css')[0])
        script = resolver.resolve(registry.list('js')[0])
        js_tags = emitter.emit(AssetKind.SCRIPT)
        css_tags = emitter.emit(AssetKind.STYLE)
        assert js_tags == \
            '<script type="text/javascript" src="%s"></script>' % \
            script.output_url
        assert css_tags == \
            '<link rel="stylesheet" href="%s">' % style.output_url
        assert emitter.emit_combined('style-first') == \
            css_tags + '\n' + js_tags
        assert emitter.emit_combined('script-first') == \
            js_tags + '\n' + css_tags

    def test_one_tag_per_asset_in_order(self, registry, emitter):
        registry.register('/js/c.js')
        registry.register('/js/b.js')
        registry.register('/js/c.js')
        markup = emitter.emit('js')
        assert markup.count('<script') == 2
        assert [url.split('/')[-1][0] for url in urls(markup)] == ['c', 'b']

    def test_media(self, registry, emitter):
        registry.register('/css/print.css', media='print')
        assert 'media="print"' in emitter.emit('css')

    def test_empty(self, emitter):
        assert emitter.emit('css') == ''
        assert emitter.emit_combined('style-first') == ''

    def test_external_url(self, registry, emitter):
        registry.register('https://cdn.example.com/lib.js?a=1&b=2')
        assert emitter.emit('js') == (
            '<script type="text/javascript" '
            'src="https://cdn.example.com/lib.js?a=1&amp;b=2"></script>')

    def test_missing_source_is_skipped(self, registry, emitter, caplog):
        registry.register('/js/b.js')
        registry.register('/js/missing.js')
        registry.register('/js/c.js')
        markup = emitter.emit('js')
        assert markup.count('<script') == 2
        assert 'missing.js' in caplog.text

    def test_sequential(self, registry, resolver):
        registry.register('/js/b.js')
        registry.register('/js/c.js')
        parallel = TagEmitter(registry, resolver, workers=4).emit('js')
        sequential = TagEmitter(registry, resolver, workers=1).emit('js')
        assert parallel == sequential

    def test_site_url(self, registry, resolver):
        registry.register('/css/a.css')
        emitter = TagEmitter(registry, resolver, 'http://example.com')
        assert urls(emitter.emit('css'))[0].startswith(
            'http://example.com/static/a-')

    def test_write_error_propagates(self, registry, base_dir):
        (base_dir / 'blocked').write_text('')
        resolver = Resolver(str(base_dir), 'blocked/%n%-l.%e', PassThrough())
        registry.register('/css/a.css')
        with pytest.raises(WriteError):
            TagEmitter(registry, resolver).emit('css')

    def test_invalid_order(self, emitter):
        with pytest.raises(ValueError):
            emitter.emit_combined('random')

    def test_order_by_kind(self, registry, emitter):
        registry.register('/css/a.css')
        registry.register('/js/b.js')
        assert emitter.emit_combined(AssetKind.SCRIPT).startswith('<script')
        assert emitter.emit_combined('css').startswith('<link')


class TestBundling:

    @pytest.fixture
    def emitter(self, registry, resolver):
        return TagEmitter(registry, resolver, bundle=True)

    def test_single_tag(self, registry, emitter, resolver):
        registry.register('/js/b.js')
        registry.register('/js/c.js')
        markup = emitter.emit('js')
        assert markup.count('<script') == 1
        bundle = resolver.resolve_bundle(registry.list('js'))
        assert urls(markup) == [bundle.output_url]

    def test_single_asset_is_not_bundled(self, registry, emitter, resolver):
        registry.register('/js/b.js')
        assert urls(emitter.emit('js')) == \
            [resolver.resolve(registry.list('js')[0]).output_url]

    def test_groups_by_media(self, registry, emitter):
        registry.register('/css/a.css')
        registry.register('/css/print.css', media='print')
        registry.register('/css/a.css', media='print')
        markup = emitter.emit('css').split('\n')
        assert len(markup) == 2
        assert 'media' not in markup[0]
        assert 'media="print"' in markup[1]

    def test_external_keeps_position(self, registry, emitter):
        registry.register('https://cdn.example.com/jquery.js')
        registry.register('/js/b.js')
        registry.register('/js/c.js')
        result = urls(emitter.emit('js'))
        assert len(result) == 2
        assert result[0] == 'https://cdn.example.com/jquery.js'

    def test_missing_member_is_left_out(self, registry, emitter, resolver,
                                        caplog):
        registry.register('/js/b.js')
        registry.register('/js/missing.js')
        registry.register('/js/c.js')
        markup = emitter.emit('js')
        assert markup.count('<script') == 1
        bundle = resolver.resolve_bundle(
            (registry.list('js')[0], registry.list('js')[2]))
        assert urls(markup) == [bundle.output_url]
        assert 'missing.js' in caplog.text

    def test_single_remaining_member(self, registry, emitter, resolver):
        registry.register('/js/missing.js')
        registry.register('/js/b.js')
        registry.register('https://cdn.example.com/jquery.js')
        plain = resolver.resolve(registry.list('js')[1])
        assert urls(emitter.emit('js')) == \
            [plain.output_url, 'https://cdn.example.com/jquery.js']

    def test_no_remaining_member(self, registry, emitter, caplog):
        registry.register('/js/missing.js')
        registry.register('/js/gone.js')
        registry.register('https://cdn.example.com/jquery.js')
        assert urls(emitter.emit('js')) == \
            ['https://cdn.example.com/jquery.js']
        assert 'not found' in caplog.text
