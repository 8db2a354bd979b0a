import pytest

from score.assets.minify import PassThrough
from score.assets.resolver import Resolver


CSS = b'body {\n    color: red;\n}\n'
JS = b'var answer = 42;\n\nfunction ask() {\n    return answer;\n}\n'


@pytest.fixture
def base_dir(tmp_path):
    """Create a folder with a few asset sources."""
    root = tmp_path / 'public'
    (root / 'css').mkdir(parents=True)
    (root / 'js').mkdir()
    (root / 'css' / 'a.css').write_bytes(CSS)
    (root / 'css' / 'print.css').write_bytes(b'body { color: black; }\n')
    (root / 'js' / 'b.js').write_bytes(JS)
    (root / 'js' / 'c.js').write_bytes(b'var c = 1;\n')
    return root


@pytest.fixture
def resolver(base_dir):
    return Resolver(str(base_dir), 'static/%n%-l.%e', PassThrough())
