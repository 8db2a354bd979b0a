# Copyright © 2015-2018 STRG.AT GmbH, Vienna, Austria
#
# This file is part of the The SCORE Framework.
#
# The SCORE Framework and all its parts are free software: you can redistribute
# them and/or modify them under the terms of the GNU Lesser General Public
# License version 3 as published by the Free Software Foundation which is in the
# file named COPYING.LESSER.txt.
#
# The SCORE Framework and all its parts are distributed without any WARRANTY;
# without even the implied warranty of MERCHANTABILITY or FITNESS FOR A
# PARTICULAR PURPOSE. For more details see the GNU Lesser General Public
# License.
#
# If you have not received a copy of the GNU Lesser General Public License see
# http://www.gnu.org/licenses/.
#
# The License-Agreement realised between you as Licensee and STRG.AT GmbH as
# Licenser including the issue of its valid conclusion and its pre- and
# post-contractual effects is governed by the laws of Austria. Any disputes
# concerning this License-Agreement including the issue of its valid conclusion
# and its pre- and post-contractual effects are exclusively decided by the
# competent court, in whose district STRG.AT GmbH has its registered seat, at
# the discretion of STRG.AT GmbH also the competent court, in whose district the
# Licensee has his registered seat, an establishment or assets.

import click
from .errors import (
    InvalidPatternError, InvalidReferenceError, SourceNotFoundError)
from .pattern import compile_pattern
from .registry import AssetKind, AssetRef


@click.group()
def main():
    """
    Manages assets.
    """
    pass


@main.command('resolve')
@click.option('-s', '--site-url', 'site_url', default='')
@click.argument('paths', nargs=-1, required=True)
@click.pass_context
def resolve(clickctx, paths, site_url):
    """
    Provides artifact URLs and hashes
    """
    assets = clickctx.obj['conf'].load('assets')
    for path in paths:
        try:
            ref = AssetRef(path, AssetKind.guess(path), None)
            artifact = assets.resolver.resolve(ref, site_url)
        except InvalidReferenceError as e:
            raise click.ClickException(str(e))
        except SourceNotFoundError as e:
            raise click.ClickException('Source not found: %s' % e.path)
        print('%s %s %s' % (path, artifact.output_url, artifact.content_hash))


@main.command('tags')
@click.option('-s', '--site-url', 'site_url', default='')
@click.option('--bundle/--no-bundle', default=None)
@click.argument('paths', nargs=-1, required=True)
@click.pass_context
def tags(clickctx, paths, site_url, bundle):
    """
    Renders the tags for a list of assets
    """
    assets = clickctx.obj['conf'].load('assets')
    session = assets.new_session(site_url)
    if bundle is not None:
        session.emitter.bundle = bundle
    for path in paths:
        session.add_asset(path)
    print(session.css_and_js_tags())


@main.command('pattern')
@click.argument('pattern')
@click.argument('filename')
def pattern(pattern, filename):
    """
    Shows where a file would be stored
    """
    try:
        compiled = compile_pattern(pattern)
    except InvalidPatternError as e:
        raise click.UsageError(e.reason)
    name, _, ext = filename.rpartition('.')
    if not name:
        name, ext = ext, ''
    kind = AssetKind.SCRIPT if ext == 'js' else AssetKind.STYLE
    print(compiled.expand(name, ext, '0123456789abcdef', kind))


if __name__ == '__main__':
    main()
