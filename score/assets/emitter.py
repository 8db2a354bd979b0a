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

import html
import logging
from concurrent.futures import ThreadPoolExecutor

from .errors import SourceNotFoundError
from .registry import AssetKind


log = logging.getLogger(__name__)


_orders = {
    'style-first': (AssetKind.STYLE, AssetKind.SCRIPT),
    'css': (AssetKind.STYLE, AssetKind.SCRIPT),
    'script-first': (AssetKind.SCRIPT, AssetKind.STYLE),
    'js': (AssetKind.SCRIPT, AssetKind.STYLE),
}


def render_tag(artifact, kind, media=None):
    """
    Returns the HTML tag loading given *artifact*.
    """
    url = html.escape(artifact.output_url, quote=True)
    if kind == AssetKind.STYLE:
        if media:
            return '<link rel="stylesheet" href="%s" media="%s">' % (
                url, html.escape(media, quote=True))
        return '<link rel="stylesheet" href="%s">' % url
    return '<script type="text/javascript" src="%s"></script>' % url


class TagEmitter:
    """
    Renders the tags for all assets in a :class:`registry
    <score.assets.AssetRegistry>`, resolving them through a :class:`resolver
    <score.assets.Resolver>` first. If *bundle* is `True`, all local assets
    of a kind sharing the same media value are delivered as a single
    artifact.

    Assets are resolved in parallel using up to *workers* threads. An asset
    with a missing source file is omitted from the output.
    """

    def __init__(self, registry, resolver, site_url='', bundle=False,
                 workers=4):
        self.registry = registry
        self.resolver = resolver
        self.site_url = site_url
        self.bundle = bundle
        self.workers = workers

    def emit(self, kind):
        """
        Returns the tags for all assets of given *kind* in registration
        order.
        """
        kind = AssetKind.parse(kind)
        return '\n'.join(render_tag(artifact, kind, artifact.source_ref.media)
                         for artifact in self.artifacts(kind))

    def emit_combined(self, order='style-first'):
        """
        Concatenates the tags of both kinds. The *order* is either
        ``'style-first'`` or ``'script-first'``, or the kind to put first.
        """
        if isinstance(order, AssetKind):
            order = order.value
        try:
            kinds = _orders[order]
        except (KeyError, TypeError):
            raise ValueError('Invalid order %r' % (order,))
        return '\n'.join(filter(None, map(self.emit, kinds)))

    def artifacts(self, kind):
        """
        Resolves all assets of given *kind* and returns the resulting
        :class:`artifacts <score.assets.ResolvedArtifact>` in the order their
        tags are to be rendered.
        """
        kind = AssetKind.parse(kind)
        jobs = []
        if self.bundle:
            for media, refs in self.registry.groups(kind).items():
                local = tuple(ref for ref in refs if not ref.is_external)
                for ref in refs:
                    if ref.is_external or len(local) == 1:
                        jobs.append((ref, self.resolver.resolve, ref))
                    elif ref is local[0]:
                        jobs.append((ref, self.resolver.resolve_bundle,
                                     local))
            order = [ref.key for ref in self.registry.list(kind)]
            jobs.sort(key=lambda job: order.index(job[0].key))
        else:
            jobs = [(ref, self.resolver.resolve, ref)
                    for ref in self.registry.list(kind)]
        return [artifact for artifact in self._run(jobs) if artifact]

    def _run(self, jobs):
        if self.workers > 1 and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                futures = [executor.submit(self._resolve, *job)
                           for job in jobs]
                return [future.result() for future in futures]
        return [self._resolve(*job) for job in jobs]

    def _resolve(self, ref, function, argument):
        try:
            return function(argument, self.site_url)
        except SourceNotFoundError as e:
            log.warning('Skipping asset %s: source %s not found',
                        ref.path_or_url, e.path)
            return None
