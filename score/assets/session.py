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

from collections import namedtuple

from .emitter import TagEmitter
from .registry import AssetKind, AssetRegistry


TemplateHelpers = namedtuple('TemplateHelpers', (
    'add_asset', 'css_tags', 'js_tags', 'css_and_js_tags',
    'js_and_css_tags'))


class PipelineSession:
    """
    The assets of a single request. A session is created at the beginning of
    a request via :meth:`ConfiguredAssetsModule.new_session
    <score.assets.ConfiguredAssetsModule.new_session>` and passed to
    everything that needs to add assets or render their tags. It should be
    discarded once the response was rendered.
    """

    def __init__(self, resolver, site_url='', bundle=False, workers=4):
        self.registry = AssetRegistry()
        self.emitter = TagEmitter(self.registry, resolver, site_url,
                                  bundle=bundle, workers=workers)

    @property
    def site_url(self):
        return self.emitter.site_url

    def add_asset(self, path_or_url, kind=None, media=None):
        """
        Registers an asset. Returns an empty string, allowing templates to
        call this function in an output expression.
        """
        self.registry.register(path_or_url, kind, media)
        return ''

    def emit(self, kind):
        return self.emitter.emit(kind)

    def emit_combined(self, order='style-first'):
        return self.emitter.emit_combined(order)

    def css_tags(self):
        return self.emit(AssetKind.STYLE)

    def js_tags(self):
        return self.emit(AssetKind.SCRIPT)

    def css_and_js_tags(self):
        return self.emit_combined('style-first')

    def js_and_css_tags(self):
        return self.emit_combined('script-first')

    def helpers(self):
        """
        Returns the functions a template layer should expose, bound to this
        session.
        """
        return TemplateHelpers(
            self.add_asset, self.css_tags, self.js_tags,
            self.css_and_js_tags, self.js_and_css_tags)
