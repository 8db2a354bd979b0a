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

from score.init import ConfiguredModule, ConfigurationError, parse_bool
import os

from .minify import parse_minify, select_transformer
from .pattern import DEFAULT_PATTERN, compile_pattern
from .resolver import Resolver
from .session import PipelineSession

defaults = {
    'url': '',
    'base_dir': 'public',
    'output_dir': DEFAULT_PATTERN,
    'minify': None,
    'minify.timeout': 30,
    'minified_name': 'minified',
    'bundle': False,
    'freeze': False,
    'workers': 4,
}


def init(confdict):
    """
    Initializes this module acoording to :ref:`our module initialization
    guidelines <module_initialization>` with the following configuration keys:

    :confkey:`url` :confdefault:`''`
        The URL prefix of the generated asset URLs. Relative values are
        resolved against the scheme and host of the current request, an empty
        value denotes the site root.

    :confkey:`base_dir` :confdefault:`public`
        The folder containing the asset sources. Asset paths are interpreted
        relative to this folder and artifacts are written below it, too.

    :confkey:`output_dir` :confdefault:`static/%n%-l.%e`
        The :mod:`output pattern <score.assets.pattern>` for artifacts.

    :confkey:`minify` :confdefault:`None`
        The minification strategy: a false value disables minification,
        ``best`` (or any true value) uses the fastest library available,
        ``minifier`` the pure python libraries. Any other value is regarded
        as the path to an external compressor like the YUI compressor.

    :confkey:`minify.timeout` :confdefault:`30`
        Seconds to wait for an external compressor before serving the
        unminified content instead.

    :confkey:`minified_name` :confdefault:`minified`
        The name under which the :class:`PipelineSession` of a request is
        made available to the framework integrations.

    :confkey:`bundle` :confdefault:`False`
        Whether all local assets of a kind should be delivered as a single
        :term:`bundle <bundling>`.

    :confkey:`freeze` :confdefault:`False`
        Whether source files may be assumed to never change during the
        lifetime of the process.

    :confkey:`workers` :confdefault:`4`
        Number of threads resolving assets while rendering tags.
    """
    conf = dict(defaults.items())
    conf.update(confdict)
    base_dir = conf['base_dir']
    if not base_dir or not os.path.isdir(base_dir):
        raise ConfigurationError(
            'score.assets', 'Configured base_dir does not exist')
    pattern = compile_pattern(conf['output_dir'] or DEFAULT_PATTERN)
    try:
        timeout = float(conf['minify.timeout'])
        workers = int(conf['workers'])
    except (TypeError, ValueError):
        raise ConfigurationError(
            'score.assets', 'Invalid minify.timeout or workers value')
    if workers < 1:
        raise ConfigurationError(
            'score.assets', 'At least one worker is required')
    transform_config = parse_minify(conf['minify'], timeout)
    return ConfiguredAssetsModule(
        conf['url'] or '', base_dir, pattern, transform_config,
        conf['minified_name'] or 'minified', parse_bool(conf['bundle']),
        parse_bool(conf['freeze']), workers)


class ConfiguredAssetsModule(ConfiguredModule):
    """
    This module's :class:`configuration class
    <score.init.ConfiguredModule>`.
    """

    def __init__(self, url, base_dir, pattern, transform_config,
                 minified_name, bundle, freeze, workers):
        super().__init__(__package__)
        self.url = url
        self.base_dir = base_dir
        self.pattern = pattern
        self.transform_config = transform_config
        self.minified_name = minified_name
        self.bundle = bundle
        self.freeze = freeze
        self.workers = workers
        self.transformer = select_transformer(transform_config)
        self.resolver = Resolver(base_dir, pattern, self.transformer,
                                 base_url=url, freeze=freeze)

    def new_session(self, site_url=''):
        """
        Creates a :class:`PipelineSession` for a request on the site at
        *site_url*, which should be the scheme and host part of the request
        URL. See :meth:`site_url`.
        """
        return PipelineSession(self.resolver, site_url, bundle=self.bundle,
                               workers=self.workers)

    def site_url(self, scheme, host):
        """
        Composes the site URL from the *scheme* and *host* of a request.
        """
        return '%s://%s' % (scheme, host)
