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

"""
This package :ref:`integrates <framework_integration>` the module with
pyramid.

Every request receives its own :class:`PipelineSession
<score.assets.PipelineSession>`, accessible as a request attribute named
after the configured ``minified_name``. Before a template is rendered, the
session and its helper functions are added to the renderer globals, so
templates can do the following::

    ${add_asset('/js/jquery.js')}
    ${css_and_js_tags()}

A :exc:`WriteError <score.assets.WriteError>` escaping a view is answered
with the HTTP status code ``500 - Internal Server Error``.
"""

import logging
from pyramid.events import BeforeRender
import score.assets


log = logging.getLogger(__name__)


def writeerror(exc, request):
    """
    Returns an HTTP response with status code 500. This method is registered
    in the pyramid-specific :func:`init` function.
    """
    log.error('Could not store asset artifact: %s', exc)
    request.response.status = 500
    return request.response


def init(confdict, configurator):
    """
    Performs the following steps:

    - Initializes the generic module with the given *confdict*.
    - Registers a reified request method providing the request's
      :class:`PipelineSession <score.assets.PipelineSession>`.
    - Subscribes to :class:`pyramid.events.BeforeRender` to populate the
      renderer globals.
    - Registers the view writeerror for a handler to the :exc:`WriteError
      <score.assets.WriteError>` exception.
    """
    assetsconf = score.assets.init(confdict)

    def session(request):
        site_url = assetsconf.site_url(request.scheme, request.host)
        return assetsconf.new_session(site_url)

    def before_render(event):
        request = event.get('request')
        if request is None:
            return
        assets = getattr(request, assetsconf.minified_name)
        event[assetsconf.minified_name] = assets
        event['assets'] = assets
        event.update(assets.helpers()._asdict())

    configurator.add_request_method(
        session, assetsconf.minified_name, reify=True)
    configurator.add_subscriber(before_render, BeforeRender)
    configurator.add_view(writeerror, context=score.assets.WriteError)
    return assetsconf


def includeme(config):
    """
    Initializes the module with all pyramid settings starting with
    ``assets.``, when included via :meth:`config.include()
    <pyramid.config.Configurator.include>`.
    """
    prefix = 'assets.'
    confdict = dict((key[len(prefix):], value)
                    for key, value in config.get_settings().items()
                    if key.startswith(prefix))
    config.registry.score_assets = init(confdict, config)
