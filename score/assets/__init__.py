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
This module provides an asset pipeline for web projects: css and javascript
files are registered during a request, optionally minified and
:term:`bundled <bundling>`, stored under a name containing their
:term:`content hash` and finally referenced by the tags this module renders.

It does not serve the generated files; that is the job of whatever
mechanism already delivers the static files of the project.
"""

from ._init import init, ConfiguredAssetsModule
from .errors import (
    AssetsError, InvalidReferenceError, InvalidPatternError,
    SourceNotFoundError, TransformError, WriteError)
from .registry import AssetKind, AssetRef, AssetRegistry
from .minify import TransformMode, TransformConfig
from .resolver import Resolver, ResolvedArtifact
from .emitter import TagEmitter
from .session import PipelineSession, TemplateHelpers


__all__ = (
    'init', 'ConfiguredAssetsModule', 'AssetsError', 'InvalidReferenceError',
    'InvalidPatternError', 'SourceNotFoundError', 'TransformError',
    'WriteError', 'AssetKind', 'AssetRef', 'AssetRegistry', 'TransformMode',
    'TransformConfig', 'Resolver', 'ResolvedArtifact', 'TagEmitter',
    'PipelineSession', 'TemplateHelpers')
