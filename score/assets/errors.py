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
Exceptions raised by this module. Configuration errors are raised during
:func:`initialization <score.assets.init>` and prevent the pipeline from being
constructed; :exc:`SourceNotFoundError` and :exc:`TransformError` only ever
affect a single asset, whereas a :exc:`WriteError` aborts the whole run.
"""

from score.init import ConfigurationError


class AssetsError(Exception):
    """
    Base class for all run-time errors of this module.
    """


class InvalidReferenceError(AssetsError, ValueError):
    """
    Thrown when an asset is registered with an empty path, an unknown
    :term:`kind <asset kind>` or a path leaving the configured base folder.
    """

    def __init__(self, reference, reason):
        self.reference = reference
        self.reason = reason
        super().__init__('%s: %r' % (reason, reference))


class InvalidPatternError(ConfigurationError):
    """
    Thrown when the configured output pattern cannot be compiled.
    """

    def __init__(self, pattern, reason):
        self.pattern = pattern
        self.reason = reason
        super().__init__('score.assets',
                         'Invalid output pattern %r: %s' % (pattern, reason))


class SourceNotFoundError(AssetsError):
    """
    The source file of an asset does not exist below the base folder.
    """

    def __init__(self, path):
        self.path = path
        super().__init__(path)


class TransformError(AssetsError):
    """
    A minifier failed. The resolver will fall back to the untransformed
    content of the asset.
    """


class WriteError(AssetsError):
    """
    An artifact could not be written into the output folder. Since no asset
    could be delivered in this case, this error is never swallowed.
    """

    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__('Could not write %s: %s' % (path, cause))
