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
Minification backends. The configured :class:`TransformMode` is translated
into a single transformer object once during initialization; assets are then
transformed by calling its :meth:`transform <Transformer.transform>` method.
If the preferred backend is not available, the next one in the order
``minify-tool`` → ``minify-fast`` → ``minify-pure`` → ``none`` is used.
"""

import abc
import enum
import importlib
import logging
import os
import shutil
import subprocess
from collections import namedtuple

from .errors import TransformError
from .registry import AssetKind


log = logging.getLogger(__name__)


class TransformMode(enum.Enum):
    NONE = 'none'
    FAST = 'minify-fast'
    TOOL = 'minify-tool'
    PURE = 'minify-pure'


TransformConfig = namedtuple('TransformConfig', ('mode', 'tool', 'timeout'),
                             defaults=(None, 30.0))


_off_values = ('', '0', 'false', 'off', 'no', 'none')
_best_values = ('1', 'true', 'on', 'yes', 'best', 'minify-fast')
_pure_values = ('minifier', 'pure', 'minify-pure')


def parse_minify(value, timeout=30.0):
    """
    Converts the value of the ``minify`` configuration key into a
    :class:`TransformConfig`. Values that are neither an on/off switch nor
    the name of a library are treated as the path to an external compressor.
    """
    if isinstance(value, TransformMode):
        return TransformConfig(value, None, timeout)
    if value is None or value is False:
        return TransformConfig(TransformMode.NONE, None, timeout)
    if value is True:
        return TransformConfig(TransformMode.FAST, None, timeout)
    text = str(value).strip()
    if text.lower() in _off_values:
        return TransformConfig(TransformMode.NONE, None, timeout)
    if text.lower() in _best_values:
        return TransformConfig(TransformMode.FAST, None, timeout)
    if text.lower() in _pure_values:
        return TransformConfig(TransformMode.PURE, None, timeout)
    return TransformConfig(TransformMode.TOOL, text, timeout)


class Transformer(abc.ABC):
    """
    Base class for all minification backends.
    """

    mode = None

    @abc.abstractmethod
    def transform(self, data, kind):
        """
        Returns the transformed version of the *data* bytes of an asset of
        given :class:`kind <score.assets.AssetKind>`. Raises
        :exc:`TransformError` on failure.
        """

    @property
    def identity(self):
        """
        A string changing whenever the output of this transformer might
        change for identical input.
        """
        return self.mode.value


class PassThrough(Transformer):

    mode = TransformMode.NONE

    def transform(self, data, kind):
        return data


class _LibraryTransformer(Transformer):
    """
    Transforms assets in-process using a pair of python libraries for
    javascript and css.
    """

    js_module = None
    js_function = None
    css_module = None
    css_function = None

    def __init__(self):
        js = importlib.import_module(self.js_module)
        css = importlib.import_module(self.css_module)
        self._functions = {
            AssetKind.SCRIPT: getattr(js, self.js_function),
            AssetKind.STYLE: getattr(css, self.css_function),
        }

    def transform(self, data, kind):
        try:
            text = data.decode('UTF-8')
            return self._functions[kind](text).encode('UTF-8')
        except Exception as e:
            raise TransformError('%s failed: %s' % (self.mode.value, e)) \
                from e


class FastMinifier(_LibraryTransformer):
    """
    Uses :mod:`rjsmin` and :mod:`rcssmin`, which come with C extensions.
    """

    mode = TransformMode.FAST
    js_module, js_function = 'rjsmin', 'jsmin'
    css_module, css_function = 'rcssmin', 'cssmin'


class PureMinifier(_LibraryTransformer):
    """
    Uses the pure python libraries :mod:`jsmin` and :mod:`csscompressor`.
    """

    mode = TransformMode.PURE
    js_module, js_function = 'jsmin', 'jsmin'
    css_module, css_function = 'csscompressor', 'compress'


class ToolMinifier(Transformer):
    """
    Invokes an external compressor, like the YUI compressor. The asset is
    passed via stdin and the minified content is read from stdout. Files
    ending in ``.jar`` are started with ``java -jar``.
    """

    mode = TransformMode.TOOL

    def __init__(self, tool, timeout=30.0):
        if not tool:
            raise FileNotFoundError('no compressor configured')
        if tool.endswith('.jar'):
            if not os.path.isfile(tool):
                raise FileNotFoundError(tool)
            java = shutil.which('java')
            if not java:
                raise FileNotFoundError('java')
            self.command = [java, '-jar', tool]
        else:
            executable = shutil.which(tool)
            if not executable:
                raise FileNotFoundError(tool)
            self.command = [executable]
        self.tool = tool
        self.timeout = timeout

    @property
    def identity(self):
        return '%s:%s' % (self.mode.value, self.tool)

    def transform(self, data, kind):
        command = self.command + ['--type', kind.value]
        try:
            result = subprocess.run(
                command, input=data, stdout=subprocess.PIPE,
                stderr=subprocess.PIPE, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise TransformError('%s timed out after %ss' % (
                self.tool, self.timeout)) from e
        except OSError as e:
            raise TransformError('Could not run %s: %s' % (self.tool, e)) \
                from e
        if result.returncode:
            raise TransformError('%s exited with status %d: %s' % (
                self.tool, result.returncode,
                result.stderr.decode('UTF-8', 'replace').strip()))
        return result.stdout


_fallbacks = {
    TransformMode.TOOL: TransformMode.FAST,
    TransformMode.FAST: TransformMode.PURE,
    TransformMode.PURE: TransformMode.NONE,
}


def _create(mode, config):
    if mode == TransformMode.TOOL:
        return ToolMinifier(config.tool, config.timeout)
    if mode == TransformMode.FAST:
        return FastMinifier()
    if mode == TransformMode.PURE:
        return PureMinifier()
    return PassThrough()


def select_transformer(config):
    """
    Returns the :class:`Transformer` for given :class:`TransformConfig`,
    falling back to the next backend whenever the preferred one is not
    available.
    """
    mode = config.mode
    while True:
        try:
            return _create(mode, config)
        except (ImportError, FileNotFoundError) as e:
            fallback = _fallbacks[mode]
            log.warning('Minifier %s unavailable (%s), falling back to %s',
                        mode.value, e, fallback.value)
            mode = fallback
