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
Output path patterns determine where :term:`artifacts <artifact>` are written
to, relative to the configured base folder. A pattern is an ordinary path
containing the following placeholders:

``%n``
    The base name of the source file without its extension. Bundles use a
    hash of their member paths instead.
``%e``
    The extension of the source file without the dot.
``%d``
    The full :term:`content hash` of the artifact.
``%l``
    The first eight characters of the content hash.
``%h``
    The :term:`kind <asset kind>` of the asset, i.e. ``css`` or ``js``.
``%%``
    A literal percent sign.

Inserting a dash after the percent sign (``%-l``) prefixes the value with a
dash, unless the value is empty. Every pattern must contain at least one of
the digest placeholders, since artifacts are addressed by their content.
"""

import posixpath
import re

from .errors import InvalidPatternError


DEFAULT_PATTERN = 'static/%n%-l.%e'

SHORT_DIGEST_LENGTH = 8

_token_regex = re.compile(r'%(-?)(.?)', re.DOTALL)

_tokens = 'nedlh'


def compile_pattern(text):
    """
    Parses the pattern *text* and returns an :class:`OutputPattern`. Raises
    :exc:`InvalidPatternError` if the pattern contains unknown placeholders,
    no digest placeholder, or would place files outside the base folder.
    """
    if not text or not text.strip():
        raise InvalidPatternError(text, 'empty pattern')
    if text.endswith('/'):
        text += '%n%-l.%e'
    parts = []
    last = 0
    for match in _token_regex.finditer(text):
        if match.start() > last:
            parts.append(text[last:match.start()])
        dash, token = match.groups()
        if token == '%' and not dash:
            parts.append('%')
        elif token and token in _tokens:
            parts.append((token, bool(dash)))
        elif not token:
            raise InvalidPatternError(text, 'dangling %')
        else:
            raise InvalidPatternError(text, 'unknown token %%%s%s' % (
                dash, token))
        last = match.end()
    if last < len(text):
        parts.append(text[last:])
    tokens = set(part[0] for part in parts if isinstance(part, tuple))
    if not tokens & {'d', 'l'}:
        raise InvalidPatternError(text, 'no digest token (%d or %l)')
    if text.startswith('/'):
        raise InvalidPatternError(text, 'pattern must be relative')
    if '..' in text.split('/'):
        raise InvalidPatternError(text, 'pattern leaves the base folder')
    return OutputPattern(text, parts)


class OutputPattern:
    """
    A compiled output path pattern. Use :func:`compile_pattern` to create
    instances.
    """

    def __init__(self, text, parts):
        self.text = text
        self._parts = parts

    def expand(self, name, ext, digest, kind):
        """
        Returns the relative output path for an artifact with given base
        *name*, extension *ext*, content *digest* and *kind*.
        """
        values = {
            'n': name,
            'e': ext,
            'd': digest,
            'l': digest[:SHORT_DIGEST_LENGTH],
            'h': getattr(kind, 'value', kind),
        }
        result = []
        for part in self._parts:
            if isinstance(part, str):
                result.append(part)
                continue
            token, dash = part
            value = values[token] or ''
            if dash and value:
                value = '-' + value
            result.append(value)
        return posixpath.normpath(''.join(result))

    def __eq__(self, other):
        return isinstance(other, OutputPattern) and self.text == other.text

    def __hash__(self):
        return hash(self.text)

    def __repr__(self):
        return '<OutputPattern %r>' % self.text
