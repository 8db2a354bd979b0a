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

import enum
import posixpath
import re
from collections import OrderedDict, namedtuple

from .errors import InvalidReferenceError


_external_regex = re.compile(r'^([a-z][a-z0-9+.-]*:)?//', re.IGNORECASE)


class AssetKind(enum.Enum):
    """
    The :term:`kind <asset kind>` of an asset, determining the shape of the
    tag referencing it.
    """

    STYLE = 'css'
    SCRIPT = 'js'

    @classmethod
    def parse(cls, value):
        """
        Converts *value* into an :class:`AssetKind`. Accepts members of this
        enum as well as a few common spellings like ``'css'``, ``'style'``,
        ``'js'`` or ``'javascript'``.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return _kind_aliases[value.strip().lower()]
            except KeyError:
                pass
        raise InvalidReferenceError(value, 'Unrecognized asset kind')

    @classmethod
    def guess(cls, path):
        """
        Infers the kind from the file extension of *path*, ignoring query
        strings and fragments.
        """
        path = re.split(r'[?#]', path, maxsplit=1)[0]
        ext = posixpath.splitext(path)[1].lower()
        if ext == '.css':
            return cls.STYLE
        if ext == '.js':
            return cls.SCRIPT
        raise InvalidReferenceError(path, 'Cannot infer asset kind')


_kind_aliases = {
    'css': AssetKind.STYLE,
    'style': AssetKind.STYLE,
    'stylesheet': AssetKind.STYLE,
    'js': AssetKind.SCRIPT,
    'script': AssetKind.SCRIPT,
    'javascript': AssetKind.SCRIPT,
}


class AssetRef(namedtuple('AssetRef', ('path_or_url', 'kind', 'media'))):
    """
    A single declared asset: either a path below the base folder or an
    absolute URL, which is never read or transformed.
    """

    __slots__ = ()

    @property
    def key(self):
        return (self.path_or_url, self.media)

    @property
    def is_external(self):
        return bool(_external_regex.match(self.path_or_url))


class AssetRegistry:
    """
    Ordered collection of the assets declared during a single request.
    Registering the same ``(path_or_url, media)`` combination twice has no
    effect; the first registration determines the position of the asset in
    the generated markup.
    """

    def __init__(self):
        self._refs = OrderedDict()

    def register(self, path_or_url, kind=None, media=None):
        if not isinstance(path_or_url, str) or not path_or_url.strip():
            raise InvalidReferenceError(path_or_url, 'Empty asset reference')
        path_or_url = path_or_url.strip()
        if kind is None:
            kind = AssetKind.guess(path_or_url)
        else:
            kind = AssetKind.parse(kind)
        if media is not None:
            media = str(media).strip() or None
        ref = AssetRef(path_or_url, kind, media)
        if not ref.is_external and _escapes_root(path_or_url):
            raise InvalidReferenceError(
                path_or_url, 'Asset path leaves the base folder')
        if ref.key in self._refs:
            return
        self._refs[ref.key] = ref

    def list(self, kind):
        """
        Returns all registered assets of given *kind* in registration order.
        """
        kind = AssetKind.parse(kind)
        return tuple(ref for ref in self._refs.values() if ref.kind == kind)

    def groups(self, kind):
        """
        Returns an ordered mapping of media values to the assets of given
        *kind* registered with that media value.
        """
        result = OrderedDict()
        for ref in self.list(kind):
            result.setdefault(ref.media, []).append(ref)
        return result

    def __iter__(self):
        return iter(self._refs.values())

    def __len__(self):
        return len(self._refs)

    def __contains__(self, key):
        return key in self._refs


def _escapes_root(path):
    depth = 0
    for part in path.split('/'):
        if part in ('', '.'):
            continue
        if part == '..':
            depth -= 1
            if depth < 0:
                return True
        else:
            depth += 1
    return False
