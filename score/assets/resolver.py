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
Turns registered assets into :term:`artifacts <artifact>`: files below the
base folder, named after the :term:`content hash` of their (possibly
minified) content. Since the name of an artifact is determined by its
content, an existing file never needs to be written again and concurrent
writers always produce the same file.
"""

import logging
import os
import posixpath
import re
import shutil
import tempfile
from collections import namedtuple

import xxhash

from .errors import SourceNotFoundError, TransformError, WriteError
from .minify import TransformMode
from .pattern import compile_pattern


log = logging.getLogger(__name__)


ResolvedArtifact = namedtuple('ResolvedArtifact', (
    'source_ref', 'output_url', 'content_hash', 'transformed',
    'output_path', 'sources'))

_absolute_url_regex = re.compile(r'^([a-z][a-z0-9+.-]*:)?//', re.IGNORECASE)


def content_hash(data):
    """
    Returns the :term:`content hash` of given bytes.
    """
    return xxhash.xxh64(data).hexdigest()


def compose_base_url(url, site_url=''):
    """
    Resolves the configured base *url* against the *site_url* of the current
    request (``scheme://host``). Absolute URLs are returned unchanged.
    """
    site_url = (site_url or '').rstrip('/')
    if not url:
        return site_url + '/'
    if _absolute_url_regex.match(url):
        return url
    if url.startswith('/'):
        return site_url + url
    return site_url + '/' + url


class Resolver:
    """
    Resolves :class:`AssetRefs <score.assets.AssetRef>` into
    :class:`ResolvedArtifact` objects. Source paths are looked up below
    *base_dir*, output files are written below the same folder according to
    the output *pattern*, and the contents are passed through the given
    :class:`transformer <score.assets.minify.Transformer>`.

    Resolved artifacts are cached in memory as long as the source file keeps
    its modification time and size. If *freeze* is `True`, source files are
    only inspected once during the lifetime of this object.
    """

    def __init__(self, base_dir, pattern, transformer, base_url='',
                 freeze=False):
        if isinstance(pattern, str):
            pattern = compile_pattern(pattern)
        self.base_dir = base_dir
        self.pattern = pattern
        self.transformer = transformer
        self.base_url = base_url or ''
        self.freeze = freeze
        self._artifacts = {}

    def resolve(self, ref, site_url=''):
        """
        Provides the artifact for a single asset. External URLs are returned
        as they are. Raises :exc:`SourceNotFoundError` if the source file
        does not exist and :exc:`WriteError` if the artifact could not be
        stored.
        """
        if ref.is_external:
            return ResolvedArtifact(
                ref, ref.path_or_url, '', False, None, (ref,))
        file = self.source_file(ref)
        key = (file, ref.kind, self.transformer.identity)
        stamp = self._stamp(file)
        artifact = self._cached(key, stamp)
        if artifact is None:
            name, ext = posixpath.splitext(posixpath.basename(file))
            artifact = self._store(
                ref.kind, self._read(file), name, ext.lstrip('.'), file)
            self._artifacts[key] = (stamp, artifact)
        return artifact._replace(
            source_ref=ref, sources=(ref,),
            output_url=self.url_for(artifact.output_path, site_url))

    def resolve_bundle(self, refs, site_url=''):
        """
        Concatenates the contents of the local assets *refs*, which must all
        be of the same kind, and provides a single artifact for the result.
        Members without a source file are left out of the bundle; a
        :exc:`SourceNotFoundError` is raised only if none of them exists.
        """
        refs = tuple(refs)
        if not refs:
            raise ValueError('No assets provided')
        present = []
        for ref in refs:
            file = self.source_file(ref)
            if os.path.isfile(file):
                present.append((ref, file))
            else:
                log.warning('Leaving %s out of bundle: source %s not found',
                            ref.path_or_url, file)
        if not present:
            raise SourceNotFoundError(self.source_file(refs[0]))
        if len(present) == 1:
            return self.resolve(present[0][0], site_url)
        refs = tuple(ref for ref, file in present)
        files = tuple(file for ref, file in present)
        kind = refs[0].kind
        key = ('bundle', files, kind, self.transformer.identity)
        stamp = tuple(map(self._stamp, files))
        artifact = self._cached(key, stamp)
        if artifact is None:
            data = b'\n'.join(self._read(file) for file in files)
            name = content_hash(
                '\0'.join(ref.path_or_url for ref in refs).encode('UTF-8'))
            label = 'bundle(%s)' % ', '.join(ref.path_or_url for ref in refs)
            artifact = self._store(kind, data, name, kind.value, label)
            self._artifacts[key] = (stamp, artifact)
        return artifact._replace(
            source_ref=refs[0], sources=refs,
            output_url=self.url_for(artifact.output_path, site_url))

    def source_file(self, ref):
        """
        Returns the file on the file system containing the source of the
        local asset *ref*.
        """
        path = re.split(r'[?#]', ref.path_or_url, maxsplit=1)[0]
        path = posixpath.normpath('/' + path.lstrip('/')).lstrip('/')
        return os.path.join(self.base_dir, *path.split('/'))

    def url_for(self, output_path, site_url=''):
        """
        Composes the URL of an artifact stored at *output_path*.
        """
        base = compose_base_url(self.base_url, site_url)
        return base.rstrip('/') + '/' + output_path

    def _stamp(self, file):
        if self.freeze:
            return None
        try:
            stat = os.stat(file)
        except (FileNotFoundError, NotADirectoryError):
            raise SourceNotFoundError(file)
        return (stat.st_mtime_ns, stat.st_size)

    def _cached(self, key, stamp):
        try:
            cached_stamp, artifact = self._artifacts[key]
        except KeyError:
            return None
        if cached_stamp != stamp:
            return None
        file = os.path.join(self.base_dir, *artifact.output_path.split('/'))
        if not os.path.isfile(file):
            log.info('Artifact %s vanished, storing it again',
                     artifact.output_path)
            return None
        log.debug('Reusing artifact %s', artifact.output_path)
        return artifact

    def _read(self, file):
        try:
            with open(file, 'rb') as fp:
                return fp.read()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise SourceNotFoundError(file)

    def _transform(self, kind, data, label):
        try:
            return self.transformer.transform(data, kind), True
        except TransformError as e:
            log.warning('Serving %s untransformed: %s', label, e)
            return data, False

    def _store(self, kind, data, name, ext, label):
        if self.transformer.mode == TransformMode.NONE:
            output, transformed = data, False
        else:
            output, transformed = self._transform(kind, data, label)
        hash_ = content_hash(output)
        path = self.pattern.expand(name, ext, hash_, kind)
        self._write(path, output)
        return ResolvedArtifact(None, None, hash_, transformed, path, ())

    def _write(self, path, data):
        file = os.path.join(self.base_dir, *path.split('/'))
        if os.path.isfile(file):
            log.debug('Artifact %s exists, skipping write', path)
            return
        folder = os.path.dirname(file)
        tmppath = None
        try:
            os.makedirs(folder, exist_ok=True)
            fd, tmppath = tempfile.mkstemp(
                dir=folder, prefix='.%s.' % os.path.basename(file),
                suffix='.tmp')
            with os.fdopen(fd, 'wb') as fp:
                fp.write(data)
            os.chmod(tmppath, 0o644)
            shutil.move(tmppath, file)
        except OSError as e:
            if tmppath and os.path.exists(tmppath):
                os.unlink(tmppath)
            raise WriteError(file, e) from e
        log.info('Wrote artifact %s', path)
