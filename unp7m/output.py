# *-* coding: utf-8 *-*
import logging
import os
import tempfile


logger = logging.getLogger(__name__)


def default_directory():
    return os.path.join(os.path.expanduser('~'), 'Downloads')


def save(payload, directory=None, overwrite=True) -> str:
    """
    Write a decoded payload under its suggested name.

    Parameters:
        payload: DecodedPayload to write.
        directory: Destination directory (str, default ``~/Downloads``),
            created when missing.
        overwrite: Replace an existing file of the same name (bool).

    Returns:
        Path of the written file.

    Raises:
        FileExistsError: target exists and ``overwrite`` is False.
        OSError: any other filesystem failure.
    """
    if directory is None:
        directory = default_directory()
    name = payload.suggested_name or 'decoded'
    if name in (os.curdir, os.pardir):
        raise ValueError('refusing to write to %r' % name)
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, name)
    if not overwrite and os.path.exists(path):
        raise FileExistsError(path)

    fd, tmppath = tempfile.mkstemp(prefix='.%s.' % name, dir=directory)
    try:
        with os.fdopen(fd, 'wb') as fp:
            fp.write(payload.data)
        os.replace(tmppath, path)
    except BaseException:
        if os.path.exists(tmppath):
            os.unlink(tmppath)
        raise
    logger.debug('saved %d bytes to %s', len(payload.data), path)
    return path
