import re
import posixpath

SEPARATORS = '\\/'

_duplicated_slashes = re.compile(r'/{2,}')

def strip_namespace(cpcode):
    """Strip the separators around a CP code"""
    return str(cpcode).strip(SEPARATORS)

def path_prefix(cpcode):
    """Returns the physical path of the namespace root: /<cpcode>/"""
    return '/%s/' % strip_namespace(cpcode)

def apply_path_prefix(prefix, path):
    """
    Resolve a logical path into the physical path.

    The result always starts with the namespace prefix and never holds
    duplicated separators. An empty path is the namespace root.
    """
    path = _duplicated_slashes.sub('/', (path or '').lstrip(SEPARATORS))
    return prefix + path

def normalize_path(path):
    """Logical form of a path: no leading or trailing separators"""
    return _duplicated_slashes.sub('/', (path or '').strip(SEPARATORS))

def join_path(base, name):
    """Join a parent directory and a leaf name"""
    base = normalize_path(base)
    name = normalize_path(name)
    if not base:
        return name
    if not name:
        return base
    return "%s/%s" % (base, name)

def is_namespace_root(path):
    return not (path or '').strip(SEPARATORS + '.')

def parent_directories(path):
    """
    Yields the logical ancestors of path, closest first.

    The walk stops before the namespace root.
    """
    check = normalize_path(path)
    while True:
        check = posixpath.dirname(check)
        if is_namespace_root(check):
            return
        yield check
