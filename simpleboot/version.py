# vim: tabstop=4 shiftwidth=4 softtabstop=4

from importlib import metadata


def version_string():
    try:
        return metadata.version("simpleboot")
    except metadata.PackageNotFoundError:
        return '1.0.0'
