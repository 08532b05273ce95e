"""Generator options."""

from dataclasses import dataclass


@dataclass
class GeneratorConfig:
    """Options for one generation run.

    ``package_prefix`` is the dotted package every generated class is placed
    under, except the well-known message families. With ``skip_existing`` the
    classes already present in the output directory are left untouched and
    not regenerated; the check is by class name only, so run into an empty
    directory when schemas may have changed.
    """

    package_prefix: str = ""
    skip_existing: bool = False
