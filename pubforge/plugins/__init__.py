"""Publish target loading and resolution.

Targets are found by name (injected factories, built-ins, the
``pubforge.targets`` entry-point group, or a dotted import path) and
resolved into instances in the order they were requested.
"""

from pubforge.plugins.loader import TargetLoader, TargetResolutionError
from pubforge.plugins.resolver import TargetResolver
