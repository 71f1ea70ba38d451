"""pubforge routing: dispatches make output to every resolved publish target.

Targets are pluggable sinks for artifact sets: a release host, a package
registry, a local manifest directory, or nothing at all. The
PublishDispatcher hands each publish group to each target in turn.
"""
