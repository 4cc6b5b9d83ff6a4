"""CLI plumbing shared by the root ``webpic`` command.

``_base`` holds the Click command class with ``--examples`` support;
``_context`` holds the per-invocation AppContext that wires settings,
logging, services, and output together.
"""
