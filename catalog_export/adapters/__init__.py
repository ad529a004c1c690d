"""
Adapter layer

Infrastructure implementations of the core ports: pymarc-backed records,
record sources, document sinks, export policies, progress reporting and
configuration.
"""
