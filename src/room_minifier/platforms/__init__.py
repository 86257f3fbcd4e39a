"""Container format implementations for the minify pipeline.

Each platform module auto-registers itself with the ContainerRegistry
when imported.
"""

# Platform modules are imported dynamically by ContainerRegistry.discover_platforms()
