"""Container registry for factory-based pipeline creation.

This module provides a central registry for container factories,
enabling format-agnostic pipeline creation and automatic platform
discovery.
"""

import importlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .containers.base import Container
    from .pipeline import MinifyPipeline

logger = logging.getLogger(__name__)

# Keyword arguments consumed by the pipeline rather than the container factory
PIPELINE_KWARGS = ("transformer", "max_workers", "progress")


class ContainerRegistry:
    """Central registry for container factories.

    Platforms register themselves when imported, and the registry
    can automatically discover all available platforms.
    """

    _factories: dict[str, Callable[..., "Container"]] = {}

    @classmethod
    def register_factory(cls, name: str, factory: Callable[..., "Container"]) -> None:
        """Register a factory function for creating containers.

        Args:
            name: Name of the container format (e.g., 'zip')
            factory: Callable that creates a Container instance
        """
        cls._factories[name] = factory

    @classmethod
    def create_container(cls, name: str, **kwargs) -> "Container":
        """Create a container instance by format name.

        Raises:
            ValueError: If name is not registered
        """
        if name not in cls._factories:
            available = ', '.join(cls.list_containers()) or 'none'
            raise ValueError(
                f"Unknown container: '{name}'. Available containers: {available}"
            )
        return cls._factories[name](**kwargs)

    @classmethod
    def create_pipeline(cls, container_name: str, **kwargs) -> "MinifyPipeline":
        """Create a pipeline for a registered container format.

        Args:
            container_name: Name of the registered container
            **kwargs: 'transformer', 'max_workers' and 'progress' go to the
                     pipeline; everything else goes to the container factory.

        Returns:
            MinifyPipeline configured with the requested container

        Raises:
            ValueError: If container_name is not registered

        Example:
            >>> pipeline = ContainerRegistry.create_pipeline('zip', max_workers=2)
            >>> result = pipeline.run(Path('room.zip').read_bytes())
        """
        # Import here to avoid circular dependency
        from .pipeline import MinifyPipeline

        pipeline_kwargs = {
            key: kwargs.pop(key) for key in PIPELINE_KWARGS if key in kwargs
        }
        container = cls.create_container(container_name, **kwargs)
        return MinifyPipeline(container, **pipeline_kwargs)

    @classmethod
    def list_containers(cls) -> list[str]:
        """List all registered container names.

        Example:
            >>> ContainerRegistry.list_containers()
            ['zip']
        """
        return list(cls._factories.keys())

    @classmethod
    def discover_platforms(cls) -> None:
        """Auto-discover and import all platforms.

        Platforms register themselves via their __init__.py when imported.
        Platforms with missing dependencies are skipped.
        """
        platforms_dir = Path(__file__).parent / 'platforms'

        if not platforms_dir.exists():
            return

        for platform_path in platforms_dir.iterdir():
            if not platform_path.is_dir():
                continue

            if not (platform_path / '__init__.py').exists():
                continue

            platform_name = platform_path.name

            try:
                importlib.import_module(
                    f'.platforms.{platform_name}',
                    package='room_minifier'
                )
            except ImportError as e:
                logger.debug("Skipping platform %s: %s", platform_name, e)
