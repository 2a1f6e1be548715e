"""
Entity configurations.

One module per entity: table definition plus imperative mapping onto
``mapper_registry``. Modules here are discovered by ``configure_mappings``.
"""
