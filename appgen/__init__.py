"""appgen -- scaffolds Doctrine model classes for PHP applications.

Collects a description of one entity (interactively or from a YAML/JSON
definition file) and writes the entity, its data object, factories,
repository, facade, not-found exception and event classes.
"""

__version__ = "0.1.0"
