"""appgen scaffolder -- turns a Specification Record into PHP source files.

Quick usage::

    from appgen.scaffolder import ModelGenerator

    generator = ModelGenerator(config)
    for path in generator.generate(spec):
        print(path)

``ModelGenerator.render`` returns the same files without writing them.
"""

from appgen.scaffolder.emitter import Emitter, GeneratedFile
from appgen.scaffolder.generator import ModelGenerator
from appgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "Emitter",
    "GeneratedFile",
    "ModelGenerator",
    "TemplateRenderer",
]
