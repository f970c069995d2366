"""
Catalyst Codegen
Incremental React code generation from a declarative project manifest.
"""

from catalyst.filemanager import FileManager, FileManagerOptions, GenerationSummary
from catalyst.manifest import Manifest, load_manifest

__version__ = "0.1.0"

__all__ = [
    "FileManager",
    "FileManagerOptions",
    "GenerationSummary",
    "Manifest",
    "load_manifest",
    "__version__",
]
